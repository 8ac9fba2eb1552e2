"""Service layer composing resolution, forwarding and translation for a route."""

import uuid
from typing import Any

import httpx
import structlog

from edge_gateway.config import Settings

from .schemas import BODYLESS_METHODS, InboundRequest, OutboundResponse, ProxyRoute
from .exceptions import (
    MethodNotAllowedError,
    MissingParameterError,
    UpstreamTransportError,
)
from .resolver import resolve_backend_url
from .forwarder import build_upstream_url, check_method, forward_request
from .translator import (
    method_not_allowed,
    missing_parameter,
    translate_failure,
    translate_upstream,
)


logger = structlog.get_logger("edge_gateway.proxy")


def generate_request_id() -> str:
    """Generate a unique request ID for tracing."""
    return str(uuid.uuid4())


def check_required_query(route: ProxyRoute, inbound: InboundRequest) -> None:
    """Reject requests missing a required query parameter.

    Blank values count as missing.

    Raises:
        MissingParameterError: For the first missing parameter.
    """
    for param in route.required_query:
        value = inbound.query.get(param.name)
        values = value if isinstance(value, list) else [value]
        if not any(item and item.strip() for item in values):
            raise MissingParameterError(
                name=param.name,
                message=param.message,
                extra=param.extra,
            )


def build_query(route: ProxyRoute, inbound: InboundRequest) -> dict[str, str | list[str]]:
    if inbound.method in BODYLESS_METHODS:
        return {**route.query_defaults, **inbound.query}
    return dict(inbound.query)


async def handle_proxy_request(
    route: ProxyRoute,
    inbound: InboundRequest,
    client: httpx.AsyncClient,
    settings: Settings,
    log: Any = None,
) -> OutboundResponse:
    """Serve one inbound request for a declared route.

    This is the main entry point for proxying. It:
    1. Enforces the route's method restriction
    2. Checks required query parameters
    3. Resolves the backend URL
    4. Forwards the request upstream
    5. Translates the upstream response or failure

    Gateway-owned errors never escape; every path returns a response.

    Args:
        route: Route declaration.
        inbound: The client request.
        client: HTTP client for backend requests.
        settings: Process-wide settings.
        log: Optional structlog logger to bind request context onto.

    Returns:
        OutboundResponse to send to the client.
    """
    request_id = inbound.header("X-Request-ID") or generate_request_id()
    log = (log or logger).bind(
        route=route.name,
        method=inbound.method,
        request_id=request_id,
    )

    try:
        check_method(inbound.method, route.allowed_methods)
        check_required_query(route, inbound)
    except MethodNotAllowedError as e:
        log.warning("method_rejected", allowed_methods=e.allowed_methods)
        return method_not_allowed(e)
    except MissingParameterError as e:
        log.warning("missing_parameter", parameter=e.name)
        return missing_parameter(e)

    upstream_url = build_upstream_url(
        resolve_backend_url(settings, route.backend_tier),
        route.upstream_path,
    )
    timeout = route.timeout_seconds or settings.UPSTREAM_TIMEOUT_SECONDS

    try:
        response = await forward_request(
            client=client,
            upstream_url=upstream_url,
            inbound=inbound,
            params=build_query(route, inbound),
            forward_authorization=route.forward_authorization,
            timeout=timeout,
            log=log,
        )
    except UpstreamTransportError as e:
        log.error("upstream_failed", upstream_url=upstream_url, error_code=e.code, reason=e.reason)
        return translate_failure(route.failure, e)

    return translate_upstream(response, route.failure, upstream_url, log=log)
