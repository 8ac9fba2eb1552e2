"""HTTP client side of the gateway: builds and issues the upstream request."""

from typing import Any

import httpx
import structlog

from .schemas import BODYLESS_METHODS, InboundRequest
from .exceptions import (
    MethodNotAllowedError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)


logger = structlog.get_logger("edge_gateway.proxy")


def check_method(method: str, allowed_methods: list[str] | None) -> None:
    """Enforce a route's method restriction.

    Raises:
        MethodNotAllowedError: If a restriction is declared and not met.
    """
    if allowed_methods is not None and method.upper() not in allowed_methods:
        raise MethodNotAllowedError(method=method.upper(), allowed_methods=allowed_methods)


def build_upstream_headers(
    inbound: InboundRequest,
    forward_authorization: bool = True,
) -> dict[str, str]:
    """Headers sent upstream: JSON content type plus the caller's credentials."""
    headers = {"Content-Type": "application/json"}

    authorization = inbound.header("Authorization")
    if forward_authorization and authorization:
        headers["Authorization"] = authorization

    return headers


def build_upstream_url(base_url: str, upstream_path: str) -> str:
    return f"{base_url.rstrip('/')}/{upstream_path.lstrip('/')}"


def _summarize_body(body: Any) -> dict[str, Any]:
    if body is None:
        return {"has_body": False}
    if isinstance(body, dict):
        return {"has_body": True, "body_fields": sorted(body)}
    return {"has_body": True, "body_type": type(body).__name__}


async def forward_request(
    client: httpx.AsyncClient,
    upstream_url: str,
    inbound: InboundRequest,
    timeout: float,
    params: dict[str, Any] | None = None,
    forward_authorization: bool = True,
    log: Any = None,
) -> httpx.Response:
    """Forward an inbound request to the backend.

    Exactly one upstream call is made. The body is JSON-encoded only for
    methods that carry one.

    Args:
        client: Shared HTTP client.
        upstream_url: Full backend URL.
        inbound: The client request being forwarded.
        timeout: Request timeout in seconds.
        params: Query parameters to send upstream.
        forward_authorization: Copy the inbound Authorization header.
        log: Optional structlog logger; the module logger is used otherwise.

    Returns:
        The raw upstream response, whatever its status code.

    Raises:
        UpstreamTimeoutError: If the backend doesn't respond in time.
        UpstreamUnavailableError: If the connection fails.
    """
    log = log or logger

    request_kwargs: dict[str, Any] = {
        "headers": build_upstream_headers(inbound, forward_authorization),
        "timeout": timeout,
    }
    if params:
        request_kwargs["params"] = params
    if inbound.method not in BODYLESS_METHODS and inbound.body is not None:
        request_kwargs["json"] = inbound.body

    log.info("upstream_request", upstream_url=upstream_url, method=inbound.method)
    log.debug("inbound_body", **_summarize_body(inbound.body))

    try:
        response = await client.request(inbound.method, upstream_url, **request_kwargs)
    except httpx.TimeoutException as e:
        raise UpstreamTimeoutError(
            upstream_url=upstream_url,
            timeout_seconds=timeout,
            reason=str(e)
        )
    except httpx.ConnectError as e:
        raise UpstreamUnavailableError(
            upstream_url=upstream_url,
            reason=str(e) or "Connection failed"
        )
    except httpx.RequestError as e:
        raise UpstreamUnavailableError(
            upstream_url=upstream_url,
            reason=f"Request failed: {e}"
        )

    log.info("upstream_response", upstream_url=upstream_url, status_code=response.status_code)
    return response
