"""FastAPI router generated from the proxy route table."""

import json
from typing import Annotated, Any, Awaitable, Callable

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from edge_gateway.config import Settings, get_settings
from edge_gateway.dependencies import get_http_client

from .schemas import BODYLESS_METHODS, STANDARD_METHODS, InboundRequest, ProxyRoute, RouteTable
from .exceptions import InvalidRequestBodyError
from .service import handle_proxy_request


def collect_query(request: Request) -> dict[str, str | list[str]]:
    """Query parameters with repeated keys kept as lists."""
    query: dict[str, str | list[str]] = {}
    for key in request.query_params.keys():
        values = request.query_params.getlist(key)
        query[key] = values[0] if len(values) == 1 else values
    return query


async def build_inbound_request(request: Request) -> InboundRequest:
    """Convert a Starlette request into an InboundRequest.

    The body is read only for methods that carry one.

    Raises:
        InvalidRequestBodyError: If a body is present but isn't JSON.
    """
    method = request.method.upper()
    body: Any = None

    if method not in BODYLESS_METHODS:
        raw = await request.body()
        if raw.strip():
            try:
                body = json.loads(raw)
            except ValueError:
                raise InvalidRequestBodyError()

    return InboundRequest(
        method=method,
        headers=dict(request.headers),
        query=collect_query(request),
        body=body,
    )


def _make_endpoint(route: ProxyRoute) -> Callable[..., Awaitable[JSONResponse]]:
    async def proxy_endpoint(
        request: Request,
        client: Annotated[httpx.AsyncClient, Depends(get_http_client)],
        settings: Annotated[Settings, Depends(get_settings)],
    ) -> JSONResponse:
        inbound = await build_inbound_request(request)
        outbound = await handle_proxy_request(
            route=route,
            inbound=inbound,
            client=client,
            settings=settings,
        )
        return outbound.to_response()

    proxy_endpoint.__name__ = f"proxy_{route.name}"
    proxy_endpoint.__doc__ = f"Proxy {route.path} to backend {route.upstream_path}."
    return proxy_endpoint


def create_proxy_router(table: RouteTable) -> APIRouter:
    """Build a router with one endpoint per declared route.

    Every endpoint accepts all standard methods so method restrictions are
    answered with the gateway's own 405 envelope.
    """
    router = APIRouter(tags=["proxy"])

    for route in table.routes:
        router.add_api_route(
            route.path,
            _make_endpoint(route),
            methods=list(STANDARD_METHODS),
            name=route.name,
        )

    return router
