"""Proxy module - forwarding client requests to the backend API."""

from .schemas import (
    InboundRequest,
    OutboundResponse,
    ErrorEnvelope,
    FailurePolicy,
    BackendTier,
    RequiredParam,
    ProxyRoute,
    RouteTable,
)
from .exceptions import (
    MethodNotAllowedError,
    MissingParameterError,
    InvalidRequestBodyError,
    UpstreamTransportError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
    UpstreamInvalidResponseError,
)
from .resolver import resolve_backend_url
from .forwarder import forward_request
from .translator import translate_upstream, translate_failure
from .service import handle_proxy_request
from .routes import load_route_table
from .router import create_proxy_router


__all__ = [
    # Schemas
    "InboundRequest",
    "OutboundResponse",
    "ErrorEnvelope",
    "FailurePolicy",
    "BackendTier",
    "RequiredParam",
    "ProxyRoute",
    "RouteTable",
    # Exceptions
    "MethodNotAllowedError",
    "MissingParameterError",
    "InvalidRequestBodyError",
    "UpstreamTransportError",
    "UpstreamTimeoutError",
    "UpstreamUnavailableError",
    "UpstreamInvalidResponseError",
    # Pipeline
    "resolve_backend_url",
    "forward_request",
    "translate_upstream",
    "translate_failure",
    "handle_proxy_request",
    # Routing
    "load_route_table",
    "create_proxy_router",
]
