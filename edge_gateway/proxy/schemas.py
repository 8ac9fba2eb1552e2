"""Pydantic schemas for proxied requests, responses and route declarations."""

from enum import StrEnum
from typing import Any, Literal

from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


STANDARD_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS")

# Methods that never carry a request body upstream
BODYLESS_METHODS = frozenset({"GET", "HEAD"})


def _normalize_method(value: str) -> str:
    method = value.upper()
    if method not in STANDARD_METHODS:
        raise ValueError(f"Unsupported HTTP method: {value}")
    return method


class InboundRequest(BaseModel):
    """A client request as seen by the gateway.

    Attributes:
        method: Upper-cased HTTP verb.
        headers: Inbound headers (looked up case-insensitively).
        query: Query string parameters; repeated keys hold a list.
        body: Parsed JSON body, absent for GET/HEAD.
    """

    method: str = Field(..., description="HTTP method")
    headers: dict[str, str] = Field(default_factory=dict, description="Request headers")
    query: dict[str, str | list[str]] = Field(default_factory=dict, description="Query parameters")
    body: Any | None = Field(default=None, description="JSON body")

    @field_validator("method")
    @classmethod
    def _check_method(cls, value: str) -> str:
        return _normalize_method(value)

    @model_validator(mode="after")
    def _check_body(self) -> "InboundRequest":
        if self.method in BODYLESS_METHODS and self.body is not None:
            raise ValueError(f"{self.method} requests cannot carry a body")
        return self

    def header(self, name: str) -> str | None:
        """Case-insensitive header lookup."""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None


class OutboundResponse(BaseModel):
    """The response the gateway sends back to the client."""

    status_code: int = Field(..., ge=100, le=599)
    body: Any = None
    headers: dict[str, str] = Field(default_factory=dict)

    def to_response(self) -> JSONResponse:
        return JSONResponse(
            status_code=self.status_code,
            content=self.body,
            headers=self.headers or None,
        )


class ErrorEnvelope(BaseModel):
    """Uniform failure body: ``{success: false, message, error?}``.

    Extra fields are kept so a route can add context such as
    ``available: false``.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    success: Literal[False] = False
    message: str
    error: str | None = None

    def to_body(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class FailurePolicy(BaseModel):
    """Per-route shape of the transport failure envelope.

    Attributes:
        message: Fixed message. When unset the captured error text is used.
        error: Optional error label, e.g. "Failed to process comments request".
    """

    message: str | None = None
    error: str | None = None

    def build(self, error_text: str) -> ErrorEnvelope:
        return ErrorEnvelope(
            message=self.message if self.message is not None else error_text,
            error=self.error,
        )


class BackendTier(StrEnum):
    """Which default backend URL applies when none is configured."""

    development = "development"
    secondary = "secondary"


class RequiredParam(BaseModel):
    """A query parameter that must be present and non-blank."""

    name: str
    message: str
    extra: dict[str, Any] = Field(default_factory=dict)


class ProxyRoute(BaseModel):
    """Declarative description of one proxied resource.

    Attributes:
        name: Route identifier used in logs.
        path: Inbound path served by the gateway.
        upstream_path: Path appended to the backend base URL.
        allowed_methods: Permitted verbs, or None for any standard verb.
        forward_authorization: Copy the inbound Authorization header upstream.
        backend_tier: Default backend used when BACKEND_URL is unset.
        required_query: Query parameters checked before contacting upstream.
        query_defaults: Values sent on GET when the client omits them.
        failure: Shape of the transport failure envelope.
        timeout_seconds: Upstream timeout, None for the configured default.
    """

    name: str
    path: str
    upstream_path: str
    allowed_methods: list[str] | None = None
    forward_authorization: bool = True
    backend_tier: BackendTier = BackendTier.development
    required_query: list[RequiredParam] = Field(default_factory=list)
    query_defaults: dict[str, str] = Field(default_factory=dict)
    failure: FailurePolicy = Field(default_factory=FailurePolicy)
    timeout_seconds: float | None = Field(default=None, gt=0)

    @field_validator("allowed_methods")
    @classmethod
    def _check_methods(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        return [_normalize_method(method) for method in value]

    @field_validator("path", "upstream_path")
    @classmethod
    def _check_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError(f"Path must start with '/': {value}")
        return value


class RouteTable(BaseModel):
    """Container for route declarations."""

    routes: list[ProxyRoute] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_unique(self) -> "RouteTable":
        names = [route.name for route in self.routes]
        paths = [route.path for route in self.routes]
        if len(set(names)) != len(names):
            raise ValueError("Route names must be unique")
        if len(set(paths)) != len(paths):
            raise ValueError("Route paths must be unique")
        return self

    def get(self, name: str) -> ProxyRoute | None:
        for route in self.routes:
            if route.name == name:
                return route
        return None
