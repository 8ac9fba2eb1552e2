"""Custom exceptions for the proxy pipeline."""

from edge_gateway.exceptions import GatewayError


class MethodNotAllowedError(GatewayError):
    """Raised when the inbound method violates a route's restriction.

    Attributes:
        method: The rejected HTTP method.
        allowed_methods: Methods the route accepts.
    """

    def __init__(self, method: str, allowed_methods: list[str]):
        super().__init__(
            message=f"Method {method} not allowed",
            code="METHOD_NOT_ALLOWED"
        )
        self.method = method
        self.allowed_methods = list(allowed_methods)


class MissingParameterError(GatewayError):
    """Raised when a required query parameter is absent or blank.

    Attributes:
        name: Name of the missing parameter.
        extra: Additional fields for the client-facing envelope.
    """

    def __init__(self, name: str, message: str | None = None, extra: dict | None = None):
        super().__init__(
            message=message or f"Query parameter '{name}' is required",
            code="MISSING_PARAMETER"
        )
        self.name = name
        self.extra = dict(extra or {})


class InvalidRequestBodyError(GatewayError):
    """Raised when an inbound body is not valid JSON."""

    def __init__(self, reason: str = "Request body must be valid JSON"):
        super().__init__(message=reason, code="INVALID_REQUEST_BODY")
        self.reason = reason


class UpstreamTransportError(GatewayError):
    """Base for failures talking to the backend.

    Attributes:
        upstream_url: URL the gateway tried to reach.
        reason: Captured error text.
    """

    def __init__(self, upstream_url: str, reason: str, code: str = "UPSTREAM_TRANSPORT_ERROR"):
        super().__init__(
            message=f"Upstream at '{upstream_url}' failed: {reason}",
            code=code
        )
        self.upstream_url = upstream_url
        self.reason = reason


class UpstreamTimeoutError(UpstreamTransportError):
    """Raised when the backend doesn't respond in time.

    Attributes:
        timeout_seconds: Timeout duration that was exceeded.
    """

    def __init__(self, upstream_url: str, timeout_seconds: float, reason: str = ""):
        super().__init__(
            upstream_url=upstream_url,
            reason=reason or f"timed out after {timeout_seconds}s",
            code="UPSTREAM_TIMEOUT"
        )
        self.timeout_seconds = timeout_seconds


class UpstreamUnavailableError(UpstreamTransportError):
    """Raised when the backend is unreachable (refused, DNS, reset)."""

    def __init__(self, upstream_url: str, reason: str = "Connection failed"):
        super().__init__(
            upstream_url=upstream_url,
            reason=reason,
            code="UPSTREAM_UNAVAILABLE"
        )


class UpstreamInvalidResponseError(UpstreamTransportError):
    """Raised when the backend answers with a body that isn't JSON.

    Attributes:
        status_code: HTTP status the backend returned.
    """

    def __init__(self, upstream_url: str, status_code: int, reason: str = "Invalid JSON"):
        super().__init__(
            upstream_url=upstream_url,
            reason=reason,
            code="UPSTREAM_INVALID_RESPONSE"
        )
        self.status_code = status_code
