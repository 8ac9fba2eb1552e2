"""Maps upstream responses and gateway-local failures to client responses."""

import json
from typing import Any

import httpx
import structlog

from .schemas import ErrorEnvelope, FailurePolicy, OutboundResponse
from .exceptions import (
    MethodNotAllowedError,
    MissingParameterError,
    UpstreamInvalidResponseError,
    UpstreamTransportError,
)


FAILURE_STATUS = 500
METHOD_NOT_ALLOWED_STATUS = 405
BAD_REQUEST_STATUS = 400

logger = structlog.get_logger("edge_gateway.proxy")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Non-standard JSON constant: {name}")


def translate_upstream(
    response: httpx.Response,
    failure: FailurePolicy,
    upstream_url: str,
    log: Any = None,
) -> OutboundResponse:
    """Pass an upstream response through unchanged.

    Status and JSON body are copied verbatim, error statuses included. A body
    that isn't JSON is treated as a transport failure.
    """
    try:
        body = json.loads(response.content, parse_constant=_reject_constant)
    except ValueError as e:
        (log or logger).error(
            "upstream_invalid_response",
            upstream_url=upstream_url,
            status_code=response.status_code,
        )
        return translate_failure(
            failure,
            UpstreamInvalidResponseError(
                upstream_url=upstream_url,
                status_code=response.status_code,
                reason=f"Invalid JSON in upstream response: {e}"
            ),
        )

    return OutboundResponse(status_code=response.status_code, body=body)


def translate_failure(
    failure: FailurePolicy,
    exc: UpstreamTransportError,
) -> OutboundResponse:
    """Build the 500 failure envelope for a route."""
    envelope = failure.build(exc.reason)
    return OutboundResponse(status_code=FAILURE_STATUS, body=envelope.to_body())


def method_not_allowed(exc: MethodNotAllowedError) -> OutboundResponse:
    envelope = ErrorEnvelope(message="Method not allowed")
    return OutboundResponse(
        status_code=METHOD_NOT_ALLOWED_STATUS,
        body=envelope.to_body(),
        headers={"Allow": ", ".join(exc.allowed_methods)},
    )


def missing_parameter(exc: MissingParameterError) -> OutboundResponse:
    envelope = ErrorEnvelope(message=exc.message, **exc.extra)
    return OutboundResponse(status_code=BAD_REQUEST_STATUS, body=envelope.to_body())
