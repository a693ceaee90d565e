"""Error taxonomy for request execution."""

from typing import Any, get_origin

__all__ = [
    "ConfigurationError",
    "DeserializationError",
    "HttpStatusError",
    "NetworkRequestError",
    "RequestCancelledError",
]


class NetworkRequestError(Exception):
    """Base exception for all request execution failures."""


class ConfigurationError(NetworkRequestError, ValueError):
    """Missing or invalid transport client or address.

    Always raised before any network I/O.
    """


class RequestCancelledError(NetworkRequestError):
    """The caller's cancellation handle fired during send or body read."""

    def __init__(self, message: str = "Request was cancelled by the caller") -> None:
        super().__init__(message)


class HttpStatusError(NetworkRequestError):
    """Remote endpoint answered with a non-success status.

    Attributes:
        status_code: HTTP status code of the response.
        reason: Reason phrase, when the transport reports one.
    """

    def __init__(self, status_code: int, reason: str | None = None) -> None:
        self.status_code = status_code
        self.reason = reason
        message = f"Response status code does not indicate success: {status_code}"
        if reason:
            message += f" ({reason})"
        super().__init__(message)


class DeserializationError(NetworkRequestError):
    """Response body could not be mapped to the requested type.

    Only the requested type and the kind of failure are kept; the body
    itself never ends up in the error.

    Attributes:
        response_type: Printable name of the requested type.
        cause_kind: Class name of the underlying decode failure.
    """

    def __init__(self, response_type: Any, cause_kind: str | None = None) -> None:
        self.response_type = _describe(response_type)
        self.cause_kind = cause_kind
        message = f"Response body could not be deserialized into {self.response_type}"
        if cause_kind:
            message += f" ({cause_kind})"
        super().__init__(message)


def _describe(response_type: Any) -> str:
    if isinstance(response_type, type) and get_origin(response_type) is None:
        return response_type.__qualname__
    return repr(response_type)
