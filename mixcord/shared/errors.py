"""
Error handling for the mixcord REST client.
"""

from typing import Any, Dict, Optional, Union

from opentelemetry import trace
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Standard error report format."""

    trace_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = {}


class MixcordException(Exception):
    """Base exception for the mixcord client."""

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self) -> ErrorResponse:
        """Convert to error response."""
        trace_id = None
        current_span = trace.get_current_span()
        if current_span and current_span.is_recording():
            span_context = current_span.get_span_context()
            if span_context.trace_id != 0:
                trace_id = f"{span_context.trace_id:032x}"

        return ErrorResponse(
            trace_id=trace_id,
            code=self.code,
            message=_as_text(self.message),
            details=self.details
        )


class ApiError(MixcordException):
    """Raised by the fail-fast operations when a REST call did not succeed.

    ``status_code`` is None when no HTTP response was obtained. ``message`` is
    passed through untouched: the raw response body for rejected calls, the
    transport's reason for network failures.
    """

    def __init__(self, status_code: Optional[int], message: Union[bytes, str]):
        self.status_code = status_code
        super().__init__(
            "API_ERROR",
            message,
            details={"status_code": status_code}
        )

    def __str__(self) -> str:
        if self.status_code is None:
            return f"API call failed: {_as_text(self.message)}"
        return f"API call failed with status {self.status_code}: {_as_text(self.message)}"


class DecodeError(MixcordException):
    """A successful response whose body does not match the expected shape."""

    def __init__(self, message: str = "Response body could not be decoded", details: Optional[Dict[str, Any]] = None):
        super().__init__("DECODE_ERROR", message, details)


class ConfigurationError(MixcordException):
    """Client configuration is missing or invalid."""

    def __init__(self, message: str = "Invalid configuration", details: Optional[Dict[str, Any]] = None):
        super().__init__("CONFIGURATION_ERROR", message, details)


def _as_text(message: Union[bytes, str]) -> str:
    if isinstance(message, bytes):
        return message.decode("utf-8", errors="replace")
    return str(message)
