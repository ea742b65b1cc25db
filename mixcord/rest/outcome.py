"""
Classification of raw transport results.
"""

from dataclasses import dataclass
from typing import Optional, Union

from mixcord.rest.transport import TransportError, TransportResult


@dataclass(frozen=True)
class TransportFailure:
    """No HTTP response was obtained (connection error, timeout)."""
    reason: str


@dataclass(frozen=True)
class Success:
    """HTTP success. ``body`` is None for no-content responses."""
    body: Optional[bytes] = None


@dataclass(frozen=True)
class ApplicationError:
    """The API answered, but rejected the call."""
    status_code: int
    message: bytes


Outcome = Union[TransportFailure, Success, ApplicationError]


def classify(result: TransportResult) -> Outcome:
    """Map a transport result onto an outcome. Total, never raises."""
    if isinstance(result, TransportError):
        return TransportFailure(reason=result.reason)

    if result.status_code == 200:
        return Success(body=result.body)
    if result.status_code == 204:
        return Success(body=None)
    return ApplicationError(status_code=result.status_code, message=result.body)


def outcome_label(outcome: Outcome) -> str:
    """Short label for metrics and logs."""
    if isinstance(outcome, Success):
        return "success"
    if isinstance(outcome, ApplicationError):
        return str(outcome.status_code)
    return "transport_error"
