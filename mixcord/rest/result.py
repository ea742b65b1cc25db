"""
Tagged results for the safe interface, and the adapter that turns them
into exceptions for the fail-fast interface.
"""

import functools
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar, Union

from mixcord.shared.errors import ApiError


T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    """Successful call. ``value`` is None for operations without content."""
    value: T = None


@dataclass(frozen=True)
class Err:
    """Failed call. ``status_code`` is None when no response was obtained."""
    status_code: Optional[int]
    message: Union[bytes, str]


Result = Union[Ok[T], Err]


def unwrap(result: "Result[T]") -> T:
    """Return the value of an Ok, raise ApiError for an Err."""
    if isinstance(result, Err):
        raise ApiError(status_code=result.status_code, message=result.message)
    return result.value


def fail_fast(operation: Callable[..., Awaitable["Result[T]"]]) -> Callable[..., Awaitable[T]]:
    """Derive the raising counterpart of a safe coroutine operation."""

    @functools.wraps(operation)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        return unwrap(await operation(*args, **kwargs))

    wrapper.__name__ = f"{operation.__name__}_or_raise"
    wrapper.__qualname__ = f"{operation.__qualname__}_or_raise"
    return wrapper
