"""
Result envelope returned by lifecycle clients.

A client reports the outcome of one call as ``Ok(value)`` or
``Err(LifecycleError)`` instead of raising, so a failure on one identifier is
an ordinary value the reconciliation engine can classify.

Both variants are frozen dataclasses and take part in structural pattern
matching::

    match await client.stop("web-1", 10):
        case Ok():
            ...
        case Err(LifecycleError(kind=LifecycleErrorKind.NOT_FOUND)):
            ...
        case Err(error):
            ...

Tags:
    result-pattern, error-handling, devspine
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """The call did what was asked; ``value`` is its payload."""

    value: T

    def unwrap(self) -> T:
        return self.value


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """The call failed; ``error`` describes why."""

    error: Exception

    def unwrap(self) -> T:
        """Re-raise the carried error."""
        raise self.error


Result = Ok[T] | Err[T]


def try_result(f: Callable[[], T]) -> Result[T]:
    """Run ``f`` and capture its return value or the exception it raised."""
    try:
        return Ok(f())
    except Exception as e:
        return Err(e)


__all__ = ["Result", "Ok", "Err", "try_result"]
