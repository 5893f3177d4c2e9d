"""
Result type for explicit success/failure handling.

A shim run resolves to ``Ok(exit_code)`` or ``Err(error)`` instead of
raising, so callers decide how to report the outcome (completion handle,
Lambda exception, CLI exit code).

Examples:
    >>> Ok(0).unwrap()
    0
    >>> Err(ValueError("boom")).is_err()
    True

Tags:
    result-pattern, error-handling, drain-hook
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Successful result containing a value."""

    value: T

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        """Get the value. Safe for Ok."""
        return self.value

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[T]):
    """Failed result containing an error."""

    error: BaseException

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    def unwrap(self) -> T:
        """Raise the contained error."""
        raise self.error

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


# Type alias for Result
Result = Ok[T] | Err[T]
