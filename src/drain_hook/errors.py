"""
Structured error types for drain-hook.

Every failure the shim can report to the host runtime is a
``DrainHookError`` subclass. Errors carry a category, a retryable flag and
an optional chained cause so they log and serialize the same way.

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────┐
        │                    DrainHookError                         │
        │         (category, retryable, cause, to_dict)             │
        ├──────────────────────────────────────────────────────────┤
        │  ProcessExitError        (PROCESS)  child exited != 0     │
        │  SpawnError              (PROCESS)  child never started   │
        │  EventSerializationError (ENCODING) event is not JSON     │
        │  CompletionError         (INTERNAL) handle written twice  │
        └──────────────────────────────────────────────────────────┘

Guardrails:
    ❌ DON'T: Put the exit code into the ProcessExitError message
    ✅ DO: Read ``exit_code`` from the attribute when diagnosing

Tags:
    errors, exceptions, error-category, drain-hook
"""

from __future__ import annotations

from enum import Enum
from typing import Any

PROCESS_EXIT_MESSAGE = "Process exited with non-zero status code"


class ErrorCategory(str, Enum):
    """Error categories used for classification in logs."""

    PROCESS = "PROCESS"  # Child process spawn / exit
    ENCODING = "ENCODING"  # Event serialization
    INTERNAL = "INTERNAL"  # Contract violations, bugs


class DrainHookError(Exception):
    """Base exception for all drain-hook errors.

    Subclasses set ``default_category`` and ``default_retryable``.
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        cause: BaseException | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result: dict[str, Any] = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }
        if self.cause is not None:
            result["cause"] = str(self.cause)
        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


class ProcessExitError(DrainHookError):
    """The child process terminated with a non-zero status.

    The message is always ``PROCESS_EXIT_MESSAGE``. Negative exit codes mean
    the child was killed by that signal number.
    """

    default_category = ErrorCategory.PROCESS

    def __init__(self, exit_code: int | None = None):
        super().__init__(PROCESS_EXIT_MESSAGE)
        self.exit_code = exit_code

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.exit_code is not None:
            result["exit_code"] = self.exit_code
        return result


class SpawnError(DrainHookError):
    """The child process could not be started."""

    default_category = ErrorCategory.PROCESS

    def __init__(self, executable: str, cause: BaseException | None = None):
        message = f"Failed to start process {executable!r}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message, cause=cause)
        self.executable = executable


class EventSerializationError(DrainHookError):
    """The invocation event could not be serialized to JSON."""

    default_category = ErrorCategory.ENCODING


class CompletionError(DrainHookError):
    """A completion handle was written more than once."""

    default_category = ErrorCategory.INTERNAL
