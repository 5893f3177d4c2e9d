"""One-shot completion handles.

The host runtime learns the outcome of an invocation through a completion
handle that is written exactly once: either ``succeed()`` or
``fail(error)``. Writing it a second time is a contract violation and
raises :class:`~drain_hook.errors.CompletionError`.

``Completion`` also accepts a Node-style ``callback(error | None)`` which
is invoked once, when the outcome is recorded.

Example::

    completion = Completion()
    await shim.handle(event, completion)
    completion.raise_for_outcome()
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Protocol, runtime_checkable

from drain_hook.errors import CompletionError
from drain_hook.result import Err, Ok, Result

DoneCallback = Callable[[BaseException | None], None]


@runtime_checkable
class CompletionHandle(Protocol):
    """Write-once outcome sink used by the invocation shim."""

    def succeed(self) -> None:
        """Complete the invocation with no error."""
        ...

    def fail(self, error: BaseException) -> None:
        """Complete the invocation with ``error``."""
        ...


class Completion:
    """Thread-safe one-shot :class:`CompletionHandle` implementation."""

    def __init__(self, callback: DoneCallback | None = None) -> None:
        self._callback = callback
        self._lock = threading.Lock()
        self._outcome: Result[None] | None = None

    def succeed(self) -> None:
        self._set(Ok(None))

    def fail(self, error: BaseException) -> None:
        self._set(Err(error))

    @property
    def done(self) -> bool:
        return self._outcome is not None

    @property
    def outcome(self) -> Result[None] | None:
        """The recorded outcome, or None while pending."""
        return self._outcome

    @property
    def error(self) -> BaseException | None:
        if isinstance(self._outcome, Err):
            return self._outcome.error
        return None

    def raise_for_outcome(self) -> None:
        """Raise the recorded error; no-op on success.

        Raises:
            CompletionError: If no outcome has been recorded yet.
        """
        if self._outcome is None:
            raise CompletionError("Completion has not been signalled")
        if isinstance(self._outcome, Err):
            raise self._outcome.error

    def _set(self, outcome: Result[None]) -> None:
        with self._lock:
            if self._outcome is not None:
                raise CompletionError(
                    f"Completion already signalled with {self._outcome!r}"
                )
            self._outcome = outcome
        if self._callback is not None:
            self._callback(outcome.error if isinstance(outcome, Err) else None)

    def __repr__(self) -> str:
        return f"Completion(outcome={self._outcome!r})"
