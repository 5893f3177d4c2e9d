"""
drain-hook - Lambda shim that runs ``drain-container-instance`` for an event.

The Lambda function handler is ``drain_hook.handler.handler``. Draining
itself is done by the external executable shipped in the deployment
package under ``drain_container_instance/bin``.
"""

from drain_hook.completion import Completion, CompletionHandle
from drain_hook.errors import (
    CompletionError,
    DrainHookError,
    ErrorCategory,
    EventSerializationError,
    ProcessExitError,
    SpawnError,
)
from drain_hook.result import Err, Ok, Result
from drain_hook.settings import DrainHookSettings, get_settings
from drain_hook.shim import InvocationShim, serialize_event

__version__ = "0.1.0"

__all__ = [
    "Completion",
    "CompletionError",
    "CompletionHandle",
    "DrainHookError",
    "DrainHookSettings",
    "Err",
    "ErrorCategory",
    "EventSerializationError",
    "InvocationShim",
    "Ok",
    "ProcessExitError",
    "Result",
    "SpawnError",
    "get_settings",
    "serialize_event",
]
