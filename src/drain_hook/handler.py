"""AWS Lambda entry point.

Configure the function handler as ``drain_hook.handler.handler``. The
Python runtime has no ``context.done()``: returning completes the
invocation successfully and raising completes it with that error, so the
shim's one-shot completion is translated at this boundary.
"""

from __future__ import annotations

import asyncio
from typing import Any

from drain_hook.completion import Completion
from drain_hook.logging import bind_context, clear_context, configure_logging
from drain_hook.settings import get_settings
from drain_hook.shim import InvocationShim

_logging_configured = False


def _configure_once() -> None:
    global _logging_configured
    if _logging_configured:
        return
    settings = get_settings()
    configure_logging(level=settings.log_level, json_format=settings.json_logs)
    _logging_configured = True


def handler(event: Any, context: Any) -> None:
    """Drain the container instance described by ``event``.

    Raises:
        ProcessExitError: The drain executable exited non-zero.
        SpawnError: The drain executable could not be started.
        EventSerializationError: ``event`` is not JSON-serializable.
    """
    _configure_once()
    clear_context()
    request_id = getattr(context, "aws_request_id", None)
    if request_id:
        bind_context(aws_request_id=request_id)

    completion = Completion()
    asyncio.run(InvocationShim(get_settings()).handle(event, completion))
    completion.raise_for_outcome()


# Conventional alias
lambda_handler = handler
