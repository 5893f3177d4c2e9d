"""Invocation shim — runs the drain binary for one event.

The shim owns exactly one child process per invocation:

    .. code-block:: text

        event ──json──▶ argv[1]
                          │
        os.environ ──copy + PATH suffix──▶ env
                          │
                          ▼
             drain-container-instance (stdio inherited)
                          │
                     exit status
                          │
              0 ──▶ Ok(0)      != 0 ──▶ Err(ProcessExitError)

``run()`` resolves to a :data:`~drain_hook.result.Result`; ``handle()``
reports the same outcome through a one-shot completion handle, strictly
after the child has terminated.

Example:
    >>> shim = InvocationShim(DrainHookSettings(task_root="/var/task"))
    >>> result = await shim.run({"instanceId": "i-abc123"})
    >>> result.is_ok()
    True

Tags:
    lambda, subprocess, asyncio, drain-hook
"""

from __future__ import annotations

import asyncio
import json
import re
import uuid
from typing import Any

from drain_hook.completion import CompletionHandle
from drain_hook.environment import build_child_env
from drain_hook.errors import EventSerializationError, ProcessExitError, SpawnError
from drain_hook.logging import get_logger
from drain_hook.result import Err, Ok, Result
from drain_hook.settings import DrainHookSettings, get_settings

logger = get_logger(__name__)

# Lone surrogates survive json.loads but cannot be encoded into argv
_SURROGATE_RE = re.compile("[\ud800-\udfff]")


def serialize_event(event: Any) -> str:
    """Serialize an invocation event to compact JSON text.

    Output matches ``JSON.stringify``: no whitespace between tokens,
    non-ASCII characters kept as-is and lone surrogates escaped as
    ``\\uXXXX``. NaN/Infinity and circular structures are rejected.

    Raises:
        EventSerializationError: If the event is not JSON-serializable or
            the text cannot be passed as a UTF-8 process argument.
    """
    try:
        text = json.dumps(event, separators=(",", ":"), ensure_ascii=False, allow_nan=False)
        text = _SURROGATE_RE.sub(lambda m: f"\\u{ord(m.group()):04x}", text)
        text.encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise EventSerializationError(
            f"Event is not JSON-serializable: {exc}", cause=exc
        ) from exc
    return text


class InvocationShim:
    """Spawns the drain executable for an event and reports its outcome.

    Parameters
    ----------
    settings
        Resolved settings. Defaults to :func:`get_settings`.
    """

    def __init__(self, settings: DrainHookSettings | None = None) -> None:
        self.settings = settings or get_settings()

    async def handle(self, event: Any, completion: CompletionHandle) -> None:
        """Run the child for ``event`` and signal ``completion`` exactly once.

        Cancellation propagates without touching ``completion``.
        """
        result = await self.run(event)
        if isinstance(result, Ok):
            completion.succeed()
        else:
            completion.fail(result.error)

    async def run(self, event: Any) -> Result[int]:
        """Run the child for ``event`` and resolve to its outcome.

        Returns:
            ``Ok(0)`` when the child exits cleanly, otherwise ``Err`` holding
            an :class:`EventSerializationError`, :class:`SpawnError` or
            :class:`ProcessExitError`.
        """
        executable = self.settings.executable
        log = logger.bind(invocation_id=uuid.uuid4().hex[:12], executable=executable)

        try:
            argument = serialize_event(event)
        except EventSerializationError as exc:
            log.error("event.serialization_failed", error=str(exc.cause))
            return Err(exc)

        env = build_child_env(self.settings.bin_dir)

        try:
            # stdio left as None: the child writes to our own descriptors
            process = await asyncio.create_subprocess_exec(executable, argument, env=env)
        except OSError as exc:
            log.error("process.spawn_failed", error=str(exc), bin_dir=str(self.settings.bin_dir))
            return Err(SpawnError(executable, cause=exc))

        log.info("process.started", pid=process.pid)

        try:
            exit_code = await process.wait()
        except asyncio.CancelledError:
            log.warning("process.cancelled", pid=process.pid)
            await self._terminate(process)
            raise

        if exit_code != 0:
            log.error("process.failed", pid=process.pid, exit_code=exit_code)
            return Err(ProcessExitError(exit_code))

        log.info("process.exited", pid=process.pid, exit_code=exit_code)
        return Ok(exit_code)

    async def _terminate(self, process: asyncio.subprocess.Process) -> None:
        """Stop a running child (SIGTERM → SIGKILL) and reap it."""
        if process.returncode is not None:
            return
        try:
            process.terminate()
            try:
                await asyncio.wait_for(
                    process.wait(), timeout=self.settings.kill_timeout_seconds,
                )
            except TimeoutError:
                process.kill()
                await process.wait()
        except ProcessLookupError:
            pass  # Process already gone
