"""Runtime settings for drain-hook.

Settings are environment-driven. The task root comes from the variable the
Lambda runtime sets (``LAMBDA_TASK_ROOT``); everything else uses the
``DRAIN_HOOK_`` prefix.

Fields
──────
task_root             : Directory the deployment package is unpacked into
executable            : Name of the binary to spawn (looked up on PATH)
bin_subdir            : Directory under task_root appended to PATH
kill_timeout_seconds  : Grace period between SIGTERM and SIGKILL on cancel
log_level             : Structlog log level
log_format            : ``json``, ``console`` or empty for auto-detect

Examples:
    >>> settings = DrainHookSettings(task_root="/var/task")
    >>> str(settings.bin_dir)
    '/var/task/drain_container_instance/bin'
"""

from __future__ import annotations

from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_EXECUTABLE = "drain-container-instance"
DEFAULT_BIN_SUBDIR = "drain_container_instance/bin"


class DrainHookSettings(BaseSettings):
    """Settings for the invocation shim and its Lambda entry point."""

    model_config = SettingsConfigDict(
        env_prefix="DRAIN_HOOK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # ── Child process ────────────────────────────────────────────
    task_root: Path = Field(
        default_factory=Path.cwd,
        validation_alias=AliasChoices("DRAIN_HOOK_TASK_ROOT", "LAMBDA_TASK_ROOT"),
        description="Directory the deployment package is unpacked into",
    )
    executable: str = Field(default=DEFAULT_EXECUTABLE)
    bin_subdir: str = Field(default=DEFAULT_BIN_SUBDIR)
    kill_timeout_seconds: float = Field(default=5.0, gt=0)

    # ── Logging ──────────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="", description="json, console, or empty for auto")

    @property
    def bin_dir(self) -> Path:
        """Directory appended to the child's search path."""
        return self.task_root / self.bin_subdir

    @property
    def json_logs(self) -> bool | None:
        if self.log_format.lower() == "json":
            return True
        if self.log_format.lower() == "console":
            return False
        return None


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, DrainHookSettings] = {}


def get_settings(*, _force_reload: bool = False) -> DrainHookSettings:
    """Load, validate, and cache a :class:`DrainHookSettings` instance."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]

    settings = DrainHookSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Clear the settings cache (primarily for testing)."""
    _settings_cache.clear()
