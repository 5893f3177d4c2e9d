"""Scoped child-process environment with an augmented search path.

The companion binary directory is appended to ``PATH`` in a copy of the
environment that is handed to the spawn call. ``os.environ`` is left
untouched, so concurrent invocations in one worker never see each other's
changes and the suffix is never appended twice.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

SEARCH_PATH_VAR = "PATH"


def augment_search_path(inherited: str | None, directory: str | Path) -> str:
    """Append ``directory`` to a search path string.

    The inherited value is always kept as the prefix, even when it is empty.

    >>> augment_search_path("/usr/bin", "/var/task/bin")
    '/usr/bin:/var/task/bin'
    """
    return f"{inherited or ''}{os.pathsep}{directory}"


def build_child_env(
    directory: str | Path,
    base_env: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """Build the environment dict for the subprocess.

    Args:
        directory: Directory to append to the search path.
        base_env: Environment to copy. Defaults to ``os.environ``.

    Returns:
        A new dict; ``base_env`` is not modified.
    """
    env = dict(os.environ if base_env is None else base_env)
    env[SEARCH_PATH_VAR] = augment_search_path(env.get(SEARCH_PATH_VAR), directory)
    return env
