"""
Shared pytest fixtures for drain-hook tests.

This module provides:
- A temporary Lambda task root holding a stub ``drain-container-instance``
- Settings pointing at that task root
- Settings cache isolation between tests

The stub is a POSIX shell script. It records what it received into
``$DRAIN_STUB_RECORD_DIR`` and then behaves according to env vars:

- ``DRAIN_STUB_EXIT_CODE``: exit status (default 0)
- ``DRAIN_STUB_SIGNAL``: kill itself with this signal
- ``DRAIN_STUB_SLEEP``: replace itself with ``sleep N``
- ``DRAIN_STUB_ECHO``: print this line to stdout
"""

import json
import os
import stat
import sys
from pathlib import Path

import pytest

# Ensure drain_hook package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from drain_hook.settings import DrainHookSettings, clear_settings_cache


STUB_SCRIPT = """#!/bin/sh
printf '%s' "$#" > "$DRAIN_STUB_RECORD_DIR/argc"
printf '%s' "$1" > "$DRAIN_STUB_RECORD_DIR/argv1"
printf '%s' "$PATH" > "$DRAIN_STUB_RECORD_DIR/path"
printf '%s' "$$" > "$DRAIN_STUB_RECORD_DIR/pid"
if [ -n "$DRAIN_STUB_ECHO" ]; then
    echo "$DRAIN_STUB_ECHO"
fi
if [ -n "$DRAIN_STUB_SIGNAL" ]; then
    kill -s "$DRAIN_STUB_SIGNAL" $$
fi
if [ -n "$DRAIN_STUB_SLEEP" ]; then
    exec sleep "$DRAIN_STUB_SLEEP"
fi
exit "${DRAIN_STUB_EXIT_CODE:-0}"
"""


class StubRecord:
    """Reads what the stub executable recorded."""

    def __init__(self, record_dir: Path) -> None:
        self.record_dir = record_dir

    def _read(self, name: str) -> str | None:
        path = self.record_dir / name
        return path.read_text() if path.exists() else None

    @property
    def called(self) -> bool:
        return (self.record_dir / "argc").exists()

    @property
    def argc(self) -> int:
        return int(self._read("argc"))

    @property
    def argument(self) -> str:
        return self._read("argv1")

    @property
    def event(self):
        return json.loads(self.argument)

    @property
    def path(self) -> str:
        return self._read("path")

    @property
    def pid(self) -> int | None:
        raw = self._read("pid")
        return int(raw) if raw else None


@pytest.fixture(autouse=True)
def _isolate_settings(monkeypatch):
    """Keep cached settings and stub knobs from leaking between tests."""
    for var in (
        "DRAIN_STUB_EXIT_CODE",
        "DRAIN_STUB_SIGNAL",
        "DRAIN_STUB_SLEEP",
        "DRAIN_STUB_ECHO",
        "DRAIN_HOOK_TASK_ROOT",
        "DRAIN_HOOK_EXECUTABLE",
    ):
        monkeypatch.delenv(var, raising=False)
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def task_root(tmp_path: Path) -> Path:
    """A Lambda task root containing the stub drain executable."""
    root = tmp_path / "task"
    bin_dir = root / "drain_container_instance" / "bin"
    bin_dir.mkdir(parents=True)
    stub = bin_dir / "drain-container-instance"
    stub.write_text(STUB_SCRIPT)
    stub.chmod(stub.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return root


@pytest.fixture
def stub_record(tmp_path: Path, monkeypatch) -> StubRecord:
    record_dir = tmp_path / "record"
    record_dir.mkdir()
    monkeypatch.setenv("DRAIN_STUB_RECORD_DIR", str(record_dir))
    return StubRecord(record_dir)


@pytest.fixture
def settings(task_root: Path, stub_record: StubRecord) -> DrainHookSettings:
    return DrainHookSettings(task_root=task_root, kill_timeout_seconds=2.0)


@pytest.fixture
def lambda_env(task_root: Path, stub_record: StubRecord, monkeypatch) -> Path:
    """Environment as the Lambda runtime would set it."""
    monkeypatch.setenv("LAMBDA_TASK_ROOT", str(task_root))
    monkeypatch.setenv("DRAIN_HOOK_LOG_FORMAT", "json")
    return task_root


@pytest.fixture
def sample_event() -> dict:
    return {"instanceId": "i-abc123"}


@pytest.fixture
def lifecycle_event() -> dict:
    """SNS-wrapped Auto Scaling lifecycle hook notification."""
    message = {
        "EC2InstanceId": "i-0123456789abcdef0",
        "LifecycleTransition": "autoscaling:EC2_INSTANCE_TERMINATING",
        "LifecycleHookName": "ecs-drain-hook",
        "AutoScalingGroupName": "ecs-cluster-asg",
        "NotificationMetadata": json.dumps({"ClusterName": "production"}),
    }
    return {
        "Records": [
            {
                "EventSource": "aws:sns",
                "Sns": {
                    "TopicArn": "arn:aws:sns:us-east-1:123456789012:ecs-drain",
                    "Message": json.dumps(message),
                },
            }
        ]
    }


@pytest.fixture
def original_path() -> str:
    return os.environ.get("PATH", "")
