"""Shared fakes for the benchmark driver tests."""

from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

import pytest

from arcbench.core.cluster import ResourceDescriptor, ResourceListing
from arcbench.core.config import BenchmarkConfig
from arcbench.core.errors import ExecutionError, MutationError


class FakeExecutor:
    """Records commands instead of running them."""

    def __init__(self, output: str = "", fail_when: Optional[Callable[[str, List[str]], bool]] = None):
        self.output = output
        self.fail_when = fail_when
        self.calls: List[Tuple[str, List[str]]] = []

    def run(self, command: str, args: Sequence[str]) -> str:
        args = list(args)
        self.calls.append((command, args))
        if self.fail_when is not None and self.fail_when(command, args):
            raise ExecutionError(command, args[0] if args else "", RuntimeError("exit status 1"), b"fatal: rejected")
        return self.output


class FakeGitClient:
    """Version-control stand-in that writes the trigger file like the real client."""

    def __init__(self, fail_at: Optional[int] = None):
        self.fail_at = fail_at
        self.synced: List[Tuple[str, str]] = []
        self.mutations: List[str] = []
        self.attempts = 0

    def ensure_synced(self, work_dir, remote):
        self.synced.append((str(work_dir), remote))

    def commit_file_mutation(self, work_dir, relative_path, content):
        self.attempts += 1
        if self.fail_at is not None and self.attempts == self.fail_at:
            raise MutationError(f"failed to commit and push {relative_path}: rejected")
        (Path(work_dir) / relative_path).write_text(content, encoding="utf-8")
        self.mutations.append(content)


def make_listing(kind: str, count: int, namespace: str = "arc-runners") -> ResourceListing:
    items = [ResourceDescriptor(name=f"{kind}-{i}") for i in range(count)]
    return ResourceListing(kind=kind, namespace=namespace, items=items)


class ScriptedClusterReader:
    """Returns one scripted ``(runners, pods)`` pair per poll iteration.

    Each iteration lists ephemeral runners first and pods second. Polling past
    the end of the script fails the test unless ``repeat_last`` is set.
    """

    def __init__(self, script: List[Tuple[int, int]], repeat_last: bool = False,
                 on_poll: Optional[Callable[[int], None]] = None):
        self.script = list(script)
        self.repeat_last = repeat_last
        self.on_poll = on_poll
        self.polls = 0
        self.calls: List[Tuple[str, str]] = []
        self._current: Tuple[int, int] = (0, 0)

    def list(self, kind: str, namespace: str) -> ResourceListing:
        self.calls.append((kind, namespace))
        if kind == "ephemeralrunner":
            if self.polls >= len(self.script):
                if not self.repeat_last:
                    raise AssertionError("polled past the end of the script")
            else:
                self._current = self.script[self.polls]
            self.polls += 1
            if self.on_poll is not None:
                self.on_poll(self.polls)
            return make_listing(kind, self._current[0], namespace)
        return make_listing(kind, self._current[1], namespace)


class StepClock:
    """Nanosecond clock advancing a fixed step per reading."""

    def __init__(self, step_seconds: float = 1.0):
        self.step = int(step_seconds * 1_000_000_000)
        self.now = 0

    def __call__(self) -> int:
        value = self.now
        self.now += self.step
        return value


@pytest.fixture
def work_dir(tmp_path):
    return tmp_path / "work"


@pytest.fixture
def config(work_dir):
    return BenchmarkConfig(
        source_repo="git@github.com:example/repo.git",
        temp_dir=str(work_dir),
        triggers=3,
    )


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep ARCBENCH_* variables from the host out of the tests."""
    import os
    for key in list(os.environ):
        if key.startswith("ARCBENCH_"):
            monkeypatch.delenv(key, raising=False)
