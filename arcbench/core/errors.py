"""Error kinds raised by the benchmark driver.

Every error is fatal to a benchmark run. Wrapping errors keep the underlying
``ExecutionError`` reachable through ``__cause__``.
"""

from typing import Optional, Union


class ArcBenchError(Exception):
    """Base class for all benchmark driver errors."""


class ConfigError(ArcBenchError):
    """Invalid benchmark configuration."""


class DirectoryError(ArcBenchError):
    """The working directory could not be prepared."""


class ExecutionError(ArcBenchError):
    """An external command could not be run or exited non-zero."""

    def __init__(self, command: str, first_arg: str, cause: BaseException, output: bytes = b""):
        self.command = command
        self.first_arg = first_arg
        self.cause = cause
        self.output = output
        super().__init__(
            f"{command} {first_arg}: {cause}: {output.decode('utf-8', errors='replace')}"
        )


class SyncError(ArcBenchError):
    """Cloning or pulling the source repository failed."""


class ParseError(ArcBenchError):
    """The trigger file does not hold a non-negative decimal integer."""

    def __init__(self, path: str, content: Union[str, bytes]):
        self.path = path
        self.content = content
        super().__init__(f"failed to parse the trigger file {path}: {content!r}")


class MutationError(ArcBenchError):
    """Writing, staging, committing or pushing the trigger file failed."""


class QueryError(ArcBenchError):
    """The cluster-state API query failed."""


class DecodeError(ArcBenchError):
    """The cluster-state API returned a malformed listing."""

    def __init__(self, kind: str, namespace: str, reason: str):
        self.kind = kind
        self.namespace = namespace
        self.reason = reason
        super().__init__(f"failed to decode the list of {kind} in {namespace}: {reason}")


class BenchmarkTimeoutError(ArcBenchError):
    """The optional measurement deadline passed before the runners drained."""

    def __init__(self, timeout_seconds: float, phase: Optional[str] = None):
        self.timeout_seconds = timeout_seconds
        self.phase = phase
        where = f" while {phase}" if phase else ""
        super().__init__(f"benchmark exceeded {timeout_seconds:g}s{where}")


class BenchmarkCancelledError(ArcBenchError):
    """The caller cancelled the benchmark run."""
