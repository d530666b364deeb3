"""Benchmark orchestrator: trigger commits, then wait for runners to come and go."""

import threading
import time
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Tuple

from .cluster import ClusterReader, ResourceListing
from .config import BenchmarkConfig
from .errors import (
    ArcBenchError,
    BenchmarkCancelledError,
    BenchmarkTimeoutError,
    ConfigError,
    DirectoryError,
)
from .executor import ProcessExecutor
from .results import BenchmarkResult, ResultCollector
from .trigger import TriggerFile
from .vcs import GitClient
from ..utils.logging import LoggerMixin
from ..utils.timer import Timer


class BenchmarkPhase(str, Enum):
    """Orchestrator states, in the order a successful run visits them."""
    INIT = "init"
    SYNCED = "synced"
    TRIGGERED = "triggered"
    AWAITING_START = "awaiting-start"
    RUNNING = "running"
    AWAITING_DRAIN = "awaiting-drain"
    DRAINED = "drained"


class BenchmarkOrchestrator(LoggerMixin):
    """Measures the time from the first trigger commit until all ephemeral runners are gone.

    A run goes through the following steps:

    1. Clone the source repository, or pull it if the working directory is
       already a clone.
    2. Increment the counter in the trigger file, commit and push it. Repeat
       for the configured number of triggers, one at a time.
    3. Poll the runner namespace until at least one ephemeral runner or pod
       shows up.
    4. Poll until a single iteration sees neither ephemeral runners nor pods.

    The measurement window opens right before step 2 and closes when step 4
    completes. Any error aborts the run; nothing already pushed is undone.
    Without ``timeout_seconds`` or a cancel event the run polls for as long
    as the controller takes. An injected ``sleep`` replaces the pause between
    polls; a cancel event set by the time it returns still stops the run.
    """

    def __init__(
        self,
        config: BenchmarkConfig,
        vcs: Optional[GitClient] = None,
        cluster: Optional[ClusterReader] = None,
        executor: Optional[ProcessExecutor] = None,
        result_collector: Optional[ResultCollector] = None,
        sleep: Optional[Callable[[float], None]] = None,
        nano_clock: Optional[Callable[[], int]] = None,
        cancel_event: Optional[threading.Event] = None,
    ):
        super().__init__()
        self.config = config
        executor = executor or ProcessExecutor()
        self.vcs = vcs or GitClient(executor, command=config.git_command)
        self.cluster = cluster or ClusterReader(executor, command=config.kubectl_command)
        self.result_collector = result_collector or ResultCollector()
        self.sleep = sleep
        self.nano_clock = nano_clock
        self.cancel_event = cancel_event

        self.phase = BenchmarkPhase.INIT
        self.work_dir: Optional[Path] = None
        self._timer: Optional[Timer] = None

    def run_benchmark(self) -> BenchmarkResult:
        """Run one trigger-to-drain measurement.

        Returns:
            The finalized result; ``elapsed_seconds`` is the measurement

        Raises:
            ArcBenchError: Any failure, see ``arcbench.core.errors``
        """
        self._validate()
        self.work_dir = self._prepare_work_dir()

        self.vcs.ensure_synced(self.work_dir, self.config.source_repo)
        self._transition(BenchmarkPhase.SYNCED)

        result = self.result_collector.create_result(
            source_repo=self.config.source_repo,
            work_dir=self.work_dir,
            triggers=self.config.triggers,
        )

        self._timer = Timer(self.nano_clock)
        try:
            self._run_triggers(result)
            self._wait_for_start(result)
            self._wait_for_drain(result)
        except ArcBenchError as e:
            self.logger.error(f"Benchmark failed while {self.phase.value}: {e}")
            result.metadata['error'] = str(e)
            result.metadata['phase'] = self.phase.value
            raise

        elapsed = self._timer.stop()
        self.result_collector.finalize_result(result, elapsed)
        self.logger.info(f"Elapsed time: {elapsed:.3f}s")
        return result

    def _validate(self) -> None:
        if not self.config.source_repo.strip():
            raise ConfigError("source repository is required")

    def _prepare_work_dir(self) -> Path:
        work_dir = self.config.resolve_work_dir()
        try:
            work_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise DirectoryError(f"failed to create working directory {work_dir}: {e}") from e
        return work_dir

    def _transition(self, phase: BenchmarkPhase) -> None:
        self.logger.debug(f"Phase {self.phase.value} -> {phase.value}")
        self.phase = phase

    def _run_triggers(self, result: BenchmarkResult) -> None:
        trigger = TriggerFile(self.work_dir, self.config.trigger_file)
        for i in range(self.config.triggers):
            self._check_bounds()
            self.logger.info(
                f"Create or update the trigger file {self.config.trigger_file} "
                f"({i + 1}/{self.config.triggers})"
            )
            content = trigger.next_content()
            self.vcs.commit_file_mutation(self.work_dir, self.config.trigger_file, content)
            result.mutations += 1
        self._transition(BenchmarkPhase.TRIGGERED)

    def _poll(self, result: BenchmarkResult, phase: str, iteration: int) -> Tuple[ResourceListing, ResourceListing]:
        namespace = self.config.runner_namespace
        runners = self.cluster.list(self.config.runner_kind, namespace)
        pods = self.cluster.list(self.config.pod_kind, namespace)
        self.result_collector.record_poll(result, phase, iteration, len(runners), len(pods))
        return runners, pods

    def _wait_for_start(self, result: BenchmarkResult) -> None:
        """Either kind may appear first; whichever does ends the wait."""
        self._transition(BenchmarkPhase.AWAITING_START)
        iteration = 0
        while True:
            self._check_bounds()
            iteration += 1
            runners, pods = self._poll(result, 'start', iteration)
            if not runners.empty or not pods.empty:
                break

            self.logger.info("Waiting for the creation of the ephemeral runners...")
            if self.config.start_poll_interval > 0:
                self._pause(self.config.start_poll_interval)

        self.logger.info(f"Observed {len(runners)} ephemeral runners and {len(pods)} pods, workflow runs started")
        self._transition(BenchmarkPhase.RUNNING)

    def _wait_for_drain(self, result: BenchmarkResult) -> None:
        """Both listings must be empty in the same iteration."""
        self._transition(BenchmarkPhase.AWAITING_DRAIN)
        iteration = 0
        while True:
            self._check_bounds()
            iteration += 1
            runners, pods = self._poll(result, 'drain', iteration)
            if runners.empty and pods.empty:
                break

            self.logger.info(f"Observed {len(runners)} ephemeral runners and {len(pods)} pods")
            self.logger.info("Still waiting for the completion of the workflow runs...")
            self._pause(self.config.poll_interval)

        self._transition(BenchmarkPhase.DRAINED)

    def _pause(self, seconds: float) -> None:
        if self.sleep is not None:
            self.sleep(seconds)
            cancelled = self.cancel_event is not None and self.cancel_event.is_set()
        elif self.cancel_event is not None:
            cancelled = self.cancel_event.wait(seconds)
        else:
            time.sleep(seconds)
            cancelled = False
        if cancelled:
            raise BenchmarkCancelledError(f"benchmark cancelled while {self.phase.value}")

    def _check_bounds(self) -> None:
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise BenchmarkCancelledError(f"benchmark cancelled while {self.phase.value}")
        if self._timer is not None and self._timer.has_exceeded(self.config.timeout_seconds):
            raise BenchmarkTimeoutError(self.config.timeout_seconds, self.phase.value)


def run_benchmark(config: BenchmarkConfig, **kwargs) -> BenchmarkResult:
    """Run a benchmark with default collaborators; see ``BenchmarkOrchestrator``."""
    return BenchmarkOrchestrator(config, **kwargs).run_benchmark()
