"""Result collection for benchmark runs."""

import json
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from ..utils.logging import LoggerMixin


@dataclass
class PollObservation:
    """Counts seen by one poll iteration."""
    phase: str  # 'start' or 'drain'
    iteration: int
    runners: int
    pods: int
    timestamp: float


@dataclass
class BenchmarkResult:
    """Complete benchmark result."""
    test_id: str
    source_repo: str
    work_dir: str
    triggers: int
    start_time: float
    end_time: float = 0.0

    # Measurement window on the monotonic clock
    elapsed_seconds: float = 0.0

    mutations: int = 0
    start_polls: int = 0
    drain_polls: int = 0
    observations: List[PollObservation] = field(default_factory=list)

    metadata: Dict[str, Any] = field(default_factory=dict)

    @property
    def duration_seconds(self) -> float:
        """Wall-clock duration of the measurement window."""
        return self.end_time - self.start_time

    @property
    def peak_runners(self) -> int:
        return max((o.runners for o in self.observations), default=0)

    @property
    def peak_pods(self) -> int:
        return max((o.pods for o in self.observations), default=0)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return asdict(self)

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=2, default=str)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BenchmarkResult":
        data = dict(data)
        data['observations'] = [PollObservation(**o) for o in data.get('observations', [])]
        return cls(**data)


class ResultCollector(LoggerMixin):
    """Creates, records and persists benchmark results."""

    def __init__(self):
        super().__init__()
        self.results: List[BenchmarkResult] = []

    def create_result(self, source_repo: str, work_dir: Union[str, Path], triggers: int) -> BenchmarkResult:
        """Create a new benchmark result, stamped with the current wall time."""
        start_time = time.time()
        result = BenchmarkResult(
            test_id=f"arcbench_{int(start_time)}",
            source_repo=source_repo,
            work_dir=str(work_dir),
            triggers=triggers,
            start_time=start_time,
        )

        self.results.append(result)
        self.logger.info(f"Created benchmark result: {result.test_id}")
        return result

    def record_poll(self, result: BenchmarkResult, phase: str, iteration: int, runners: int, pods: int) -> PollObservation:
        observation = PollObservation(
            phase=phase,
            iteration=iteration,
            runners=runners,
            pods=pods,
            timestamp=time.time(),
        )
        result.observations.append(observation)
        if phase == 'start':
            result.start_polls += 1
        else:
            result.drain_polls += 1
        return observation

    def finalize_result(self, result: BenchmarkResult, elapsed_seconds: float) -> None:
        """Close the measurement window."""
        result.end_time = time.time()
        result.elapsed_seconds = elapsed_seconds
        self.logger.info(f"Finalized benchmark result: {result.test_id}")

    def save(self, result: BenchmarkResult, file_path: Union[str, Path]) -> Path:
        """Save as CSV when the path ends in .csv, JSON otherwise."""
        file_path = Path(file_path)
        if file_path.suffix.lower() == '.csv':
            self.export_csv(result, file_path)
        else:
            self.save_result(result, file_path)
        return file_path

    def save_result(self, result: BenchmarkResult, file_path: Union[str, Path]) -> None:
        """Save benchmark result to JSON file."""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        with open(file_path, 'w', encoding='utf-8') as f:
            f.write(result.to_json())

        self.logger.info(f"Saved benchmark result to: {file_path}")

    def load_result(self, file_path: Union[str, Path]) -> BenchmarkResult:
        """Load benchmark result from JSON file."""
        with open(file_path, 'r', encoding='utf-8') as f:
            data = json.load(f)

        result = BenchmarkResult.from_dict(data)
        self.logger.info(f"Loaded benchmark result from: {file_path}")
        return result

    def export_csv(self, result: BenchmarkResult, file_path: Union[str, Path]) -> None:
        """Export one row per poll observation, each carrying the run summary."""
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        summary = {
            'test_id': result.test_id,
            'source_repo': result.source_repo,
            'triggers': result.triggers,
            'mutations': result.mutations,
            'elapsed_seconds': result.elapsed_seconds,
            'start_polls': result.start_polls,
            'drain_polls': result.drain_polls,
        }

        rows = [{**summary, **asdict(o)} for o in result.observations]
        if not rows:
            rows = [summary]

        df = pd.DataFrame(rows)
        df.to_csv(file_path, index=False)

        self.logger.info(f"Exported benchmark result to CSV: {file_path}")
