"""Core components of the benchmark driver."""

from .config import BenchmarkConfig, ConfigLoader, build_config
from .executor import ProcessExecutor
from .vcs import GitClient
from .cluster import ClusterReader, ResourceDescriptor, ResourceListing, decode_listing
from .orchestrator import BenchmarkOrchestrator, BenchmarkPhase, run_benchmark
from .results import BenchmarkResult, PollObservation, ResultCollector

__all__ = [
    "BenchmarkConfig",
    "ConfigLoader",
    "build_config",
    "ProcessExecutor",
    "GitClient",
    "ClusterReader",
    "ResourceDescriptor",
    "ResourceListing",
    "decode_listing",
    "BenchmarkOrchestrator",
    "BenchmarkPhase",
    "run_benchmark",
    "BenchmarkResult",
    "PollObservation",
    "ResultCollector",
]
