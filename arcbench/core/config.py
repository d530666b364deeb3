"""Configuration management for the benchmark driver."""

import tempfile
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError, validator

from .errors import ConfigError
from ..utils.env import Env


DEFAULT_TRIGGER_FILE = "trigger.txt"
DEFAULT_CONTROLLER_NAMESPACE = "arc-systems"
DEFAULT_RUNNER_NAMESPACE = "arc-runners"
DEFAULT_POLL_INTERVAL = 10.0
WORK_DIR_BASE = "arcbench"
WORK_DIR_TIMESTAMP_FORMAT = "%Y%m%d%H%M%S"


class BenchmarkConfig(BaseModel):
    """Benchmark run configuration.

    Immutable once built. The repository locator may be empty here so that a
    config can be assembled in layers; the orchestrator rejects an empty one.
    """

    # Source repository
    source_repo: str = Field(alias="sourceRepo", default="", description="Repository to clone, e.g. git@github.com:example/repo.git")
    temp_dir: Optional[str] = Field(alias="tempDir", default=None, description="Working directory for the clone")
    trigger_file: str = Field(alias="triggerFile", default=DEFAULT_TRIGGER_FILE, description="Trigger file path inside the repository")
    triggers: int = Field(default=1, ge=1, description="Number of trigger commits")

    # Cluster
    controller_namespace: str = Field(alias="controllerNamespace", default=DEFAULT_CONTROLLER_NAMESPACE)
    runner_namespace: str = Field(alias="runnerNamespace", default=DEFAULT_RUNNER_NAMESPACE)
    runner_kind: str = Field(alias="runnerKind", default="ephemeralrunner")
    pod_kind: str = Field(alias="podKind", default="pod")

    # Polling
    poll_interval: float = Field(alias="pollInterval", default=DEFAULT_POLL_INTERVAL, ge=0, description="Sleep between drain polls in seconds")
    start_poll_interval: float = Field(alias="startPollInterval", default=0.0, ge=0, description="Sleep between start polls in seconds")
    timeout_seconds: Optional[float] = Field(alias="timeoutSeconds", default=None, gt=0, description="Optional bound on the measurement window")

    # External commands
    git_command: str = Field(alias="gitCommand", default="git")
    kubectl_command: str = Field(alias="kubectlCommand", default="kubectl")

    # Output and logging
    output: Optional[str] = Field(default=None, description="Results file (.json or .csv)")
    log_level: str = Field(alias="logLevel", default="INFO", description="Logging level")
    log_file: Optional[str] = Field(alias="logFile", default=None, description="Log file path")

    class Config:
        populate_by_name = True
        frozen = True

    @validator('trigger_file')
    def trigger_file_is_relative(cls, v):
        """Reject trigger files that would escape the working directory."""
        if not v:
            raise ValueError("trigger file must not be empty")
        path = Path(v)
        if path.is_absolute() or ".." in path.parts:
            raise ValueError(f"trigger file must be a relative path inside the repository: {v}")
        return v

    @validator('log_level')
    def log_level_is_known(cls, v):
        if v.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"unknown log level: {v}")
        return v.upper()

    def resolve_work_dir(self, now: Optional[datetime] = None) -> Path:
        """Return the configured working directory or a timestamped default."""
        if self.temp_dir:
            return Path(self.temp_dir)
        timestamp = (now or datetime.now()).strftime(WORK_DIR_TIMESTAMP_FORMAT)
        return Path(tempfile.gettempdir()) / WORK_DIR_BASE / timestamp


def build_config(**values: Any) -> BenchmarkConfig:
    """Build a config, reporting validation failures as ``ConfigError``."""
    try:
        return BenchmarkConfig(**values)
    except ValidationError as e:
        raise ConfigError(f"invalid benchmark configuration: {e}") from e


class ConfigLoader:
    """Configuration loader utility."""

    @staticmethod
    def load_benchmark(file_path: Union[str, Path]) -> BenchmarkConfig:
        """Load benchmark configuration from YAML file."""
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"failed to read config file {file_path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"failed to parse config file {file_path}: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"config file {file_path} must contain a mapping")
        return build_config(**data)

    @staticmethod
    def save_config(config: BaseModel, file_path: Union[str, Path]) -> None:
        """Save configuration to YAML file."""
        with open(file_path, 'w', encoding='utf-8') as f:
            data = config.dict(by_alias=True, exclude_none=True)
            yaml.dump(data, f, default_flow_style=False, indent=2)


def load_env_config() -> BenchmarkConfig:
    """Load configuration from ARCBENCH_* environment variables."""
    values: Dict[str, Any] = {
        'source_repo': Env.get_str('source_repo', ''),
        'temp_dir': Env.get_str('temp_dir'),
        'trigger_file': Env.get_str('trigger_file', DEFAULT_TRIGGER_FILE),
        'controller_namespace': Env.get_str('controller_namespace', DEFAULT_CONTROLLER_NAMESPACE),
        'runner_namespace': Env.get_str('runner_namespace', DEFAULT_RUNNER_NAMESPACE),
        'triggers': Env.get_long('triggers', 1),
        'poll_interval': Env.get_double('poll_interval', DEFAULT_POLL_INTERVAL),
        'timeout_seconds': Env.get_double('timeout_seconds', None),
        'output': Env.get_str('output'),
        'log_level': Env.get_str('log_level', 'INFO'),
        'log_file': Env.get_str('log_file'),
    }
    return build_config(**values)


def merge_configs(base: BenchmarkConfig, overrides: Dict[str, Any]) -> BenchmarkConfig:
    """Overlay explicitly set values (``None`` means unset) onto a config."""
    base_dict = base.dict(exclude_none=True)
    base_dict.update({k: v for k, v in overrides.items() if v is not None})
    return build_config(**base_dict)
