"""Logging utilities for the benchmark driver."""

import logging
import sys
from pathlib import Path
from typing import Optional
from rich.logging import RichHandler
from rich.console import Console


LOGGER_PREFIX = "arcbench"


def resolve_level(level: str) -> int:
    """Numeric level for a name such as ``debug`` or ``WARNING``."""
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"unknown log level: {level}")
    return value


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    component: Optional[str] = None,
    enable_rich: bool = True
) -> logging.Logger:
    """Setup logging configuration.

    Calling it again replaces the handlers installed by the previous call, so
    the CLI can configure logging early and again once the benchmark
    configuration is known.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path
        component: Optional component name; ``None`` configures the package logger
        enable_rich: Enable rich console output

    Returns:
        Configured logger instance
    """
    # Package logger unless a component is named
    name = f"{LOGGER_PREFIX}.{component}" if component else LOGGER_PREFIX
    logger = logging.getLogger(name)
    logger.setLevel(resolve_level(level))

    # Drop handlers from an earlier call
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    # Console goes to stderr; stdout carries the results table.
    # git and kubectl output may contain brackets, so no markup.
    if enable_rich:
        console_handler = RichHandler(
            console=Console(stderr=True),
            show_time=True,
            show_path=False,
            markup=False,
            rich_tracebacks=True
        )
        console_handler.setFormatter(logging.Formatter('%(message)s'))
    else:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)

    logger.addHandler(console_handler)

    # File handler
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Keep records away from the root logger
    logger.propagate = False

    return logger


def get_logger(component: str) -> logging.Logger:
    """Get logger for component."""
    return logging.getLogger(f"{LOGGER_PREFIX}.{component}")


class LoggerMixin:
    """Mixin class that provides logging capabilities."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._logger = None

    @property
    def logger(self) -> logging.Logger:
        """Logger named after the lowercased class, e.g. ``arcbench.gitclient``."""
        if getattr(self, "_logger", None) is None:
            self._logger = get_logger(self.__class__.__name__.lower())
        return self._logger
