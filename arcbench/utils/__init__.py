"""Utilities for the benchmark driver."""

from .logging import setup_logging, get_logger, LoggerMixin
from .timer import Timer
from .env import Env

__all__ = [
    "setup_logging",
    "get_logger",
    "LoggerMixin",
    "Timer",
    "Env",
]
