"""Trigger-file counter handling."""

import re
from pathlib import Path
from typing import Union

from .errors import MutationError, ParseError


_COUNTER_PATTERN = re.compile(r"[0-9]+")


def parse_counter(content: str, path: str = "") -> int:
    """Parse trigger-file content as a non-negative decimal integer.

    Only ASCII digits are accepted: no sign, no whitespace, no trailing
    newline. There is no fallback value for malformed content.
    """
    if not _COUNTER_PATTERN.fullmatch(content):
        raise ParseError(path, content)
    return int(content)


def format_counter(value: int) -> str:
    return str(value)


class TriggerFile:
    """Counter persisted as the text of a file inside the working directory."""

    def __init__(self, work_dir: Union[str, Path], relative_path: str):
        self.work_dir = Path(work_dir)
        self.relative_path = relative_path

    @property
    def path(self) -> Path:
        return self.work_dir / self.relative_path

    def read_counter(self) -> int:
        """Current counter value; a missing file counts as 0."""
        try:
            raw = self.path.read_bytes()
        except FileNotFoundError:
            return 0
        except OSError as e:
            raise MutationError(f"failed to read the trigger file {self.relative_path}: {e}") from e

        try:
            content = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(self.relative_path, raw) from e
        return parse_counter(content, self.relative_path)

    def next_content(self) -> str:
        """Text to commit for the next trigger."""
        return format_counter(self.read_counter() + 1)
