"""Blocking execution of external commands."""

import subprocess
from typing import Sequence

from .errors import ExecutionError
from ..utils.logging import LoggerMixin


class ProcessExecutor(LoggerMixin):
    """Runs external commands and returns their combined stdout/stderr.

    No retries and no timeout are applied here; callers own both policies.
    """

    def run(self, command: str, args: Sequence[str]) -> str:
        """Run ``command`` with ``args`` and block until it exits.

        Args:
            command: Executable name, resolved through ``PATH``
            args: Ordered argument list

        Returns:
            Combined stdout/stderr decoded as text

        Raises:
            ExecutionError: If the process cannot be started or exits non-zero
        """
        args = list(args)
        first_arg = args[0] if args else ""
        self.logger.debug(f"exec: {command} {' '.join(args)}")

        try:
            completed = subprocess.run(
                [command, *args],
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                check=False,
            )
        except OSError as e:
            raise ExecutionError(command, first_arg, e) from e

        output = completed.stdout or b""
        if completed.returncode != 0:
            cause = subprocess.CalledProcessError(completed.returncode, [command, *args], output)
            raise ExecutionError(command, first_arg, cause, output) from cause

        return output.decode("utf-8", errors="replace")
