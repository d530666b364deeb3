"""Git operations against the benchmark's working clone."""

from pathlib import Path
from typing import Optional, Union

from .errors import ExecutionError, MutationError, SyncError
from .executor import ProcessExecutor
from ..utils.logging import LoggerMixin


class GitClient(LoggerMixin):
    """Clones, pulls and pushes single-file trigger commits.

    Push failures are not retried and local commits are not rolled back: a
    retry would stack a second local commit on top of the unpushed one.
    """

    def __init__(self, executor: Optional[ProcessExecutor] = None, command: str = "git"):
        super().__init__()
        self.executor = executor or ProcessExecutor()
        self.command = command

    def _git(self, *args: str) -> str:
        return self.executor.run(self.command, list(args))

    @staticmethod
    def is_clone(work_dir: Union[str, Path]) -> bool:
        return (Path(work_dir) / ".git").exists()

    def ensure_synced(self, work_dir: Union[str, Path], remote: str) -> None:
        """Pull if ``work_dir`` is already a clone, otherwise clone ``remote`` into it."""
        work_dir = str(work_dir)
        try:
            if self.is_clone(work_dir):
                self.logger.info(f"Pull the latest changes in the source repository {remote}")
                self._git("-C", work_dir, "pull")
            else:
                self.logger.info(f"Clone the source repository {remote} to {work_dir}")
                self._git("clone", remote, work_dir)
        except ExecutionError as e:
            raise SyncError(f"failed to sync {remote} into {work_dir}: {e}") from e

    def check_remote(self, remote: str) -> None:
        """Verify the remote is reachable with the current credentials."""
        try:
            self._git("ls-remote", "--heads", remote)
        except ExecutionError as e:
            raise SyncError(f"source repository {remote} is not reachable: {e}") from e

    def commit_file_mutation(self, work_dir: Union[str, Path], relative_path: str, content: str) -> None:
        """Write ``content`` to ``relative_path``, then add, commit and push it."""
        target = Path(work_dir) / relative_path
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        except OSError as e:
            raise MutationError(f"failed to write the trigger file {relative_path}: {e}") from e

        work_dir = str(work_dir)
        try:
            self._git("-C", work_dir, "add", relative_path)
            self._git("-C", work_dir, "commit", "-m", commit_message(relative_path))
            self._git("-C", work_dir, "push")
        except ExecutionError as e:
            raise MutationError(f"failed to commit and push {relative_path}: {e}") from e


def commit_message(relative_path: str) -> str:
    return f"Update {relative_path}"
