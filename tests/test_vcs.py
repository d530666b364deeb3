"""Test the git client."""

import pytest

from arcbench.core.errors import ExecutionError, MutationError, SyncError
from arcbench.core.vcs import GitClient, commit_message

from conftest import FakeExecutor


REMOTE = "git@github.com:example/repo.git"


class TestEnsureSynced:
    """Test clone-or-pull."""

    def test_clones_into_fresh_directory(self, tmp_path):
        executor = FakeExecutor()

        GitClient(executor).ensure_synced(tmp_path, REMOTE)

        assert executor.calls == [("git", ["clone", REMOTE, str(tmp_path)])]

    def test_pulls_existing_clone(self, tmp_path):
        (tmp_path / ".git").mkdir()
        executor = FakeExecutor()

        GitClient(executor).ensure_synced(tmp_path, REMOTE)

        assert executor.calls == [("git", ["-C", str(tmp_path), "pull"])]

    def test_custom_git_binary(self, tmp_path):
        executor = FakeExecutor()

        GitClient(executor, command="/usr/local/bin/git").ensure_synced(tmp_path, REMOTE)

        assert executor.calls[0][0] == "/usr/local/bin/git"

    def test_clone_failure(self, tmp_path):
        executor = FakeExecutor(fail_when=lambda cmd, args: True)

        with pytest.raises(SyncError) as excinfo:
            GitClient(executor).ensure_synced(tmp_path, REMOTE)

        assert isinstance(excinfo.value.__cause__, ExecutionError)
        assert "fatal: rejected" in str(excinfo.value)

    def test_pull_failure(self, tmp_path):
        (tmp_path / ".git").mkdir()
        executor = FakeExecutor(fail_when=lambda cmd, args: "pull" in args)

        with pytest.raises(SyncError):
            GitClient(executor).ensure_synced(tmp_path, REMOTE)


class TestCommitFileMutation:
    """Test write, add, commit and push."""

    def test_full_sequence(self, tmp_path):
        executor = FakeExecutor()

        GitClient(executor).commit_file_mutation(tmp_path, "trigger.txt", "5")

        assert (tmp_path / "trigger.txt").read_text() == "5"
        work_dir = str(tmp_path)
        assert executor.calls == [
            ("git", ["-C", work_dir, "add", "trigger.txt"]),
            ("git", ["-C", work_dir, "commit", "-m", "Update trigger.txt"]),
            ("git", ["-C", work_dir, "push"]),
        ]

    def test_overwrites_existing_content(self, tmp_path):
        (tmp_path / "trigger.txt").write_text("a much longer previous content")

        GitClient(FakeExecutor()).commit_file_mutation(tmp_path, "trigger.txt", "1")

        assert (tmp_path / "trigger.txt").read_text() == "1"

    @pytest.mark.parametrize("step", ["add", "commit", "push"])
    def test_step_failure_is_a_mutation_error(self, tmp_path, step):
        executor = FakeExecutor(fail_when=lambda cmd, args: step in args)

        with pytest.raises(MutationError) as excinfo:
            GitClient(executor).commit_file_mutation(tmp_path, "trigger.txt", "1")

        assert isinstance(excinfo.value.__cause__, ExecutionError)
        assert executor.calls[-1][1][2] == step

    def test_push_failure_leaves_local_commit(self, tmp_path):
        """No rollback and no retry after a rejected push."""
        executor = FakeExecutor(fail_when=lambda cmd, args: "push" in args)

        with pytest.raises(MutationError):
            GitClient(executor).commit_file_mutation(tmp_path, "trigger.txt", "1")

        assert [args[2] for _, args in executor.calls] == ["add", "commit", "push"]

    def test_write_failure(self, tmp_path):
        (tmp_path / "blocked").write_text("")
        executor = FakeExecutor()

        with pytest.raises(MutationError):
            GitClient(executor).commit_file_mutation(tmp_path, "blocked/trigger.txt", "1")

        assert executor.calls == []

    def test_commit_message(self):
        assert commit_message("bench/trigger.txt") == "Update bench/trigger.txt"


class TestCheckRemote:

    def test_reachable(self):
        executor = FakeExecutor()

        GitClient(executor).check_remote(REMOTE)

        assert executor.calls == [("git", ["ls-remote", "--heads", REMOTE])]

    def test_unreachable(self):
        executor = FakeExecutor(fail_when=lambda cmd, args: True)

        with pytest.raises(SyncError, match="not reachable"):
            GitClient(executor).check_remote(REMOTE)
