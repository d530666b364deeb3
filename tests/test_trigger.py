"""Test the trigger-file counter."""

import pytest

from arcbench.core.errors import ParseError
from arcbench.core.trigger import TriggerFile, parse_counter
from arcbench.core.vcs import GitClient

from conftest import FakeExecutor


class TestParseCounter:
    """Test counter parsing."""

    @pytest.mark.parametrize("content,expected", [
        ("0", 0),
        ("7", 7),
        ("41", 41),
        ("007", 7),
        ("123456789012345678901234567890", 123456789012345678901234567890),
    ])
    def test_valid(self, content, expected):
        assert parse_counter(content) == expected

    @pytest.mark.parametrize("content", ["abc", "", "-1", "+1", " 1", "1\n", "1.0", "1_000", "٣"])
    def test_malformed(self, content):
        with pytest.raises(ParseError) as excinfo:
            parse_counter(content, "trigger.txt")

        assert excinfo.value.content == content
        assert excinfo.value.path == "trigger.txt"


class TestTriggerFile:
    """Test reading and incrementing the trigger file."""

    def test_missing_file_counts_as_zero(self, tmp_path):
        trigger = TriggerFile(tmp_path, "trigger.txt")

        assert trigger.read_counter() == 0
        assert trigger.next_content() == "1"

    def test_increments_by_one(self, tmp_path):
        (tmp_path / "trigger.txt").write_text("99")

        assert TriggerFile(tmp_path, "trigger.txt").next_content() == "100"

    def test_leading_zeros_are_dropped(self, tmp_path):
        (tmp_path / "trigger.txt").write_text("0009")

        assert TriggerFile(tmp_path, "trigger.txt").next_content() == "10"

    def test_nested_path(self, tmp_path):
        (tmp_path / "bench").mkdir()
        (tmp_path / "bench" / "count").write_text("5")

        trigger = TriggerFile(tmp_path, "bench/count")

        assert trigger.path == tmp_path / "bench" / "count"
        assert trigger.read_counter() == 5

    def test_malformed_file(self, tmp_path):
        (tmp_path / "trigger.txt").write_text("abc")

        with pytest.raises(ParseError):
            TriggerFile(tmp_path, "trigger.txt").read_counter()

    def test_undecodable_bytes(self, tmp_path):
        (tmp_path / "trigger.txt").write_bytes(b"\xff\xfe")

        with pytest.raises(ParseError) as excinfo:
            TriggerFile(tmp_path, "trigger.txt").read_counter()

        assert "trigger.txt" in str(excinfo.value)
        assert excinfo.value.content == b"\xff\xfe"


class TestMutationSequence:
    """Increment-and-commit cycles through the real git client."""

    def test_repeated_mutations_count_up(self, tmp_path):
        executor = FakeExecutor()
        git = GitClient(executor)
        trigger = TriggerFile(tmp_path, "trigger.txt")

        for _ in range(3):
            git.commit_file_mutation(tmp_path, "trigger.txt", trigger.next_content())

        assert (tmp_path / "trigger.txt").read_text() == "3"
        commits = [args for _, args in executor.calls if "commit" in args]
        assert len(commits) == 3
