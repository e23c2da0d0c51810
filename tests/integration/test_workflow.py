"""Integration tests for the add / commit / log / show / status commands."""

import json
import os
from pathlib import Path

import pytest
from typer.testing import CliRunner

from groot.cli.main import app
from groot.constants import GROOT_DIR
from groot.storage import ObjectStore, encode_commit

runner = CliRunner()


@pytest.fixture
def cli_repo(tmp_path: Path):
    """Initialize a repository and run the test from inside it."""
    original_cwd = Path.cwd()
    os.chdir(tmp_path)
    try:
        result = runner.invoke(app, ["init", "--quiet"])
        assert result.exit_code == 0
        yield tmp_path
    finally:
        os.chdir(original_cwd)


def _head(root: Path) -> str:
    return (root / GROOT_DIR / "HEAD").read_text(encoding="utf-8").strip()


def _index_entries(root: Path) -> list:
    return json.loads((root / GROOT_DIR / "index").read_text(encoding="utf-8"))["entries"]


class TestAddCommand:
    """Test groot add."""

    def test_add_prints_id_and_confirmation(self, cli_repo: Path) -> None:
        (cli_repo / "a.txt").write_text("hello\n", encoding="utf-8")

        result = runner.invoke(app, ["add", "a.txt"])

        assert result.exit_code == 0
        assert "Added a.txt" in result.stdout
        entries = _index_entries(cli_repo)
        assert entries[0]["path"] == "a.txt"
        assert entries[0]["hash"] in result.stdout

    def test_add_multiple_files_in_order(self, cli_repo: Path) -> None:
        (cli_repo / "b.txt").write_text("b\n", encoding="utf-8")
        (cli_repo / "a.txt").write_text("a\n", encoding="utf-8")

        result = runner.invoke(app, ["add", "b.txt", "a.txt"])

        assert result.exit_code == 0
        assert [e["path"] for e in _index_entries(cli_repo)] == ["b.txt", "a.txt"]

    def test_add_same_path_twice(self, cli_repo: Path) -> None:
        (cli_repo / "a.txt").write_text("v1\n", encoding="utf-8")
        runner.invoke(app, ["add", "a.txt"])
        (cli_repo / "a.txt").write_text("v2\n", encoding="utf-8")
        runner.invoke(app, ["add", "a.txt"])

        entries = _index_entries(cli_repo)
        assert [e["path"] for e in entries] == ["a.txt", "a.txt"]
        assert entries[0]["hash"] != entries[1]["hash"]

    def test_add_missing_file(self, cli_repo: Path) -> None:
        result = runner.invoke(app, ["add", "missing.txt"])

        assert result.exit_code == 1
        assert "file not found" in result.stdout
        assert _index_entries(cli_repo) == []

    def test_add_stages_good_files_despite_errors(self, cli_repo: Path) -> None:
        (cli_repo / "a.txt").write_text("a\n", encoding="utf-8")

        result = runner.invoke(app, ["add", "missing.txt", "a.txt"])

        assert result.exit_code == 1
        assert [e["path"] for e in _index_entries(cli_repo)] == ["a.txt"]


class TestCommitCommand:
    """Test groot commit."""

    def test_commit_basic(self, cli_repo: Path) -> None:
        (cli_repo / "a.txt").write_text("hello\n", encoding="utf-8")
        runner.invoke(app, ["add", "a.txt"])

        result = runner.invoke(app, ["commit", "first"])

        assert result.exit_code == 0
        head = _head(cli_repo)
        assert len(head) == 64
        assert f"Committed {head}" in result.stdout
        assert "(root commit)" in result.stdout
        assert _index_entries(cli_repo) == []

    def test_commit_with_message_option(self, cli_repo: Path) -> None:
        result = runner.invoke(app, ["commit", "-m", "via option"])

        assert result.exit_code == 0
        assert _head(cli_repo)

    def test_commit_requires_message(self, cli_repo: Path) -> None:
        result = runner.invoke(app, ["commit"])

        assert result.exit_code == 1
        assert "message is required" in result.stdout.lower()
        assert _head(cli_repo) == ""

    def test_empty_message_is_accepted(self, cli_repo: Path) -> None:
        result = runner.invoke(app, ["commit", ""])

        assert result.exit_code == 0
        head = _head(cli_repo)
        assert len(head) == 64
        assert f"Committed {head}" in result.stdout

    def test_empty_commit_allowed(self, cli_repo: Path) -> None:
        result = runner.invoke(app, ["commit", "nothing staged"])

        assert result.exit_code == 0
        assert "Files:" in result.stdout

    def test_second_commit_shows_parent(self, cli_repo: Path) -> None:
        runner.invoke(app, ["commit", "one"])
        first = _head(cli_repo)

        result = runner.invoke(app, ["commit", "two"])

        assert result.exit_code == 0
        assert first[:7] in result.stdout


class TestLogCommand:
    """Test groot log."""

    def test_log_empty_repo(self, cli_repo: Path) -> None:
        result = runner.invoke(app, ["log"])

        assert result.exit_code == 0
        assert "no commits yet" in result.stdout.lower()

    def test_log_newest_first(self, cli_repo: Path) -> None:
        ids = []
        for message in ("first", "second", "third"):
            runner.invoke(app, ["commit", message])
            ids.append(_head(cli_repo))

        result = runner.invoke(app, ["log"])

        assert result.exit_code == 0
        positions = [result.stdout.index(commit_id) for commit_id in reversed(ids)]
        assert positions == sorted(positions)
        assert "Date:" in result.stdout
        assert "second" in result.stdout

    def test_log_oneline_and_max_count(self, cli_repo: Path) -> None:
        runner.invoke(app, ["commit", "first"])
        runner.invoke(app, ["commit", "second"])
        head = _head(cli_repo)

        result = runner.invoke(app, ["log", "--oneline", "-n", "1"])

        assert result.exit_code == 0
        assert result.stdout.strip() == f"{head[:7]} second"

    def test_max_count_stops_before_broken_parent(self, cli_repo: Path) -> None:
        """Commits past the limit are never loaded."""
        store = ObjectStore(cli_repo / GROOT_DIR)
        record = encode_commit("2026-01-01T00:00:00+00:00", "orphan", [], "e" * 64)
        (cli_repo / GROOT_DIR / "HEAD").write_text(store.put(record), encoding="utf-8")

        limited = runner.invoke(app, ["log", "-n", "1"])
        full = runner.invoke(app, ["log"])

        assert limited.exit_code == 0
        assert "orphan" in limited.stdout
        assert full.exit_code == 1

    def test_log_broken_chain(self, cli_repo: Path) -> None:
        (cli_repo / GROOT_DIR / "HEAD").write_text("f" * 64, encoding="utf-8")

        result = runner.invoke(app, ["log"])

        assert result.exit_code == 1
        assert "Commit not found" in result.stdout


class TestShowCommand:
    """Test groot show."""

    def test_show_first_commit(self, cli_repo: Path) -> None:
        (cli_repo / "a.txt").write_text("hello\n", encoding="utf-8")
        runner.invoke(app, ["add", "a.txt"])
        runner.invoke(app, ["commit", "first"])

        result = runner.invoke(app, ["show", _head(cli_repo)])

        assert result.exit_code == 0
        assert "File: a.txt" in result.stdout
        assert "hello" in result.stdout
        assert "First commit" in result.stdout

    def test_show_diff_against_parent(self, cli_repo: Path) -> None:
        path = cli_repo / "a.txt"
        path.write_text("hello\n", encoding="utf-8")
        runner.invoke(app, ["add", "a.txt"])
        runner.invoke(app, ["commit", "first"])
        path.write_text("hello\nworld\n", encoding="utf-8")
        runner.invoke(app, ["add", "a.txt"])
        runner.invoke(app, ["commit", "second"])

        result = runner.invoke(app, ["show", _head(cli_repo)])

        assert result.exit_code == 0
        assert "Diff:" in result.stdout
        assert "  hello\n" in result.stdout
        assert "++world\n" in result.stdout

    def test_show_removed_lines(self, cli_repo: Path) -> None:
        path = cli_repo / "a.txt"
        path.write_text("keep\ndrop\n", encoding="utf-8")
        runner.invoke(app, ["add", "a.txt"])
        runner.invoke(app, ["commit", "first"])
        path.write_text("keep\n", encoding="utf-8")
        runner.invoke(app, ["add", "a.txt"])
        runner.invoke(app, ["commit", "second"])

        result = runner.invoke(app, ["show", "HEAD"])

        assert result.exit_code == 0
        assert "--drop\n" in result.stdout

    def test_show_new_file(self, cli_repo: Path) -> None:
        (cli_repo / "a.txt").write_text("a\n", encoding="utf-8")
        runner.invoke(app, ["add", "a.txt"])
        runner.invoke(app, ["commit", "first"])
        (cli_repo / "b.txt").write_text("b\n", encoding="utf-8")
        runner.invoke(app, ["add", "b.txt"])
        runner.invoke(app, ["commit", "second"])

        result = runner.invoke(app, ["show", _head(cli_repo)])

        assert result.exit_code == 0
        assert "New file in this commit" in result.stdout

    def test_show_short_id_and_stat(self, cli_repo: Path) -> None:
        path = cli_repo / "a.txt"
        path.write_text("a\nb\n", encoding="utf-8")
        runner.invoke(app, ["add", "a.txt"])
        runner.invoke(app, ["commit", "first"])
        path.write_text("a\nc\nd\n", encoding="utf-8")
        runner.invoke(app, ["add", "a.txt"])
        runner.invoke(app, ["commit", "second"])

        result = runner.invoke(app, ["show", _head(cli_repo)[:7], "--stat"])

        assert result.exit_code == 0
        assert "a.txt  +2 -1" in result.stdout

    def test_show_unknown_commit(self, cli_repo: Path) -> None:
        result = runner.invoke(app, ["show", "0" * 64])

        assert result.exit_code == 1
        assert "Commit not found" in result.stdout

    def test_show_markup_in_content_is_literal(self, cli_repo: Path) -> None:
        (cli_repo / "a.txt").write_text("[bold]not markup[/bold]\n", encoding="utf-8")
        runner.invoke(app, ["add", "a.txt"])
        runner.invoke(app, ["commit", "first"])

        result = runner.invoke(app, ["show", "HEAD"])

        assert "[bold]not markup[/bold]" in result.stdout


class TestStatusCommand:
    """Test groot status."""

    def test_status_fresh(self, cli_repo: Path) -> None:
        result = runner.invoke(app, ["status"])

        assert result.exit_code == 0
        assert "no commits yet" in result.stdout
        assert "No files staged" in result.stdout

    def test_status_lists_staged_files(self, cli_repo: Path) -> None:
        (cli_repo / "a.txt").write_text("a\n", encoding="utf-8")
        runner.invoke(app, ["add", "a.txt"])
        runner.invoke(app, ["commit", "first"])
        (cli_repo / "b.txt").write_text("b\n", encoding="utf-8")
        runner.invoke(app, ["add", "b.txt"])

        result = runner.invoke(app, ["status"])

        assert result.exit_code == 0
        assert _head(cli_repo)[:7] in result.stdout
        assert "+ b.txt" in result.stdout
