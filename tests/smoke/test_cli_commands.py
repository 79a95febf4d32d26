"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate correctness deeply - just that commands work.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import json
import subprocess
import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest
from typer.testing import CliRunner

from recall.cli import app
from recall.item_store import ItemStore
from recall.persistence import JsonFileBackend
from recall.session_manager import SessionManager

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent

runner = CliRunner()


def invoke(data_dir: Path, *args: str, input: str | None = None):
    return runner.invoke(app, ["--data-dir", str(data_dir), *args], input=input)


def seed_due(data_dir: Path, *names: str) -> ItemStore:
    """Store items that are already due."""
    store = ItemStore(JsonFileBackend(data_dir))
    past = datetime.now() - timedelta(days=3)
    for name in names:
        store.add(store.create_item(name, f"{name} explained", now=past))
    return store


class TestCLIHelp:
    """Test that help commands work."""

    def test_module_help(self):
        """`python -m recall --help` should display without errors."""
        result = subprocess.run(
            [sys.executable, "-m", "recall", "--help"],
            cwd=PROJECT_ROOT,
            capture_output=True,
            text=True,
            timeout=30,
        )

        assert result.returncode == 0, f"Help failed: {result.stderr}"
        assert "review" in result.stdout
        assert "Commands" in result.stdout

    @pytest.mark.parametrize("command", ["add", "import", "due", "review", "stats", "sessions"])
    def test_command_help(self, command):
        result = runner.invoke(app, [command, "--help"])
        assert result.exit_code == 0


class TestItemCommands:
    """add / import / due."""

    def test_add(self, tmp_path):
        result = invoke(tmp_path, "add", "OSPF", "Link-state routing", "-d", "4")

        assert result.exit_code == 0, result.output
        assert "Added" in result.output
        items = ItemStore(JsonFileBackend(tmp_path)).get_all()
        assert [(i.concept, i.difficulty) for i in items] == [("OSPF", 4)]

    def test_add_rejects_bad_difficulty(self, tmp_path):
        result = invoke(tmp_path, "add", "OSPF", "x", "-d", "9")
        assert result.exit_code != 0

    def test_import_is_idempotent(self, tmp_path):
        source = tmp_path / "concepts.json"
        source.write_text(json.dumps([
            {"name": "BGP", "description": "Path vector"},
            {"name": "RIP", "description": "Distance vector"},
        ]))
        data_dir = tmp_path / "data"

        first = invoke(data_dir, "import", str(source))
        second = invoke(data_dir, "import", str(source))

        assert first.exit_code == 0, first.output
        assert "Imported 2 new concepts" in first.output
        assert "Imported 0 new concepts" in second.output
        assert len(ItemStore(JsonFileBackend(data_dir)).get_all()) == 2

    def test_import_rejects_non_list(self, tmp_path):
        source = tmp_path / "concepts.json"
        source.write_text(json.dumps({"name": "BGP"}))

        result = invoke(tmp_path / "data", "import", str(source))
        assert result.exit_code == 1

    @pytest.mark.parametrize(
        "payload",
        [
            [{"description": "x"}],
            [{"name": 42}],
            [{"name": "BGP", "description": "ok"}, {"name": None}],
        ],
    )
    def test_import_rejects_malformed_entries(self, tmp_path, payload):
        source = tmp_path / "concepts.json"
        source.write_text(json.dumps(payload))
        data_dir = tmp_path / "data"

        result = invoke(data_dir, "import", str(source))

        assert result.exit_code == 1
        assert result.exception is None or isinstance(result.exception, SystemExit)
        assert "Error importing concepts" in result.output
        assert ItemStore(JsonFileBackend(data_dir)).get_all() == []

    def test_due_empty(self, tmp_path):
        result = invoke(tmp_path, "due")
        assert result.exit_code == 0
        assert "Nothing due" in result.output

    def test_due_lists_items(self, tmp_path):
        seed_due(tmp_path, "STP")
        result = invoke(tmp_path, "due")

        assert result.exit_code == 0
        assert "STP" in result.output


class TestReviewCommand:
    """Interactive review."""

    def test_nothing_due(self, tmp_path):
        result = invoke(tmp_path, "review")

        assert result.exit_code == 0
        assert "Nothing due" in result.output

    def test_empty_review_records_no_session(self, tmp_path):
        invoke(tmp_path, "review")
        invoke(tmp_path, "review")
        seed_due(tmp_path, "STP")
        result = invoke(tmp_path, "review", "--max", "0")

        assert result.exit_code == 0
        assert "Nothing due" in result.output
        assert SessionManager(ItemStore(JsonFileBackend(tmp_path))).get_sessions() == []
        assert "No sessions" in invoke(tmp_path, "sessions").output

    def test_rate_and_skip(self, tmp_path):
        seed_due(tmp_path, "STP", "VTP")
        result = invoke(tmp_path, "review", input="3\ns\n")

        assert result.exit_code == 0, result.output
        assert "Session Complete" in result.output

        store = ItemStore(JsonFileBackend(tmp_path))
        by_name = {i.concept: i for i in store.get_all()}
        assert by_name["STP"].repetition_count == 1
        assert by_name["VTP"].review_history == []

        session = SessionManager(store).get_sessions()[-1]
        assert session.score == pytest.approx(50.0)

    def test_quit_early(self, tmp_path):
        seed_due(tmp_path, "STP", "VTP", "HSRP")
        result = invoke(tmp_path, "review", "--max", "2", input="q\n")

        assert result.exit_code == 0, result.output
        session = SessionManager(ItemStore(JsonFileBackend(tmp_path))).get_sessions()[-1]
        assert session.total_items == 2
        assert session.score == 0.0


class TestReportingCommands:
    """stats / sessions."""

    def test_stats(self, tmp_path):
        seed_due(tmp_path, "STP")
        result = invoke(tmp_path, "stats")

        assert result.exit_code == 0
        assert "Items tracked" in result.output

    def test_sessions(self, tmp_path):
        assert "No sessions" in invoke(tmp_path, "sessions").output

        seed_due(tmp_path, "STP")
        invoke(tmp_path, "review", input="4\n")
        result = invoke(tmp_path, "sessions")

        assert result.exit_code == 0
        assert "100%" in result.output
