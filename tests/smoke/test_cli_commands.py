"""
Smoke Tests for CLI Commands.

These tests verify that CLI commands run without errors and produce output.
They don't validate correctness deeply - just that commands work.

Usage:
    pytest tests/smoke/test_cli_commands.py -v
    pytest tests/smoke/test_cli_commands.py -v -m smoke
"""

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

# Mark all tests in this module as smoke tests
pytestmark = pytest.mark.smoke

# Project root
PROJECT_ROOT = Path(__file__).parent.parent.parent


@pytest.fixture
def data_dir(tmp_path):
    return tmp_path / "store"


def run_cli_command(args: list[str], data_dir: Path, timeout: int = 30) -> tuple[int, str, str]:
    """
    Run a CLI command and return exit code, stdout, stderr.

    Args:
        args: Arguments after 'python -m src.study_data'
        data_dir: Directory for the study store
        timeout: Maximum time to wait

    Returns:
        Tuple of (exit_code, stdout, stderr)
    """
    env = {**os.environ, "STUDY_DATA_DIR": str(data_dir), "COLUMNS": "200"}
    result = subprocess.run(
        [sys.executable, "-m", "src.study_data", *args],
        cwd=PROJECT_ROOT,
        env=env,
        capture_output=True,
        text=True,
        timeout=timeout,
    )

    return result.returncode, result.stdout, result.stderr


class TestCLIHelp:
    """Test that help commands work."""

    def test_main_help(self, data_dir):
        code, stdout, stderr = run_cli_command(["--help"], data_dir)

        assert code == 0, f"Help failed: {stderr}"
        for command in ("stats", "weaknesses", "daily", "export", "import", "reset"):
            assert command in stdout


class TestCLICommands:
    """Test that commands run against a temporary store."""

    def test_stats_on_empty_store(self, data_dir):
        code, stdout, stderr = run_cli_command(["stats"], data_dir)

        assert code == 0, f"stats failed: {stderr}"
        assert "Study Statistics" in stdout
        assert (data_dir / "n8_study_data.json").exists()

    def test_record_then_weaknesses(self, data_dir):
        code, stdout, stderr = run_cli_command(["record", "chain-maps", "cardiac", "1", "4"], data_dir)
        assert code == 0, f"record failed: {stderr}"
        assert "25%" in stdout

        code, stdout, _ = run_cli_command(["weaknesses"], data_dir)
        assert code == 0
        assert "Cardiac Output & Perfusion" in stdout

    def test_record_rejects_impossible_counts(self, data_dir):
        code, _, _ = run_cli_command(["record", "chain-maps", "cardiac", "5", "4"], data_dir)

        assert code == 1

    def test_daily_and_due_on_empty_store(self, data_dir):
        code, stdout, _ = run_cli_command(["daily"], data_dir)
        assert code == 0
        assert "Nothing to review" in stdout

        code, stdout, _ = run_cli_command(["due"], data_dir)
        assert code == 0
        assert "Nothing due" in stdout

    def test_export_reset_import(self, data_dir, tmp_path):
        run_cli_command(["record", "quiz-prep", "oxygenation", "3", "5"], data_dir)
        export_file = tmp_path / "export.json"

        code, _, stderr = run_cli_command(["export", "--output", str(export_file)], data_dir)
        assert code == 0, f"export failed: {stderr}"
        assert json.loads(export_file.read_text())["performance"]["oxygenation"]["quiz-prep"]["total"] == 5

        code, _, _ = run_cli_command(["reset", "--yes"], data_dir)
        assert code == 0

        code, _, stderr = run_cli_command(["import", str(export_file)], data_dir)
        assert code == 0, f"import failed: {stderr}"

        code, stdout, _ = run_cli_command(["export"], data_dir)
        assert json.loads(stdout)["performance"]["oxygenation"]["quiz-prep"]["correct"] == 3

    def test_import_invalid_file_fails(self, data_dir, tmp_path):
        bad = tmp_path / "bad.json"
        bad.write_text("not json at all")

        code, _, _ = run_cli_command(["import", str(bad)], data_dir)

        assert code == 1
