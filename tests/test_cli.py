"""Tests for the CLI implementation."""

import json

import pytest
from typer.testing import CliRunner

from lengthlimit.cli import app

INPUT = b"these are the input data"


class TestCLI:
    """Test the CLI functionality."""

    @pytest.fixture
    def runner(self):
        """CLI test runner."""
        return CliRunner()

    @pytest.fixture
    def input_path(self, tmp_path):
        """A small input file."""
        path = tmp_path / "input.bin"
        path.write_bytes(INPUT)
        return path

    def test_single_file_json_pretty(self, runner, input_path):
        """Test single file under the limit with pretty JSON."""
        result = runner.invoke(app, [str(input_path), "--limit", "1", "--unit", "kb"])

        assert result.exit_code == 0
        payload = json.loads(result.stdout)
        assert payload["success"] is True
        assert payload["bytes_read"] == len(INPUT)
        assert payload["bytes_remaining"] == 1024 - len(INPUT)
        assert payload["limit_exceeded"] is False
        assert "error" not in payload

    def test_over_limit_exit_code(self, runner, input_path):
        """A source reaching the limit fails with exit code 1."""
        result = runner.invoke(app, [str(input_path), "--limit", "5"])

        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload["success"] is False
        assert payload["limit_exceeded"] is True
        assert payload["bytes_read"] == 5
        assert payload["error"] == "Length limit exceeded"

    def test_exact_limit_fails(self, runner, input_path):
        result = runner.invoke(app, [str(input_path), "--limit", str(len(INPUT)), "--sync"])

        assert result.exit_code == 1
        assert json.loads(result.stdout)["limit_exceeded"] is True

    def test_multiple_files_jsonl(self, runner, input_path, tmp_path):
        """Test multiple files with JSONL output."""
        big = tmp_path / "big.bin"
        big.write_bytes(b"x" * 5000)

        result = runner.invoke(app, [str(input_path), str(big), "--limit", "1", "--unit", "kb"])

        assert result.exit_code == 1
        lines = result.stdout.strip().splitlines()
        assert len(lines) == 2
        first, second = (json.loads(line) for line in lines)
        assert first["success"] is True
        assert second["success"] is False
        assert second["bytes_read"] == 1024

    def test_force_jsonl_single_file(self, runner, input_path):
        """Test --jsonl flag forces JSONL even for single file."""
        result = runner.invoke(app, ["--jsonl", str(input_path), "--limit", "100"])

        assert result.exit_code == 0
        lines = result.stdout.strip().splitlines()
        assert len(lines) == 1
        assert json.loads(lines[0])["success"] is True

    def test_sync_mode(self, runner, input_path):
        result = runner.invoke(app, ["--sync", str(input_path), "--limit", "100", "--chunk-size", "3"])

        assert result.exit_code == 0
        assert json.loads(result.stdout)["bytes_read"] == len(INPUT)

    def test_output_file(self, runner, input_path, tmp_path):
        """Test -o writes to a file."""
        out = tmp_path / "out.json"
        result = runner.invoke(app, [str(input_path), "--limit", "100", "-o", str(out)])

        assert result.exit_code == 0
        assert json.loads(out.read_text())["success"] is True

    def test_stdin_sources(self, runner, input_path):
        """Test '-' reads source names from stdin."""
        result = runner.invoke(app, ["-", "--limit", "100"], input=f"{input_path}\n{input_path}\n")

        assert result.exit_code == 0
        assert len(result.stdout.strip().splitlines()) == 2

    def test_missing_file(self, runner):
        result = runner.invoke(app, ["/nonexistent/file.bin", "--limit", "100"])

        assert result.exit_code == 1
        payload = json.loads(result.stdout)
        assert payload["success"] is False
        assert payload["limit_exceeded"] is False

    def test_no_input(self, runner):
        result = runner.invoke(app, ["--limit", "10"])
        assert result.exit_code == 1

    def test_bad_unit(self, runner, input_path):
        result = runner.invoke(app, [str(input_path), "--limit", "10", "--unit", "tb"])
        assert result.exit_code == 2

    def test_fields_filter(self, runner, input_path):
        """Test --fields keeps only the requested keys (plus success)."""
        result = runner.invoke(app, [str(input_path), "--limit", "100", "--fields", "bytes_read"])

        assert result.exit_code == 0
        assert json.loads(result.stdout) == {"success": True, "bytes_read": len(INPUT)}
