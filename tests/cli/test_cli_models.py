"""Tests for ``claude-bridge models`` CLI command."""

from __future__ import annotations

import json

from click.testing import CliRunner

from claude_bridge.cli import main


class TestModelsCommand:
    def test_table(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["models"])

        assert result.exit_code == 0
        assert "Known Models" in result.output
        assert "claude-3-opus-20240229" in result.output

    def test_json(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["models", "--json"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        by_model = {entry["model"]: entry for entry in data}
        assert by_model["claude-3-opus-20240229"]["max_tokens"] == 4096
        assert by_model["claude-2.1"]["images"] is False


class TestVersion:
    def test_version(self) -> None:
        runner = CliRunner()
        result = runner.invoke(main, ["--version"])

        assert result.exit_code == 0
        assert "0.1.0" in result.output
