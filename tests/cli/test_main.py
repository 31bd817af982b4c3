"""Tests for the `run` command's early exits."""

from pathlib import Path

import pytest
from typer.testing import CliRunner

from tool_eval.cli.main import app

runner = CliRunner()


class TestRunCommand:
    def test_missing_config_exits_with_error(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["run", str(tmp_path / "absent.yaml")])

        assert result.exit_code == 1
        assert "Failed to load config" in result.output

    def test_invalid_log_format_exits_with_error(self, tmp_path: Path) -> None:
        result = runner.invoke(
            app, ["run", str(tmp_path / "absent.yaml"), "--log-format", "xml"]
        )

        assert result.exit_code == 1
        assert "Invalid log format" in result.output

    def test_missing_env_vars_are_reported(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("DATASET_DIR", raising=False)
        monkeypatch.delenv("MODEL_A", raising=False)
        config = Path(__file__).parents[1] / "fixtures" / "missing_env_config.yaml"

        result = runner.invoke(app, ["run", str(config)])

        assert result.exit_code == 1
        assert "DATASET_DIR" in result.output
