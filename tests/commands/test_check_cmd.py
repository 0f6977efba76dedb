"""Tests for ``propbind check``."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner

from propbind.cli import cli


@pytest.mark.usefixtures("_isolated_cwd", "_restore_root_logging")
class TestCheckCommand:
    def test_ok(self, cli_runner: CliRunner, model_module: str, write_source: Callable[..., Path]) -> None:
        path = write_source("app.name=a", "db.url=b")
        result = cli_runner.invoke(cli, ["check", str(path), "-m", f"{model_module}:AppConfig"])
        assert result.exit_code == 0, result.output
        assert result.output.startswith("OK  check")

    def test_failure_lists_every_field(
        self, cli_runner: CliRunner, model_module: str, write_source: Callable[..., Path]
    ) -> None:
        path = write_source("app.port=eighty")
        result = cli_runner.invoke(cli, ["check", str(path), "-m", f"{model_module}:AppConfig"])
        assert result.exit_code == 1
        assert "missing name" in result.output
        assert "errored port:" in result.output
        assert "errored db:" in result.output

    def test_json_ok(self, cli_runner: CliRunner, model_module: str, write_source: Callable[..., Path]) -> None:
        path = write_source("app.name=a", "db.url=b")
        result = cli_runner.invoke(cli, ["--json", "check", str(path), "-m", f"{model_module}:AppConfig"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.output)["data"] == {
            "source": str(path),
            "model": f"{model_module}:AppConfig",
            "missing": [],
            "errored": {},
        }

    def test_not_a_config(self, cli_runner: CliRunner, model_module: str, write_source: Callable[..., Path]) -> None:
        path = write_source("a=1")
        result = cli_runner.invoke(cli, ["check", str(path), "-m", f"{model_module}:NotAConfig"])
        assert result.exit_code == 1
        assert "not a propbind Config class" in result.output
