"""Smoke tests verifying CLI entry points load without an engine."""

from __future__ import annotations

import importlib
from typing import Callable

import pytest
from click.testing import CliRunner


@pytest.mark.parametrize(
    "module_path, attr_name, prog_name",
    [
        ("duka_cli.duka_console.main", "cli", "duka-console"),
        ("duka_cli.duka_admin.main", "cli", "duka-admin"),
    ],
)
def test_cli_entrypoint_help(module_path: str, attr_name: str, prog_name: str) -> None:
    module = importlib.import_module(module_path)
    cli: Callable[..., object] = getattr(module, attr_name)

    runner = CliRunner()
    result = runner.invoke(cli, ["--help"], prog_name=prog_name)

    assert result.exit_code == 0, result.output
    assert "Usage" in result.output


@pytest.mark.parametrize(
    "module_path, command",
    [
        ("duka_cli.duka_console.main", "exec"),
        ("duka_cli.duka_admin.main", "create-table"),
        ("duka_cli.duka_admin.main", "insert"),
    ],
)
def test_subcommand_help(module_path: str, command: str) -> None:
    module = importlib.import_module(module_path)

    result = CliRunner().invoke(module.cli, [command, "--help"])

    assert result.exit_code == 0, result.output
    assert "Usage" in result.output
