from __future__ import annotations

from pathlib import Path

import click
import pytest
from click.testing import CliRunner

from duka_cli.shared import paths
from duka_cli.shared.cli import CLIContext, common_cli_options, handle_cli_errors
from duka_cli.shared.config import load_config
from duka_cli.shared.exceptions import (
    ConfigurationError,
    DukaError,
    EngineTransportError,
    FormValidationError,
)


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


@pytest.fixture
def stub_config(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    config = load_config(env={paths.CONFIG_DIR_ENV: str(tmp_path)})
    monkeypatch.setattr("duka_cli.shared.cli.load_config", lambda config_path: config)
    return config


def test_common_cli_options_builds_context(runner: CliRunner, stub_config) -> None:
    @click.command()
    @common_cli_options
    def sample(cli_ctx: CLIContext) -> None:
        click.echo(f"verbose={cli_ctx.verbose} url={cli_ctx.config.engine.base_url}")

    result = runner.invoke(sample, [])

    assert result.exit_code == 0, result.output
    assert f"verbose=False url={stub_config.engine.base_url}" in result.output


def test_common_cli_options_applies_engine_override(runner: CliRunner, stub_config) -> None:
    @click.command()
    @common_cli_options
    def sample(cli_ctx: CLIContext) -> None:
        click.echo(cli_ctx.config.engine.base_url)

    result = runner.invoke(sample, ["--engine-url", "http://remote:9000/api/", "--verbose"])

    assert result.exit_code == 0, result.output
    assert "http://remote:9000/api" in result.output


def test_common_cli_options_reports_bad_config(runner: CliRunner, tmp_path: Path) -> None:
    cfg_file = tmp_path / "broken.yaml"
    cfg_file.write_text("engine: [unclosed\n", encoding="utf-8")

    @click.command()
    @common_cli_options
    def sample(cli_ctx: CLIContext) -> None:
        click.echo("unreachable")

    result = runner.invoke(sample, ["--config", str(cfg_file)])

    assert result.exit_code == 1
    assert "not valid YAML" in result.output


def test_handle_cli_errors_wraps_known_exceptions() -> None:
    @handle_cli_errors
    def boom() -> None:
        raise EngineTransportError("engine unreachable")

    with pytest.raises(click.ClickException) as excinfo:
        boom()
    assert str(excinfo.value) == "engine unreachable"


def test_handle_cli_errors_formats_configuration_errors() -> None:
    @handle_cli_errors
    def misconfigured() -> None:
        raise ConfigurationError("missing value")

    with pytest.raises(click.ClickException) as excinfo:
        misconfigured()
    assert "Configuration error" in str(excinfo.value)


def test_handle_cli_errors_turns_form_errors_into_usage_errors() -> None:
    @handle_cli_errors
    def incomplete() -> None:
        raise FormValidationError("Please enter a table name")

    with pytest.raises(click.UsageError) as excinfo:
        incomplete()
    assert excinfo.value.exit_code == 2


def test_handle_cli_errors_passes_click_errors_through() -> None:
    @handle_cli_errors
    def aborted() -> None:
        raise click.Abort()

    with pytest.raises(click.Abort):
        aborted()


def test_handle_cli_errors_wraps_unexpected_exceptions() -> None:
    @handle_cli_errors
    def explode() -> None:
        raise RuntimeError("kapow")

    with pytest.raises(click.ClickException) as excinfo:
        explode()
    assert "Unexpected error: kapow" == str(excinfo.value)


def test_duka_error_hierarchy() -> None:
    assert issubclass(EngineTransportError, DukaError)
    assert issubclass(FormValidationError, DukaError)
