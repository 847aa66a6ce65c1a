"""duka-admin CLI entrypoint."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Iterable
from typing import Any, TypeVar

import click

from duka_cli.duka_console.dispatch import CommandDispatcher
from duka_cli.duka_console.session import ConsoleSession
from duka_cli.shared.cli import CLIContext, common_cli_options, handle_cli_errors, pass_cli_context
from duka_cli.shared.config import AppConfig
from duka_cli.shared.engine import EngineClient

from . import forms, render
from .manager import TableManager

T = TypeVar("T")

PRIMARY_KEY_FLAGS = {"pk", "primary", "primary-key", "primary_key"}
UNIQUE_FLAGS = {"unique"}
NOT_NULL_FLAGS = {"notnull", "not-null", "not_null"}


@click.group(help="Manage tables on a Duka engine without writing SQL.")
@common_cli_options
@handle_cli_errors
def cli(cli_ctx: CLIContext) -> None:
    """Primary Click group for duka-admin commands."""
    cli_ctx.logger.debug("duka-admin group initialised.")


@cli.command("health")
@pass_cli_context
@handle_cli_errors
def health(cli_ctx: CLIContext) -> None:
    """Report whether the engine is reachable."""

    async def probe(client: EngineClient) -> None:
        render.render_status(await client.health(), client.base_url)

    asyncio.run(_with_client(cli_ctx.config, probe))


@cli.command("tables")
@pass_cli_context
@handle_cli_errors
def list_tables(cli_ctx: CLIContext) -> None:
    """List the tables the engine knows about."""
    tables = _run_with_manager(cli_ctx, lambda manager: manager.list_tables())
    render.render_table_list(tables, logger=cli_ctx.logger)


@cli.command("show")
@click.argument("table_name", type=str)
@pass_cli_context
@handle_cli_errors
def show_table(cli_ctx: CLIContext, table_name: str) -> None:
    """Show a table's structure, row count and contents."""
    view = _run_with_manager(cli_ctx, lambda manager: manager.load_table(table_name))
    render.render_schema(view.schema)
    if not view.data.success:
        cli_ctx.logger.warning(view.data.message)
        return
    render.render_result_table(
        view.data,
        logger=cli_ctx.logger,
        empty_message="No data in table",
        show_summary=False,
    )


@cli.command("create-table")
@click.argument("table_name", type=str)
@click.option(
    "-c",
    "--column",
    "column_specs",
    multiple=True,
    metavar="NAME:TYPE[(SIZE)][:pk][:unique][:notnull]",
    help="Column definition; repeat for each column. Prompts interactively when omitted.",
)
@pass_cli_context
@handle_cli_errors
def create_table(cli_ctx: CLIContext, table_name: str, column_specs: tuple[str, ...]) -> None:
    """Create a table from column definitions."""
    form = forms.TableForm(table_name, seed_column=False)
    if column_specs:
        for spec in column_specs:
            form.add_column(**parse_column_spec(spec))
    else:
        _prompt_columns(form, cli_ctx.config.forms.default_varchar_size)

    _run_with_manager(cli_ctx, lambda manager: manager.create_table(form))
    cli_ctx.logger.success(f"Table {table_name} created successfully!")


@cli.command("insert")
@click.argument("table_name", type=str)
@click.option(
    "-v",
    "--value",
    "value_pairs",
    multiple=True,
    metavar="COLUMN=VALUE",
    help="Value for one column; any column left out is prompted for.",
)
@pass_cli_context
@handle_cli_errors
def insert_row(cli_ctx: CLIContext, table_name: str, value_pairs: tuple[str, ...]) -> None:
    """Insert one row, filling a field per column of the table."""
    try:
        provided = _parse_pairs(value_pairs)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--value") from exc

    schema = _run_with_manager(cli_ctx, lambda manager: manager.describe_table(table_name))
    unknown = sorted(set(provided) - set(schema.column_names()))
    if unknown:
        raise click.BadParameter(f"Unknown column(s): {', '.join(unknown)}", param_hint="--value")

    values = forms.empty_field_values(schema)
    for column in schema.columns:
        if column.name in provided:
            values[column.name] = provided[column.name]
        else:
            values[column.name] = click.prompt(
                f"{column.name} ({column.data_type})", default="", show_default=False
            )

    _run_with_manager(cli_ctx, lambda manager: manager.insert_row(table_name, values))
    cli_ctx.logger.success("Data inserted successfully!")


@cli.command("select")
@click.argument("table_name", type=str)
@click.option("--columns", default="", help="Comma-separated columns (default *).")
@click.option("--where", "where_clause", default="", help="Filter condition, e.g. \"price > 100\".")
@pass_cli_context
@handle_cli_errors
def select_rows(cli_ctx: CLIContext, table_name: str, columns: str, where_clause: str) -> None:
    """Build and run a SELECT against one table."""
    result = _run_with_manager(
        cli_ctx, lambda manager: manager.run_query(table_name, columns, where_clause)
    )
    render.render_result_table(result, logger=cli_ctx.logger)


@cli.command("drop")
@click.argument("table_name", type=str)
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt.")
@pass_cli_context
@handle_cli_errors
def drop_table(cli_ctx: CLIContext, table_name: str, yes: bool) -> None:
    """Drop a table and all of its data."""
    if not yes:
        click.confirm(
            f'Are you sure you want to drop table "{table_name}"? This cannot be undone!',
            abort=True,
        )
    _run_with_manager(cli_ctx, lambda manager: manager.drop_table(table_name))
    cli_ctx.logger.success("Table dropped successfully!")


@cli.command("truncate")
@click.argument("table_name", type=str)
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt.")
@pass_cli_context
@handle_cli_errors
def truncate_table(cli_ctx: CLIContext, table_name: str, yes: bool) -> None:
    """Delete every row of a table, keeping its structure."""
    if not yes:
        click.confirm(f'Delete all data from table "{table_name}"?', abort=True)
    _run_with_manager(cli_ctx, lambda manager: manager.truncate_table(table_name))
    cli_ctx.logger.success("All data deleted!")


@cli.command("init-demo")
@pass_cli_context
@handle_cli_errors
def init_demo(cli_ctx: CLIContext) -> None:
    """Ask the engine to load its demo tables."""

    async def seed(client: EngineClient) -> str:
        return await client.init_demo_data()

    message = asyncio.run(_with_client(cli_ctx.config, seed))
    cli_ctx.logger.success(message or "Demo data initialized.")


def parse_column_spec(spec: str) -> dict[str, Any]:
    """Turn ``name:TYPE[(SIZE)][:flag...]`` into column draft fields."""
    parts = [part.strip() for part in spec.split(":")]
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise click.BadParameter(
            f"Column '{spec}' must look like NAME:TYPE[(SIZE)][:pk][:unique][:notnull].",
            param_hint="--column",
        )

    column_type, size = parts[1], None
    if column_type.endswith(")") and "(" in column_type:
        column_type, _, size_text = column_type[:-1].partition("(")
        size = size_text.strip() or None

    fields: dict[str, Any] = {"name": parts[0], "type": column_type.strip().upper(), "size": size}
    for flag in parts[2:]:
        lowered = flag.lower()
        if lowered in PRIMARY_KEY_FLAGS:
            fields["primary_key"] = True
        elif lowered in UNIQUE_FLAGS:
            fields["unique"] = True
        elif lowered in NOT_NULL_FLAGS:
            fields["not_null"] = True
        else:
            raise click.BadParameter(f"Unknown column flag '{flag}' in '{spec}'.", param_hint="--column")
    return fields


def _prompt_columns(form: forms.TableForm, default_size: int) -> None:
    click.echo("Define columns; leave the name blank to finish.")
    while True:
        name = click.prompt("Column name", default="", show_default=False).strip()
        if not name:
            break
        column_type = click.prompt(
            "Type", type=click.Choice(forms.COLUMN_TYPES, case_sensitive=False)
        ).upper()
        size = None
        if column_type in forms.SIZED_TYPES:
            size = click.prompt("Size", default=str(default_size))
        primary_key = click.confirm("Primary key?", default=False)
        unique = not_null = False
        if not primary_key:
            unique = click.confirm("Unique?", default=False)
            not_null = click.confirm("Not null?", default=False)
        form.add_column(
            name=name,
            type=column_type,
            size=size,
            primary_key=primary_key,
            unique=unique,
            not_null=not_null,
        )


def _parse_pairs(pairs: Iterable[str]) -> dict[str, str]:
    """Convert COLUMN=VALUE options into a dictionary."""
    parsed: dict[str, str] = {}
    for pair in pairs:
        if "=" not in pair:
            raise ValueError(f"Value '{pair}' must be in COLUMN=VALUE format.")
        key, value = pair.split("=", 1)
        key = key.strip()
        if not key:
            raise ValueError("Column names cannot be empty.")
        parsed[key] = value
    return parsed


def _open_client(config: AppConfig) -> EngineClient:
    return EngineClient.from_settings(config.engine)


async def _with_client(config: AppConfig, action: Callable[[EngineClient], Awaitable[T]]) -> T:
    async with _open_client(config) as client:
        return await action(client)


def _run_with_manager(cli_ctx: CLIContext, action: Callable[[TableManager], Awaitable[T]]) -> T:
    config = cli_ctx.config

    async def run(client: EngineClient) -> T:
        dispatcher = CommandDispatcher(ConsoleSession(), client, prompt=config.console.prompt)
        manager = TableManager(
            client,
            dispatcher,
            cli_ctx.logger,
            default_varchar_size=config.forms.default_varchar_size,
        )
        return await action(manager)

    return asyncio.run(_with_client(config, run))


def main() -> None:  # pragma: no cover - console script hook
    cli(prog_name="duka-admin")


if __name__ == "__main__":  # pragma: no cover
    main()
