"""Output rendering helpers for duka-admin."""

from __future__ import annotations

import sys
from typing import IO, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from duka_cli.duka_console.present import format_ms
from duka_cli.duka_console.table import stringify
from duka_cli.shared.engine import ConnectionStatus
from duka_cli.shared.logging import Logger
from duka_cli.shared.models import QueryResult, Schema

CHECK = "✓"
NULL_DISPLAY = "NULL"


def render_status(status: ConnectionStatus, base_url: str, *, stream: IO[str] | None = None) -> None:
    labels = {
        ConnectionStatus.CONNECTED: "Connected",
        ConnectionStatus.DISCONNECTED: "Disconnected",
        ConnectionStatus.ERROR: "Error",
        ConnectionStatus.UNKNOWN: "Unknown",
    }
    print(f"{labels[status]} ({base_url})", file=stream or sys.stdout)


def render_table_list(tables: Sequence[str], *, logger: Logger, stream: IO[str] | None = None) -> None:
    output_stream = stream or sys.stdout
    if not tables:
        logger.info("No tables yet.")
        return
    for name in tables:
        print(name, file=output_stream)


def render_schema(schema: Schema, *, stream: IO[str] | None = None) -> None:
    """Print a table's columns with their key and nullability flags."""
    console = _console(stream)
    console.print(f"[bold]Table: {escape(schema.table_name)}[/bold]")
    table = Table(box=box.SIMPLE, show_header=True, header_style="bold")
    for heading in ("Column", "Type", "Primary", "Unique", "Nullable"):
        table.add_column(heading)
    for column in schema.columns:
        table.add_row(
            escape(column.name),
            escape(column.data_type),
            CHECK if column.primary_key else "",
            CHECK if column.unique else "",
            CHECK if column.nullable else "",
        )
    console.print(table)
    console.print(f"Row Count: {schema.row_count}")


def render_result_table(
    result: QueryResult,
    *,
    logger: Logger,
    empty_message: str = "No results found",
    stream: IO[str] | None = None,
    show_summary: bool = True,
) -> None:
    """Print result rows as a Rich table; nulls show as ``NULL``."""
    if not result.rows:
        logger.info(empty_message)
        return

    console = _console(stream)
    table = Table(box=box.SIMPLE_HEAVY, show_header=True, header_style="bold")
    for column in result.column_names:
        table.add_column(escape(column))
    for row in result.rows:
        table.add_row(*[_display(row.get(column)) for column in result.column_names])
    console.print(table)
    if show_summary:
        console.print(f"{result.row_count} row(s) returned in {format_ms(result.execution_time_ms)} ms")


def _console(stream: IO[str] | None) -> Console:
    return Console(file=stream or sys.stdout, highlight=False, force_terminal=False)


def _display(value: object) -> str:
    if value is None:
        return NULL_DISPLAY
    return escape(stringify(value))
