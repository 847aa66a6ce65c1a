"""Turn engine results into console lines."""

from __future__ import annotations

from duka_cli.shared.models import QueryResult

from . import table
from .types import LineKind, RenderedLine


def present(result: QueryResult) -> list[RenderedLine]:
    """Map a result onto error, table or success feedback.

    Rows present means a table plus a row-count summary; success without rows
    (DDL, DML) means the engine message plus an optional timing line.
    """
    if not result.success:
        return [RenderedLine(LineKind.ERROR, f"✗ {result.message}")]

    if result.rows:
        grid = table.format_table(result.column_names, result.rows)
        summary = f"{result.row_count} row(s) returned ({format_ms(result.execution_time_ms)} ms)"
        return [
            RenderedLine(LineKind.TABLE, grid),
            RenderedLine(LineKind.SUCCESS, summary),
        ]

    lines = [RenderedLine(LineKind.SUCCESS, f"✓ {result.message}")]
    # A zero timing is treated as absent, matching the engine's default value.
    if result.execution_time_ms:
        lines.append(RenderedLine(LineKind.TEXT, f"({format_ms(result.execution_time_ms)} ms)"))
    return lines


def present_transport_error(exc: Exception) -> RenderedLine:
    return RenderedLine(LineKind.ERROR, f"✗ Error: {exc}")


def format_ms(value: float | None) -> str:
    if value is None:
        return "0"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
