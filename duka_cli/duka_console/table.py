"""Fixed-width ASCII grid used by the console to print result sets."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from duka_cli.shared.models import Row


def stringify(value: object) -> str:
    """Render a cell the way the engine spells it on the wire."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def column_widths(columns: Sequence[str], rows: Sequence[Row]) -> list[int]:
    """Width of each column including one space of padding on either side."""
    widths: list[int] = []
    for column in columns:
        longest = len(column)
        for row in rows:
            longest = max(longest, len(_cell(row, column)))
        widths.append(longest + 2)
    return widths


def format_table(columns: Sequence[str], rows: Sequence[Row]) -> str:
    """Return a bordered grid, one ``\\n``-terminated line per border or row.

    Missing and null cells render empty. With no columns the result is the
    degenerate frame ``++`` / ``||`` / ``++`` / ``++``.
    """
    widths = column_widths(columns, rows)
    border = "+" + "+".join("-" * width for width in widths) + "+"

    lines = [border, _format_line(columns, widths), border]
    for row in rows:
        lines.append(_format_line([_cell(row, column) for column in columns], widths))
    lines.append(border)
    return "\n".join(lines) + "\n"


def _cell(row: Mapping[str, object], column: str) -> str:
    return stringify(row.get(column))


def _format_line(cells: Sequence[str], widths: Sequence[int]) -> str:
    return "|" + "|".join(f" {cell.ljust(width - 1)}" for cell, width in zip(cells, widths)) + "|"
