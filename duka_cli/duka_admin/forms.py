"""Statement assembly from structured form input.

The admin surface never asks the user for raw SQL: column drafts become a
``CREATE TABLE`` statement, a fetched :class:`Schema` drives the fields of an
``INSERT``, and the query builder composes a ``SELECT``. Validation here is
limited to completeness; the engine owns everything else.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass

from duka_cli.shared.exceptions import FormValidationError
from duka_cli.shared.models import Schema

COLUMN_TYPES = ("INT", "LONG", "VARCHAR", "BOOLEAN", "DATE", "DATETIME", "TIMESTAMP")
SIZED_TYPES = frozenset({"VARCHAR"})
# Declared types whose values must be written as quoted string literals.
TEXTUAL_TYPE_MARKERS = ("VARCHAR", "CHAR", "TEXT")
DEFAULT_VARCHAR_SIZE = 100
NULL_LITERAL = "NULL"

MISSING_TABLE_NAME = "Please enter a table name"
MISSING_COLUMNS = "Please add at least one column"
INCOMPLETE_COLUMNS = "Please fill in all column names and types"
MISSING_TABLE_SELECTION = "Please select a table"


@dataclass(slots=True)
class ColumnFieldDraft:
    """One editable column row of the create-table form."""

    id: str
    name: str = ""
    type: str = ""
    size: str | int | None = None
    primary_key: bool = False
    unique: bool = False
    not_null: bool = False

    def is_complete(self) -> bool:
        return bool(self.name.strip()) and bool(self.type.strip())


class TableForm:
    """Table name plus the ordered set of column drafts being edited."""

    def __init__(self, table_name: str = "", *, seed_column: bool = True) -> None:
        self.table_name = table_name
        self._columns: list[ColumnFieldDraft] = []
        self._counter = 0
        if seed_column:
            self.add_column()

    @property
    def columns(self) -> tuple[ColumnFieldDraft, ...]:
        return tuple(self._columns)

    def add_column(self, **fields: object) -> ColumnFieldDraft:
        draft = ColumnFieldDraft(id=f"col-{self._counter}", **fields)  # type: ignore[arg-type]
        self._counter += 1
        self._columns.append(draft)
        return draft

    def remove_column(self, draft_id: str) -> bool:
        for position, draft in enumerate(self._columns):
            if draft.id == draft_id:
                del self._columns[position]
                return True
        return False

    def get(self, draft_id: str) -> ColumnFieldDraft | None:
        return next((draft for draft in self._columns if draft.id == draft_id), None)

    def reset(self) -> None:
        """Forget the name and every draft, leaving one fresh column."""
        self.table_name = ""
        self._columns.clear()
        self.add_column()


def build_column_clause(draft: ColumnFieldDraft, *, default_size: int = DEFAULT_VARCHAR_SIZE) -> str:
    """Render ``name TYPE [PRIMARY KEY | UNIQUE NOT NULL]`` for one draft.

    A primary key already implies uniqueness and non-nullability, so those
    flags are only emitted for non-key columns.
    """
    if not draft.is_complete():
        raise FormValidationError(INCOMPLETE_COLUMNS)

    column_type = draft.type.strip().upper()
    if column_type in SIZED_TYPES:
        size = str(draft.size).strip() if draft.size is not None else ""
        column_type = f"{column_type}({size or default_size})"

    parts = [draft.name.strip(), column_type]
    if draft.primary_key:
        parts.append("PRIMARY KEY")
    else:
        if draft.unique:
            parts.append("UNIQUE")
        if draft.not_null:
            parts.append("NOT NULL")
    return " ".join(parts)


def build_create_table(
    table_name: str,
    drafts: Sequence[ColumnFieldDraft],
    *,
    default_size: int = DEFAULT_VARCHAR_SIZE,
) -> str:
    """Assemble a ``CREATE TABLE`` statement or reject the whole form."""
    name = table_name.strip()
    if not name:
        raise FormValidationError(MISSING_TABLE_NAME)
    if not drafts:
        raise FormValidationError(MISSING_COLUMNS)
    if not all(draft.is_complete() for draft in drafts):
        raise FormValidationError(INCOMPLETE_COLUMNS)

    clauses = [build_column_clause(draft, default_size=default_size) for draft in drafts]
    return f"CREATE TABLE {name} ({', '.join(clauses)})"


def is_textual_type(data_type: str) -> bool:
    upper = data_type.upper()
    return any(marker in upper for marker in TEXTUAL_TYPE_MARKERS)


def quote_literal(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'")
    return f"'{escaped}'"


def build_insert_values(schema: Schema, field_values: Mapping[str, str | None]) -> list[str]:
    """Return one literal per schema column, in schema order.

    Textual columns are always quoted (an empty field becomes ``''``); any
    other column passes its input through bare, with empty input as ``NULL``.
    """
    literals: list[str] = []
    for column in schema.columns:
        raw = field_values.get(column.name)
        value = "" if raw is None else str(raw)
        if is_textual_type(column.data_type):
            literals.append(quote_literal(value))
        else:
            literals.append(value.strip() or NULL_LITERAL)
    return literals


def build_insert_statement(schema: Schema, field_values: Mapping[str, str | None]) -> str:
    values = build_insert_values(schema, field_values)
    return f"INSERT INTO {schema.table_name} VALUES ({', '.join(values)})"


def build_select_statement(table_name: str, columns: str | Iterable[str] = "", where: str = "") -> str:
    """Compose the query builder's ``SELECT``; columns default to ``*``."""
    table = table_name.strip()
    if not table:
        raise FormValidationError(MISSING_TABLE_SELECTION)
    if isinstance(columns, str):
        projection = columns.strip()
    else:
        projection = ", ".join(column.strip() for column in columns if column.strip())
    statement = f"SELECT {projection or '*'} FROM {table}"
    if where.strip():
        statement += f" WHERE {where.strip()}"
    return statement


def build_drop_statement(table_name: str) -> str:
    table = table_name.strip()
    if not table:
        raise FormValidationError(MISSING_TABLE_SELECTION)
    return f"DROP TABLE {table}"


def build_truncate_statement(table_name: str) -> str:
    table = table_name.strip()
    if not table:
        raise FormValidationError(MISSING_TABLE_SELECTION)
    return f"DELETE FROM {table}"


def empty_field_values(schema: Schema) -> dict[str, str]:
    """Fresh insert-form state: one blank field per column of ``schema``."""
    return {column.name: "" for column in schema.columns}
