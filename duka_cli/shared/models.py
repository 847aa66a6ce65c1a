"""Value types exchanged with the remote engine."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any, Union

Scalar = Union[str, int, float, bool, None]
Row = Mapping[str, Scalar]


@dataclass(frozen=True, slots=True)
class QueryResult:
    """Outcome of a single statement as reported by the engine."""

    success: bool
    message: str = ""
    column_names: tuple[str, ...] = ()
    rows: tuple[Row, ...] = ()
    row_count: int = 0
    # None when the engine did not report a timing
    execution_time_ms: float | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> QueryResult:
        """Build a result from the engine's JSON body (camelCase keys)."""
        rows = payload.get("rows") or ()
        return cls(
            success=bool(payload.get("success", False)),
            message=str(payload.get("message") or ""),
            column_names=tuple(str(name) for name in payload.get("columnNames") or ()),
            rows=tuple(dict(row) for row in rows),
            row_count=int(payload.get("rowCount") or 0),
            execution_time_ms=payload.get("executionTimeMs"),
        )


@dataclass(frozen=True, slots=True)
class ColumnDescriptor:
    name: str
    data_type: str
    primary_key: bool = False
    unique: bool = False
    nullable: bool = True

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> ColumnDescriptor:
        return cls(
            name=str(payload["name"]),
            data_type=str(payload["dataType"]),
            primary_key=bool(payload.get("primaryKey", False)),
            unique=bool(payload.get("unique", False)),
            nullable=bool(payload.get("nullable", True)),
        )


@dataclass(frozen=True, slots=True)
class Schema:
    """Structure of one table, fetched fresh for each view."""

    table_name: str
    row_count: int = 0
    columns: Sequence[ColumnDescriptor] = field(default_factory=tuple)

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> Schema:
        return cls(
            table_name=str(payload["tableName"]),
            row_count=int(payload.get("rowCount") or 0),
            columns=tuple(ColumnDescriptor.from_payload(col) for col in payload.get("columns") or ()),
        )

    def column_names(self) -> list[str]:
        return [column.name for column in self.columns]
