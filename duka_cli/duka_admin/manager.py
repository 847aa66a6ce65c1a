"""Table management workflows behind the admin commands."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping

from duka_cli.duka_console.dispatch import CommandDispatcher
from duka_cli.shared.engine import EngineClient
from duka_cli.shared.exceptions import StatementError
from duka_cli.shared.logging import Logger
from duka_cli.shared.models import QueryResult, Schema

from . import forms


@dataclass(frozen=True, slots=True)
class TableView:
    """Everything shown for a selected table: structure, data and a blank insert form."""

    schema: Schema
    data: QueryResult
    insert_fields: dict[str, str]


class TableManager:
    """Runs form-built statements through the console's dispatch path.

    Validation problems raise :class:`FormValidationError` before anything is
    sent; a statement the engine rejects raises :class:`StatementError`.
    """

    def __init__(
        self,
        client: EngineClient,
        dispatcher: CommandDispatcher,
        logger: Logger,
        *,
        default_varchar_size: int = forms.DEFAULT_VARCHAR_SIZE,
    ) -> None:
        self._client = client
        self._dispatcher = dispatcher
        self._logger = logger
        self._default_varchar_size = default_varchar_size

    async def list_tables(self) -> list[str]:
        return await self._client.list_tables()

    async def describe_table(self, name: str) -> Schema:
        return await self._client.describe_table(name)

    async def create_table(self, form: forms.TableForm) -> QueryResult:
        statement = forms.build_create_table(
            form.table_name,
            form.columns,
            default_size=self._default_varchar_size,
        )
        result = await self._run(statement)
        form.reset()
        return result

    async def load_table(self, name: str) -> TableView:
        schema = await self._client.describe_table(name)
        data = await self._dispatcher.execute(forms.build_select_statement(name))
        return TableView(schema=schema, data=data, insert_fields=forms.empty_field_values(schema))

    async def insert_row(self, table_name: str, field_values: Mapping[str, str | None]) -> QueryResult:
        # Always assemble against the current structure, not a stale view.
        schema = await self._client.describe_table(table_name)
        return await self._run(forms.build_insert_statement(schema, field_values))

    async def drop_table(self, name: str) -> QueryResult:
        return await self._run(forms.build_drop_statement(name))

    async def truncate_table(self, name: str) -> QueryResult:
        return await self._run(forms.build_truncate_statement(name))

    async def run_query(self, table_name: str, columns: str = "", where: str = "") -> QueryResult:
        return await self._run(forms.build_select_statement(table_name, columns, where))

    async def _run(self, statement: str) -> QueryResult:
        self._logger.debug(f"Submitting: {statement}")
        result = await self._dispatcher.execute(statement)
        if not result.success:
            raise StatementError(result.message or "Statement failed.")
        return result
