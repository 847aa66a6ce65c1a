"""In-memory stand-ins for the remote engine used across the test suite."""

from __future__ import annotations

import json
from collections import deque
from typing import Any

import httpx

from duka_cli.shared.engine import EngineClient
from duka_cli.shared.exceptions import EngineTransportError
from duka_cli.shared.models import QueryResult, Schema

BASE_URL = "http://engine.test/api"


class StubLogger:
    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))

    def debug(self, message: str) -> None:
        self.messages.append(("debug", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def success(self, message: str) -> None:
        self.messages.append(("success", message))


class RecordingSink:
    def __init__(self) -> None:
        self.written: list[Any] = []
        self.clears = 0

    def write(self, line: Any) -> None:
        self.written.append(line)

    def clear(self) -> None:
        self.clears += 1


class FakeClient:
    """Duck-typed EngineClient with scripted replies."""

    def __init__(self, *results: QueryResult, tables: list[str] | None = None) -> None:
        self.results = deque(results)
        self.tables = list(tables or [])
        self.schemas: dict[str, Schema] = {}
        self.statements: list[str] = []
        self.list_calls = 0
        self.fail_execute: Exception | None = None
        self.fail_list: Exception | None = None

    async def execute(self, statement: str) -> QueryResult:
        self.statements.append(statement)
        if self.fail_execute is not None:
            raise self.fail_execute
        if self.results:
            return self.results.popleft()
        return QueryResult(success=True, message="OK")

    async def list_tables(self) -> list[str]:
        self.list_calls += 1
        if self.fail_list is not None:
            raise self.fail_list
        return list(self.tables)

    async def describe_table(self, name: str) -> Schema:
        return self.schemas[name]


class EngineStub:
    """httpx handler mimicking the engine's REST endpoints."""

    def __init__(self) -> None:
        self.tables: list[str] = []
        self.schemas: dict[str, dict[str, Any]] = {}
        self.execute_replies: deque[tuple[int, dict[str, Any]]] = deque()
        self.statements: list[str] = []
        self.health_status = "UP"
        self.offline = False

    def reply(self, payload: dict[str, Any], status: int = 200) -> None:
        self.execute_replies.append((status, payload))

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def client(self) -> EngineClient:
        return EngineClient(BASE_URL, transport=self.transport())

    def handle(self, request: httpx.Request) -> httpx.Response:
        if self.offline:
            raise httpx.ConnectError("connection refused", request=request)

        path = request.url.path.removeprefix("/api")
        if path == "/health":
            return httpx.Response(200, json={"status": self.health_status, "database": "Duka RDBMS"})
        if path == "/tables":
            return httpx.Response(200, json=self.tables)
        if path.startswith("/tables/") and path.endswith("/schema"):
            name = path[len("/tables/") : -len("/schema")]
            if name not in self.schemas:
                return httpx.Response(404)
            return httpx.Response(200, json=self.schemas[name])
        if path == "/execute":
            statement = json.loads(request.content)["sql"]
            self.statements.append(statement)
            if self.execute_replies:
                status, payload = self.execute_replies.popleft()
                return httpx.Response(status, json=payload)
            return httpx.Response(200, json={"success": True, "message": "OK", "rowCount": 0, "executionTimeMs": 1})
        if path == "/init-demo-data":
            return httpx.Response(200, json={"message": "Demo data initialized successfully"})
        return httpx.Response(404)


def products_schema_payload() -> dict[str, Any]:
    return {
        "tableName": "products",
        "rowCount": 1,
        "columns": [
            {"name": "id", "dataType": "INT", "primaryKey": True, "unique": True, "nullable": False},
            {"name": "name", "dataType": "VARCHAR", "primaryKey": False, "unique": False, "nullable": True},
            {"name": "price", "dataType": "INT", "primaryKey": False, "unique": False, "nullable": True},
        ],
    }


def transport_error(message: str = "connection refused") -> EngineTransportError:
    return EngineTransportError(message)
