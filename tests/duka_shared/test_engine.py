from __future__ import annotations

import asyncio
import json

import httpx
import pytest

from duka_cli.shared.engine import ConnectionStatus, EngineClient
from duka_cli.shared.exceptions import EngineTransportError, TableNotFoundError
from tests.support import BASE_URL, EngineStub, products_schema_payload


def test_execute_posts_statement_and_decodes_result() -> None:
    stub = EngineStub()
    stub.reply(
        {
            "success": True,
            "message": "",
            "columnNames": ["id", "name"],
            "rows": [{"id": 1, "name": "Laptop"}],
            "rowCount": 1,
            "executionTimeMs": 7,
        }
    )

    async def scenario():
        async with stub.client() as client:
            return await client.execute("SELECT * FROM products")

    result = asyncio.run(scenario())

    assert stub.statements == ["SELECT * FROM products"]
    assert result.success is True
    assert result.column_names == ("id", "name")
    assert result.rows == ({"id": 1, "name": "Laptop"},)
    assert result.row_count == 1
    assert result.execution_time_ms == 7


def test_execute_decodes_bad_request_result() -> None:
    stub = EngineStub()
    stub.reply({"success": False, "message": "SQL query cannot be empty"}, status=400)

    async def scenario():
        async with stub.client() as client:
            return await client.execute("")

    result = asyncio.run(scenario())

    assert result.success is False
    assert result.message == "SQL query cannot be empty"


def test_execute_server_error_is_transport_error() -> None:
    stub = EngineStub()
    stub.reply({"error": "boom"}, status=500)

    async def scenario():
        async with stub.client() as client:
            await client.execute("SELECT 1")

    with pytest.raises(EngineTransportError, match="status 500"):
        asyncio.run(scenario())


def test_execute_invalid_json_is_transport_error() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))

    async def scenario():
        async with EngineClient(BASE_URL, transport=transport) as client:
            await client.execute("SELECT 1")

    with pytest.raises(EngineTransportError, match="invalid JSON"):
        asyncio.run(scenario())


def test_unreachable_engine_is_transport_error() -> None:
    stub = EngineStub()
    stub.offline = True

    async def scenario():
        async with stub.client() as client:
            await client.list_tables()

    with pytest.raises(EngineTransportError, match="GET /tables failed"):
        asyncio.run(scenario())


def test_list_tables_and_describe() -> None:
    stub = EngineStub()
    stub.tables = ["products"]
    stub.schemas["products"] = products_schema_payload()

    async def scenario():
        async with stub.client() as client:
            return await client.list_tables(), await client.describe_table("products")

    tables, schema = asyncio.run(scenario())

    assert tables == ["products"]
    assert schema.table_name == "products"
    assert schema.row_count == 1
    assert schema.column_names() == ["id", "name", "price"]
    assert schema.columns[0].primary_key is True
    assert schema.columns[1].data_type == "VARCHAR"


def test_describe_unknown_table_raises() -> None:
    stub = EngineStub()

    async def scenario():
        async with stub.client() as client:
            await client.describe_table("ghost")

    with pytest.raises(TableNotFoundError, match="ghost"):
        asyncio.run(scenario())


@pytest.mark.parametrize(
    "configure, expected",
    [
        (lambda stub: None, ConnectionStatus.CONNECTED),
        (lambda stub: setattr(stub, "health_status", "DOWN"), ConnectionStatus.DISCONNECTED),
        (lambda stub: setattr(stub, "offline", True), ConnectionStatus.ERROR),
    ],
)
def test_health_never_raises(configure, expected: ConnectionStatus) -> None:
    stub = EngineStub()
    configure(stub)

    async def scenario():
        async with stub.client() as client:
            return await client.health()

    assert asyncio.run(scenario()) is expected


def test_requests_target_base_url() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json={"message": "Demo data initialized successfully"})

    async def scenario():
        async with EngineClient(f"{BASE_URL}/", transport=httpx.MockTransport(handler)) as client:
            return await client.init_demo_data()

    message = asyncio.run(scenario())

    assert message == "Demo data initialized successfully"
    assert str(seen[0].url) == f"{BASE_URL}/init-demo-data"
    assert seen[0].method == "POST"


def test_execute_sends_sql_body() -> None:
    seen: list[dict[str, str]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(json.loads(request.content))
        return httpx.Response(200, json={"success": True, "message": "OK"})

    async def scenario():
        async with EngineClient(BASE_URL, transport=httpx.MockTransport(handler)) as client:
            return await client.execute("SHOW TABLES")

    asyncio.run(scenario())

    assert seen == [{"sql": "SHOW TABLES"}]


@pytest.mark.parametrize(
    "payload",
    [
        {"success": True, "columnNames": ["id"], "rows": [[1, 2, 3]], "rowCount": 1},
        {"success": True, "columnNames": ["id"], "rows": [], "rowCount": "many"},
    ],
)
def test_execute_malformed_result_is_transport_error(payload: dict[str, object]) -> None:
    stub = EngineStub()
    stub.reply(payload)

    async def scenario():
        async with stub.client() as client:
            await client.execute("SELECT id FROM t")

    with pytest.raises(EngineTransportError, match="unexpected payload"):
        asyncio.run(scenario())
