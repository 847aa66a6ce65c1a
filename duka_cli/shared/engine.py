"""Async HTTP client for the remote Duka engine."""

from __future__ import annotations

from enum import Enum
from typing import Any, Mapping
from urllib.parse import quote

import httpx

from .config import EngineSettings
from .exceptions import EngineTransportError, TableNotFoundError
from .models import QueryResult, Schema


class ConnectionStatus(str, Enum):
    UNKNOWN = "unknown"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    ERROR = "error"


class EngineClient:
    """Request/response wrapper around the engine's REST surface.

    Every call is a single round trip with no retries. Network failures and
    unreadable replies surface as :class:`EngineTransportError`; statement
    failures reported by the engine come back as ``QueryResult(success=False)``.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

    @classmethod
    def from_settings(
        cls,
        settings: EngineSettings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> EngineClient:
        return cls(settings.base_url, timeout=settings.timeout, transport=transport)

    @property
    def base_url(self) -> str:
        return self._base_url

    async def __aenter__(self) -> EngineClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def execute(self, statement: str) -> QueryResult:
        """Submit one statement and return the engine's verdict."""
        response = await self._send("POST", "/execute", json={"sql": statement})
        # The engine answers blank statements with 400 and a regular result body.
        if response.status_code == 400:
            payload = self._json(response)
            if isinstance(payload, Mapping) and "success" in payload:
                return self._decode_result(payload)
        self._raise_for_status(response, "/execute")
        payload = self._json(response)
        if not isinstance(payload, Mapping):
            raise EngineTransportError("/execute returned an unexpected payload.")
        return self._decode_result(payload)

    async def list_tables(self) -> list[str]:
        response = await self._send("GET", "/tables")
        self._raise_for_status(response, "/tables")
        payload = self._json(response)
        if not isinstance(payload, list):
            raise EngineTransportError("/tables returned an unexpected payload.")
        return [str(name) for name in payload]

    async def describe_table(self, name: str) -> Schema:
        endpoint = f"/tables/{quote(name, safe='')}/schema"
        response = await self._send("GET", endpoint)
        if response.status_code == 404:
            raise TableNotFoundError(f"Table '{name}' does not exist.")
        self._raise_for_status(response, endpoint)
        payload = self._json(response)
        try:
            return Schema.from_payload(payload)
        except (KeyError, TypeError, ValueError) as exc:
            raise EngineTransportError(f"{endpoint} returned an unexpected payload: {exc}") from exc

    async def health(self) -> ConnectionStatus:
        """Probe the engine; never raises."""
        try:
            response = await self._send("GET", "/health")
            self._raise_for_status(response, "/health")
            payload = self._json(response)
        except EngineTransportError:
            return ConnectionStatus.ERROR
        if isinstance(payload, Mapping) and payload.get("status") == "UP":
            return ConnectionStatus.CONNECTED
        return ConnectionStatus.DISCONNECTED

    async def init_demo_data(self) -> str:
        response = await self._send("POST", "/init-demo-data")
        self._raise_for_status(response, "/init-demo-data")
        payload = self._json(response)
        if isinstance(payload, Mapping):
            return str(payload.get("message") or "")
        return ""

    # ------------------------------------------------------------------
    # Internal helpers

    async def _send(self, method: str, endpoint: str, **kwargs: Any) -> httpx.Response:
        try:
            return await self._client.request(method, endpoint, **kwargs)
        except httpx.HTTPError as exc:
            raise EngineTransportError(f"{method} {endpoint} failed: {exc}") from exc

    @staticmethod
    def _raise_for_status(response: httpx.Response, endpoint: str) -> None:
        if response.status_code != 200:
            raise EngineTransportError(
                f"{endpoint} failed, status {response.status_code}: {response.text}"
            )

    @staticmethod
    def _decode_result(payload: Mapping[str, Any]) -> QueryResult:
        try:
            return QueryResult.from_payload(payload)
        except (KeyError, TypeError, ValueError) as exc:
            raise EngineTransportError(f"/execute returned an unexpected payload: {exc}") from exc

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise EngineTransportError(f"Engine returned invalid JSON: {exc}") from exc
