"""Background refreshes of the engine's table list."""

from __future__ import annotations

import asyncio

from duka_cli.shared.engine import EngineClient
from duka_cli.shared.exceptions import EngineError
from duka_cli.shared.logging import Logger

from .session import ConsoleSession


class TableListRefresher:
    """Keeps ``session.tables`` in step with the engine.

    Runs a periodic refresh on the event loop and accepts one-off delayed
    refreshes after DDL. Failures are logged and otherwise ignored; the next
    tick tries again.
    """

    def __init__(
        self,
        client: EngineClient,
        session: ConsoleSession,
        logger: Logger,
        *,
        interval: float = 10.0,
        ddl_delay: float = 0.5,
    ) -> None:
        self._client = client
        self._session = session
        self._logger = logger
        self._interval = interval
        self._ddl_delay = ddl_delay
        self._periodic: asyncio.Task[None] | None = None
        self._pending: set[asyncio.Task[None]] = set()

    async def refresh(self) -> None:
        try:
            tables = await self._client.list_tables()
        except EngineError as exc:
            self._logger.debug(f"Table list refresh failed: {exc}")
            return
        if self._session.update_tables(tables):
            self._logger.debug(f"Tables: {', '.join(tables) or '(none)'}")

    def schedule(self, delay: float | None = None) -> asyncio.Task[None]:
        """Refresh once after ``delay`` seconds (defaults to the DDL delay)."""
        wait = self._ddl_delay if delay is None else delay
        task = asyncio.get_running_loop().create_task(self._refresh_after(wait))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    def start(self) -> None:
        if self._periodic is None or self._periodic.done():
            self._periodic = asyncio.get_running_loop().create_task(self._run_periodic())

    async def stop(self) -> None:
        tasks = list(self._pending)
        if self._periodic is not None:
            tasks.append(self._periodic)
            self._periodic = None
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def _refresh_after(self, delay: float) -> None:
        await asyncio.sleep(delay)
        await self.refresh()

    async def _run_periodic(self) -> None:
        while True:
            await self.refresh()
            await asyncio.sleep(self._interval)
