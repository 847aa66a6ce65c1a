"""duka-console CLI entrypoint."""

from __future__ import annotations

import asyncio
import concurrent.futures
import queue
import threading
from typing import Callable

import click
import httpx
from rich.console import Console

from duka_cli.shared.cli import CLIContext, common_cli_options, handle_cli_errors, pass_cli_context
from duka_cli.shared.config import AppConfig
from duka_cli.shared.engine import ConnectionStatus, EngineClient
from duka_cli.shared.logging import Logger

from .dispatch import CommandDispatcher
from .refresh import TableListRefresher
from .session import ConsoleSession, OutputBuffer, OutputSink
from .types import LineKind, RenderedLine

try:
    import readline
except ImportError:  # pragma: no cover - line editing is optional
    readline = None  # type: ignore[assignment]

_LINE_STYLES = {
    LineKind.COMMAND: "command",
    LineKind.ERROR: "error",
    LineKind.SUCCESS: "success",
    LineKind.NOTICE: "notice",
}


class RichSink:
    """Print console lines to a Rich console as they are produced."""

    def __init__(self, console: Console) -> None:
        self._console = console

    def write(self, line: RenderedLine) -> None:
        if line.kind is LineKind.TABLE:
            self._console.print(line.text, markup=False, soft_wrap=True, end="")
            return
        self._console.print(line.text, style=_LINE_STYLES.get(line.kind), markup=False)

    def clear(self) -> None:
        self._console.clear()


class ConsoleRunner:
    """Interactive loop around a :class:`CommandDispatcher`.

    The event loop runs on a worker thread so the blocking prompt stays on the
    main thread (where Ctrl-C lands). Session state is only touched from the
    loop: each line becomes a coroutine submitted to it, and output appears
    whenever the engine answers, in arrival order.
    """

    def __init__(
        self,
        config: AppConfig,
        logger: Logger,
        *,
        sink: OutputSink | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._config = config
        self._logger = logger
        self._sink = sink or RichSink(logger.console)
        self._transport = transport
        self.session = ConsoleSession(OutputBuffer([self._sink]))
        self._client: EngineClient | None = None
        self._refresher: TableListRefresher | None = None
        self._dispatcher: CommandDispatcher | None = None

    def run(self, read_line: Callable[[str], str] | None = None) -> int:
        """Read lines until EOF; without ``read_line`` the terminal prompt is used."""
        recalled: queue.SimpleQueue[str] | None = None
        if read_line is None:
            read_line = input
            if readline is not None:
                recalled = self._bind_readline()

        loop = asyncio.new_event_loop()
        thread = threading.Thread(target=loop.run_forever, name="duka-console-loop", daemon=True)
        thread.start()
        in_flight: list[concurrent.futures.Future[list[RenderedLine]]] = []
        try:
            asyncio.run_coroutine_threadsafe(self._start(), loop).result()
            while True:
                if recalled is not None:
                    _drain_into_readline(recalled)
                try:
                    line = read_line(self._config.console.prompt)
                except EOFError:
                    click.echo()
                    break
                except KeyboardInterrupt:
                    # Drop the half-typed line and keep going.
                    click.echo()
                    continue
                if not line.strip():
                    continue
                in_flight = [future for future in in_flight if not future.done()]
                future = asyncio.run_coroutine_threadsafe(self._submit(line), loop)
                future.add_done_callback(self._report_failure)
                in_flight.append(future)
        finally:
            concurrent.futures.wait(in_flight)
            if recalled is not None:
                _drain_into_readline(recalled)
            asyncio.run_coroutine_threadsafe(self._shutdown(), loop).result()
            loop.call_soon_threadsafe(loop.stop)
            thread.join()
            loop.close()
        return 0

    def _bind_readline(self) -> queue.SimpleQueue[str]:
        # Arrow-key recall shows exactly what the navigator recorded. Records
        # happen on the loop thread; readline is only touched from this one.
        recalled: queue.SimpleQueue[str] = queue.SimpleQueue()
        readline.set_auto_history(False)
        self.session.history.subscribe(lambda command: recalled.put(command.text))
        return recalled

    def _report_failure(self, future: concurrent.futures.Future[list[RenderedLine]]) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            self._logger.error(f"Console error: {exc}")

    async def _start(self) -> None:
        settings = self._config.console
        self._client = EngineClient.from_settings(self._config.engine, transport=self._transport)
        self._refresher = TableListRefresher(
            self._client,
            self.session,
            self._logger,
            interval=settings.refresh_interval,
            ddl_delay=settings.ddl_refresh_delay,
        )
        self._dispatcher = CommandDispatcher(
            self.session,
            self._client,
            refresher=self._refresher,
            prompt=settings.prompt,
        )

        self.session.status = await self._client.health()
        if self.session.status is ConnectionStatus.CONNECTED:
            self._logger.success(f"Connected to {self._client.base_url}")
        else:
            self._logger.warning(f"Engine at {self._client.base_url} is {self.session.status.value}.")

        self.session.output.extend(
            [
                RenderedLine(LineKind.NOTICE, "Duka RDBMS console."),
                RenderedLine(LineKind.NOTICE, "Type SQL commands or 'help' for examples. Ctrl-D exits."),
            ]
        )
        self._refresher.start()

    async def _submit(self, line: str) -> list[RenderedLine]:
        if self._dispatcher is None:
            raise RuntimeError("Console has not been started.")
        return await self._dispatcher.submit(line)

    async def _shutdown(self) -> None:
        if self._refresher is not None:
            await self._refresher.stop()
        if self._client is not None:
            await self._client.aclose()


def _drain_into_readline(recalled: queue.SimpleQueue[str]) -> None:
    while True:
        try:
            text = recalled.get_nowait()
        except queue.Empty:
            return
        readline.add_history(text)


async def run_single(
    config: AppConfig,
    statement: str,
    sink: OutputSink,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[RenderedLine]:
    """Dispatch one line exactly as the interactive console would."""
    session = ConsoleSession(OutputBuffer([sink]))
    async with EngineClient.from_settings(config.engine, transport=transport) as client:
        dispatcher = CommandDispatcher(session, client, prompt=config.console.prompt)
        return await dispatcher.submit(statement)


@click.group(help="Interactive SQL console for a Duka engine.", invoke_without_command=True)
@common_cli_options
@handle_cli_errors
def cli(cli_ctx: CLIContext) -> None:
    """Start the interactive console when no subcommand is given."""
    ctx = click.get_current_context()
    if ctx.invoked_subcommand is not None:
        return
    cli_ctx.logger.debug("duka-console starting interactive session.")
    ConsoleRunner(cli_ctx.config, cli_ctx.logger).run()


@cli.command("exec")
@click.argument("statement", type=str)
@pass_cli_context
@handle_cli_errors
def exec_statement(cli_ctx: CLIContext, statement: str) -> None:
    """Run a single console line (statement or meta-command) and exit."""
    if not statement.strip():
        raise click.ClickException("Statement must not be empty.")
    cli_ctx.logger.debug(f"duka-console exec: {statement}")
    lines = asyncio.run(run_single(cli_ctx.config, statement, RichSink(cli_ctx.logger.console)))
    if any(line.kind is LineKind.ERROR for line in lines):
        raise SystemExit(1)


def main() -> None:  # pragma: no cover - console script hook
    cli(prog_name="duka-console")


if __name__ == "__main__":  # pragma: no cover
    main()
