"""Classify console input and route it locally or to the engine."""

from __future__ import annotations

from duka_cli.shared.engine import EngineClient
from duka_cli.shared.exceptions import EngineError
from duka_cli.shared.models import QueryResult

from .present import present, present_transport_error
from .refresh import TableListRefresher
from .session import ConsoleSession
from .types import Classified, LineKind, LocalCommand, LocalKind, RemoteStatement, RenderedLine

DEFAULT_PROMPT = "duka> "
DDL_MARKERS = ("CREATE TABLE", "DROP TABLE")

HELP_EXAMPLES = (
    "CREATE TABLE products (id INT PRIMARY KEY, name VARCHAR(100), price INT)",
    "INSERT INTO products VALUES (1, 'Laptop', 75000)",
    "SELECT * FROM products",
    "SELECT * FROM products WHERE price > 10000",
    "UPDATE products SET price = 80000 WHERE id = 1",
    "DELETE FROM products WHERE id = 1",
    "DROP TABLE products",
    "SHOW TABLES",
    "DESCRIBE products",
)

HELP_SPECIAL = (
    "help    - Show this help",
    "clear   - Clear terminal",
    "history - List previous commands",
)


def classify(raw: str) -> Classified | None:
    """Return the command kind for ``raw``, or None for blank input."""
    text = raw.strip()
    if not text:
        return None
    try:
        return LocalCommand(LocalKind(text.lower()))
    except ValueError:
        return RemoteStatement(text)


def is_table_ddl(statement: str) -> bool:
    upper = statement.upper()
    return any(marker in upper for marker in DDL_MARKERS)


def help_lines() -> list[RenderedLine]:
    lines = [RenderedLine(LineKind.SUCCESS, "Available Commands:")]
    lines.extend(RenderedLine(LineKind.TEXT, example) for example in HELP_EXAMPLES)
    lines.append(RenderedLine(LineKind.SUCCESS, "Special Commands:"))
    lines.extend(RenderedLine(LineKind.TEXT, entry) for entry in HELP_SPECIAL)
    return lines


class CommandDispatcher:
    """Routes one line of input at a time for a :class:`ConsoleSession`."""

    def __init__(
        self,
        session: ConsoleSession,
        client: EngineClient,
        *,
        refresher: TableListRefresher | None = None,
        prompt: str = DEFAULT_PROMPT,
    ) -> None:
        self.session = session
        self._client = client
        self._refresher = refresher
        self._prompt = prompt

    async def submit(self, raw: str) -> list[RenderedLine]:
        """Record, classify and run one line; return the lines it produced.

        Engine and transport failures become error lines; nothing raised here
        escapes to the caller.
        """
        classified = classify(raw)
        if classified is None:
            return []

        text = raw.strip()
        self.session.history.record(text)
        echo = RenderedLine(LineKind.COMMAND, f"{self._prompt}{text}")
        self.session.output.extend([echo])

        if classified == LocalCommand(LocalKind.CLEAR):
            self.session.output.clear()
            return list(self.session.output.lines)

        if isinstance(classified, LocalCommand):
            lines = self._run_local(classified.kind)
        else:
            lines = await self._run_remote(classified)
        self.session.output.extend(lines)
        return [echo, *lines]

    async def execute(self, statement: str) -> QueryResult:
        """Send a statement to the engine; table DDL nudges a table-list refresh.

        Raises :class:`EngineError` when the engine cannot be reached.
        """
        result = await self._client.execute(statement)
        if self._refresher is not None and is_table_ddl(statement):
            self._refresher.schedule()
        return result

    async def _run_remote(self, remote: RemoteStatement) -> list[RenderedLine]:
        try:
            result = await self.execute(remote.statement)
        except EngineError as exc:
            return [present_transport_error(exc)]
        return present(result)

    def _run_local(self, kind: LocalKind) -> list[RenderedLine]:
        if kind is LocalKind.HELP:
            return help_lines()
        return self._history_lines()

    def _history_lines(self) -> list[RenderedLine]:
        listing = self.session.history.listing()
        if not listing:
            return [RenderedLine(LineKind.TEXT, "No command history yet")]
        lines = [RenderedLine(LineKind.SUCCESS, "Command History:")]
        lines.extend(RenderedLine(LineKind.TEXT, entry) for entry in listing)
        return lines
