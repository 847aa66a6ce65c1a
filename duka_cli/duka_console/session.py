"""State owned by one interactive console session."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Protocol

from duka_cli.shared.engine import ConnectionStatus

from .history import HistoryNavigator
from .types import LineKind, RenderedLine

CLEARED_PLACEHOLDER = "Terminal cleared. Type SQL commands or 'help' for examples."


class OutputSink(Protocol):
    def write(self, line: RenderedLine) -> None: ...

    def clear(self) -> None: ...


class OutputBuffer:
    """Rendered console output, mirrored to any attached sinks."""

    def __init__(self, sinks: Iterable[OutputSink] = ()) -> None:
        self._lines: list[RenderedLine] = []
        self._sinks = list(sinks)

    @property
    def lines(self) -> tuple[RenderedLine, ...]:
        return tuple(self._lines)

    def extend(self, lines: Iterable[RenderedLine]) -> None:
        for line in lines:
            self._lines.append(line)
            for sink in self._sinks:
                sink.write(line)

    def clear(self) -> None:
        self._lines = []
        for sink in self._sinks:
            sink.clear()
        self.extend([RenderedLine(LineKind.NOTICE, CLEARED_PLACEHOLDER)])


class ConsoleSession:
    """Everything a console needs between submissions; lives as long as the process."""

    def __init__(self, output: OutputBuffer | None = None) -> None:
        self.history = HistoryNavigator()
        self.output = output or OutputBuffer()
        self.tables: tuple[str, ...] = ()
        self.status = ConnectionStatus.UNKNOWN

    def update_tables(self, names: Sequence[str]) -> bool:
        """Replace the known table list; return True when it changed."""
        new_tables = tuple(names)
        changed = new_tables != self.tables
        self.tables = new_tables
        return changed
