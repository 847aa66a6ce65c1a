"""Data structures shared across duka-console modules."""

from __future__ import annotations

import html
from dataclasses import dataclass
from enum import Enum


class LineKind(str, Enum):
    COMMAND = "command"
    ERROR = "error"
    SUCCESS = "success"
    TEXT = "text"
    TABLE = "table"
    NOTICE = "notice"


class LocalKind(str, Enum):
    HELP = "help"
    CLEAR = "clear"
    HISTORY = "history"


@dataclass(frozen=True, slots=True)
class RenderedLine:
    """One entry of console output."""

    kind: LineKind
    text: str

    def to_html(self) -> str:
        escaped = html.escape(self.text, quote=False)
        if self.kind is LineKind.TABLE:
            return f'<pre class="terminal-table">{escaped}</pre>'
        return f'<span class="terminal-{self.kind.value}">{escaped}</span>'


@dataclass(frozen=True, slots=True)
class LocalCommand:
    kind: LocalKind


@dataclass(frozen=True, slots=True)
class RemoteStatement:
    statement: str


Classified = LocalCommand | RemoteStatement
