"""Command history with arrow-key style recall."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True, slots=True)
class Command:
    text: str
    index: int


class HistoryNavigator:
    """Append-only log of submitted commands plus a recall cursor.

    The cursor ranges over ``[0, len(log)]``; ``len(log)`` means the user is
    editing a fresh command rather than recalling an old one.
    """

    def __init__(self) -> None:
        self._log: list[Command] = []
        self._cursor = 0
        self._listeners: list[Callable[[Command], None]] = []

    def __len__(self) -> int:
        return len(self._log)

    def subscribe(self, listener: Callable[[Command], None]) -> None:
        """Call ``listener`` with every command recorded from now on."""
        self._listeners.append(listener)

    @property
    def cursor(self) -> int:
        return self._cursor

    def record(self, raw: str) -> Command | None:
        """Append the trimmed command and park the cursor past the end.

        Blank input is ignored and leaves the cursor untouched.
        """
        text = raw.strip()
        if not text:
            return None
        command = Command(text=text, index=len(self._log))
        self._log.append(command)
        self._cursor = len(self._log)
        for listener in self._listeners:
            listener(command)
        return command

    def recall_previous(self, draft: str = "") -> str:
        if self._cursor > 0:
            self._cursor -= 1
            return self._log[self._cursor].text
        return draft

    def recall_next(self) -> str:
        if self._cursor >= len(self._log):
            return ""
        self._cursor += 1
        if self._cursor == len(self._log):
            return ""
        return self._log[self._cursor].text

    def entries(self) -> tuple[Command, ...]:
        return tuple(self._log)

    def listing(self) -> list[str]:
        """Return the log as 1-indexed ``"n. command"`` strings."""
        return [f"{command.index + 1}. {command.text}" for command in self._log]
