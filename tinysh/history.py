"""Command history kept in memory and persisted to a plain text file."""

from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from tinysh.rio import MAXLINE

DEFAULT_HISTORY_FILE = "history.txt"
_HISTORY_COMMAND = "history\n"


@dataclass(frozen=True)
class HistoryEntry:
    """One remembered command line and its 1-based number."""

    number: int
    command: str


def _split_long_line(line: str, limit: int) -> Iterator[str]:
    """Cut a line into pieces of at most ``limit`` characters."""
    while len(line) > limit:
        yield line[:limit]
        line = line[limit:]
    if line:
        yield line


class History:
    """Ordered list of command lines, numbered from 1."""

    def __init__(self, path: str | os.PathLike[str] = DEFAULT_HISTORY_FILE) -> None:
        self.path = Path(path)
        self._entries: list[HistoryEntry] = []

    def load(self) -> None:
        """Replace the entries with the lines of the history file.

        A missing file is created empty. Lines longer than the maximum
        line length are split into several entries.
        """
        self._entries = []
        if not self.path.exists():
            self.path.touch()
        with self.path.open("r", encoding="utf-8", errors="surrogateescape", newline="") as stream:
            for line in stream:
                for piece in _split_long_line(line, MAXLINE - 1):
                    self.add(piece)

    def save(self) -> None:
        """Write every entry but the last to the history file.

        The final entry is the command that ended the session and is not kept.
        """
        with self.path.open("w", encoding="utf-8", errors="surrogateescape", newline="") as stream:
            stream.writelines(entry.command for entry in self._entries[:-1])

    def add(self, command: str) -> HistoryEntry:
        """Append ``command`` unconditionally and return its entry."""
        entry = HistoryEntry(len(self._entries) + 1, command)
        self._entries.append(entry)
        return entry

    def record(self, command: str) -> HistoryEntry | None:
        """Append ``command`` unless it repeats an immediately preceding ``history``.

        Returns the new entry, or None when the command was not recorded.
        """
        if (
            self._entries
            and self._entries[-1].command == _HISTORY_COMMAND
            and command == _HISTORY_COMMAND
        ):
            return None
        return self.add(command)

    def get(self, number: int) -> HistoryEntry:
        """Return the entry numbered ``number``."""
        if not 1 <= number <= len(self._entries):
            raise KeyError(f"no history entry {number}")
        return self._entries[number - 1]

    def last(self) -> HistoryEntry:
        """Return the most recent entry."""
        if not self._entries:
            raise KeyError("history is empty")
        return self._entries[-1]

    def format(self) -> str:
        """Render the history as the ``history`` command prints it."""
        return "".join(f"{entry.number}  {entry.command}" for entry in self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)