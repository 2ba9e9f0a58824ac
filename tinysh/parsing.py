"""Parsing of shell command lines: words, pipelines and history marks."""

from __future__ import annotations

from dataclasses import dataclass, field

REPEAT_LAST = -1
"""Mark returned by :func:`check_mark` for ``!!``."""

NO_MARK = 0
"""Mark returned by :func:`check_mark` for an ordinary command line."""

_ASCII_DIGITS = frozenset("0123456789")


@dataclass
class ParsedCommand:
    """Words of a command line and whether it asks to run in the background."""

    argv: list[str] = field(default_factory=list)
    background: bool = False

    @property
    def is_empty(self) -> bool:
        """True when the line holds no command to run."""
        return not self.argv


def _strip_newline(line: str) -> str:
    return line[:-1] if line.endswith("\n") else line


def parse_line(line: str) -> ParsedCommand:
    """Split a command line on spaces and detect a trailing ``&``.

    Only the space character separates words. A final word that begins
    with ``&`` marks a background job and is dropped. A blank line yields
    an empty command that counts as a background job.
    """
    words = [word for word in _strip_newline(line).split(" ") if word]
    if not words:
        return ParsedCommand([], True)
    background = words[-1].startswith("&")
    if background:
        words.pop()
    return ParsedCommand(words, background)


def split_pipeline(line: str) -> list[str]:
    """Split a line on ``|`` outside quotes, removing the quote characters.

    A double quote inside single quotes (and the reverse) is kept as an
    ordinary character, as is a ``|`` inside either kind of quotes. The
    segments are returned without a trailing newline.
    """
    segments: list[str] = []
    current: list[str] = []
    in_double = in_single = False
    for char in _strip_newline(line):
        if char == '"' and not in_single:
            in_double = not in_double
        elif char == "'" and not in_double:
            in_single = not in_single
        elif char == "|" and not in_single and not in_double:
            segments.append("".join(current))
            current = []
        else:
            current.append(char)
    segments.append("".join(current))
    return segments


def check_mark(line: str) -> int:
    """Classify a line as a history reference.

    Returns :data:`REPEAT_LAST` for ``!!`` (but not ``!!!``), the number
    ``n`` for ``!n`` made only of digits, and :data:`NO_MARK` otherwise.
    """
    if line.startswith("!!"):
        return NO_MARK if line.startswith("!!!") else REPEAT_LAST
    if line.startswith("!"):
        digits = _strip_newline(line)[1:]
        if not digits or not all(char in _ASCII_DIGITS for char in digits):
            return NO_MARK
        return int(digits)
    return NO_MARK