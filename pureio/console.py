"""Primitive console effects.

The core never touches a terminal directly. Line input and output go through
two small provider contracts, ``LineReader`` and ``LineWriter``; the effect
constructors below wrap one provider call in a ``Delay`` so that nothing is
read or written until the interpreter reaches the node.
"""

from __future__ import annotations

import sys
from collections import deque
from collections.abc import Iterable
from functools import partial
from typing import Protocol, TextIO, runtime_checkable

from pureio.errors import InputUnavailable, ParseError
from pureio.node import Delay, EffectNode


@runtime_checkable
class LineReader(Protocol):
    """Blocking source of text lines."""

    def read_line(self) -> str:
        """Return the next line without its terminator.

        Raises ``InputUnavailable`` when no more input exists.
        """
        ...


@runtime_checkable
class LineWriter(Protocol):
    """Blocking sink of text lines."""

    def write_line(self, text: str) -> None:
        """Write ``text`` followed by a line terminator."""
        ...


@runtime_checkable
class Console(LineReader, LineWriter, Protocol):
    """A provider that both reads and writes lines."""


class StreamConsole:
    """Console over text streams, ``sys.stdin``/``sys.stdout`` by default.

    The default streams are looked up on every call so that redirection done
    after construction (for example by a test harness) is honoured.
    """

    def __init__(self, stdin: TextIO | None = None, stdout: TextIO | None = None) -> None:
        self._stdin = stdin
        self._stdout = stdout

    @property
    def stdin(self) -> TextIO:
        return self._stdin if self._stdin is not None else sys.stdin

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    def read_line(self) -> str:
        line = self.stdin.readline()
        if line == "":
            raise InputUnavailable()
        return _strip_terminator(line)

    def write_line(self, text: str) -> None:
        stream = self.stdout
        stream.write(f"{text}\n")
        stream.flush()


class ScriptedConsole:
    """Console that replays canned input and records every write."""

    def __init__(self, inputs: Iterable[str] = ()) -> None:
        self._pending: deque[str] = deque(inputs)
        self.written: list[str] = []
        self.reads = 0

    def feed(self, *lines: str) -> None:
        self._pending.extend(lines)

    @property
    def remaining(self) -> int:
        return len(self._pending)

    def read_line(self) -> str:
        if not self._pending:
            raise InputUnavailable()
        self.reads += 1
        return self._pending.popleft()

    def write_line(self, text: str) -> None:
        self.written.append(text)

    def __repr__(self) -> str:
        return (
            f"ScriptedConsole(remaining={self.remaining}, "
            f"written={len(self.written)})"
        )


def _strip_terminator(line: str) -> str:
    if line.endswith("\r\n"):
        return line[:-2]
    if line.endswith("\n") or line.endswith("\r"):
        return line[:-1]
    return line


def read_line(console: LineReader) -> EffectNode[str]:
    """Read one line from ``console`` when interpreted."""

    return Delay(console.read_line, "ReadLine")


def print_line(console: LineWriter, text: str) -> EffectNode[None]:
    """Write ``text`` as one line to ``console`` when interpreted."""

    return Delay(partial(console.write_line, str(text)), "PrintLine")


def _parse(text: str) -> int | float:
    stripped = text.strip()
    try:
        return int(stripped)
    except ValueError:
        pass
    try:
        return float(stripped)
    except ValueError:
        raise ParseError(text) from None


def parse_number(text: str) -> EffectNode[int | float]:
    """Parse ``text`` as an int (or float) when interpreted; fails with ParseError."""

    return Delay(partial(_parse, text), "ParseNumber")


# Uppercase aliases

def ReadLine(console: LineReader) -> EffectNode[str]:
    return read_line(console)


def PrintLine(console: LineWriter, text: str) -> EffectNode[None]:
    return print_line(console, text)


__all__ = [
    "Console",
    "LineReader",
    "LineWriter",
    "PrintLine",
    "ReadLine",
    "ScriptedConsole",
    "StreamConsole",
    "parse_number",
    "print_line",
    "read_line",
]
