"""Input sources and output sinks for the interpreter.

An output sink exposes write_byte(value); an input source exposes read_byte(),
which consumes one line and returns its first byte, or None when no line is
left.
"""

import sys
from typing import Iterable, List, Optional


class StreamOutput:
    """Writes each byte as one character to a text stream and flushes."""

    def __init__(self, stream=None):
        self.stream = stream if stream is not None else sys.stdout

    def write_byte(self, value: int):
        self.stream.write(chr(value))
        self.stream.flush()


class BufferOutput:
    def __init__(self):
        self.values: List[int] = []

    def write_byte(self, value: int):
        self.values.append(value)

    def getvalue(self) -> str:
        return ''.join(chr(v) for v in self.values)


def first_byte(line) -> Optional[int]:
    """First byte of a line read from a binary or text stream."""
    if not line:
        return None
    if isinstance(line, str):
        line = line.encode("utf-8", errors="surrogateescape")
    return line[0]


class LineInput:
    """Reads one line per request from a stream (raw stdin bytes by default)."""

    def __init__(self, stream=None):
        if stream is None:
            stream = getattr(sys.stdin, "buffer", sys.stdin)
        self.stream = stream

    def read_byte(self) -> Optional[int]:
        return first_byte(self.stream.readline())


class ScriptedInput:
    """Serves a fixed list of lines, then reports exhaustion."""

    def __init__(self, lines: Iterable[str] = ()):
        self.lines = [line if line.endswith("\n") else line + "\n" for line in lines]
        self.reads = 0

    def read_byte(self) -> Optional[int]:
        if self.reads >= len(self.lines):
            return None
        line = self.lines[self.reads]
        self.reads += 1
        return first_byte(line)
