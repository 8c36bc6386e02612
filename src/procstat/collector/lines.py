"""Line counting over a text stream."""

from __future__ import annotations

import io
import logging
import queue
import threading
from enum import IntEnum
from typing import BinaryIO, TextIO

from ..errors import EndOfInput
from .base import BaseCollector, FieldDef, Schema
from .record import UINT_MAX, Record

logger = logging.getLogger(__name__)


class LinesSlot(IntEnum):
    COUNT = 0


LINES_SCHEMA = Schema("linescount", {LinesSlot.COUNT: FieldDef("lines", "count", True)})

_EOF = None


class LineFeed:
    """Reads a text stream on a daemon thread.

    The reader only queues raw lines; :meth:`drain` takes whatever has
    arrived so far without blocking, so a quiet stream never stalls a
    tick.
    """

    def __init__(self, stream: TextIO) -> None:
        self._stream = stream
        self._queue: queue.SimpleQueue[str | None] = queue.SimpleQueue()
        self._closed = threading.Event()
        self._thread = threading.Thread(target=self._read, name="procstat-linefeed", daemon=True)
        self._thread.start()

    @classmethod
    def from_binary(cls, buffer: BinaryIO) -> LineFeed:
        """Decode a byte stream as UTF-8, replacing invalid bytes."""
        return cls(io.TextIOWrapper(buffer, encoding="utf-8", errors="replace"))

    def _read(self) -> None:
        try:
            for line in self._stream:
                self._queue.put(line.rstrip("\r\n"))
        except (OSError, ValueError) as exc:
            logger.warning("Input stream failed, treating as end of input: %s", exc)
        finally:
            self._queue.put(_EOF)
            self._closed.set()

    def drain(self) -> tuple[list[str], bool]:
        """Return ``(lines, eof)`` for everything queued since the last call."""
        lines: list[str] = []
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return lines, False
            if item is _EOF:
                return lines, True
            lines.append(item)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the stream has been read to its end."""
        return self._closed.wait(timeout)


class LinesCollector(BaseCollector):
    """Counts the lines of a stream that pass a substring filter.

    With an empty *substring* every line counts. Otherwise a line counts
    when it contains the substring, or when it does not and *invert* is
    set. The count is an accumulator since the collector was created.
    """

    schema = LINES_SCHEMA

    def __init__(self, feed: LineFeed, substring: str = "", invert: bool = False) -> None:
        self._feed = feed
        self._substring = substring
        self._invert = invert
        self._count = 0
        self._exhausted = False

    @property
    def name(self) -> str:
        return "lines"

    def matches(self, line: str) -> bool:
        if not self._substring:
            return True
        return (self._substring in line) != self._invert

    def sample(self, record: Record) -> None:
        if self._exhausted:
            raise EndOfInput("input stream closed")
        lines, eof = self._feed.drain()
        for line in lines:
            if self.matches(line):
                self._count = (self._count + 1) & UINT_MAX
        self._exhausted = eof
        record.values[LinesSlot.COUNT] = self._count
