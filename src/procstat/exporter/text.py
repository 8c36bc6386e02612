"""Canonical text serialization of headers and records.

Header::

    [time] [interface] h cpu:user/a cpu:idle/a ...

Records, one line per tick (one per entity for keyed sources)::

    [time] [eth0] d 500 3 ...

The marker is ``a`` for cumulative values, ``d`` for deltas and ``p`` for
percent deltas.
"""

from __future__ import annotations

import sys
from datetime import datetime
from typing import TextIO

from ..collector.base import Schema
from ..collector.record import Record
from .base import BaseExporter

SEPARATOR = " "
HEADER_MARKER = "h"


def render_header(schema: Schema) -> str:
    tokens = [HEADER_MARKER, *schema.header()]
    if schema.keyed:
        tokens.insert(0, schema.key_label)
    return SEPARATOR.join(tokens)


def render_record(record: Record) -> list[str]:
    """Render *record* as text lines, without a trailing newline."""
    lines = []
    for key, vector in record.vectors():
        tokens = [record.marker, *map(str, vector)]
        if key is not None:
            tokens.insert(0, key)
        lines.append(SEPARATOR.join(tokens))
    return lines


def format_timestamp(ts: float) -> str:
    """Local time with millisecond precision and numeric offset."""
    dt = datetime.fromtimestamp(ts).astimezone()
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}" + dt.strftime("%z")


class TextExporter(BaseExporter):
    """Writes the header and records to a text stream, stdout by default."""

    def __init__(self, schema: Schema, stream: TextIO | None = None, timestamps: bool = True) -> None:
        self._schema = schema
        self._stream = stream if stream is not None else sys.stdout
        self._timestamps = timestamps

    def begin(self) -> None:
        prefix = "time" + SEPARATOR if self._timestamps else ""
        self._stream.write(prefix + render_header(self._schema) + "\n")
        self._stream.flush()

    def export(self, record: Record) -> None:
        prefix = format_timestamp(record.timestamp) + SEPARATOR if self._timestamps else ""
        for line in render_record(record):
            self._stream.write(prefix + line + "\n")
        self._stream.flush()

    def shutdown(self) -> None:
        self._stream.flush()
