"""Snapshot parser: fills a record from the lines of one source read."""

from __future__ import annotations

import logging
from typing import Iterable

from ..errors import MalformedField
from .base import LineDef, Schema
from .record import UINT_MAX, Record

logger = logging.getLogger(__name__)


def parse_uint(token: str, line: str = "") -> int:
    """Parse a base-10 unsigned 64-bit integer, raising MalformedField."""
    if not (token.isascii() and token.isdigit()):
        raise MalformedField(token, line)
    value = int(token)
    if value > UINT_MAX:
        raise MalformedField(token, line)
    return value


def _fill(ld: LineDef, tokens: list[str], line: str, vector: list[int]) -> None:
    for slot, token in zip(ld.slots, tokens):
        vector[slot] = parse_uint(token, line)
    if len(tokens) < len(ld.slots):
        logger.debug(
            "Short %r line: expected %d values, got %d",
            ld.prefix or "entity", len(ld.slots), len(tokens),
        )


def _split_key(first: str, rest: list[str], separator: str) -> tuple[str, list[str]] | None:
    if first.endswith(separator):
        return first[: -len(separator)], rest
    key, found, glued = first.partition(separator)
    if found and glued:
        # old kernels print "eth0:12345" when the counter is wide
        return key, [glued, *rest]
    return None


def parse_snapshot(schema: Schema, lines: Iterable[str], record: Record) -> Record:
    """Populate *record* from *lines*, then run the schema calculators.

    *record* is expected to be reset. Unrecognized lines are skipped. A
    malformed numeric token raises :class:`MalformedField` and leaves the
    record partially filled.
    """
    for line in lines:
        tokens = line.split()
        if not tokens:
            continue
        if schema.keyed:
            split = _split_key(tokens[0], tokens[1:], schema.key_separator)
            if split is None:
                continue
            key, values = split
            _fill(schema.entity_line, values, line, record.entity(key))
        else:
            ld = schema.line_def(tokens[0])
            if ld is None:
                continue
            _fill(ld, tokens[1:], line, record.values)

    for _key, vector in record.vectors():
        schema.calculate(vector)
    return record
