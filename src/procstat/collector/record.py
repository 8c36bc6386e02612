"""Sampled records, and the diff and relative transforms between them."""

from __future__ import annotations

from typing import Iterator

from .base import Schema

UINT_BITS = 64
UINT_MAX = (1 << UINT_BITS) - 1


class Record:
    """Field values captured at one tick.

    Flat sources keep one vector in :attr:`values`. Multi-entity sources
    keep one vector per key in :attr:`entities`, in the order keys were
    first seen during the tick.
    """

    def __init__(self, schema: Schema, cumulative: bool = True, relative: bool = False) -> None:
        self.schema = schema
        self.timestamp = 0.0
        self.cumulative = cumulative
        self.relative = relative
        self.values: list[int] = [] if schema.keyed else [0] * len(schema)
        self.entities: dict[str, list[int]] = {}

    @property
    def marker(self) -> str:
        if self.cumulative:
            return "a"
        return "p" if self.relative else "d"

    def reset(self) -> None:
        """Zero the flat vector and drop every entity."""
        for i in range(len(self.values)):
            self.values[i] = 0
        self.entities.clear()

    def entity(self, key: str) -> list[int]:
        """Return the vector for *key*, creating a zeroed one if unseen."""
        vector = self.entities.get(key)
        if vector is None:
            vector = [0] * len(self.schema)
            self.entities[key] = vector
        return vector

    def vectors(self) -> Iterator[tuple[str | None, list[int]]]:
        """Yield ``(key, vector)`` pairs; the key is None for flat sources."""
        if self.schema.keyed:
            yield from self.entities.items()
        else:
            yield None, self.values

    def get(self, slot: int, key: str | None = None) -> int:
        vector = self.values if key is None else self.entities[key]
        return vector[slot]

    def copy(self) -> Record:
        other = Record(self.schema, self.cumulative, self.relative)
        other.timestamp = self.timestamp
        other.values = list(self.values)
        other.entities = {k: list(v) for k, v in self.entities.items()}
        return other

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return (
            self.schema is other.schema
            and self.cumulative == other.cumulative
            and self.relative == other.relative
            and self.values == other.values
            and self.entities == other.entities
        )

    def __repr__(self) -> str:
        body = self.entities if self.schema.keyed else self.values
        return f"Record({self.schema.name}, {self.marker}, {body})"


def _diff_vector(schema: Schema, current: list[int], previous: list[int] | None, out: list[int]) -> None:
    for i, fd in enumerate(schema.fields):
        if fd.is_accumulator:
            prev = previous[i] if previous is not None else 0
            # a decreasing counter wraps like an unsigned 64-bit subtraction
            out[i] = (current[i] - prev) & UINT_MAX
        else:
            out[i] = current[i]


def diff_records(current: Record, previous: Record, out: Record) -> Record:
    """Write ``current - previous`` into *out* and return it.

    Accumulators are differenced, instantaneous fields pass through.
    For multi-entity records the key set of *out* is the key set of
    *current*; keys missing from *previous* diff against zero.
    """
    schema = current.schema
    out.timestamp = current.timestamp
    out.cumulative = False
    if schema.keyed:
        out.entities.clear()
        for key, vector in current.entities.items():
            _diff_vector(schema, vector, previous.entities.get(key), out.entity(key))
    else:
        _diff_vector(schema, current.values, previous.values, out.values)
    return out


def apply_relative(delta: Record) -> Record:
    """Convert a delta's relative slots to integer percentages of its total.

    Slots are left raw when the total delta is zero.
    """
    schema = delta.schema
    if delta.cumulative:
        raise ValueError("relative transform needs a delta record")
    if not schema.relative_slots:
        return delta
    for _key, vector in delta.vectors():
        total = vector[schema.relative_total]
        if total == 0:
            continue
        for slot in schema.relative_slots:
            vector[slot] = vector[slot] * 100 // total
    delta.relative = True
    return delta
