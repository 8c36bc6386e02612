"""Schema registry and base interface for sampled sources.

A :class:`Schema` declares every field a tool emits (category, name and
whether it is an accumulator) and every input line prefix with the slots
it fills. Slots are ``IntEnum`` members so that field positions are
checked names rather than bare integers. Header text and line dispatch
are both derived from the schema; no other component holds field
knowledge.
"""

from __future__ import annotations

import abc
import logging
from dataclasses import dataclass
from enum import IntEnum
from typing import TYPE_CHECKING, Callable, Mapping, Sequence

from ..errors import SourceUnavailable

if TYPE_CHECKING:
    from ..config import SystemConfig
    from .record import Record

logger = logging.getLogger(__name__)

Calculator = Callable[[Sequence[int]], int]


@dataclass(frozen=True)
class FieldDef:
    """A single emitted field."""

    category: str
    name: str
    is_accumulator: bool

    def header(self) -> str:
        suffix = "a" if self.is_accumulator else "i"
        return f"{self.category}:{self.name}/{suffix}"

    def __str__(self) -> str:
        return self.header()


@dataclass(frozen=True)
class LineDef:
    """An input line prefix and the slots its values populate, in order."""

    prefix: str
    slots: tuple[int, ...]


class Schema:
    """Field and line declarations for one tool.

    *fields* maps every member of a slot enum to its :class:`FieldDef`.
    *calculators* are ``(slot, func)`` pairs run in order after raw
    parsing; each func receives the whole vector. *relative_slots* and
    *relative_total* describe the percentage transform. Multi-entity
    sources set *key_label*; their lines are keyed by the first token and
    fill every slot in declaration order.
    """

    def __init__(
        self,
        name: str,
        fields: Mapping[IntEnum, FieldDef],
        line_defs: Sequence[LineDef] = (),
        calculators: Sequence[tuple[IntEnum, Calculator]] = (),
        relative_slots: Sequence[IntEnum] = (),
        relative_total: IntEnum | None = None,
        key_label: str | None = None,
        key_separator: str = ":",
    ) -> None:
        slots = sorted(fields)
        if [int(s) for s in slots] != list(range(len(slots))):
            raise ValueError(f"{name}: field slots must be contiguous from 0")
        self.name = name
        self.fields: tuple[FieldDef, ...] = tuple(fields[s] for s in slots)
        self.calculators: tuple[tuple[int, Calculator], ...] = tuple(
            (int(slot), func) for slot, func in calculators
        )
        self.relative_slots: tuple[int, ...] = tuple(int(s) for s in relative_slots)
        self.relative_total = None if relative_total is None else int(relative_total)
        if self.relative_slots and self.relative_total is None:
            raise ValueError(f"{name}: relative slots need a total slot")
        self.key_label = key_label
        self.key_separator = key_separator

        self._line_defs: dict[str, LineDef] = {}
        filled: set[int] = set()
        for ld in line_defs:
            if ld.prefix in self._line_defs:
                raise ValueError(f"{name}: duplicate line prefix {ld.prefix!r}")
            for slot in ld.slots:
                if slot in filled:
                    raise ValueError(f"{name}: slot {slot} filled by more than one line")
                if not 0 <= slot < len(self.fields):
                    raise ValueError(f"{name}: slot {slot} out of range")
                filled.add(slot)
            self._line_defs[ld.prefix] = ld

        # every entity line fills the full vector
        self.entity_line = (
            LineDef("", tuple(range(len(self.fields)))) if key_label is not None else None
        )

    def __len__(self) -> int:
        return len(self.fields)

    def __repr__(self) -> str:
        return f"Schema({self.name!r}, fields={len(self.fields)})"

    @property
    def keyed(self) -> bool:
        return self.key_label is not None

    def line_def(self, prefix: str) -> LineDef | None:
        """Exact-match lookup of a line prefix."""
        return self._line_defs.get(prefix)

    @property
    def line_defs(self) -> tuple[LineDef, ...]:
        return tuple(self._line_defs.values())

    def header(self) -> list[str]:
        """Header tokens, excluding the leading marker."""
        return [fd.header() for fd in self.fields]

    def calculate(self, vector: list[int]) -> None:
        """Overwrite derived slots in place. Call after all raw slots are filled."""
        for slot, func in self.calculators:
            vector[slot] = func(vector)


class BaseCollector(abc.ABC):
    """Abstract base class for sampled sources."""

    schema: Schema

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Collector name used in configuration and output."""

    @abc.abstractmethod
    def sample(self, record: Record) -> None:
        """Fill a freshly reset *record* from one read of the source."""


class FileCollector(BaseCollector):
    """Collector backed by a pseudo-file that is reopened on every tick."""

    default_path: str = ""

    def __init__(self, system: SystemConfig) -> None:
        self._system = system
        self.path = system.source_path(self.default_path)

    def sample(self, record: Record) -> None:
        from .parser import parse_snapshot

        try:
            with open(self.path, encoding="utf-8", errors="replace") as fh:
                lines = fh.readlines()
        except OSError as exc:
            raise SourceUnavailable(self.path, exc) from exc
        parse_snapshot(self.schema, lines, record)
