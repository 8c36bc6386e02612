"""End-of-run summary table of every field."""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console
from rich.table import Table

from ..collector.base import Schema
from ..collector.record import Record
from .base import BaseExporter


@dataclass
class FieldStats:
    minimum: int
    maximum: int
    last: int
    samples: int = 1

    def add(self, value: int) -> None:
        self.minimum = min(self.minimum, value)
        self.maximum = max(self.maximum, value)
        self.last = value
        self.samples += 1


class SummaryExporter(BaseExporter):
    """Tracks min/max/last per field and prints a table on shutdown.

    The first cumulative record of a delta run is not counted so that the
    statistics only cover one kind of value.
    """

    def __init__(self, schema: Schema, console: Console | None = None) -> None:
        self._schema = schema
        self._console = console or Console(stderr=True)
        self._stats: dict[tuple[str | None, int], FieldStats] = {}
        self._mode: str | None = None
        self._records = 0

    @property
    def stats(self) -> dict[tuple[str | None, int], FieldStats]:
        return self._stats

    def export(self, record: Record) -> None:
        if self._mode is None or (self._mode == "a" and record.marker != "a"):
            # first record, or the switch from the raw baseline to deltas
            self._mode = record.marker
            self._stats.clear()
            self._records = 0
        self._records += 1
        for key, vector in record.vectors():
            for slot, value in enumerate(vector):
                st = self._stats.get((key, slot))
                if st is None:
                    self._stats[(key, slot)] = FieldStats(value, value, value)
                else:
                    st.add(value)

    def render(self) -> Table:
        title = f"{self._schema.name} summary ({self._records} records, mode {self._mode or '-'})"
        table = Table(title=title, show_lines=False)
        if self._schema.keyed:
            table.add_column(self._schema.key_label.capitalize(), style="magenta")
        table.add_column("Field", style="green")
        table.add_column("Min", justify="right", style="cyan")
        table.add_column("Max", justify="right", style="cyan")
        table.add_column("Last", justify="right")

        for (key, slot), st in self._stats.items():
            row = [self._schema.fields[slot].header(), str(st.minimum), str(st.maximum), str(st.last)]
            if self._schema.keyed:
                row.insert(0, key or "")
            table.add_row(*row)
        return table

    def shutdown(self) -> None:
        if not self._stats:
            self._console.print(f"No {self._schema.name} records collected")
            return
        self._console.print(self.render())
