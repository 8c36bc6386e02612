"""Local file exporter – writes records to JSONL files."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from ..collector.base import Schema
from ..collector.record import Record
from ..config import LocalExporterConfig
from .base import BaseExporter

logger = logging.getLogger(__name__)


def record_to_dicts(record: Record) -> list[dict[str, Any]]:
    """One plain dictionary per vector, values keyed by header text."""
    header = record.schema.header()
    rows = []
    for key, vector in record.vectors():
        row: dict[str, Any] = {"time": record.timestamp, "mode": record.marker}
        if key is not None:
            row[record.schema.key_label] = key
        row["values"] = dict(zip(header, vector))
        rows.append(row)
    return rows


class LocalExporter(BaseExporter):
    """Writes records to JSONL files on disk.

    One file per tool and per UTC day is created inside the configured
    *output_dir*, e.g. ``cpustat-2024-05-01.jsonl``.
    """

    def __init__(self, config: LocalExporterConfig, schema: Schema) -> None:
        self._config = config
        self._schema = schema
        self._output_dir = Path(config.output_dir)
        self._output_dir.mkdir(parents=True, exist_ok=True)
        self._fh = None
        self._current_date: str | None = None
        logger.info("LocalExporter initialized → %s", self._output_dir)

    def _ensure_file(self, ts: float) -> None:
        day = datetime.fromtimestamp(ts, timezone.utc).strftime("%Y-%m-%d")
        if self._current_date != day or self._fh is None:
            if self._fh is not None:
                self._fh.close()
            filepath = self._output_dir / f"{self._schema.name}-{day}.jsonl"
            self._fh = open(filepath, "a", encoding="utf-8")  # noqa: SIM115
            self._current_date = day

    def export(self, record: Record) -> None:
        self._ensure_file(record.timestamp)
        assert self._fh is not None
        for row in record_to_dicts(record):
            self._fh.write(json.dumps(row) + "\n")
        self._fh.flush()

    def shutdown(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None
        logger.info("LocalExporter shut down")
