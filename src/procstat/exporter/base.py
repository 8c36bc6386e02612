"""Base interface for record exporters."""

from __future__ import annotations

import abc

from ..collector.record import Record


class BaseExporter(abc.ABC):
    """Abstract base for exporters that receive sampled records."""

    def begin(self) -> None:
        """Called once before the first record."""

    @abc.abstractmethod
    def export(self, record: Record) -> None:
        """Export one record."""

    @abc.abstractmethod
    def shutdown(self) -> None:
        """Flush and release resources."""
