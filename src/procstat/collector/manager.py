"""Runs a poller on a background thread and delivers records to sinks."""

from __future__ import annotations

import logging
import threading
from typing import Callable

from .poller import Poller
from .record import Record

logger = logging.getLogger(__name__)


class PollManager:
    """Owns the tick loop of one :class:`Poller`.

    Register sinks with :meth:`add_sink`, then call :meth:`start` /
    :meth:`stop`. Sinks are called in order on the polling thread, so the
    next tick does not start until every sink has accepted the current
    record. :meth:`wait` returns True once the stream has ended, either
    because the duration elapsed, the input ended, or :meth:`stop` was
    called.
    """

    def __init__(self, poller: Poller) -> None:
        self._poller = poller
        self._sinks: list[Callable[[Record], None]] = []
        self._thread: threading.Thread | None = None
        self._stop_event = threading.Event()
        self._done = threading.Event()
        self._emitted = 0

    @property
    def emitted(self) -> int:
        return self._emitted

    def add_sink(self, sink: Callable[[Record], None]) -> None:
        """Register a callback to receive each record."""
        self._sinks.append(sink)

    def _run(self) -> None:
        """Background thread loop."""
        try:
            for record in self._poller.poll(self._stop_event):
                self._emitted += 1
                for sink in self._sinks:
                    try:
                        sink(record)
                    except Exception:
                        logger.exception("Sink failed")
        except Exception:
            logger.exception("Poller for %s failed", self._poller.collector.name)
        finally:
            self._done.set()

    def start(self) -> None:
        """Start polling in the background."""
        if self._thread is not None:
            return
        self._stop_event.clear()
        self._done.clear()
        self._thread = threading.Thread(target=self._run, name="procstat-poller", daemon=True)
        self._thread.start()
        logger.info("PollManager started for %s", self._poller.collector.name)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the record stream ends or *timeout* expires."""
        return self._done.wait(timeout)

    def stop(self) -> None:
        """Stop polling and wait for the thread to finish."""
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout=5)
            self._thread = None
        logger.info("PollManager stopped after %d records", self._emitted)
