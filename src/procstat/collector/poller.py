"""Interval-correcting poll scheduler."""

from __future__ import annotations

import logging
import math
import threading
import time
from typing import Callable, Iterator

from ..errors import EndOfInput, MalformedField, SourceUnavailable
from .base import BaseCollector
from .record import Record, apply_relative, diff_records

logger = logging.getLogger(__name__)


class Poller:
    """Samples a collector every *interval* seconds for *duration* seconds.

    :meth:`poll` yields one record per successful tick. The first record
    is always the raw cumulative sample; later ones are deltas (or
    percent deltas when *relative* is set and the schema supports it)
    unless *cumulative* is set. A *duration* of 0 polls until stopped.

    Tick targets are computed from the previous target, not from the end
    of the previous sample, so sampling latency does not accumulate.
    *clock*, *sleep* and *wall_clock* can be replaced for testing.
    """

    def __init__(
        self,
        collector: BaseCollector,
        interval: float = 1.0,
        duration: float = 0.0,
        cumulative: bool = False,
        relative: bool = False,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], object] = time.sleep,
        wall_clock: Callable[[], float] = time.time,
    ) -> None:
        if not (math.isfinite(interval) and math.isfinite(duration)) or interval < 0 or duration < 0:
            raise ValueError("interval and duration must be finite and not negative")
        self._collector = collector
        self._interval = interval
        self._duration = duration
        self._cumulative = cumulative
        schema = collector.schema
        self._relative = relative and not cumulative and bool(schema.relative_slots)
        self._clock = clock
        self._sleep = sleep
        self._wall_clock = wall_clock

        # current/previous swap roles each tick; _delta is reused for diffs
        self._buffers = (Record(schema), Record(schema))
        self._current = 0
        self._delta = Record(schema, cumulative=False, relative=self._relative)

    @property
    def collector(self) -> BaseCollector:
        return self._collector

    def _sample(self) -> Record:
        record = self._buffers[self._current]
        record.reset()
        record.timestamp = self._wall_clock()
        self._collector.sample(record)
        return record

    def poll(self, stop: threading.Event | None = None) -> Iterator[Record]:
        """Run the tick loop, yielding a copy of each finished record.

        Setting *stop* ends the loop at the next check and interrupts the
        wait between ticks.
        """
        sleep = stop.wait if stop is not None else self._sleep
        start = self._clock()
        have_baseline = False
        last_target = start
        tick = 0
        logger.debug(
            "Polling %s every %.3fs (duration=%s)",
            self._collector.name, self._interval, self._duration or "unlimited",
        )

        while not self._duration or self._clock() - start <= self._duration:
            if stop is not None and stop.is_set():
                break
            if tick > 0:
                target = last_target + self._interval
                to_wait = target - self._clock()
                if to_wait > 0:
                    sleep(to_wait)
                    if stop is not None and stop.is_set():
                        break
            else:
                target = self._clock()
            last_target = target
            tick += 1

            try:
                current = self._sample()
            except EndOfInput:
                logger.info("End of input for %s after %d ticks", self._collector.name, tick - 1)
                break
            except (SourceUnavailable, MalformedField) as exc:
                logger.warning("Error parsing record, ignoring: %s", exc)
                continue

            if self._cumulative or not have_baseline:
                yield current.copy()
            else:
                previous = self._buffers[1 - self._current]
                diff_records(current, previous, self._delta)
                if self._relative:
                    apply_relative(self._delta)
                yield self._delta.copy()

            if not self._cumulative:
                have_baseline = True
                self._current = 1 - self._current
