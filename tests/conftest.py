"""Shared fixtures: a fake clock and sample /proc contents."""

from __future__ import annotations

import pytest

PROC_STAT_1 = """\
cpu  100 0 50 850 0 0 0 0 0 0
cpu0 50 0 25 425 0 0 0 0 0 0
cpu1 50 0 25 425 0 0 0 0 0 0
intr 12345 10 0 3
ctxt 6789
btime 1700000000
processes 4242
procs_running 3
procs_blocked 1
softirq 99 1 2 3
"""

PROC_STAT_2 = """\
cpu  200 0 60 900 0 0 0 0 0 0
cpu0 100 0 30 450 0 0 0 0 0 0
cpu1 100 0 30 450 0 0 0 0 0 0
intr 12400 12 0 3
ctxt 6800
btime 1700000000
processes 4250
procs_running 2
procs_blocked 0
softirq 120 1 2 3
"""

NET_DEV_1 = """\
Inter-|   Receive                                                |  Transmit
 face |bytes    packets errs drop fifo frame compressed multicast|bytes    packets errs drop fifo colls carrier compressed
    lo:     500       5    0    0    0     0          0         0      500       5    0    0    0     0       0          0
  eth0:    1000      10    0    0    0     0          0         0     2000      20    0    0    0     0       0          0
 wlan0:     300       3    0    0    0     0          0         0      400       4    0    0    0     0       0          0
"""

NET_DEV_2 = """\
Inter-|   Receive                                                |  Transmit
 face |bytes    packets errs drop fifo frame compressed multicast|bytes    packets errs drop fifo colls carrier compressed
    lo:     500       5    0    0    0     0          0         0      500       5    0    0    0     0       0          0
  eth0:    1500      14    0    0    0     0          0         0     2600      26    0    0    0     0       0          0
docker0:     70       1    0    0    0     0          0         0       80       1    0    0    0     0       0          0
"""


class FakeClock:
    """Monotonic clock whose sleep advances time instantly."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def time(self) -> float:
        return 1_700_000_000.0 + self.now


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fs_root(tmp_path):
    """A fake filesystem root with /proc/stat and /proc/net/dev."""
    (tmp_path / "proc" / "net").mkdir(parents=True)
    (tmp_path / "proc" / "stat").write_text(PROC_STAT_1)
    (tmp_path / "proc" / "net" / "dev").write_text(NET_DEV_1)
    return tmp_path
