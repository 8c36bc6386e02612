"""CPU statistics from /proc/stat."""

from __future__ import annotations

from enum import IntEnum
from functools import partial
from typing import Sequence

from ..config import SystemConfig
from .base import FieldDef, FileCollector, LineDef, Schema

PROC_STAT = "/proc/stat"


class CpuSlot(IntEnum):
    PROCS_FORKS = 0
    PROCS_RUNNING = 1
    PROCS_BLOCKED = 2
    INTR_TOTAL = 3
    CTXT_TOTAL = 4
    CPU_MAX = 5
    CPU_TOTAL = 6
    CPU_USER = 7
    CPU_NICE = 8
    CPU_SYSTEM = 9
    CPU_IDLE = 10
    CPU_IOWAIT = 11
    CPU_IRQ = 12
    CPU_SOFTIRQ = 13
    CPU_STEAL = 14
    CPU_GUEST = 15
    CPU_GUEST_NICE = 16


# Columns of the aggregate "cpu" line, in USER_HZ units.
CPU_COLUMNS = (
    CpuSlot.CPU_USER,
    CpuSlot.CPU_NICE,
    CpuSlot.CPU_SYSTEM,
    CpuSlot.CPU_IDLE,
    CpuSlot.CPU_IOWAIT,
    CpuSlot.CPU_IRQ,
    CpuSlot.CPU_SOFTIRQ,
    CpuSlot.CPU_STEAL,
    CpuSlot.CPU_GUEST,
    CpuSlot.CPU_GUEST_NICE,
)

# guest and guest_nice are already accounted in user and nice
CPU_TOTAL_COLUMNS = CPU_COLUMNS[:8]

CPU_FIELDS = {
    CpuSlot.PROCS_FORKS: FieldDef("procs", "forks", True),
    CpuSlot.PROCS_RUNNING: FieldDef("procs", "running", False),
    CpuSlot.PROCS_BLOCKED: FieldDef("procs", "blocked", False),
    CpuSlot.INTR_TOTAL: FieldDef("intr", "total", True),
    CpuSlot.CTXT_TOTAL: FieldDef("ctxt", "total", True),
    CpuSlot.CPU_MAX: FieldDef("cpu", "max", False),
    CpuSlot.CPU_TOTAL: FieldDef("cpu", "total", True),
    CpuSlot.CPU_USER: FieldDef("cpu", "user", True),
    CpuSlot.CPU_NICE: FieldDef("cpu", "nice", True),
    CpuSlot.CPU_SYSTEM: FieldDef("cpu", "system", True),
    CpuSlot.CPU_IDLE: FieldDef("cpu", "idle", True),
    CpuSlot.CPU_IOWAIT: FieldDef("cpu", "iowait", True),
    CpuSlot.CPU_IRQ: FieldDef("cpu", "irq", True),
    CpuSlot.CPU_SOFTIRQ: FieldDef("cpu", "softirq", True),
    CpuSlot.CPU_STEAL: FieldDef("cpu", "steal", True),
    CpuSlot.CPU_GUEST: FieldDef("cpu", "guest", True),
    CpuSlot.CPU_GUEST_NICE: FieldDef("cpu", "guest_nice", True),
}

CPU_LINES = (
    LineDef("cpu", CPU_COLUMNS),
    LineDef("intr", (CpuSlot.INTR_TOTAL,)),
    LineDef("ctxt", (CpuSlot.CTXT_TOTAL,)),
    LineDef("processes", (CpuSlot.PROCS_FORKS,)),
    LineDef("procs_running", (CpuSlot.PROCS_RUNNING,)),
    LineDef("procs_blocked", (CpuSlot.PROCS_BLOCKED,)),
)


def total_cpu(fields: Sequence[int]) -> int:
    return sum(fields[i] for i in CPU_TOTAL_COLUMNS)


def max_cpu(capacity: int, fields: Sequence[int]) -> int:
    """Ticks per second the machine can spend: clock rate times processors."""
    return capacity


def make_cpu_schema(system: SystemConfig) -> Schema:
    return Schema(
        "cpustat",
        CPU_FIELDS,
        CPU_LINES,
        calculators=(
            (CpuSlot.CPU_MAX, partial(max_cpu, system.clk_tck * system.nprocs)),
            (CpuSlot.CPU_TOTAL, total_cpu),
        ),
        relative_slots=CPU_COLUMNS,
        relative_total=CpuSlot.CPU_TOTAL,
    )


class CpuCollector(FileCollector):
    """Samples process, interrupt, context switch and CPU time counters."""

    default_path = PROC_STAT

    def __init__(self, system: SystemConfig) -> None:
        super().__init__(system)
        self.schema = make_cpu_schema(system)

    @property
    def name(self) -> str:
        return "cpu"
