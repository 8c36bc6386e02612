"""Process and CPU counters from /proc/stat, in vmstat column order."""

from __future__ import annotations

from enum import IntEnum
from typing import Sequence

from ..config import SystemConfig
from .base import FieldDef, FileCollector, LineDef, Schema
from .cpu import PROC_STAT


class VmSlot(IntEnum):
    PROCS_FORKS = 0
    PROCS_RUNNING = 1
    PROCS_BLOCKED = 2
    INTR_TOTAL = 3
    CTXT_TOTAL = 4
    CPU_TOTAL = 5
    CPU_USER = 6
    CPU_NICE = 7
    CPU_SYSTEM = 8
    CPU_IDLE = 9
    CPU_IOWAIT = 10
    CPU_IRQ = 11
    CPU_SOFTIRQ = 12
    CPU_STEAL = 13
    CPU_GUEST = 14
    CPU_GUEST_NICE = 15


VM_CPU_COLUMNS = tuple(VmSlot)[VmSlot.CPU_USER:]

VM_FIELDS = {
    VmSlot.PROCS_FORKS: FieldDef("procs", "forks", True),
    VmSlot.PROCS_RUNNING: FieldDef("procs", "running", False),
    VmSlot.PROCS_BLOCKED: FieldDef("procs", "blocked", False),
    VmSlot.INTR_TOTAL: FieldDef("intr", "total", True),
    VmSlot.CTXT_TOTAL: FieldDef("ctxt", "total", True),
    VmSlot.CPU_TOTAL: FieldDef("cpu", "total", True),
    **{
        slot: FieldDef("cpu", slot.name[len("CPU_"):].lower(), True)
        for slot in VM_CPU_COLUMNS
    },
}

VM_LINES = (
    LineDef("cpu", VM_CPU_COLUMNS),
    LineDef("intr", (VmSlot.INTR_TOTAL,)),
    LineDef("ctxt", (VmSlot.CTXT_TOTAL,)),
    LineDef("processes", (VmSlot.PROCS_FORKS,)),
    LineDef("procs_running", (VmSlot.PROCS_RUNNING,)),
    LineDef("procs_blocked", (VmSlot.PROCS_BLOCKED,)),
)


def sum_cpu_columns(fields: Sequence[int]) -> int:
    # plain sum of every column, guest time included
    return sum(fields[i] for i in VM_CPU_COLUMNS)


VM_SCHEMA = Schema(
    "vmstat",
    VM_FIELDS,
    VM_LINES,
    calculators=((VmSlot.CPU_TOTAL, sum_cpu_columns),),
)


class VmstatCollector(FileCollector):
    default_path = PROC_STAT
    schema = VM_SCHEMA

    @property
    def name(self) -> str:
        return "vm"
