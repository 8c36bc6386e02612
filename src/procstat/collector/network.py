"""Per-interface network counters from /proc/net/dev."""

from __future__ import annotations

from enum import IntEnum

from .base import FieldDef, FileCollector, Schema

PROC_NET_DEV = "/proc/net/dev"


class NetSlot(IntEnum):
    # Inter-|   Receive                                                |  Transmit
    #  face |bytes    packets errs drop fifo frame compressed multicast|bytes    packets errs drop fifo colls carrier compressed
    RX_BYTES = 0
    RX_PACKETS = 1
    RX_ERRS = 2
    RX_DROPS = 3
    RX_FIFO = 4
    RX_FRAME = 5
    RX_COMPRESSED = 6
    RX_MULTICAST = 7
    TX_BYTES = 8
    TX_PACKETS = 9
    TX_ERRS = 10
    TX_DROPS = 11
    TX_FIFO = 12
    TX_COLLS = 13
    TX_CARRIER = 14
    TX_COMPRESSED = 15


NET_FIELDS = {
    slot: FieldDef(*slot.name.lower().split("_", 1), True)
    for slot in NetSlot
}

NET_SCHEMA = Schema("netstat", NET_FIELDS, key_label="interface")


class NetworkCollector(FileCollector):
    """Collects receive/transmit counters for every interface."""

    default_path = PROC_NET_DEV
    schema = NET_SCHEMA

    @property
    def name(self) -> str:
        return "net"
