"""CLI interface for procstat."""

from __future__ import annotations

import argparse
import logging
import math
import re
import signal
import sys

from . import __version__
from .collector.base import BaseCollector
from .config import ProcstatConfig, load_config

logger = logging.getLogger(__name__)

_DURATION_UNITS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)")


def parse_duration(text: str) -> float:
    """Parse ``1.5``, ``500ms`` or ``1h2m3s`` into seconds."""
    text = text.strip()
    try:
        value = float(text)
    except ValueError:
        pass
    else:
        if not math.isfinite(value) or value < 0:
            raise argparse.ArgumentTypeError(f"invalid duration: {text!r}")
        return value

    pos = 0
    total = 0.0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            break
        total += float(match.group(1)) * _DURATION_UNITS[match.group(2)]
        pos = match.end()
    if pos == 0 or pos != len(text):
        raise argparse.ArgumentTypeError(f"invalid duration: {text!r}")
    return total


def _build_collector(args: argparse.Namespace, cfg: ProcstatConfig) -> BaseCollector:
    if args.command == "lines":
        from .collector.lines import LineFeed, LinesCollector

        substring = args.substring if args.substring is not None else cfg.lines.substring
        invert = args.invert or cfg.lines.invert
        return LinesCollector(LineFeed.from_binary(sys.stdin.buffer), substring=substring, invert=invert)

    from .getconf import resolve_system_config

    system = resolve_system_config(cfg.source)
    if args.command == "cpu":
        from .collector.cpu import CpuCollector

        return CpuCollector(system)
    if args.command == "net":
        from .collector.network import NetworkCollector

        return NetworkCollector(system)
    from .collector.vmstat import VmstatCollector

    return VmstatCollector(system)


def _cmd_poll(args: argparse.Namespace) -> int:
    """Poll one source and print its records."""
    cfg = load_config(args.config)
    poll = cfg.poll
    if args.interval is not None:
        poll.interval_seconds = args.interval
    if args.duration is not None:
        poll.duration_seconds = args.duration
    if args.cumul:
        poll.cumulative = True
    if getattr(args, "no_rel", False):
        poll.relative = False
    if args.no_time:
        poll.timestamps = False

    from .collector.manager import PollManager
    from .collector.poller import Poller
    from .exporter.text import TextExporter

    collector = _build_collector(args, cfg)
    exporters = [TextExporter(collector.schema, sys.stdout, timestamps=poll.timestamps)]

    if cfg.local_exporter.enabled:
        from .exporter.local import LocalExporter

        exporters.append(LocalExporter(cfg.local_exporter, collector.schema))

    if args.summary:
        from .exporter.summary import SummaryExporter

        exporters.append(SummaryExporter(collector.schema))

    poller = Poller(
        collector,
        interval=poll.interval_seconds,
        duration=poll.duration_seconds,
        cumulative=poll.cumulative,
        relative=poll.relative,
    )
    manager = PollManager(poller)
    for exp in exporters:
        exp.begin()
        manager.add_sink(exp.export)

    stop = False

    def _handle_signal(_sig: int, _frame: object) -> None:
        nonlocal stop
        stop = True

    previous = {sig: signal.signal(sig, _handle_signal) for sig in (signal.SIGINT, signal.SIGTERM)}

    manager.start()
    try:
        while not stop and not manager.wait(0.5):
            pass
        if stop:
            logger.info("Stop requested, shutting down")
    finally:
        manager.stop()
        for exp in exporters:
            exp.shutdown()
        for sig, handler in previous.items():
            signal.signal(sig, handler)
    return 0


def _cmd_version(_args: argparse.Namespace) -> int:
    print(f"procstat {__version__}")
    return 0


def _add_poll_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--interval", type=parse_duration, default=None,
                   help="Poll interval, e.g. 1s or 250ms (default 1s)")
    p.add_argument("--duration", type=parse_duration, default=None,
                   help="Monitoring duration, unlimited if zero (default 0)")
    p.add_argument("--cumul", action="store_true",
                   help="Log cumulative counters instead of deltas")
    p.add_argument("--no-time", action="store_true", help="Omit the timestamp prefix")
    p.add_argument("--summary", action="store_true",
                   help="Print a min/max/last table to stderr at the end")
    p.set_defaults(func=_cmd_poll)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="procstat",
        description="Sample /proc counters or count stream lines at a fixed interval",
    )
    parser.add_argument("--config", "-c", default=None, help="Path to procstat.yaml")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command")

    cpu_p = sub.add_parser("cpu", help="CPU, interrupt and process counters from /proc/stat")
    cpu_p.add_argument("--no-rel", action="store_true",
                       help="Raw CPU time deltas instead of percentages")
    _add_poll_args(cpu_p)

    net_p = sub.add_parser("net", help="Per-interface counters from /proc/net/dev")
    _add_poll_args(net_p)

    vm_p = sub.add_parser("vm", help="vmstat-style counters from /proc/stat")
    _add_poll_args(vm_p)

    lines_p = sub.add_parser("lines", help="Count lines read from stdin")
    lines_p.add_argument("--substring", default=None,
                         help="Count only lines containing this substring")
    lines_p.add_argument("--invert", action="store_true",
                         help="Count only lines not containing the substring")
    _add_poll_args(lines_p)

    ver_p = sub.add_parser("version", help="Print version")
    ver_p.set_defaults(func=_cmd_version)
    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point for the procstat CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if not hasattr(args, "func"):
        parser.print_help()
        sys.exit(1)

    sys.exit(args.func(args))


if __name__ == "__main__":
    main()
