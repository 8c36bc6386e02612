"""Host configuration lookup (clock tick rate, online processors)."""

from __future__ import annotations

import logging
import subprocess

import psutil

from .config import SourceConfig, SystemConfig

logger = logging.getLogger(__name__)

DEFAULT_CLK_TCK = 100
DEFAULT_NPROCS = 1


def getconf(name: str, command: str = "getconf") -> int:
    """Run ``getconf NAME`` and parse its output as an unsigned integer.

    Raises ``OSError``, ``subprocess.CalledProcessError`` or ``ValueError``.
    """
    out = subprocess.run(
        [command, name],
        capture_output=True,
        text=True,
        check=True,
        timeout=5,
    ).stdout
    value = int(out.strip(" \t\n"))
    if value < 0:
        raise ValueError(f"negative value for {name}: {value}")
    return value


def get_clk_tck(command: str = "getconf") -> int:
    return getconf("CLK_TCK", command)


def get_nprocs(command: str = "getconf") -> int:
    """Number of online processors, from psutil or ``_NPROCESSORS_ONLN``."""
    count = psutil.cpu_count(logical=True)
    if count:
        return count
    return getconf("_NPROCESSORS_ONLN", command)


def resolve_system_config(source: SourceConfig | None = None) -> SystemConfig:
    """Query the host once. Lookup failures fall back to defaults with a warning."""
    source = source or SourceConfig()

    try:
        clk_tck = get_clk_tck(source.getconf_cmd)
    except (OSError, subprocess.SubprocessError, ValueError) as exc:
        logger.warning(
            "Error getting CLK_TCK from system conf, using default value (%d): %s",
            DEFAULT_CLK_TCK, exc,
        )
        clk_tck = DEFAULT_CLK_TCK

    try:
        nprocs = get_nprocs(source.getconf_cmd)
    except (OSError, subprocess.SubprocessError, ValueError) as exc:
        logger.warning(
            "Error getting _NPROCESSORS_ONLN from system conf, using default value (%d): %s",
            DEFAULT_NPROCS, exc,
        )
        nprocs = DEFAULT_NPROCS

    return SystemConfig(clk_tck=clk_tck, nprocs=nprocs, fs_root=source.fs_root)
