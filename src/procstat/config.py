"""Configuration loading and validation for procstat."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml


@dataclass
class PollConfig:
    """Poll scheduler settings."""

    interval_seconds: float = 1.0
    duration_seconds: float = 0.0  # 0 means unlimited
    cumulative: bool = False
    relative: bool = True
    timestamps: bool = True


@dataclass
class SourceConfig:
    """Where sources are read from and how the host is queried."""

    fs_root: str = ""
    getconf_cmd: str = "getconf"


@dataclass
class LinesConfig:
    """Line counting filter."""

    substring: str = ""
    invert: bool = False


@dataclass
class LocalExporterConfig:
    """Local file exporter settings."""

    enabled: bool = False
    output_dir: str = "./procstat_data"


@dataclass
class ProcstatConfig:
    """Top-level procstat configuration."""

    poll: PollConfig = field(default_factory=PollConfig)
    source: SourceConfig = field(default_factory=SourceConfig)
    lines: LinesConfig = field(default_factory=LinesConfig)
    local_exporter: LocalExporterConfig = field(default_factory=LocalExporterConfig)


@dataclass(frozen=True)
class SystemConfig:
    """Host facts resolved once at startup and passed to collectors.

    See :func:`procstat.getconf.resolve_system_config`.
    """

    clk_tck: int = 100
    nprocs: int = 1
    fs_root: str = ""

    def source_path(self, default_path: str) -> str:
        """Return *default_path* relocated under ``fs_root`` when one is set."""
        if not self.fs_root:
            return default_path
        return os.path.join(self.fs_root, default_path.lstrip("/"))


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides."""
    env_map = {
        "PROCSTAT_INTERVAL": ("poll", "interval_seconds"),
        "PROCSTAT_DURATION": ("poll", "duration_seconds"),
        "PROCSTAT_LOCAL_OUTPUT_DIR": ("local_exporter", "output_dir"),
        "FS_ROOT": ("source", "fs_root"),
        "GETCONF_CMD": ("source", "getconf_cmd"),
    }
    for env_key, path in env_map.items():
        value = os.environ.get(env_key)
        if value:
            obj = data
            for part in path[:-1]:
                obj = obj.setdefault(part, {})
            final_key = path[-1]
            if final_key.endswith("_seconds"):
                obj[final_key] = float(value)
            else:
                obj[final_key] = value
    return data


def _section(cls: type, data: dict[str, Any]) -> Any:
    return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


def _dict_to_config(data: dict[str, Any]) -> ProcstatConfig:
    """Convert a raw dictionary to a ProcstatConfig dataclass."""
    return ProcstatConfig(
        poll=_section(PollConfig, data.get("poll", {})),
        source=_section(SourceConfig, data.get("source", {})),
        lines=_section(LinesConfig, data.get("lines", {})),
        local_exporter=_section(LocalExporterConfig, data.get("local_exporter", {})),
    )


def load_config(path: str | Path | None = None) -> ProcstatConfig:
    """Load configuration from a YAML file with environment overrides.

    Looks for ``procstat.yaml`` in the current directory if *path* is None.
    A missing file yields the defaults.
    """
    data: dict[str, Any] = {}
    if path is None:
        path = Path("procstat.yaml")
    else:
        path = Path(path)

    if path.exists():
        with open(path, encoding="utf-8") as fh:
            loaded = yaml.safe_load(fh)
            if isinstance(loaded, dict):
                data = loaded

    data = _apply_env_overrides(data)
    return _dict_to_config(data)
