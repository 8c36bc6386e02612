"""Tests for host configuration lookup."""

import logging
import subprocess

import pytest

from procstat import getconf
from procstat.config import SourceConfig


class _Completed:
    def __init__(self, stdout):
        self.stdout = stdout


def test_getconf_parses_output(monkeypatch):
    calls = []

    def _run(cmd, **kwargs):
        calls.append(cmd)
        return _Completed("250\n")

    monkeypatch.setattr(getconf.subprocess, "run", _run)
    assert getconf.get_clk_tck("/usr/bin/getconf") == 250
    assert calls == [["/usr/bin/getconf", "CLK_TCK"]]


def test_getconf_rejects_garbage(monkeypatch):
    monkeypatch.setattr(getconf.subprocess, "run", lambda cmd, **kw: _Completed("undefined\n"))
    with pytest.raises(ValueError):
        getconf.getconf("CLK_TCK")


def test_resolve_system_config(monkeypatch):
    monkeypatch.setattr(getconf.subprocess, "run", lambda cmd, **kw: _Completed("128\n"))
    monkeypatch.setattr(getconf.psutil, "cpu_count", lambda logical=True: 8)
    system = getconf.resolve_system_config(SourceConfig(fs_root="/sandbox"))
    assert system.clk_tck == 128
    assert system.nprocs == 8
    assert system.fs_root == "/sandbox"


def test_nprocs_falls_back_to_getconf(monkeypatch):
    monkeypatch.setattr(getconf.subprocess, "run", lambda cmd, **kw: _Completed("3\n"))
    monkeypatch.setattr(getconf.psutil, "cpu_count", lambda logical=True: None)
    assert getconf.get_nprocs() == 3


def test_lookup_failures_use_defaults(monkeypatch, caplog):
    def _run(cmd, **kwargs):
        raise subprocess.CalledProcessError(1, cmd)

    monkeypatch.setattr(getconf.subprocess, "run", _run)
    monkeypatch.setattr(getconf.psutil, "cpu_count", lambda logical=True: None)
    with caplog.at_level(logging.WARNING, logger="procstat.getconf"):
        system = getconf.resolve_system_config(SourceConfig(getconf_cmd="/nonexistent/getconf"))
    assert system.clk_tck == getconf.DEFAULT_CLK_TCK == 100
    assert system.nprocs == getconf.DEFAULT_NPROCS == 1
    assert "CLK_TCK" in caplog.text
    assert "_NPROCESSORS_ONLN" in caplog.text


def test_missing_command_is_not_fatal(monkeypatch):
    monkeypatch.setattr(getconf.psutil, "cpu_count", lambda logical=True: 2)
    system = getconf.resolve_system_config(SourceConfig(getconf_cmd="/nonexistent/getconf"))
    assert system.clk_tck == 100
    assert system.nprocs == 2
