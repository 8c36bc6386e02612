"""Tests for the command line interface."""

import argparse
import io
import sys

import pytest

from procstat import __version__
from procstat.cli import build_parser, main, parse_duration


class TestParseDuration:
    @pytest.mark.parametrize(
        "text, seconds",
        [
            ("1", 1.0),
            ("1.5", 1.5),
            ("0", 0.0),
            ("500ms", 0.5),
            ("2s", 2.0),
            ("1m30s", 90.0),
            ("2h", 7200.0),
            ("1h2m3s", 3723.0),
            ("1.5m", 90.0),
        ],
    )
    def test_valid(self, text, seconds):
        assert parse_duration(text) == pytest.approx(seconds)

    @pytest.mark.parametrize("text", ["", "abc", "5x", "1m30", "-1", "s", "nan", "inf", "-inf"])
    def test_invalid(self, text):
        with pytest.raises(argparse.ArgumentTypeError):
            parse_duration(text)


def test_parser_subcommands():
    parser = build_parser()
    args = parser.parse_args(["cpu", "--interval", "250ms", "--no-rel", "--cumul"])
    assert args.command == "cpu"
    assert args.interval == 0.25
    assert args.no_rel is True
    assert args.cumul is True
    args = parser.parse_args(["lines", "--substring", "ERROR", "--invert"])
    assert args.substring == "ERROR"
    assert args.invert is True


def test_version(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main(["version"])
    assert exc_info.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_no_command_prints_help(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main([])
    assert exc_info.value.code == 1


def test_cpu_cumulative_run(fs_root, monkeypatch, capsys):
    monkeypatch.setenv("FS_ROOT", str(fs_root))
    monkeypatch.setenv("GETCONF_CMD", "/nonexistent/getconf")
    with pytest.raises(SystemExit) as exc_info:
        main(["cpu", "--interval", "20ms", "--duration", "50ms", "--cumul", "--no-time"])
    assert exc_info.value.code == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith("h procs:forks/a procs:running/i")
    records = lines[1:]
    assert len(records) >= 1
    # same file contents every tick give identical lines
    assert len(set(records)) == 1
    assert records[0].startswith("a 4242 3 1 12345 6789 ")


def test_net_run_with_timestamps(fs_root, monkeypatch, capsys):
    monkeypatch.setenv("FS_ROOT", str(fs_root))
    monkeypatch.setenv("GETCONF_CMD", "/nonexistent/getconf")
    with pytest.raises(SystemExit):
        main(["net", "--interval", "10ms", "--duration", "10ms"])
    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith("time interface h rx:bytes/a")
    first = lines[1].split(" ")
    assert first[1:3] == ["lo", "a"]


def test_lines_run_until_end_of_input(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.TextIOWrapper(io.BytesIO(b"a ERROR\nb\nERROR c\nd\n"), encoding="utf-8"))
    with pytest.raises(SystemExit) as exc_info:
        main(["lines", "--substring", "ERROR", "--no-time", "--interval", "10ms", "--summary"])
    assert exc_info.value.code == 0
    captured = capsys.readouterr()
    lines = captured.out.splitlines()
    assert lines[0] == "h lines:count/a"
    records = [line.split(" ") for line in lines[1:]]
    assert records[0][0] == "a"
    assert all(marker == "d" for marker, _ in records[1:])
    # baseline plus deltas add up to the final count
    assert sum(int(value) for _, value in records) == 2
    assert "linescount summary" in captured.err
