"""Exceptions raised while sampling a source."""

from __future__ import annotations


class ProcstatError(Exception):
    """Base class for sampling errors."""


class SourceUnavailable(ProcstatError):
    """The pseudo-file or stream could not be opened or read."""

    def __init__(self, path: str, cause: OSError | None = None) -> None:
        self.path = path
        self.cause = cause
        msg = f"cannot read {path}"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)


class MalformedField(ProcstatError):
    """A token expected to be an unsigned integer failed to parse."""

    def __init__(self, token: str, line: str) -> None:
        self.token = token
        self.line = line
        super().__init__(f"invalid unsigned integer {token!r} in line {line.strip()!r}")


class EndOfInput(ProcstatError):
    """A stream source is exhausted. Ends polling cleanly."""
