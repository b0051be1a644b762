"""Log listeners: console, callback and structlog sinks."""

from __future__ import annotations

import json
import sys
from typing import Any, Callable, TextIO

from .log import get_logger
from .logger import LogEntry, LogLevel


class ConsoleListener:
    """Writes entries to the console.

    Verbose and info entries go to ``stdout``; warnings and errors go to their
    own streams, which default to ``stderr``. Streams left as None are looked
    up on :mod:`sys` at write time.
    """

    def __init__(
        self,
        *,
        stdout: TextIO | None = None,
        warning_stream: TextIO | None = None,
        error_stream: TextIO | None = None,
    ) -> None:
        self._stdout = stdout
        self._warning_stream = warning_stream
        self._error_stream = error_stream

    def log(self, entry: LogEntry) -> None:
        msg = self.format(entry)
        if entry.level == LogLevel.WARNING:
            print(msg, file=self._warning_stream or sys.stderr)
        elif entry.level == LogLevel.ERROR:
            print(msg, file=self._error_stream or sys.stderr)
        elif entry.level in (LogLevel.VERBOSE, LogLevel.INFO):
            print(msg, file=self._stdout or sys.stdout)

    @staticmethod
    def format(entry: LogEntry) -> str:
        msg = [f"Message: {entry.message}"]
        if entry.data is not None:
            try:
                msg.append(f" Data: {json.dumps(entry.data)}")
            except Exception as exc:
                msg.append(f" Data: Error in stringify of supplied data {exc}")
        return "".join(msg)


class FunctionListener:
    """Passes every entry, unchanged, to the supplied function."""

    def __init__(self, method: Callable[[LogEntry], Any]) -> None:
        self.method = method

    def log(self, entry: LogEntry) -> None:
        self.method(entry)


_STRUCTLOG_METHODS = {
    LogLevel.VERBOSE: "debug",
    LogLevel.INFO: "info",
    LogLevel.WARNING: "warning",
    LogLevel.ERROR: "error",
}


class StructlogListener:
    """Forwards entries to a structlog logger at the matching level."""

    def __init__(self, name: str = "graph_http", **initial_context: Any) -> None:
        self._logger = get_logger(name, **initial_context)

    def log(self, entry: LogEntry) -> None:
        method = _STRUCTLOG_METHODS.get(entry.level)
        if method is None:
            return
        if entry.data is None:
            getattr(self._logger, method)(entry.message)
        else:
            getattr(self._logger, method)(entry.message, data=entry.data)
