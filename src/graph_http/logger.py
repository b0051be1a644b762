"""Log entries, the listener protocol and a subscribing logger."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Protocol


class LogLevel(IntEnum):
    VERBOSE = 0
    INFO = 1
    WARNING = 2
    ERROR = 3
    OFF = 99


@dataclass(frozen=True)
class LogEntry:
    message: str
    level: LogLevel = LogLevel.VERBOSE
    data: Any = None


class LogListener(Protocol):
    """Anything that can receive a :class:`LogEntry`."""

    def log(self, entry: LogEntry) -> None: ...


class Logger:
    """Fans log entries out to subscribed listeners.

    Entries whose level is below ``active_log_level`` are dropped before any
    listener sees them. Listeners are called synchronously, in the order they
    were subscribed.
    """

    def __init__(self, active_log_level: LogLevel = LogLevel.WARNING) -> None:
        self.active_log_level = active_log_level
        self._subscribers: list[LogListener] = []

    @property
    def count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, *listeners: LogListener) -> None:
        self._subscribers.extend(listeners)

    def clear_subscribers(self) -> list[LogListener]:
        removed = self._subscribers
        self._subscribers = []
        return removed

    def write(self, message: str, level: LogLevel = LogLevel.VERBOSE) -> None:
        self.log(LogEntry(message=message, level=level))

    def write_json(self, obj: Any, level: LogLevel = LogLevel.VERBOSE) -> None:
        self.write(json.dumps(obj), level)

    def log(self, entry: LogEntry) -> None:
        if entry.level < self.active_log_level:
            return
        for listener in self._subscribers:
            listener.log(entry)

    def error(self, err: BaseException) -> None:
        self.log(LogEntry(message=str(err), level=LogLevel.ERROR, data=err))
