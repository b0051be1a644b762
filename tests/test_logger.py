from __future__ import annotations

from graph_http.listeners import FunctionListener
from graph_http.logger import LogEntry, Logger, LogLevel


def _recording_logger(level: LogLevel = LogLevel.WARNING) -> tuple[Logger, list[LogEntry]]:
    received: list[LogEntry] = []
    logger = Logger(active_log_level=level)
    logger.subscribe(FunctionListener(received.append))
    return logger, received


def test_entries_below_active_level_are_dropped() -> None:
    logger, received = _recording_logger(LogLevel.WARNING)

    logger.write("verbose")
    logger.write("info", LogLevel.INFO)
    logger.write("warning", LogLevel.WARNING)
    logger.write("error", LogLevel.ERROR)

    assert [entry.message for entry in received] == ["warning", "error"]


def test_every_subscriber_receives_entries_in_order() -> None:
    calls: list[str] = []
    logger = Logger(active_log_level=LogLevel.VERBOSE)
    logger.subscribe(
        FunctionListener(lambda entry: calls.append("first")),
        FunctionListener(lambda entry: calls.append("second")),
    )

    logger.log(LogEntry("hi"))

    assert calls == ["first", "second"]
    assert logger.count == 2


def test_clear_subscribers_returns_removed_listeners() -> None:
    logger, received = _recording_logger()

    removed = logger.clear_subscribers()
    logger.write("lost", LogLevel.ERROR)

    assert len(removed) == 1
    assert logger.count == 0
    assert received == []


def test_write_json_serializes_message() -> None:
    logger, received = _recording_logger(LogLevel.VERBOSE)

    logger.write_json({"a": [1, 2]})

    assert received[0].message == '{"a": [1, 2]}'
    assert received[0].level == LogLevel.VERBOSE


def test_error_logs_exception_as_data() -> None:
    logger, received = _recording_logger()
    exc = RuntimeError("boom")

    logger.error(exc)

    assert received[0].message == "boom"
    assert received[0].level == LogLevel.ERROR
    assert received[0].data is exc


def test_off_level_silences_everything() -> None:
    logger, received = _recording_logger(LogLevel.OFF)

    logger.write("error", LogLevel.ERROR)

    assert received == []
