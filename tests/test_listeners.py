from __future__ import annotations

import io

import structlog

from graph_http.listeners import ConsoleListener, FunctionListener, StructlogListener
from graph_http.logger import LogEntry, LogLevel


def test_console_listener_routes_verbose_and_info_to_stdout(capsys) -> None:
    listener = ConsoleListener()
    listener.log(LogEntry("starting", LogLevel.VERBOSE))
    listener.log(LogEntry("ready", LogLevel.INFO, data={"count": 2}))

    captured = capsys.readouterr()
    assert captured.out == 'Message: starting\nMessage: ready Data: {"count": 2}\n'
    assert captured.err == ""


def test_console_listener_routes_warning_and_error_to_their_streams() -> None:
    out, warn, err = io.StringIO(), io.StringIO(), io.StringIO()
    listener = ConsoleListener(stdout=out, warning_stream=warn, error_stream=err)

    listener.log(LogEntry("careful", LogLevel.WARNING))
    listener.log(LogEntry("broken", LogLevel.ERROR, data=[1, "two"]))

    assert out.getvalue() == ""
    assert warn.getvalue() == "Message: careful\n"
    assert err.getvalue() == 'Message: broken Data: [1, "two"]\n'


def test_console_listener_survives_circular_data(capsys) -> None:
    data: dict[str, object] = {}
    data["self"] = data

    ConsoleListener().log(LogEntry("loop", LogLevel.ERROR, data=data))

    captured = capsys.readouterr()
    assert captured.err.startswith("Message: loop Data: Error in stringify of supplied data")
    assert "Circular reference" in captured.err


def test_console_listener_survives_unserializable_data(capsys) -> None:
    ConsoleListener().log(LogEntry("obj", LogLevel.INFO, data=object()))

    assert "Error in stringify of supplied data" in capsys.readouterr().out


def test_console_listener_ignores_off_level(capsys) -> None:
    ConsoleListener().log(LogEntry("silent", LogLevel.OFF))

    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""


def test_function_listener_passes_identical_entry_once() -> None:
    received: list[LogEntry] = []
    entry = LogEntry("hello", LogLevel.INFO, data={"a": 1})

    FunctionListener(received.append).log(entry)

    assert len(received) == 1
    assert received[0] is entry


def test_structlog_listener_forwards_level_and_data() -> None:
    listener = StructlogListener("graph_http.test")

    with structlog.testing.capture_logs() as logs:
        listener.log(LogEntry("careful", LogLevel.WARNING, data={"a": 1}))
        listener.log(LogEntry("details", LogLevel.VERBOSE))

    assert logs == [
        {"event": "careful", "log_level": "warning", "data": {"a": 1}},
        {"event": "details", "log_level": "debug"},
    ]
