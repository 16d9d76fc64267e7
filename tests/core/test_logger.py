from __future__ import annotations

import inspect
from pathlib import Path

import pytest
from pydantic import ValidationError

from callsite_logger.core.config import LoggerConfig
from callsite_logger.core.logger import CallsiteLogger, get_logger, init, reset
from callsite_logger.core.models import Severity


def _here() -> int:
    """Line number of the caller's next line."""
    return inspect.currentframe().f_back.f_lineno + 1


class Screen:
    def __init__(self, log: CallsiteLogger) -> None:
        self.log = log

    def render(self) -> int:
        line = _here()
        self.log.i("rendered")
        return line


def test_debug_call_has_caller_header(sink, clock) -> None:
    log = CallsiteLogger(sink=sink, clock=clock)

    line = _here()
    log.d("hello")

    assert sink.calls == [
        (
            Severity.DEBUG,
            "CallsiteLogger",
            f"[ (test_logger.py:{line})#test_debug_call_has_caller_header ] hello",
        )
    ]


def test_each_severity_entry_point(sink) -> None:
    log = CallsiteLogger(LoggerConfig(tag="T"), sink=sink)

    log.v()
    log.d()
    log.i()
    log.w()
    log.e()
    log.a()
    log.log(Severity.WARN, "x")

    assert [s for s, _, _ in sink.calls] == [
        Severity.VERBOSE,
        Severity.DEBUG,
        Severity.INFO,
        Severity.WARN,
        Severity.ERROR,
        Severity.ASSERT,
        Severity.WARN,
    ]
    assert all(m.endswith(" ] execute") for m in sink.messages[:6])
    assert {t for _, t, _ in sink.calls} == {"T"}


def test_null_and_multiple_arguments(sink) -> None:
    log = CallsiteLogger(sink=sink)

    log.i(None)
    log.i("A", "B")

    assert sink.messages[0].endswith(" ] null")
    assert sink.messages[1].endswith(" ] \n\targument[0]=A\n\targument[1]=B")


def test_method_call_gets_inner_class_suffix(sink) -> None:
    log = CallsiteLogger(sink=sink)

    line = Screen(log).render()

    assert sink.messages == [f"[ (test_logger.py:{line})$Screen#render ] rendered"]


def test_stacklevel_reports_wrapper_caller(sink) -> None:
    log = CallsiteLogger(sink=sink)

    def audit(message: str) -> None:
        log.w(message, stacklevel=2)

    line = _here()
    audit("changed")

    assert sink.messages == [
        f"[ (test_logger.py:{line})#test_stacklevel_reports_wrapper_caller ] changed"
    ]


def test_disabled_logger_is_silent(sink, clock, tmp_path: Path) -> None:
    log = CallsiteLogger(
        LoggerConfig(enabled=False, log_directory=tmp_path), sink=sink, clock=clock
    )

    log.d("x")
    log.e("a", "b")
    log.json({"a": 1})
    log.trace()

    assert sink.calls == []
    assert list(tmp_path.iterdir()) == []


def test_json_dispatched_at_debug(sink) -> None:
    log = CallsiteLogger(sink=sink)

    def on_error() -> None:
        log.json({"a": 1})

    on_error()

    assert len(sink.calls) == 1
    severity, _, message = sink.calls[0]
    assert severity == Severity.DEBUG
    header, body = message.split("\n", 1)
    assert header.endswith("#on_error ] ")
    assert body == '{\n    "a": 1\n}'


def test_json_serialization_failure_reports_error(sink) -> None:
    log = CallsiteLogger(sink=sink)

    log.json({"a": {1, 2}})

    assert sink.at(Severity.DEBUG) == []
    errors = sink.at(Severity.ERROR)
    assert len(errors) == 1
    assert "TypeError" in errors[0]


def test_long_message_is_chunked(sink) -> None:
    log = CallsiteLogger(sink=sink)

    log.i("y" * 9000)

    assert len(sink.calls) == 3
    assert all(len(m) <= 4000 for m in sink.messages)
    assert "".join(sink.messages).endswith("y" * 9000)


def test_file_logging_writes_header_and_body(sink, clock, tmp_path: Path) -> None:
    log = CallsiteLogger(
        LoggerConfig(log_directory=tmp_path, file_prefix="app_"), sink=sink, clock=clock
    )

    line = _here()
    log.i("saved")
    log.w("again")

    path = tmp_path / "app_2025-12-30_08.log"
    lines = path.read_text(encoding="utf-8").splitlines()
    assert lines[0] == (
        f"08:12:01.123 [ (test_logger.py:{line})#test_file_logging_writes_header_and_body ] saved"
    )
    assert lines[1].endswith(" ] again")
    assert sink.at(Severity.INFO)[1].startswith("create log file local:")


def test_file_failure_does_not_break_sink_write(sink, clock, tmp_path: Path) -> None:
    directory = tmp_path / "logs"
    directory.mkdir()
    log = CallsiteLogger(LoggerConfig(log_directory=directory), sink=sink, clock=clock)
    directory.rmdir()

    log.i("still logged")

    assert sink.at(Severity.INFO)[0].endswith(" ] still logged")
    assert len(sink.at(Severity.ERROR)) == 2


def test_unwritable_file_name_does_not_raise(sink, clock, tmp_path: Path) -> None:
    log = CallsiteLogger(
        LoggerConfig(log_directory=tmp_path, file_prefix="p" * 300), sink=sink, clock=clock
    )

    log.i("hello")

    assert sink.at(Severity.INFO)[0].endswith(" ] hello")
    errors = sink.at(Severity.ERROR)
    assert len(errors) == 2
    assert errors[0].startswith("log create file failed :\n")


def test_trace_excludes_logger_frames(sink) -> None:
    log = CallsiteLogger(sink=sink)

    log.trace()

    assert len(sink.calls) == 1
    severity, _, message = sink.calls[0]
    assert severity == Severity.DEBUG
    assert message.startswith("[ (test_logger.py:")
    assert "#test_trace_excludes_logger_frames ] \nStack (most recent call last):\n" in message
    assert "_dispatch_trace" not in message


def test_trace_stacklevel_drops_wrapper_frames(sink) -> None:
    log = CallsiteLogger(sink=sink)

    def dump_stack() -> None:
        log.trace(stacklevel=2)

    dump_stack()

    message = sink.messages[0]
    assert "#test_trace_stacklevel_drops_wrapper_frames ] \n" in message
    assert ", in dump_stack\n" not in message
    last_frame = message.rstrip("\n").split("\n")[-2]
    assert last_frame.endswith(", in test_trace_stacklevel_drops_wrapper_frames")


def test_get_stack_trace_string_static() -> None:
    try:
        raise ValueError("boom")
    except ValueError as exc:
        text = CallsiteLogger.get_stack_trace_string(exc)
    assert "ValueError: boom" in text


def test_init_installs_default_handle(sink, tmp_path: Path) -> None:
    handle = init(True, "App", tmp_path, "app_", sink=sink)

    assert get_logger() is handle
    assert handle.config.tag == "App"
    assert handle.config.file_logging_enabled is True


def test_init_rejects_missing_directory(sink, tmp_path: Path) -> None:
    with pytest.raises(ValidationError):
        init(True, "App", tmp_path / "missing", sink=sink)


def test_get_logger_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CALLSITE_LOGGER_ENABLED", "false")
    monkeypatch.setenv("CALLSITE_LOGGER_TAG", "EnvTag")

    handle = get_logger()
    assert handle.enabled is False
    assert handle.config.tag == "EnvTag"
    assert get_logger() is handle


class ClosingSink:
    def __init__(self) -> None:
        self.closed = 0

    def write(self, severity: Severity, tag: str, message: str) -> None:
        pass

    def close(self) -> None:
        self.closed += 1


def test_close_releases_sink() -> None:
    closing = ClosingSink()

    CallsiteLogger(sink=closing).close()

    assert closing.closed == 1


def test_close_without_sink_close_is_noop(sink) -> None:
    CallsiteLogger(sink=sink).close()


def test_reinit_closes_previous_sink() -> None:
    first, second = ClosingSink(), ClosingSink()

    init(sink=first)
    init(sink=second)

    assert first.closed == 1
    assert second.closed == 0


def test_reinit_with_same_sink_keeps_it_open() -> None:
    closing = ClosingSink()

    init(sink=closing)
    init(tag="Other", sink=closing)

    assert closing.closed == 0


def test_reset_closes_default_handle() -> None:
    closing = ClosingSink()
    init(sink=closing)

    reset()

    assert closing.closed == 1
    reset()
    assert closing.closed == 1
