"""Logger handle: caller header + body -> sink (+ hourly file).

Every public entry point calls one `_dispatch*` method directly, and those
call `CallerResolver.resolve` directly. The resolver's skip count relies
on that exact depth; keep it when adding entry points.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from .caller import CallerResolver
from .chunking import ChunkWriter
from .config import DEFAULT_FILE_PREFIX, DEFAULT_TAG, LoggerConfig, resolve_logger_config
from .file_log import FileLogWriter
from .formatter import (
    LINE_SEPARATOR,
    format_args,
    format_current_stack,
    get_stack_trace_string,
    render_json,
)
from .models import LogRecord, Severity
from .sinks import LogSink, select_sink

Clock = Callable[[], datetime]


class CallsiteLogger:
    """Log with caller attribution.

    Parameters
    ----------
    config:
        Validated configuration; defaults to `LoggerConfig()`.
    sink:
        Platform sink; defaults to the result of `select_sink()`.
    clock:
        Source of timestamps for file lines (default: local wall clock).
    resolver:
        Caller resolver; override only when wrapping the handle in extra frames.
    """

    def __init__(
        self,
        config: LoggerConfig | None = None,
        *,
        sink: LogSink | None = None,
        clock: Clock | None = None,
        resolver: CallerResolver | None = None,
    ) -> None:
        self._config = config or LoggerConfig()
        self._sink = sink if sink is not None else select_sink()
        self._clock = clock or datetime.now
        self._resolver = resolver or CallerResolver()
        self._chunks = ChunkWriter(self._sink)
        self._files: FileLogWriter | None = None
        if self._config.log_directory is not None:
            self._files = FileLogWriter(
                self._config.log_directory, self._config.file_prefix, self._report
            )

    @property
    def config(self) -> LoggerConfig:
        return self._config

    @property
    def sink(self) -> LogSink:
        return self._sink

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    def v(self, *args: object, stacklevel: int = 1) -> None:
        self._dispatch(Severity.VERBOSE, args, stacklevel)

    def d(self, *args: object, stacklevel: int = 1) -> None:
        self._dispatch(Severity.DEBUG, args, stacklevel)

    def i(self, *args: object, stacklevel: int = 1) -> None:
        self._dispatch(Severity.INFO, args, stacklevel)

    def w(self, *args: object, stacklevel: int = 1) -> None:
        self._dispatch(Severity.WARN, args, stacklevel)

    def e(self, *args: object, stacklevel: int = 1) -> None:
        self._dispatch(Severity.ERROR, args, stacklevel)

    def a(self, *args: object, stacklevel: int = 1) -> None:
        """Log at ASSERT severity (a condition that should never happen)."""
        self._dispatch(Severity.ASSERT, args, stacklevel)

    def log(self, severity: Severity, *args: object, stacklevel: int = 1) -> None:
        self._dispatch(Severity(severity), args, stacklevel)

    def json(self, document: Any, *, stacklevel: int = 1) -> None:
        """Pretty-print a JSON document (dict, list, pydantic model or str).

        JSON dumps are diagnostic output and always go out at DEBUG.
        """
        self._dispatch_json(document, stacklevel)

    def trace(self, *, stacklevel: int = 1) -> None:
        """Log the current stack at DEBUG.

        Frames of this package and the `stacklevel - 1` innermost caller frames
        are left out, so the stack ends where the header points.
        """
        self._dispatch_trace(stacklevel)

    def close(self) -> None:
        """Release the sink's resources (e.g. the syslog socket), if it holds any."""
        close = getattr(self._sink, "close", None)
        if callable(close):
            close()

    @staticmethod
    def get_stack_trace_string(exc: BaseException | None) -> str:
        return get_stack_trace_string(exc)

    def _dispatch(self, severity: Severity, args: Sequence[object], stacklevel: int) -> None:
        if not self._config.enabled:
            return
        header = self._resolver.resolve(stacklevel).header
        self._emit(severity, header, format_args(args))

    def _dispatch_json(self, document: Any, stacklevel: int) -> None:
        if not self._config.enabled:
            return
        header = self._resolver.resolve(stacklevel).header
        try:
            pretty = render_json(document)
        except (TypeError, ValueError) as exc:
            self._report(Severity.ERROR, get_stack_trace_string(exc))
            return
        self._emit(Severity.DEBUG, header, LINE_SEPARATOR + pretty)

    def _dispatch_trace(self, stacklevel: int) -> None:
        if not self._config.enabled:
            return
        header = self._resolver.resolve(stacklevel).header
        self._emit(Severity.DEBUG, header, format_current_stack(stacklevel - 1))

    def _emit(self, severity: Severity, header: str, body: str) -> None:
        record = LogRecord(
            severity=severity,
            tag=self._config.tag,
            header=header,
            body=body,
            timestamp=self._clock(),
        )
        self._chunks.write(record.severity, record.tag, record.message)
        if self._files is not None:
            self._files.write(record)

    def _report(self, severity: Severity, message: str) -> None:
        self._chunks.write(severity, self._config.tag, message)


_default: CallsiteLogger | None = None
_default_lock = threading.Lock()


def init(
    enabled: bool = True,
    tag: str = DEFAULT_TAG,
    log_directory: str | Path | None = None,
    file_prefix: str = DEFAULT_FILE_PREFIX,
    *,
    sink: LogSink | None = None,
) -> CallsiteLogger:
    """Build and install the process-wide logger handle.

    Raises pydantic.ValidationError (a ValueError) when `log_directory` does not
    exist or is not a directory. Call once at startup, before logging.
    """
    config = LoggerConfig(
        enabled=enabled,
        tag=tag,
        log_directory=Path(log_directory) if log_directory is not None else None,
        file_prefix=file_prefix,
    )
    handle = CallsiteLogger(config, sink=sink)
    global _default
    with _default_lock:
        previous, _default = _default, handle
    if previous is not None and previous.sink is not handle.sink:
        previous.close()
    return handle


def get_logger() -> CallsiteLogger:
    """Return the process-wide handle, building it from the environment if needed."""
    global _default
    with _default_lock:
        if _default is None:
            _default = CallsiteLogger(resolve_logger_config())
        return _default


def reset() -> None:
    """Close and drop the process-wide handle; the next get_logger() builds a new one."""
    global _default
    with _default_lock:
        previous, _default = _default, None
    if previous is not None:
        previous.close()
