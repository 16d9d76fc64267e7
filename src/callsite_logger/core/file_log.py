"""Hourly log files.

Every write re-derives the target file from the record's timestamp, so two
writes in the same hour land in the same file without any cached handle.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import datetime
from pathlib import Path

from .buckets import bucket_key
from .formatter import LINE_SEPARATOR, get_stack_trace_string
from .models import LogFileHandle, LogRecord, Severity

LOGGER = logging.getLogger(__name__)

Reporter = Callable[[Severity, str], None]


def format_line_time(ts: datetime) -> str:
    """HH:MM:SS.mmm"""
    return f"{ts:%H:%M:%S}.{ts.microsecond // 1000:03d}"


def format_file_line(record: LogRecord) -> str:
    return f"{format_line_time(record.timestamp)} {record.header}{record.body}\n"


class FileLogWriter:
    """Append formatted lines to `<directory>/<prefix><bucket>.log`.

    Failures never propagate: they are passed to `report` as ERROR messages so
    the caller's log call still completes.
    """

    def __init__(self, directory: Path, prefix: str, report: Reporter) -> None:
        self.directory = directory
        self.prefix = prefix
        self._report = report
        self._lock = threading.Lock()

    def handle_for(self, ts: datetime) -> LogFileHandle:
        return LogFileHandle(directory=self.directory, prefix=self.prefix, bucket_key=bucket_key(ts))

    def _ensure_file(self, path: Path) -> None:
        try:
            if path.exists():
                return
            path.touch()
        except OSError as exc:
            self._report(
                Severity.ERROR,
                "log create file failed :" + LINE_SEPARATOR + get_stack_trace_string(exc),
            )
            return
        LOGGER.debug("Created log file %s", path)
        self._report(Severity.INFO, f"create log file local:{path.resolve()}")

    def write(self, record: LogRecord) -> bool:
        """Append one line for `record`; return False if the append failed."""
        path = self.handle_for(record.timestamp).path
        line = format_file_line(record)
        with self._lock:
            self._ensure_file(path)
            try:
                with path.open("a", encoding="utf-8") as f:
                    f.write(line)
            except OSError as exc:
                self._report(
                    Severity.ERROR,
                    "log printFile failed :" + LINE_SEPARATOR + get_stack_trace_string(exc),
                )
                return False
        return True
