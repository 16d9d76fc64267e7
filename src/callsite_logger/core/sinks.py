"""Platform sinks.

A sink writes one severity-tagged line. Two variants exist: the local system
log (syslog socket) and the process's standard output. `select_sink` probes
once at startup; the result is injected into the logger handle.
"""

from __future__ import annotations

import logging
import logging.handlers
import os
import sys
from typing import Protocol, TextIO

from .models import Severity

LOGGER = logging.getLogger(__name__)

SYSLOG_ADDRESSES = ("/dev/log", "/var/run/syslog")
STDOUT_FORMAT = "%(asctime)s %(levelname)s/%(tag)s: %(message)s"
SYSLOG_FORMAT = "%(tag)s: %(message)s"


class LogSink(Protocol):
    """Sink interface: write one line for a severity and tag."""

    def write(self, severity: Severity, tag: str, message: str) -> None:
        ...


def _make_record(severity: Severity, tag: str, message: str) -> logging.LogRecord:
    level = severity.logging_level
    return logging.makeLogRecord(
        {
            "name": tag,
            "levelno": level,
            "levelname": logging.getLevelName(level),
            "msg": message,
            "tag": tag,
        }
    )


class _HandlerSink:
    """Sink backed by a single stdlib logging handler it owns."""

    def __init__(self, handler: logging.Handler, fmt: str) -> None:
        handler.setFormatter(logging.Formatter(fmt))
        self.handler = handler

    def write(self, severity: Severity, tag: str, message: str) -> None:
        self.handler.handle(_make_record(severity, tag, message))

    def close(self) -> None:
        self.handler.close()


class StdoutSink(_HandlerSink):
    """Write lines to standard output (or any text stream)."""

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__(logging.StreamHandler(stream or sys.stdout), STDOUT_FORMAT)


class SystemLogSink(_HandlerSink):
    """Write lines to the local syslog daemon over its unix socket."""

    def __init__(self, address: str) -> None:
        handler = logging.handlers.SysLogHandler(address=address)
        handler.priority_map = {**handler.priority_map, "VERBOSE": "debug"}
        super().__init__(handler, SYSLOG_FORMAT)
        self.address = address


def system_log_address() -> str | None:
    """Return the first local syslog socket that exists, if any."""
    for address in SYSLOG_ADDRESSES:
        if os.path.exists(address):
            return address
    return None


def select_sink() -> LogSink:
    """Pick the system log when a syslog socket is available, else stdout."""
    address = system_log_address()
    if address is not None:
        try:
            sink = SystemLogSink(address)
        except OSError as exc:
            LOGGER.warning("System log at %s unavailable (%s); using stdout", address, exc)
        else:
            LOGGER.debug("Using system log sink at %s", address)
            return sink
    LOGGER.debug("Using stdout sink")
    return StdoutSink()
