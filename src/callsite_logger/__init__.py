"""Call-site logging.

Formats log calls with the file, line and method that issued them, splits long
messages for the platform sink, and optionally keeps hourly log files.
"""

from __future__ import annotations

from .core.caller import CallerResolutionError, CallerResolver
from .core.config import LoggerConfig, resolve_logger_config
from .core.formatter import get_stack_trace_string
from .core.logger import CallsiteLogger, get_logger, init, reset
from .core.models import CallerInfo, LogRecord, Severity
from .core.sinks import LogSink, StdoutSink, SystemLogSink, select_sink

__all__ = [
    "CallerInfo",
    "CallerResolutionError",
    "CallerResolver",
    "CallsiteLogger",
    "LogRecord",
    "LogSink",
    "LoggerConfig",
    "Severity",
    "StdoutSink",
    "SystemLogSink",
    "get_logger",
    "get_stack_trace_string",
    "init",
    "reset",
    "resolve_logger_config",
    "select_sink",
]
