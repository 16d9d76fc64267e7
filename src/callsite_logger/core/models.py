"""Core data models for call-site logging."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

VERBOSE_LEVEL = 5
logging.addLevelName(VERBOSE_LEVEL, "VERBOSE")

LOG_FILE_SUFFIX = ".log"


class Severity(str, Enum):
    """Severity of a log call, from chattiest to most severe."""

    VERBOSE = "VERBOSE"
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARN = "WARN"
    ERROR = "ERROR"
    ASSERT = "ASSERT"

    @property
    def logging_level(self) -> int:
        """Equivalent stdlib `logging` level number."""
        return _LOGGING_LEVELS[self]


_LOGGING_LEVELS: dict[Severity, int] = {
    Severity.VERBOSE: VERBOSE_LEVEL,
    Severity.DEBUG: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.WARN: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.ASSERT: logging.CRITICAL,
}


@dataclass(frozen=True, slots=True)
class CallerInfo:
    """Source location of the statement that issued a log call."""

    file_name: str
    class_name: str
    method_name: str
    line_number: int
    inner_class_suffix: str | None = None  # e.g. "$Worker" for a method of class Worker

    @property
    def header(self) -> str:
        """Render as `[ (file:line)#method ] ` (the trailing space is part of it)."""
        owner = self.inner_class_suffix or ""
        return f"[ ({self.file_name}:{self.line_number}){owner}#{self.method_name} ] "


@dataclass(frozen=True, slots=True)
class LogRecord:
    """One formatted log call, consumed by the sink and the file writer."""

    severity: Severity
    tag: str
    header: str
    body: str
    timestamp: datetime

    @property
    def message(self) -> str:
        return self.header + self.body


@dataclass(frozen=True, slots=True)
class LogFileHandle:
    """Location of the bucket file that receives lines for one hour."""

    directory: Path
    prefix: str
    bucket_key: str

    @property
    def path(self) -> Path:
        return self.directory / f"{self.prefix}{self.bucket_key}{LOG_FILE_SUFFIX}"
