from __future__ import annotations

from collections.abc import Callable
from datetime import datetime

import pytest

from callsite_logger.core.logger import reset
from callsite_logger.core.models import Severity


class RecordingSink:
    """Sink that keeps every write for assertions."""

    def __init__(self) -> None:
        self.calls: list[tuple[Severity, str, str]] = []

    def write(self, severity: Severity, tag: str, message: str) -> None:
        self.calls.append((severity, tag, message))

    @property
    def messages(self) -> list[str]:
        return [m for _, _, m in self.calls]

    def at(self, severity: Severity) -> list[str]:
        return [m for s, _, m in self.calls if s == severity]


class FakeClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 12, 30, 8, 12, 1, 123456))


@pytest.fixture
def write_bucket_file() -> Callable[..., None]:
    def _write(directory, name: str, lines: list[str]) -> None:
        (directory / name).write_text("".join(line + "\n" for line in lines), encoding="utf-8")

    return _write


@pytest.fixture(autouse=True)
def _reset_default_logger():
    reset()
    yield
    reset()
