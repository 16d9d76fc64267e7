"""Split long messages across several sink calls."""

from __future__ import annotations

from collections.abc import Iterator

from .models import Severity
from .sinks import LogSink

MAX_LENGTH = 4000


def iter_chunks(message: str, max_length: int = MAX_LENGTH) -> Iterator[str]:
    """Yield consecutive windows of at most `max_length` characters.

    A message that fits (including "") is yielded once. A message whose length
    is an exact multiple of `max_length` yields no trailing empty window.
    """
    if max_length < 1:
        raise ValueError("max_length must be >= 1")
    if len(message) <= max_length:
        yield message
        return
    for start in range(0, len(message), max_length):
        yield message[start : start + max_length]


class ChunkWriter:
    """Forward messages to a sink without exceeding its per-call length."""

    def __init__(self, sink: LogSink, max_length: int = MAX_LENGTH) -> None:
        if max_length < 1:
            raise ValueError("max_length must be >= 1")
        self.sink = sink
        self.max_length = max_length

    def write(self, severity: Severity, tag: str, message: str) -> None:
        for chunk in iter_chunks(message, self.max_length):
            self.sink.write(severity, tag, chunk)
