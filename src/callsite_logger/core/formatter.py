"""Message body rendering."""

from __future__ import annotations

import errno
import json
import socket
import traceback
from collections.abc import Sequence
from pathlib import Path
from typing import Any

from pydantic import BaseModel

DEFAULT_MESSAGE = "execute"
ARGUMENT = "argument"
NULL = "null"
JSON_INDENT = 4
LINE_SEPARATOR = "\n"

_PACKAGE_DIR = Path(__file__).resolve().parent.parent


def _value_string(value: object) -> str:
    return NULL if value is None else str(value)


def format_args(args: Sequence[object]) -> str:
    """Render the positional arguments of a log call into a body string."""
    if not args:
        return DEFAULT_MESSAGE
    if len(args) == 1:
        return _value_string(args[0])
    lines = [f"\t{ARGUMENT}[{i}]={_value_string(value)}" for i, value in enumerate(args)]
    return LINE_SEPARATOR + LINE_SEPARATOR.join(lines)


def render_json(document: Any) -> str:
    """Pretty-print a JSON document with 4-space indentation.

    Strings are assumed to be formatted already and pass through verbatim.
    Raises TypeError/ValueError when the document cannot be serialized.
    """
    if isinstance(document, str):
        return document
    if isinstance(document, BaseModel):
        return document.model_dump_json(indent=JSON_INDENT)
    if isinstance(document, (dict, list, tuple)):
        return json.dumps(document, indent=JSON_INDENT, ensure_ascii=False)
    return str(document)


def is_host_unreachable(exc: BaseException) -> bool:
    """True for DNS failures and EHOSTUNREACH socket errors."""
    if isinstance(exc, socket.gaierror):
        return True
    return isinstance(exc, OSError) and exc.errno == errno.EHOSTUNREACH


def _iter_chain(exc: BaseException):
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.__cause__ or current.__context__


def get_stack_trace_string(exc: BaseException | None) -> str:
    """Return the printed traceback of `exc`.

    Returns "" for None and for errors caused by an unreachable host; those
    traces are noise on a device without network.
    """
    if exc is None:
        return ""
    if any(is_host_unreachable(e) for e in _iter_chain(exc)):
        return ""
    return "".join(traceback.format_exception(exc))


def _is_internal(filename: str) -> bool:
    try:
        return Path(filename).resolve().is_relative_to(_PACKAGE_DIR)
    except OSError:
        return False


def format_current_stack(skip_innermost: int = 0) -> str:
    """Render the current stack without this package's own frames.

    `skip_innermost` further drops that many of the remaining innermost frames
    (the wrappers a `stacklevel` above 1 steps over).
    """
    frames = [f for f in traceback.extract_stack() if not _is_internal(f.filename)]
    if skip_innermost > 0:
        frames = frames[:-skip_innermost]
    return (
        LINE_SEPARATOR
        + "Stack (most recent call last):"
        + LINE_SEPARATOR
        + "".join(traceback.format_list(frames))
    )
