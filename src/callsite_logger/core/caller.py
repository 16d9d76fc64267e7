"""Call-site resolution.

Python offers no compile-time call-site token, so the caller is recovered from
the live stack at a fixed offset. The offset counts the frames this package
puts between the user's statement and `CallerResolver.resolve`:

    user code -> CallsiteLogger.d() -> CallsiteLogger._dispatch() -> resolve()

Wrappers around the facade add frames; they pass a larger `stacklevel`, the
same way they would with `logging.Logger.log`.
"""

from __future__ import annotations

import os
import sys
from types import FrameType

from .models import CallerInfo

SOURCE_SUFFIX = ".py"
NESTED_MARKER = "$"

# public entry point + private dispatch method
FACADE_FRAMES = 2


class CallerResolutionError(IndexError):
    """The stack is shallower than the configured skip count."""


def normalize_line_number(lineno: int | None) -> int:
    """Clamp missing or negative line numbers to 0."""
    if lineno is None or lineno < 0:
        return 0
    return lineno


def _type_name(frame: FrameType) -> str:
    module = frame.f_globals.get("__name__") or ""
    owner, _, _ = frame.f_code.co_qualname.rpartition(".")
    if not owner:
        return module
    return module + NESTED_MARKER + owner.replace(".", NESTED_MARKER)


def caller_from_frame(frame: FrameType) -> CallerInfo:
    """Build CallerInfo for a frame.

    The display class name is the last dotted component of the type name plus
    `.py`. A function defined inside a class (or another function) carries the
    owner as an inner-class suffix, e.g. `$Worker` or `$outer$<locals>`.
    """
    code = frame.f_code
    file_name = os.path.basename(code.co_filename)
    class_name = _type_name(frame).rpartition(".")[2] + SOURCE_SUFFIX

    inner: str | None = None
    if file_name != class_name and NESTED_MARKER in class_name:
        inner = class_name[class_name.index(NESTED_MARKER) : -len(SOURCE_SUFFIX)]

    return CallerInfo(
        file_name=file_name,
        class_name=class_name,
        method_name=code.co_name,
        line_number=normalize_line_number(frame.f_lineno),
        inner_class_suffix=inner,
    )


class CallerResolver:
    """Resolve the frame that issued a log call."""

    def __init__(self, skip: int = FACADE_FRAMES) -> None:
        if skip < 0:
            raise ValueError("skip must be >= 0")
        self.skip = skip

    def resolve(self, stacklevel: int = 1) -> CallerInfo:
        """Return the caller `skip + stacklevel` frames above this method's caller."""
        if stacklevel < 1:
            raise ValueError("stacklevel must be >= 1")
        depth = self.skip + stacklevel
        try:
            frame = sys._getframe(depth)
        except ValueError as exc:
            raise CallerResolutionError(
                f"call stack is shallower than {depth} frames; "
                "the skip count no longer matches the call path"
            ) from exc
        try:
            return caller_from_frame(frame)
        finally:
            del frame
