"""Read hourly log files back."""

from __future__ import annotations

from collections.abc import AsyncIterator
from pathlib import Path

import aiofiles

from .buckets import parse_bucket_key
from .models import LOG_FILE_SUFFIX


def bucket_of(path: Path, prefix: str) -> str | None:
    """Return the bucket key encoded in a log file name, or None."""
    name = path.name
    if not (name.startswith(prefix) and name.endswith(LOG_FILE_SUFFIX)):
        return None
    key = name[len(prefix) : -len(LOG_FILE_SUFFIX)]
    try:
        parse_bucket_key(key)
    except ValueError:
        return None
    return key


def list_log_files(directory: str | Path, prefix: str) -> list[Path]:
    """Return the bucket files in `directory`, oldest hour first."""
    path = Path(directory)
    if not path.is_dir():
        raise FileNotFoundError(f"Log directory not found: {path}")

    found: list[tuple[str, Path]] = []
    for candidate in path.iterdir():
        if not candidate.is_file():
            continue
        key = bucket_of(candidate, prefix)
        if key is not None:
            found.append((key, candidate))
    # Bucket keys sort chronologically as plain strings.
    return [p for _, p in sorted(found)]


async def iter_log_lines(
    path: str | Path,
    *,
    contains: str | None = None,
    encoding: str = "utf-8",
    decode_errors: str = "replace",
) -> AsyncIterator[str]:
    """Yield lines (without terminators) from a log file."""
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"Log file not found: {p}")
    async with aiofiles.open(p, encoding=encoding, errors=decode_errors) as f:
        async for line in f:
            line = line.rstrip("\r\n")
            if contains is not None and contains not in line:
                continue
            yield line


async def read_log_lines(path: str | Path, **iter_kwargs) -> list[str]:
    """Collect iter_log_lines into a list."""
    return [line async for line in iter_log_lines(path, **iter_kwargs)]
