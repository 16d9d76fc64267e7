"""Time-bucket helpers.

Log files rotate hourly; the bucket key is the hour a line was written in,
formatted with digits only so it does not depend on the process locale.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta

BUCKET_FORMAT = "%Y-%m-%d_%H"

_BUCKET_RE = re.compile(r"^\d{4}-\d{2}-\d{2}_\d{2}$")
_HOUR_RE = re.compile(r"^(?P<d>\d{4}-\d{2}-\d{2})T(?P<h>\d{2})$")


def bucket_key(ts: datetime) -> str:
    """Return the hour bucket key for a timestamp (e.g. 2025-12-31_10)."""
    return ts.strftime(BUCKET_FORMAT)


def parse_bucket_key(key: str) -> datetime:
    """Parse a bucket key back into the (naive) start of its hour."""
    if not _BUCKET_RE.match(key):
        raise ValueError("bucket key must look like YYYY-MM-DD_HH (e.g., 2025-12-31_10)")
    return datetime.strptime(key, BUCKET_FORMAT)


def range_for_bucket(key: str) -> tuple[datetime, datetime]:
    """Return the [start, end) hour window covered by a bucket key."""
    start = parse_bucket_key(key)
    return start, start + timedelta(hours=1)


def range_for_hour(s: str) -> tuple[datetime, datetime]:
    """Return the hour window for a YYYY-MM-DDTHH selector."""
    m = _HOUR_RE.match(s)
    if not m:
        raise ValueError("hour must look like YYYY-MM-DDTHH (e.g., 2025-12-31T10)")
    start = datetime.combine(date.fromisoformat(m.group("d")), time(int(m.group("h"))))
    end = start + timedelta(hours=1)
    return start, end


def bucket_for_hour(s: str) -> str:
    """Return the bucket key for a YYYY-MM-DDTHH selector."""
    start, _ = range_for_hour(s)
    return bucket_key(start)
