"""Command line access to hourly log files.

    callsite-logger list logs/
    callsite-logger show logs/ --hour 2025-12-31T10 --contains MainActivity
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path

from callsite_logger.core.buckets import bucket_for_hour, bucket_key, range_for_bucket
from callsite_logger.core.config import DEFAULT_FILE_PREFIX
from callsite_logger.core.models import LogFileHandle
from callsite_logger.core.reader import bucket_of, list_log_files, read_log_lines

LOGGER = logging.getLogger(__name__)


def _configure_logging() -> None:
    level_name = os.getenv("CALLSITE_LOGGER_LOG_LEVEL", "INFO").upper()
    level = getattr(logging, level_name, logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _cmd_list(args: argparse.Namespace) -> None:
    files = list_log_files(args.directory, args.prefix)
    for path in files:
        start, end = range_for_bucket(bucket_of(path, args.prefix))
        print(f"{start:%Y-%m-%d %H:%M}-{end:%H:%M} {path}")
    print(f"\nFound {len(files)} log files.")


def _cmd_show(args: argparse.Namespace) -> None:
    directory = Path(args.directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Log directory not found: {directory}")
    key = bucket_for_hour(args.hour) if args.hour else bucket_key(datetime.now())
    path = LogFileHandle(directory=directory, prefix=args.prefix, bucket_key=key).path
    LOGGER.debug("Reading %s", path)
    for line in asyncio.run(read_log_lines(path, contains=args.contains)):
        print(line)


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="callsite-logger", description="Inspect hourly call-site log files."
    )
    sub = p.add_subparsers(dest="command", required=True)

    p_list = sub.add_parser("list", help="List hourly log files, oldest first")
    p_list.add_argument("directory")
    p_list.add_argument("--prefix", default=DEFAULT_FILE_PREFIX, help="Log file name prefix")
    p_list.set_defaults(func=_cmd_list)

    p_show = sub.add_parser("show", help="Print the lines of one hourly log file")
    p_show.add_argument("directory")
    p_show.add_argument("--prefix", default=DEFAULT_FILE_PREFIX, help="Log file name prefix")
    p_show.add_argument("--hour", default=None, help="YYYY-MM-DDTHH (default: current hour)")
    p_show.add_argument("--contains", default=None, help="Only print lines containing this text")
    p_show.set_defaults(func=_cmd_show)
    return p


def main(argv: Sequence[str] | None = None) -> None:
    _configure_logging()
    args = build_parser().parse_args(argv)
    try:
        args.func(args)
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)


if __name__ == "__main__":
    main()
