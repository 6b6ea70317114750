"""Record encoders turning a level and a message into one log line."""
from __future__ import annotations

import json
import time
from typing import Callable, Optional

from .types import LogLevel

RecordFormatter = Callable[[int, str, Optional[int]], bytes]


def _split_ns(timestamp_ns: int):
    seconds, nanos = divmod(timestamp_ns, 1_000_000_000)
    return time.localtime(seconds), nanos


def _utc_offset(moment: time.struct_time) -> str:
    offset = moment.tm_gmtoff or 0
    if offset == 0:
        return "Z"
    sign = "+" if offset > 0 else "-"
    hours, minutes = divmod(abs(offset) // 60, 60)
    return f"{sign}{hours:02d}:{minutes:02d}"


def rfc3339_nano(timestamp_ns: int) -> str:
    """Format a ``time.time_ns()`` value as RFC 3339 with trimmed nanoseconds."""

    moment, nanos = _split_ns(timestamp_ns)
    text = time.strftime("%Y-%m-%dT%H:%M:%S", moment)
    fraction = f"{nanos:09d}".rstrip("0")
    if fraction:
        text = f"{text}.{fraction}"
    return text + _utc_offset(moment)


def format_plain(level: int, message: str, timestamp_ns: Optional[int] = None) -> bytes:
    """``[YYYY-MM-DD HH:MM:SS.mmm] [LEVEL] message`` followed by a newline."""

    if timestamp_ns is None:
        timestamp_ns = time.time_ns()
    moment, nanos = _split_ns(timestamp_ns)
    stamp = time.strftime("%Y-%m-%d %H:%M:%S", moment)
    line = f"[{stamp}.{nanos // 1_000_000:03d}] [{LogLevel.label(level)}] {message}\n"
    return line.encode("utf-8")


def format_json(level: int, message: str, timestamp_ns: Optional[int] = None) -> bytes:
    """One JSON object per line with ``level``, ``message`` and ``time`` keys."""

    if timestamp_ns is None:
        timestamp_ns = time.time_ns()
    record = {
        "time": rfc3339_nano(timestamp_ns),
        "level": LogLevel.label(level),
        "message": message,
    }
    return (json.dumps(record, ensure_ascii=False, sort_keys=True) + "\n").encode("utf-8")


def select_formatter(json_format: bool) -> RecordFormatter:
    return format_json if json_format else format_plain


__all__ = [
    "RecordFormatter",
    "format_json",
    "format_plain",
    "rfc3339_nano",
    "select_formatter",
]
