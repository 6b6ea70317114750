"""Pure helpers mapping a segment prefix to on-disk file names."""
from __future__ import annotations

from datetime import datetime
from pathlib import Path

ACTIVE_SUFFIX = ".log"
COMPRESSED_SUFFIX = ".log.gz"
TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def active_name(prefix: str) -> str:
    return f"{prefix}{ACTIVE_SUFFIX}"


def active_path(log_dir: Path, prefix: str) -> Path:
    """Return ``<log_dir>/<prefix>.log``."""

    return Path(log_dir) / active_name(prefix)


def archive_path(
    log_dir: Path,
    prefix: str,
    timestamp: datetime,
    compress: bool,
    sequence: int = 0,
) -> Path:
    """Return the archive path for a segment rotated at ``timestamp``.

    ``sequence`` disambiguates rotations within the same second; ``0`` yields
    the plain ``<prefix>_<YYYYMMDD_HHMMSS>.log[.gz]`` form.
    """

    stem = f"{prefix}_{timestamp.strftime(TIMESTAMP_FORMAT)}"
    if sequence:
        stem = f"{stem}_{sequence}"
    suffix = COMPRESSED_SUFFIX if compress else ACTIVE_SUFFIX
    return Path(log_dir) / f"{stem}{suffix}"


def unique_archive_path(
    log_dir: Path,
    prefix: str,
    timestamp: datetime,
    compress: bool,
) -> Path:
    """Like :func:`archive_path` but never returns a path that already exists."""

    sequence = 0
    while True:
        candidate = archive_path(log_dir, prefix, timestamp, compress, sequence)
        if not candidate.exists():
            return candidate
        sequence += 1


def is_segment_name(name: str, prefix: str) -> bool:
    """Return ``True`` for the active file and for archives of ``prefix``."""

    if name == active_name(prefix):
        return True
    if not name.startswith(f"{prefix}_"):
        return False
    return name.endswith(ACTIVE_SUFFIX) or name.endswith(COMPRESSED_SUFFIX)


__all__ = [
    "active_name",
    "active_path",
    "archive_path",
    "is_segment_name",
    "unique_archive_path",
]
