"""Directory-listing based discovery and retention of log segments."""
from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from . import naming
from ..errors import report_error
from ..utils.types import Duration, ErrorHandler, to_seconds

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SegmentInfo:
    """A segment file seen during a directory scan."""

    path: Path
    mtime: float

    @property
    def name(self) -> str:
        return self.path.name


@dataclass(frozen=True)
class RetentionDecision:
    """Outcome of the retention rules for one non-active segment."""

    segment: SegmentInfo
    position: int
    delete: bool
    reason: Optional[str] = None


def list_segments(log_dir: Path, prefix: str) -> List[SegmentInfo]:
    """Return regular files belonging to ``prefix``, newest first.

    Ties keep directory enumeration order.
    """

    found: List[SegmentInfo] = []
    with os.scandir(log_dir) as entries:
        for entry in entries:
            if not naming.is_segment_name(entry.name, prefix):
                continue
            try:
                if not entry.is_file(follow_symlinks=False):
                    continue
                mtime = entry.stat(follow_symlinks=False).st_mtime
            except OSError:
                # Removed between listing and stat.
                continue
            found.append(SegmentInfo(path=Path(entry.path), mtime=mtime))
    found.sort(key=lambda info: info.mtime, reverse=True)
    return found


def plan_retention(
    segments: Sequence[SegmentInfo],
    prefix: str,
    *,
    max_age: Duration = 0,
    max_backups: int = 0,
    now: Optional[float] = None,
) -> List[RetentionDecision]:
    """Classify every non-active segment as kept or deleted.

    ``segments`` must already be ordered newest first. Positions count only
    non-active segments.
    """

    if now is None:
        now = time.time()
    max_age_s = to_seconds(max_age)
    active = naming.active_name(prefix)

    decisions: List[RetentionDecision] = []
    position = 0
    for segment in segments:
        if segment.name == active:
            continue
        reason = None
        if max_age_s > 0 and now - segment.mtime > max_age_s:
            reason = "age"
        elif max_backups > 0 and position >= max_backups:
            reason = "count"
        decisions.append(
            RetentionDecision(
                segment=segment,
                position=position,
                delete=reason is not None,
                reason=reason,
            )
        )
        position += 1
    return decisions


class RetentionScanner:
    """Apply age/count retention to the archives of one segment prefix.

    The scanner keeps no state between passes: every call re-lists the
    directory. Callers are responsible for serialising passes with writes.
    """

    def __init__(
        self,
        log_dir: Path,
        prefix: str,
        *,
        max_age: Duration = 0,
        max_backups: int = 0,
        error_handler: Optional[ErrorHandler] = None,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        self.log_dir = Path(log_dir)
        self.prefix = prefix
        self.max_age = max_age
        self.max_backups = max_backups
        self._error_handler = error_handler
        self._clock = clock or time.time

    def scan(self) -> List[RetentionDecision]:
        segments = list_segments(self.log_dir, self.prefix)
        return plan_retention(
            segments,
            self.prefix,
            max_age=self.max_age,
            max_backups=self.max_backups,
            now=self._clock(),
        )

    def cleanup(self) -> List[Path]:
        """Delete every segment the retention rules reject.

        Listing and deletion failures are reported through the error handler
        and never raised. Returns the paths that were removed.
        """

        try:
            decisions = self.scan()
        except OSError as exc:
            report_error(
                self._error_handler,
                OSError(f"failed to get log file list for cleanup: {exc}"),
            )
            return []

        deleted: List[Path] = []
        for decision in decisions:
            if not decision.delete:
                continue
            path = decision.segment.path
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            except OSError as exc:
                report_error(
                    self._error_handler,
                    OSError(f"failed to delete old log file {path}: {exc}"),
                )
                continue
            deleted.append(path)

        if deleted:
            LOGGER.debug("cleaned up %d old log files in %s", len(deleted), self.log_dir)
        return deleted


__all__ = [
    "RetentionDecision",
    "RetentionScanner",
    "SegmentInfo",
    "list_segments",
    "plan_retention",
]
