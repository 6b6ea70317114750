"""Size-rotated, buffered append-only segment writer."""
from __future__ import annotations

import logging
import os
from datetime import datetime
from pathlib import Path
from threading import Lock
from typing import BinaryIO, Callable, Iterable, List, Optional

from . import naming
from .archiver import compress_file
from .retention import RetentionScanner
from ..errors import (
    ArchiveError,
    RotationError,
    SetupError,
    WriterClosedError,
    report_error,
)
from ..utils.sinks import FanOutWriter
from ..utils.types import Duration, ErrorHandler, LogLevel

LOGGER = logging.getLogger(__name__)


class RotatingWriter:
    """Own the active segment and every mutation of it.

    A single lock serialises writes, rotation, sync, cleanup and close, so a
    rotation triggered by one write is always visible to the next one. The
    active file is opened in append mode behind a buffered handle and its
    size is tracked in memory, seeded from disk on every (re)open.
    """

    def __init__(
        self,
        log_dir: Path,
        prefix: str,
        *,
        max_size: int = 0,
        compress: bool = False,
        level: LogLevel = LogLevel.DEBUG,
        max_age: Duration = 0,
        max_backups: int = 0,
        sinks: Iterable[BinaryIO] = (),
        error_handler: Optional[ErrorHandler] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.log_dir = Path(log_dir)
        self.prefix = prefix
        self.max_size = max_size
        self.compress = compress
        self._level = LogLevel.parse(level)
        self._error_handler = error_handler
        self._clock = clock or datetime.now
        self._lock = Lock()
        self._handle: Optional[BinaryIO] = None
        self._current_size = 0
        self._closed = False
        self._secondary = FanOutWriter(sinks, error_handler)
        self._retention = RetentionScanner(
            self.log_dir,
            prefix,
            max_age=max_age,
            max_backups=max_backups,
            error_handler=error_handler,
        )

        try:
            self.log_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise SetupError(f"failed to create log directory {self.log_dir}: {exc}") from exc
        try:
            self._open_segment()
        except OSError as exc:
            raise SetupError(f"failed to open log file {self.path}: {exc}") from exc

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    @property
    def path(self) -> Path:
        return naming.active_path(self.log_dir, self.prefix)

    @property
    def current_size(self) -> int:
        """Bytes in the active segment, including still-buffered bytes."""

        with self._lock:
            return self._current_size

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def level(self) -> LogLevel:
        with self._lock:
            return self._level

    @level.setter
    def level(self, value: LogLevel) -> None:
        level = LogLevel.parse(value)
        with self._lock:
            self._level = level

    def enabled_for(self, level: int) -> bool:
        """Cheap pre-check used to skip formatting of filtered records."""

        return level >= self._level

    def write(self, level: int, data: bytes) -> None:
        """Append one encoded record, rotating first when it would overflow.

        Errors are reported through the error handler and never raised.
        """

        with self._lock:
            self._write_locked(level, data)

    def sync(self) -> None:
        """Flush buffered output and fsync the active segment."""

        with self._lock:
            if self._handle is None:
                return
            self._handle.flush()
            os.fsync(self._handle.fileno())

    def cleanup(self) -> List[Path]:
        """Run one retention pass under the writer lock."""

        with self._lock:
            return self._retention.cleanup()

    def close(self) -> None:
        """Flush, fsync and close the active segment.

        Every step is attempted; the first failure is raised afterwards.
        Closing twice is a no-op.
        """

        with self._lock:
            if self._closed:
                return
            self._closed = True
            handle, self._handle = self._handle, None
            if handle is None:
                return

            first_error: Optional[OSError] = None
            try:
                handle.flush()
                os.fsync(handle.fileno())
            except OSError as exc:
                first_error = exc
            try:
                handle.close()
            except OSError as exc:
                first_error = first_error or exc
            if first_error is not None:
                raise first_error

    # ------------------------------------------------------------------
    # Internal helpers (lock held)
    # ------------------------------------------------------------------
    def _write_locked(self, level: int, data: bytes) -> None:
        if level < self._level:
            return
        if self._closed:
            report_error(self._error_handler, WriterClosedError(f"write to closed log {self.path}"))
            return
        if self._handle is None:
            # A previous rotation could not reopen the segment.
            try:
                self._open_segment()
            except OSError as exc:
                report_error(self._error_handler, OSError(f"failed to reopen log file: {exc}"))
                return

        if self._should_rotate(len(data)):
            try:
                self._rotate()
            except RotationError as exc:
                report_error(self._error_handler, exc)
            if self._handle is None:
                return

        try:
            written = self._handle.write(data)
        except BlockingIOError as exc:
            self._current_size += exc.characters_written
            report_error(self._error_handler, OSError(f"partial write to log output: {exc}"))
        except OSError as exc:
            report_error(self._error_handler, OSError(f"failed to write to log output: {exc}"))
        else:
            self._current_size += written

        # Only the primary file counts towards the rotation threshold.
        if len(self._secondary):
            self._secondary.write(data)

    def _should_rotate(self, incoming: int) -> bool:
        # An empty segment is never archived; an oversized record goes into it.
        if self.max_size <= 0 or self._current_size == 0:
            return False
        return self._current_size + incoming > self.max_size

    def _open_segment(self) -> None:
        handle = open(self.path, "ab")
        try:
            size = os.fstat(handle.fileno()).st_size
        except OSError:
            handle.close()
            raise
        self._handle = handle
        self._current_size = size

    def _release_handle(self) -> None:
        handle, self._handle = self._handle, None
        if handle is None:
            return
        try:
            handle.flush()
        except OSError as exc:
            report_error(
                self._error_handler,
                OSError(f"failed to flush writer during rotation: {exc}"),
            )
        try:
            handle.close()
        except OSError as exc:
            report_error(
                self._error_handler,
                OSError(f"failed to close file during rotation: {exc}"),
            )

    def _recover_segment(self) -> None:
        try:
            self._open_segment()
        except OSError as exc:
            report_error(self._error_handler, OSError(f"failed to reopen log file: {exc}"))

    def _rotate(self) -> Path:
        current = self.path
        self._release_handle()

        timestamp = self._clock()
        try:
            target = naming.unique_archive_path(self.log_dir, self.prefix, timestamp, self.compress)
            if self.compress:
                compress_file(current, target)
            else:
                os.replace(current, target)
        except (ArchiveError, OSError) as exc:
            self._recover_segment()
            action = "compress" if self.compress else "rename"
            raise RotationError(f"failed to {action} log file {current}: {exc}") from exc

        if self.compress:
            try:
                current.unlink()
            except OSError as exc:
                report_error(
                    self._error_handler,
                    OSError(f"failed to remove original log file after compression: {exc}"),
                )

        try:
            self._open_segment()
        except OSError as exc:
            raise RotationError(f"failed to open new log file {current}: {exc}") from exc
        LOGGER.debug("rotated %s to %s", current, target.name)
        return target


__all__ = ["RotatingWriter"]
