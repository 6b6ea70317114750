"""Leveled logging facade over the rotating writer."""
from __future__ import annotations

import logging
import os
import sys
import threading
import time
from pathlib import Path
from typing import BinaryIO, Callable, List, Optional

from .core.rotating_writer import RotatingWriter
from .core.scheduler import Scheduler
from .errors import FatalSyncTimeout, report_error
from .utils.formatters import RecordFormatter, select_formatter
from .utils.sinks import StdoutSink
from .utils.types import LogLevel, LoggerConfig, default_config

LOGGER = logging.getLogger(__name__)

FATAL_SYNC_TIMEOUT = 5.0


class Logger:
    """Leveled, rotating file logger.

    Construction creates the log directory, opens the active segment and
    starts the background cleanup and sync tasks. Any failure before the
    tasks start raises :class:`~logroll.errors.SetupError` and leaves nothing
    running.
    """

    fatal_sync_timeout: float = FATAL_SYNC_TIMEOUT

    def __init__(
        self,
        config: Optional[LoggerConfig] = None,
        *,
        formatter: Optional[RecordFormatter] = None,
        exit_func: Optional[Callable[[int], object]] = None,
    ) -> None:
        self.config = config or default_config()
        self._format = formatter or select_formatter(self.config.json_format)
        self._exit = exit_func or os._exit
        self._writer = RotatingWriter(
            self.config.log_dir,
            self.config.file_name,
            max_size=self.config.max_size,
            compress=self.config.compress,
            level=self.config.level,
            max_age=self.config.max_age,
            max_backups=self.config.max_backups,
            sinks=self._secondary_sinks(),
            error_handler=self.config.error_handler,
        )
        self._scheduler = Scheduler(
            self._writer.cleanup,
            self._writer.sync,
            sync_interval=self.config.sync_interval_seconds,
            error_handler=self.config.error_handler,
        )
        self._scheduler.start()

    def _secondary_sinks(self) -> List[BinaryIO]:
        if self.config.output is not None:
            return [self.config.output]
        if self.config.enable_stdout:
            return [StdoutSink()]  # type: ignore[list-item]
        return []

    # ------------------------------------------------------------------
    @property
    def path(self) -> Path:
        """Path of the active segment."""

        return self._writer.path

    def log(self, level: LogLevel, msg: str, *args: object) -> None:
        data = self._encode(level, msg, args)
        if data is not None:
            self._writer.write(level, data)

    def _encode(self, level: LogLevel, msg: str, args: tuple) -> Optional[bytes]:
        if not self._writer.enabled_for(level):
            return None
        message = msg
        if args:
            try:
                message = msg % args
            except (TypeError, ValueError) as exc:
                report_error(self.config.error_handler, ValueError(f"bad log format {msg!r}: {exc}"))
                message = f"{msg} {args!r}"
        return self._format(level, message, time.time_ns())

    def debug(self, msg: str, *args: object) -> None:
        self.log(LogLevel.DEBUG, msg, *args)

    def info(self, msg: str, *args: object) -> None:
        self.log(LogLevel.INFO, msg, *args)

    def warn(self, msg: str, *args: object) -> None:
        self.log(LogLevel.WARN, msg, *args)

    warning = warn

    def error(self, msg: str, *args: object) -> None:
        self.log(LogLevel.ERROR, msg, *args)

    def fatal(self, msg: str, *args: object) -> None:
        """Write a FATAL record, sync with a bounded wait and exit with status 1."""

        # The record is written on the bounded worker: a stuck lock must not
        # keep the process alive.
        self._sync_before_exit(self._encode(LogLevel.FATAL, msg, args))
        self._exit(1)

    # ------------------------------------------------------------------
    def set_level(self, level: LogLevel) -> None:
        self._writer.level = level

    def get_level(self) -> LogLevel:
        return self._writer.level

    def sync(self) -> None:
        """Flush buffered records and fsync the active segment."""

        self._writer.sync()

    def cleanup(self) -> List[Path]:
        """Run a retention pass now, in addition to the hourly one."""

        return self._writer.cleanup()

    def close(self) -> None:
        """Stop background tasks, then flush, fsync and close the active segment."""

        self._scheduler.stop()
        self._writer.close()

    def __enter__(self) -> "Logger":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    def _sync_before_exit(self, record: Optional[bytes] = None) -> None:
        done = threading.Event()

        def _run() -> None:
            try:
                if record is not None:
                    self._writer.write(LogLevel.FATAL, record)
                self._writer.sync()
            except Exception as exc:  # reported, exit proceeds regardless
                report_error(self.config.error_handler, exc)
            finally:
                done.set()

        worker = threading.Thread(target=_run, name="logroll-fatal-sync", daemon=True)
        worker.start()
        if not done.wait(self.fatal_sync_timeout):
            report_error(
                self.config.error_handler,
                FatalSyncTimeout(
                    f"log sync timed out after {self.fatal_sync_timeout:g}s during fatal exit"
                ),
            )
        try:
            sys.stdout.flush()
        except (OSError, ValueError):
            LOGGER.debug("Unable to flush stdout before fatal exit")


def new_logger(config: Optional[LoggerConfig] = None) -> Logger:
    """Create a :class:`Logger`; ``None`` selects :func:`default_config`."""

    return Logger(config)


__all__ = ["FATAL_SYNC_TIMEOUT", "Logger", "new_logger"]
