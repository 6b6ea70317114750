"""Exceptions raised or reported by the log sink."""
from __future__ import annotations

import logging
from typing import Callable, Optional

ErrorHandler = Callable[[BaseException], None]

LOGGER = logging.getLogger(__name__)


class LogrollError(RuntimeError):
    """Base class for every error produced by this package."""


class SetupError(LogrollError):
    """Raised when the log directory or the initial segment cannot be opened."""


class RotationError(LogrollError):
    """Raised when the active segment could not be archived."""


class ArchiveError(LogrollError):
    """Raised when a segment could not be compressed into an archive."""


class WriterClosedError(LogrollError):
    """Reported when a record arrives after the writer was closed."""


class FatalSyncTimeout(LogrollError):
    """Reported when the durable sync before a fatal exit did not finish in time."""


def report_error(handler: Optional[ErrorHandler], exc: BaseException) -> None:
    """Deliver ``exc`` to ``handler`` or, without one, to the package logger."""

    if handler is None:
        LOGGER.error("logroll error: %s", exc)
        return
    try:
        handler(exc)
    except Exception:  # a broken callback must never break the write path
        LOGGER.exception("Error handler raised while reporting: %s", exc)


__all__ = [
    "ArchiveError",
    "FatalSyncTimeout",
    "LogrollError",
    "RotationError",
    "SetupError",
    "WriterClosedError",
    "report_error",
]
