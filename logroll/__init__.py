"""Embeddable rotating file log sink with gzip archives and retention."""

from .core.retention import RetentionScanner
from .core.rotating_writer import RotatingWriter
from .errors import (
    ArchiveError,
    FatalSyncTimeout,
    LogrollError,
    RotationError,
    SetupError,
    WriterClosedError,
)
from .logger import Logger, new_logger
from .utils.types import LogLevel, LoggerConfig, default_config

DEBUG = LogLevel.DEBUG
INFO = LogLevel.INFO
WARN = LogLevel.WARN
ERROR = LogLevel.ERROR
FATAL = LogLevel.FATAL

__all__ = [
    "ArchiveError",
    "DEBUG",
    "ERROR",
    "FATAL",
    "FatalSyncTimeout",
    "INFO",
    "LogLevel",
    "Logger",
    "LoggerConfig",
    "LogrollError",
    "RetentionScanner",
    "RotatingWriter",
    "RotationError",
    "SetupError",
    "WARN",
    "WriterClosedError",
    "default_config",
    "new_logger",
]
