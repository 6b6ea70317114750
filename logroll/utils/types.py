"""Shared value types consumed across the log sink."""
from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import timedelta
from enum import IntEnum
from pathlib import Path
from typing import Any, BinaryIO, Dict, Mapping, Optional, Union

from ..errors import ErrorHandler

Duration = Union[float, int, timedelta]


class LogLevel(IntEnum):
    """Totally ordered record severity."""

    DEBUG = 0
    INFO = 1
    WARN = 2
    ERROR = 3
    FATAL = 4

    @classmethod
    def parse(cls, value: Union["LogLevel", str, int]) -> "LogLevel":
        """Convert a level name or integer into a :class:`LogLevel`."""

        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            name = value.strip().upper()
            if name == "WARNING":
                name = "WARN"
            try:
                return cls[name]
            except KeyError as exc:
                raise ValueError(f"Unknown log level: {value!r}") from exc
        return cls(int(value))

    @staticmethod
    def label(value: int) -> str:
        try:
            return LogLevel(value).name
        except ValueError:
            return "UNKNOWN"


def to_seconds(value: Optional[Duration]) -> float:
    if value is None:
        return 0.0
    if isinstance(value, timedelta):
        return value.total_seconds()
    return float(value)


# Flat option names accepted by LoggerConfig.from_mapping.
_OPTION_ALIASES: Dict[str, str] = {
    "LogDir": "log_dir",
    "FileName": "file_name",
    "MaxSize": "max_size",
    "MaxAge": "max_age",
    "MaxBackups": "max_backups",
    "Level": "level",
    "EnableStdout": "enable_stdout",
    "SyncInterval": "sync_interval",
    "Compress": "compress",
    "JSONFormat": "json_format",
    "Output": "output",
    "ErrorHandler": "error_handler",
}


@dataclass(frozen=True)
class LoggerConfig:
    """Immutable configuration for a :class:`~logroll.logger.Logger`.

    Durations are expressed in seconds (``float``) or as
    :class:`datetime.timedelta`. Non-positive limits disable the matching
    rotation or retention rule.
    """

    log_dir: Path = Path("./logs")
    file_name: str = "myapp"
    max_size: int = 100 * 1024 * 1024
    max_age: Duration = timedelta(days=7)
    max_backups: int = 10
    level: LogLevel = LogLevel.INFO
    enable_stdout: bool = False
    sync_interval: Duration = 0.1
    compress: bool = True
    json_format: bool = False
    output: Optional[BinaryIO] = None
    error_handler: Optional[ErrorHandler] = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "log_dir", Path(self.log_dir))
        object.__setattr__(self, "level", LogLevel.parse(self.level))

    @property
    def max_age_seconds(self) -> float:
        return to_seconds(self.max_age)

    @property
    def sync_interval_seconds(self) -> float:
        return to_seconds(self.sync_interval)

    @classmethod
    def from_mapping(cls, options: Mapping[str, Any]) -> "LoggerConfig":
        """Build a config from a flat option mapping.

        Keys may use the attribute names (``max_size``) or their CamelCase
        spelling (``MaxSize``). Unknown keys raise :class:`ValueError`.
        """

        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in options.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown logger option: {key!r}")
            kwargs[name] = value
        return cls(**kwargs)


def default_config() -> LoggerConfig:
    """Return the default logger configuration."""

    return LoggerConfig()


__all__ = [
    "Duration",
    "ErrorHandler",
    "LogLevel",
    "LoggerConfig",
    "default_config",
    "to_seconds",
]
