"""Value types, record encoders and secondary sinks."""

from .formatters import format_json, format_plain, select_formatter
from .sinks import FanOutWriter, StdoutSink
from .types import LogLevel, LoggerConfig, default_config

__all__ = [
    "FanOutWriter",
    "LogLevel",
    "LoggerConfig",
    "StdoutSink",
    "default_config",
    "format_json",
    "format_plain",
    "select_formatter",
]
