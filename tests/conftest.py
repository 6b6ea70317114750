"""Shared fixtures for the log sink tests."""

from __future__ import annotations

from pathlib import Path
from typing import Callable, List

import pytest

from logroll import LogLevel, LoggerConfig


class ErrorCollector:
    """Error handler that records every reported exception."""

    def __init__(self) -> None:
        self.errors: List[BaseException] = []

    def __call__(self, exc: BaseException) -> None:
        self.errors.append(exc)

    def of_type(self, kind: type) -> List[BaseException]:
        return [err for err in self.errors if isinstance(err, kind)]


@pytest.fixture
def errors() -> ErrorCollector:
    return ErrorCollector()


@pytest.fixture
def make_config(tmp_path: Path, errors: ErrorCollector) -> Callable[..., LoggerConfig]:
    def _make(**overrides) -> LoggerConfig:
        options = {
            "log_dir": tmp_path / "logs",
            "file_name": "test",
            "max_size": 1024,
            "max_age": 3600,
            "max_backups": 3,
            "level": LogLevel.DEBUG,
            "sync_interval": 0,
            "compress": False,
            "error_handler": errors,
        }
        options.update(overrides)
        return LoggerConfig(**options)

    return _make
