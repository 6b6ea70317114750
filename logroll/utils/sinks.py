"""Secondary byte sinks that receive a copy of every record."""
from __future__ import annotations

import sys
from typing import BinaryIO, Iterable, List, Optional

from .types import ErrorHandler
from ..errors import report_error


class StdoutSink:
    """Writes raw record bytes to whatever ``sys.stdout`` currently is."""

    def write(self, data: bytes) -> int:
        stream = sys.stdout
        target = getattr(stream, "buffer", None)
        if target is None:
            stream.write(data.decode("utf-8", errors="replace"))
            stream.flush()
            return len(data)
        stream.flush()
        written = target.write(data)
        target.flush()
        return written

    def __repr__(self) -> str:
        return "StdoutSink()"


class FanOutWriter:
    """Ordered set of byte sinks written after the primary file.

    A failing sink is reported through ``error_handler`` and skipped; the
    remaining sinks still receive the record.
    """

    def __init__(
        self,
        sinks: Iterable[BinaryIO],
        error_handler: Optional[ErrorHandler] = None,
    ) -> None:
        self.sinks: List[BinaryIO] = list(sinks)
        self._error_handler = error_handler

    def __len__(self) -> int:
        return len(self.sinks)

    def write(self, data: bytes) -> None:
        for sink in self.sinks:
            try:
                sink.write(data)
            except Exception as exc:  # secondary sinks never abort the write
                report_error(
                    self._error_handler,
                    OSError(f"failed to write to secondary sink {sink!r}: {exc}"),
                )


__all__ = ["FanOutWriter", "StdoutSink"]
