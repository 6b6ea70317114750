"""Helpers shared by the log sink tests."""

from __future__ import annotations

import gzip
from pathlib import Path
from typing import List


def segment_files(log_dir: Path, prefix: str) -> List[Path]:
    return sorted(
        path
        for path in log_dir.iterdir()
        if path.name == f"{prefix}.log"
        or (path.name.startswith(f"{prefix}_") and path.name.endswith((".log", ".log.gz")))
    )


def read_segment(path: Path) -> str:
    if path.name.endswith(".gz"):
        return gzip.decompress(path.read_bytes()).decode("utf-8")
    return path.read_text("utf-8")


def read_all_segments(log_dir: Path, prefix: str) -> str:
    """Concatenate the text of every plain or gzip segment for ``prefix``."""

    return "".join(read_segment(path) for path in segment_files(log_dir, prefix))
