"""Unit tests for gzip archival."""

from __future__ import annotations

import gzip
from pathlib import Path

import pytest

from logroll.core.archiver import compress_file
from logroll.errors import ArchiveError


def test_compress_preserves_exact_bytes(tmp_path: Path) -> None:
    source = tmp_path / "app.log"
    payload = b"".join(f"line {idx}\n".encode() for idx in range(5000))
    source.write_bytes(payload)
    target = tmp_path / "app_20250102_030405.log.gz"

    assert compress_file(source, target) == target
    assert gzip.decompress(target.read_bytes()) == payload
    assert source.read_bytes() == payload
    assert not list(tmp_path.glob(".tmp_archive_*"))


def test_missing_source_raises_archive_error(tmp_path: Path) -> None:
    target = tmp_path / "app_20250102_030405.log.gz"
    with pytest.raises(ArchiveError):
        compress_file(tmp_path / "missing.log", target)
    assert not target.exists()
    assert not list(tmp_path.glob(".tmp_archive_*"))
