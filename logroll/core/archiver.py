"""Gzip archival of closed log segments."""
from __future__ import annotations

import gzip
import logging
import os
import shutil
import tempfile
from pathlib import Path

from ..errors import ArchiveError

LOGGER = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def compress_file(source: Path, destination: Path) -> Path:
    """Stream ``source`` through gzip into ``destination``.

    The compressed stream is written to a hidden temporary file in the
    destination directory and moved into place only once it is complete and
    fsynced, so a half-written archive never carries the final name. The
    source file is left untouched.
    """

    source = Path(source)
    destination = Path(destination)

    fd, tmp_path = tempfile.mkstemp(
        dir=destination.parent,
        prefix=".tmp_archive_",
        suffix=".gz",
    )
    try:
        with os.fdopen(fd, "wb") as raw:
            with source.open("rb") as src, gzip.GzipFile(
                filename=source.name, mode="wb", fileobj=raw
            ) as encoder:
                shutil.copyfileobj(src, encoder, CHUNK_SIZE)
            raw.flush()
            os.fsync(raw.fileno())
        os.replace(tmp_path, destination)
    except OSError as exc:
        raise ArchiveError(
            f"failed to compress {source} into {destination}: {exc}"
        ) from exc
    finally:
        if os.path.exists(tmp_path):
            try:
                os.remove(tmp_path)
            except OSError:
                LOGGER.debug("Unable to remove temp archive file: %s", tmp_path)
    return destination


__all__ = ["compress_file"]
