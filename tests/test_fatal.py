"""Tests for the fatal exit path and its bounded sync wait."""

from __future__ import annotations

import threading
import time
from typing import List

from logroll import FatalSyncTimeout, Logger


def test_fatal_writes_record_syncs_and_exits(make_config) -> None:
    exit_codes: List[int] = []
    logger = Logger(make_config(), exit_func=exit_codes.append)

    logger.fatal("unrecoverable: %s", "config missing")

    assert exit_codes == [1]
    # Synced before exiting, so visible on disk without close().
    assert "[FATAL] unrecoverable: config missing" in logger.path.read_text("utf-8")
    logger.close()


def test_fatal_exits_even_when_sync_hangs(make_config, errors) -> None:
    exit_codes: List[int] = []
    release = threading.Event()
    logger = Logger(make_config(), exit_func=exit_codes.append)
    logger.fatal_sync_timeout = 0.2

    def _stuck_sync() -> None:
        release.wait(10)

    logger._writer.sync = _stuck_sync  # type: ignore[assignment]
    try:
        started = time.monotonic()
        logger.fatal("shutting down")
        elapsed = time.monotonic() - started
    finally:
        release.set()

    assert exit_codes == [1]
    assert elapsed < 2.0
    assert len(errors.of_type(FatalSyncTimeout)) == 1
    logger.close()


def test_fatal_exits_when_lock_is_held_elsewhere(make_config, errors) -> None:
    exit_codes: List[int] = []
    logger = Logger(make_config(), exit_func=exit_codes.append)
    logger.fatal_sync_timeout = 0.2
    holder_ready = threading.Event()
    release = threading.Event()

    def _hold_lock() -> None:
        # Stands in for a filesystem call stuck while owning the writer lock.
        with logger._writer._lock:
            holder_ready.set()
            release.wait(10)

    holder = threading.Thread(target=_hold_lock, daemon=True)
    holder.start()
    assert holder_ready.wait(1)
    try:
        started = time.monotonic()
        logger.fatal("lock is stuck")
        elapsed = time.monotonic() - started
    finally:
        release.set()
        holder.join(1)

    assert exit_codes == [1]
    assert elapsed < 2.0
    assert len(errors.of_type(FatalSyncTimeout)) == 1
    logger.close()
