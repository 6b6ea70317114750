"""Periodic background tasks sharing one shutdown signal."""
from __future__ import annotations

import logging
import threading
from typing import Callable, List, Optional

from ..errors import report_error
from ..utils.types import ErrorHandler

LOGGER = logging.getLogger(__name__)

CLEANUP_INTERVAL = 3600.0


class PeriodicTask(threading.Thread):
    """Call ``action`` every ``interval`` seconds until ``stop_event`` is set.

    Exceptions raised by ``action`` are reported and the loop keeps running.
    """

    def __init__(
        self,
        name: str,
        interval: float,
        action: Callable[[], object],
        stop_event: threading.Event,
        error_handler: Optional[ErrorHandler] = None,
    ) -> None:
        super().__init__(name=name, daemon=True)
        self.interval = interval
        self.action = action
        self.stop_event = stop_event
        self._error_handler = error_handler

    def run(self) -> None:
        while not self.stop_event.wait(self.interval):
            try:
                self.action()
            except Exception as exc:  # background errors never reach the host
                report_error(self._error_handler, exc)
        LOGGER.debug("%s stopped", self.name)


class Scheduler:
    """Cleanup and sync tasks for one writer.

    ``start`` may be called once; after ``stop`` the scheduler cannot be
    restarted.
    """

    def __init__(
        self,
        cleanup: Callable[[], object],
        sync: Callable[[], object],
        *,
        sync_interval: float = 0.0,
        cleanup_interval: float = CLEANUP_INTERVAL,
        error_handler: Optional[ErrorHandler] = None,
    ) -> None:
        self._stop_event = threading.Event()
        self._started = False
        self.tasks: List[PeriodicTask] = [
            PeriodicTask("logroll-cleanup", cleanup_interval, cleanup, self._stop_event, error_handler)
        ]
        if sync_interval > 0:
            self.tasks.append(
                PeriodicTask("logroll-sync", sync_interval, sync, self._stop_event, error_handler)
            )

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()

    def start(self) -> None:
        if self._stop_event.is_set():
            raise RuntimeError("scheduler has been stopped and cannot be restarted")
        if self._started:
            return
        self._started = True
        for task in self.tasks:
            task.start()

    def stop(self, timeout: Optional[float] = 5.0) -> None:
        """Signal both tasks and wait up to ``timeout`` seconds for each."""

        self._stop_event.set()
        if not self._started:
            return
        current = threading.current_thread()
        for task in self.tasks:
            if task is not current:
                task.join(timeout)


__all__ = ["CLEANUP_INTERVAL", "PeriodicTask", "Scheduler"]
