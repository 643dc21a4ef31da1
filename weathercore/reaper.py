from __future__ import annotations

import logging
import threading
from typing import Callable


class PeriodicReaper(threading.Thread):
    """Daemon thread calling ``task`` every ``period`` seconds until stopped."""

    def __init__(self, name: str, task: Callable[[], object], period: float) -> None:
        if period <= 0:
            raise ValueError("period must be positive")
        super().__init__(name=name, daemon=True)
        self.task = task
        self.period = period
        self._stop_event = threading.Event()
        self._log = logging.getLogger(self.__class__.__name__)

    def run(self) -> None:
        while not self._stop_event.wait(self.period):
            try:
                self.task()
            except Exception as exc:  # noqa: BLE001 - a failed sweep must not kill the thread
                self._log.error("Reaper %s failed", self.name, exc_info=exc)

    def stop(self, timeout: float | None = None) -> None:
        self._stop_event.set()
        if self.is_alive():
            self.join(timeout)

    @property
    def stopped(self) -> bool:
        return self._stop_event.is_set()


__all__ = ["PeriodicReaper"]
