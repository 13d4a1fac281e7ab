"""Serializes cleanup passes over a store.

Only one pass runs at a time. A caller that arrives while another pass is
running waits for it to finish and then runs its own full pass with a fresh
clock reading; passes are never skipped or merged.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, TypeVar

R = TypeVar("R")

logger = logging.getLogger(__name__)

IDLE = "idle"
RUNNING = "running"


class CleanupCoordinator:
    def __init__(self, *, name: str = "store") -> None:
        self._name = name
        # Held for the whole pass. Writers never touch this lock, so a Put is
        # only ordered against the namespace currently being swept.
        self._lock = threading.Lock()
        self._state = IDLE
        self._passes = 0

    @property
    def state(self) -> str:
        return self._state

    @property
    def passes(self) -> int:
        return self._passes

    def run(self, sweep: Callable[[], R]) -> R:
        with self._lock:
            self._state = RUNNING
            try:
                result = sweep()
                self._passes += 1
                return result
            finally:
                self._state = IDLE
                logger.debug("%s: cleanup pass %d finished", self._name, self._passes)
