"""Background timer that runs cleanup passes on a fixed interval.

Runs in a daemon thread so it keeps sweeping while the stdio server blocks
in its own event loop. Each tick sweeps every registered store once.
"""

from __future__ import annotations

import logging
import threading
from typing import Optional, Protocol, Sequence

from core.errors import ConfigurationError

logger = logging.getLogger(__name__)


class Sweepable(Protocol):
    """Anything with a ``cleanup()`` pass (a Store or a session manager)."""
    name: str

    def cleanup(self, now: Optional[float] = None): ...


class CleanupScheduler:
    def __init__(self, targets: Sequence[Sweepable], *, interval_seconds: float) -> None:
        interval = float(interval_seconds)
        if interval <= 0:
            raise ConfigurationError(f"cleanup interval must be positive, got: {interval_seconds}")

        self._targets = list(targets)
        self._interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def tick(self) -> None:
        for target in self._targets:
            try:
                target.cleanup()
            except Exception:
                # Keep the timer alive; the next tick retries.
                logger.exception("periodic cleanup failed for %s", getattr(target, "name", target))

    def _loop(self) -> None:
        # Event.wait returns True once stop() is called.
        while not self._stop.wait(self._interval):
            self.tick()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="cleanup-scheduler", daemon=True)
        self._thread.start()
        logger.info("cleanup scheduler started (every %.0fs)", self._interval)

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
