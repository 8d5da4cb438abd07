"""Fixed-interval ticker driving the processing pass."""

import logging
import threading
import time
from typing import Callable

logger = logging.getLogger(__name__)


class Poller:
    """Call *tick* every *interval* seconds until *shutdown_event* is set.

    Ticks are aligned to ``start + n * interval``. A pass that overruns its
    slot drops the missed ticks instead of queueing them, so passes never
    overlap and at most one tick is ever pending.
    """

    def __init__(
        self,
        interval: float,
        tick: Callable[[], None],
        shutdown_event: threading.Event | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._interval = interval
        self._tick = tick
        self._shutdown = shutdown_event or threading.Event()
        self._clock = clock
        self.ticks = 0

    def _next_deadline(self, deadline: float) -> float:
        deadline += self._interval
        now = self._clock()
        if now >= deadline:
            missed = int((now - deadline) // self._interval)
            if missed:
                logger.debug("Dropped %d tick(s) after a slow pass", missed)
            deadline += missed * self._interval
        return deadline

    def run(self, max_ticks: int | None = None) -> None:
        deadline = self._clock() + self._interval
        while not self._shutdown.is_set():
            if self._shutdown.wait(max(0.0, deadline - self._clock())):
                break
            try:
                self._tick()
            except Exception:
                logger.exception("Unexpected error during processing pass")
            self.ticks += 1
            if max_ticks is not None and self.ticks >= max_ticks:
                break
            deadline = self._next_deadline(deadline)

    def stop(self) -> None:
        self._shutdown.set()
