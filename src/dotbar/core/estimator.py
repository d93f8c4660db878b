"""Ticking countdown of estimated remaining seconds."""

import threading
from collections.abc import Callable


class TimeEstimator:
    """Count an estimate down once per interval on a background thread.

    ``on_tick`` runs on the ticking thread after every decrement.
    """

    def __init__(self, seconds: int, interval: float = 1.0, on_tick: Callable[[], None] | None = None):
        self.remaining = max(0, int(seconds))
        self.interval = interval
        self.on_tick = on_tick
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def active(self) -> bool:
        return self._thread is not None

    def start(self) -> None:
        """Start ticking; does nothing without an estimate or when running."""
        if self._thread is not None or self.remaining <= 0 or self._stop.is_set():
            return

        self._thread = threading.Thread(target=self._run, name="dotbar-estimator", daemon=True)
        self._thread.start()

    def tick(self) -> None:
        self.remaining = max(0, self.remaining - 1)

    def stop(self) -> None:
        """Cancel the cadence. Safe to call repeatedly or before ``start``."""
        self._stop.set()

        thread = self._thread
        self._thread = None
        if thread is not None and thread is not threading.current_thread():
            thread.join()

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.tick()
            if self.on_tick is not None and not self._stop.is_set():
                self.on_tick()
