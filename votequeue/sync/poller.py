"""
Periodic reconciliation for votequeue.

ReconcileTimer calls a refresh function right away and then once every
interval on a daemon thread, until stopped. The thread waits on an Event
instead of sleeping, so stop() returns without waiting out the interval.

Usage:
    timer = ReconcileTimer(engine.refresh, interval=8.0)
    timer.start()
    ...
    timer.stop()

    # Or scoped:
    with ReconcileTimer(engine.refresh, interval=8.0):
        ...
"""

import threading
from typing import Callable

from votequeue.core.config import DEFAULT_POLL_INTERVAL
from votequeue.core.logger import get_logger

logger = get_logger(__name__)


class ReconcileTimer:
    """
    Owned, cancellable periodic refresh task.

    Attributes:
        interval: Seconds between refreshes.
        ticks: Number of refresh calls made so far.

    Thread Safety:
        start() and stop() may be called from any thread and are both
        idempotent.
    """

    def __init__(
        self,
        refresh: Callable[[], object],
        interval: float = DEFAULT_POLL_INTERVAL,
        on_tick: Callable[[], None] | None = None
    ) -> None:
        """
        Args:
            refresh: Called on every tick. Exceptions are logged and the
                     loop keeps going.
            interval: Seconds between ticks. Must be positive.
            on_tick: Called after each refresh, e.g. to redraw a display.

        Raises:
            ValueError: If interval is not positive.
        """
        if interval <= 0:
            raise ValueError(f"interval must be positive, got {interval}")

        self.interval = interval
        self.ticks = 0
        self._refresh = refresh
        self._on_tick = on_tick
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        thread = self._thread
        return thread is not None and thread.is_alive()

    def start(self) -> None:
        """Start ticking. Does nothing if already running."""
        with self._lock:
            if self._thread is not None:
                return
            self._stop_event.clear()
            self._thread = threading.Thread(
                target=self._run,
                name="votequeue-reconcile",
                daemon=True
            )
            self._thread.start()
        logger.debug(f"Reconcile timer started (every {self.interval}s)")

    def stop(self, timeout: float | None = None) -> None:
        """
        Stop ticking and wait for the thread to exit.

        A refresh already in progress finishes first; no new one starts.
        Does nothing if not running.
        """
        with self._lock:
            thread = self._thread
            if thread is None:
                return
            self._thread = None
            self._stop_event.set()

        if thread is not threading.current_thread():
            thread.join(timeout)
        logger.debug("Reconcile timer stopped")

    def _run(self) -> None:
        while not self._stop_event.is_set():
            self._tick()
            if self._stop_event.wait(self.interval):
                break

    def _tick(self) -> None:
        self.ticks += 1
        try:
            self._refresh()
            if self._on_tick is not None:
                self._on_tick()
        except Exception:
            logger.exception("Reconcile tick failed")

    def __enter__(self) -> "ReconcileTimer":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
