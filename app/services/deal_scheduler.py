"""Background runner for the periodic deal status sweep."""

from __future__ import annotations

import logging
from collections.abc import Callable
from threading import Event, Lock, Thread

from app.services.deal_lifecycle import SweepReport, run_deal_status_sweep

logger = logging.getLogger(__name__)


class DealStatusScheduler:
    """Runs the deal status sweep on a fixed interval in a single daemon thread.

    Only one sweep may run at a time; a tick that arrives while a sweep is
    still in progress is skipped rather than queued.
    """

    def __init__(
        self,
        interval_seconds: float,
        sweep: Callable[[], SweepReport] = run_deal_status_sweep,
    ) -> None:
        self.interval_seconds = interval_seconds
        self._sweep = sweep
        self._run_lock = Lock()
        self._stop_event = Event()
        self._thread: Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def run_once(self) -> SweepReport | None:
        """Run one sweep now; returns None when skipped or failed."""
        if not self._run_lock.acquire(blocking=False):
            logger.warning("Deal status sweep still running; skipping this tick")
            return None
        try:
            return self._sweep()
        except Exception:
            # A failed sweep must never kill the scheduler thread.
            logger.exception("Deal status sweep failed; retrying on next tick")
            return None
        finally:
            self._run_lock.release()

    def _loop(self) -> None:
        self.run_once()
        while not self._stop_event.wait(self.interval_seconds):
            self.run_once()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._thread = Thread(target=self._loop, name="deal-status-sweep", daemon=True)
        self._thread.start()
        logger.info("Deal status sweep scheduled every %.0f seconds", self.interval_seconds)

    def stop(self, timeout: float = 5.0) -> None:
        if self._thread is None:
            return
        self._stop_event.set()
        self._thread.join(timeout=timeout)
        if self._thread.is_alive():
            # At most one sweep loop may be alive; start() checks this handle.
            logger.warning("Deal status sweep still running after %.1fs; scheduler not yet stopped", timeout)
            return
        self._thread = None
        logger.info("Deal status sweep scheduler stopped")
