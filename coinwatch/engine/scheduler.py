"""
Recurring Job Scheduler
=======================

Runs a job on a fixed period from a background thread. At most one run
is in flight at a time: a tick (or manual run) that arrives while the
job is executing is dropped, not queued.
"""

import logging
import threading
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 120.0
DEFAULT_INITIAL_DELAY_SECONDS = 5.0


class Scheduler:
    """Fixed-period timer with an overlap guard.

    States: stopped -> running -> stopped. ``start`` and ``stop`` are
    idempotent. ``stop`` only prevents future ticks; a run already in
    progress finishes normally.
    """

    def __init__(
        self,
        job: Callable[[], Any],
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        initial_delay_seconds: float = DEFAULT_INITIAL_DELAY_SECONDS,
        name: str = "scheduler",
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        if initial_delay_seconds < 0:
            raise ValueError("initial_delay_seconds cannot be negative")

        self.job = job
        self.interval_seconds = interval_seconds
        self.initial_delay_seconds = initial_delay_seconds
        self.name = name

        self._state_lock = threading.Lock()
        self._run_lock = threading.Lock()
        self._stop_event: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None
        self.skipped_ticks = 0

    @property
    def is_running(self) -> bool:
        with self._state_lock:
            return self._thread is not None

    @property
    def is_busy(self) -> bool:
        """Whether a run is currently in flight."""
        return self._run_lock.locked()

    def start(self) -> None:
        with self._state_lock:
            if self._thread is not None:
                logger.warning(f"{self.name} is already running")
                return

            self._stop_event = threading.Event()
            self._thread = threading.Thread(
                target=self._loop,
                args=(self._stop_event,),
                name=self.name,
                daemon=True,
            )
            self._thread.start()

        logger.info(
            f"{self.name} started - running every {self.interval_seconds:g}s "
            f"(first run in {self.initial_delay_seconds:g}s)"
        )

    def stop(self) -> None:
        with self._state_lock:
            if self._thread is None:
                logger.warning(f"{self.name} is not running")
                return

            self._stop_event.set()
            self._thread = None
            self._stop_event = None

        logger.info(f"{self.name} stopped")

    def run_once(self) -> bool:
        """Run the job now unless a run is already in flight.

        Returns:
            True if the job ran, False if the call was dropped.
        """
        if not self._run_lock.acquire(blocking=False):
            self.skipped_ticks += 1
            logger.warning(f"{self.name}: previous run still in progress, skipping")
            return False

        try:
            self.job()
        except Exception:
            logger.exception(f"{self.name}: job failed")
        finally:
            self._run_lock.release()
        return True

    def _loop(self, stop_event: threading.Event) -> None:
        if stop_event.wait(self.initial_delay_seconds):
            return
        self.run_once()

        while not stop_event.wait(self.interval_seconds):
            self.run_once()
