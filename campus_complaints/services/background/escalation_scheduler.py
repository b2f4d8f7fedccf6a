"""
Escalation scheduler.

Runs the escalation sweep on a background thread: once immediately on
start, then every interval until stopped.

- Single-flight: a sweep never starts while another is running
- Overrun handling: ticks missed during a long sweep are skipped, not queued
- Fault isolation: a failed sweep is logged and the loop carries on
- Cooperative stop: ``stop()`` interrupts the wait at once but lets an
  in-flight sweep finish its commit
"""

import math
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Optional, Tuple

from campus_complaints.config.logging import get_logger
from campus_complaints.config.settings import Settings, get_settings

logger = get_logger(__name__)


@dataclass
class SchedulerConfig:
    """Configuration for the escalation scheduler."""
    interval_seconds: float = 24 * 3600
    run_on_start: bool = True
    stop_timeout_seconds: float = 30.0

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "SchedulerConfig":
        settings = settings or get_settings()
        return cls(interval_seconds=settings.ESCALATION_INTERVAL_HOURS * 3600)


def next_deadline(previous_deadline: float, now: float, interval: float) -> Tuple[float, int]:
    """
    Next tick after a run that was due at ``previous_deadline``.

    Returns the first ``previous_deadline + k * interval`` (k >= 1) that is
    not in the past, and how many ticks were skipped to reach it.
    """
    if interval <= 0:
        raise ValueError("interval must be positive")
    elapsed = now - previous_deadline
    steps = max(1, math.ceil(elapsed / interval))
    return previous_deadline + steps * interval, steps - 1


class EscalationScheduler:
    """
    Periodic driver for an escalation sweep.

    Args:
        sweep: Callable running one sweep (e.g. ``ComplaintEscalationService.run_sweep``)
        config: Interval and start/stop behaviour
        stop_event: Shutdown signal; a fresh event by default
        monotonic: Time source for tick arithmetic
    """

    def __init__(
        self,
        sweep: Callable[[], Any],
        config: Optional[SchedulerConfig] = None,
        *,
        stop_event: Optional[threading.Event] = None,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        self._sweep = sweep
        self.config = config or SchedulerConfig()
        self._stop_event = stop_event or threading.Event()
        self._monotonic = monotonic
        self._run_lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None

        self.last_result: Any = None
        self.last_error: Optional[BaseException] = None
        self.runs = 0
        self.failures = 0
        self.skipped_ticks = 0

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def is_sweeping(self) -> bool:
        return self._run_lock.locked()

    def start(self) -> None:
        """
        Start the background loop.

        Raises:
            RuntimeError: If already running
        """
        if self.is_running:
            raise RuntimeError("Escalation scheduler is already running")

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._loop,
            name="escalation-scheduler",
            daemon=True,
        )
        self._thread.start()
        logger.info(f"Escalation scheduler started (interval {self.config.interval_seconds:.0f}s)")

    def stop(self, timeout: Optional[float] = None) -> bool:
        """
        Signal shutdown and wait for the loop to exit.

        Returns:
            True if the loop has stopped within ``timeout``
        """
        self._stop_event.set()
        thread = self._thread
        if thread is None:
            return True

        thread.join(self.config.stop_timeout_seconds if timeout is None else timeout)
        stopped = not thread.is_alive()
        if stopped:
            self._thread = None
            logger.info("Escalation scheduler stopped")
        else:
            logger.warning("Escalation scheduler did not stop in time; a sweep is still running")
        return stopped

    def run_once(self) -> Any:
        """
        Run one sweep now unless one is already running.

        Returns:
            The sweep's result, or None when skipped because a sweep is in
            flight

        Raises:
            Whatever the sweep raises
        """
        if not self._run_lock.acquire(blocking=False):
            logger.warning("Escalation sweep already in progress, skipping")
            return None
        try:
            result = self._sweep()
            self.runs += 1
            self.last_result = result
            self.last_error = None
            return result
        finally:
            self._run_lock.release()

    def _tick(self) -> None:
        try:
            self.run_once()
        except Exception as e:
            self.failures += 1
            self.last_error = e
            logger.error(f"Escalation tick abandoned: {e}", exc_info=True)

    def _loop(self) -> None:
        deadline = self._monotonic()
        if not self.config.run_on_start:
            deadline += self.config.interval_seconds
            if self._stop_event.wait(self.config.interval_seconds):
                return

        while not self._stop_event.is_set():
            self._tick()

            deadline, skipped = next_deadline(deadline, self._monotonic(), self.config.interval_seconds)
            if skipped:
                self.skipped_ticks += skipped
                logger.warning(f"Escalation sweep overran its interval; skipped {skipped} tick(s)")

            wait = deadline - self._monotonic()
            if wait > 0 and self._stop_event.wait(wait):
                break


__all__ = ["EscalationScheduler", "SchedulerConfig", "next_deadline"]
