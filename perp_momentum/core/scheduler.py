"""
Scheduler: Triggers the monitoring cycle at a fixed interval.

Waits on a shared stop event between cycles so a stop request takes
effect immediately instead of after a full sleep.
"""

import logging
import threading
import time
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class Scheduler:
    """
    Fixed-interval cycle scheduler.

    Calls `callback` every `interval_sec` seconds, measured from the start of
    the previous cycle. Errors raised by the callback are logged and the
    loop continues.
    """

    def __init__(
        self,
        interval_sec: float,
        callback: Callable[[], object],
        stop_event: Optional[threading.Event] = None,
    ):
        """
        Initialize scheduler.

        Args:
            interval_sec: Seconds between cycle starts
            callback: Function to call on each trigger
            stop_event: Cancellation signal shared with the callback's owner
        """
        if interval_sec <= 0:
            raise ValueError(f"interval_sec must be > 0, got {interval_sec}")
        self.interval_sec = interval_sec
        self.callback = callback
        self.stop_event = stop_event or threading.Event()
        self.last_run_ts: float = 0.0
        self.cycles: int = 0

    @property
    def running(self) -> bool:
        return not self.stop_event.is_set()

    def next_run_time(self) -> datetime:
        """Next trigger time (UTC)."""
        if not self.last_run_ts:
            return datetime.now(timezone.utc)
        return datetime.fromtimestamp(self.last_run_ts, timezone.utc) + timedelta(seconds=self.interval_sec)

    def seconds_until_next_run(self) -> float:
        if not self.last_run_ts:
            return 0.0
        return max(0.0, self.last_run_ts + self.interval_sec - time.time())

    def run_once(self) -> bool:
        """
        Run a single cycle now.

        Returns:
            True if the callback completed without raising
        """
        self.last_run_ts = time.time()
        self.cycles += 1
        try:
            self.callback()
            return True
        except Exception:
            logger.exception("[Scheduler] Error during cycle %d", self.cycles)
            return False

    def run_forever(self):
        """
        Run scheduler loop until stopped.

        Blocks. The stop event is checked before every cycle.
        """
        logger.info("[Scheduler] Started. Interval=%ss", self.interval_sec)

        while not self.stop_event.is_set():
            sleep_sec = self.seconds_until_next_run()
            if sleep_sec > 0:
                logger.debug("[Scheduler] Next cycle in %.0fs at %s", sleep_sec, self.next_run_time().isoformat())
                if self.stop_event.wait(sleep_sec):
                    break
                continue

            self.run_once()

        logger.info("[Scheduler] Stopped after %d cycles", self.cycles)

    def stop(self):
        """Stop the scheduler loop."""
        logger.info("[Scheduler] Stopping...")
        self.stop_event.set()
