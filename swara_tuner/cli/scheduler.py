"""Fixed-rate tick scheduler for command line sessions."""

import time
from typing import Callable, Optional

from ..logger import get_logger
from ..audio.tuner_service import TunerSession

logger = get_logger(__name__)


class FixedRateScheduler:
    """Calls session.tick() at a fixed rate on the calling thread.

    The scheduler registers itself with the session, so disposing the session
    cancels any further ticks.
    """

    def __init__(
        self,
        session: TunerSession,
        tick_hz: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ):
        if tick_hz <= 0:
            raise ValueError(f"tick_hz must be positive, got {tick_hz}")
        self._session = session
        self._interval = 1.0 / tick_hz
        self._clock = clock
        self._sleep = sleep
        self._cancelled = False
        session.add_cancel_callback(self.cancel)

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True

    def run(self, duration: Optional[float] = None) -> int:
        """Tick until cancelled or until duration seconds have passed.

        Returns:
            The number of ticks delivered
        """
        start = self._clock()
        next_tick = start
        ticks = 0

        while not self._cancelled:
            now = self._clock()
            if duration is not None and now - start >= duration:
                break
            if now < next_tick:
                self._sleep(next_tick - now)
                continue

            self._session.tick(now)
            ticks += 1
            # Skip missed slots instead of bursting to catch up
            next_tick += self._interval
            if next_tick <= now:
                next_tick = now + self._interval

        logger.debug(f"Scheduler delivered {ticks} ticks")
        return ticks
