from collections import deque
from typing import Deque, Optional

from ..logger import get_logger
from ..note_utils import note_number, standard_frequency

logger = get_logger(__name__)


class Smoother:
    """
    Averages the most recent pitch estimates and snaps the result to the
    nearest equal-tempered pitch when it is close enough.
    """

    WINDOW_SIZE = 5
    SNAP_THRESHOLD_HZ = 3.0

    def __init__(
        self,
        window_size: int = WINDOW_SIZE,
        snap_threshold: float = SNAP_THRESHOLD_HZ,
    ):
        self._snap_threshold = snap_threshold
        self._window: Deque[float] = deque(maxlen=window_size)

    def __len__(self) -> int:
        return len(self._window)

    def update(self, estimate: Optional[float]) -> Optional[float]:
        """Feed one tick's estimate and return the smoothed frequency.

        A missing estimate pushes nothing and evicts the oldest entry, so a
        run of silent ticks empties the window instead of holding a stale
        average. Silent ticks return None.
        """
        if estimate is None:
            if self._window:
                self._window.popleft()
            return None

        self._window.append(estimate)
        mean = sum(self._window) / len(self._window)
        return self.quantize(mean)

    def quantize(self, frequency: float) -> float:
        """Snap a frequency to its equal-tempered pitch if within the threshold."""
        target = standard_frequency(note_number(frequency))
        if abs(frequency - target) < self._snap_threshold:
            return target
        return frequency

    def reset(self) -> None:
        self._window.clear()
