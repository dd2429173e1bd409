from collections import deque
from typing import Deque, Optional, Tuple

from ..logger import get_logger

logger = get_logger(__name__)


class HistoryBuffer:
    """
    Fixed-capacity record of recent frequencies for trend display.

    Once full, every push evicts the oldest value.
    """

    CAPACITY = 100
    SILENCE_DECAY = 0.98
    # Decayed values below this are stored as the 0.0 silence sentinel
    SILENCE_FLOOR_HZ = 1.0

    def __init__(self, capacity: int = CAPACITY):
        self._values: Deque[float] = deque(maxlen=capacity)

    def __len__(self) -> int:
        return len(self._values)

    @property
    def capacity(self) -> int:
        return self._values.maxlen

    @property
    def latest(self) -> float:
        """Newest value, 0.0 when empty."""
        return self._values[-1] if self._values else 0.0

    def push(self, frequency: Optional[float]) -> float:
        """Append one tick's frequency, decaying the last value on silence.

        Returns:
            The value that was stored
        """
        if frequency is None:
            value = self.latest * self.SILENCE_DECAY
            if value < self.SILENCE_FLOOR_HZ:
                value = 0.0
        else:
            value = float(frequency)
        self._values.append(value)
        return value

    def snapshot(self) -> Tuple[float, ...]:
        """Current contents, oldest first."""
        return tuple(self._values)

    def clear(self) -> None:
        self._values.clear()
