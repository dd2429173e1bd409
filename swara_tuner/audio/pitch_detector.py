"""Fundamental-frequency estimation by normalized time-domain autocorrelation."""

from __future__ import annotations
import numpy as np
from numpy.lib.stride_tricks import sliding_window_view
from typing import ClassVar, List, Optional, TypeAlias

from ..logger import get_logger
from ..note_types import SampleFrame
from ..core.errors import MalformedFrameError
from ..core.interfaces import IPitchDetector

logger = get_logger(__name__)


class PitchDetector(IPitchDetector):
    """Estimates the pitch of a frame from its average magnitude difference.

    For each lag in the first half of the frame the detector scores how
    closely the frame matches a copy of itself shifted by that lag. The first
    peak that climbs above the lock-on threshold gives the period.
    """

    # Type aliases
    Frequency: TypeAlias = float
    Correlation: TypeAlias = float

    DEFAULT_FRAME_SIZE: ClassVar[int] = 2048

    # Detection constants. These are fixed, changing them changes the output.
    MIN_RMS: ClassVar[float] = 0.01  # Below this the frame is treated as silence
    LOCK_ON_CORRELATION: ClassVar[Correlation] = 0.9
    FALLBACK_CORRELATION: ClassVar[Correlation] = 0.01
    INTERPOLATION_FACTOR: ClassVar[float] = 8.0

    def __init__(self, frame_size: int = DEFAULT_FRAME_SIZE) -> None:
        """Initialize the PitchDetector.

        Args:
            frame_size: Number of samples per frame, must be a power of two

        Raises:
            ValueError: If frame_size is not a power of two
        """
        if frame_size < 2 or frame_size & (frame_size - 1):
            raise ValueError(f"frame_size must be a power of two, got {frame_size}")
        self._frame_size = frame_size
        logger.info(f"Pitch detector initialized: frame_size={frame_size}")

    @property
    def frame_size(self) -> int:
        return self._frame_size

    def detect(self, frame: SampleFrame) -> Optional[Frequency]:
        """Estimate the fundamental frequency of a frame.

        Args:
            frame: A frame of exactly frame_size finite samples

        Returns:
            The frequency in Hz, or None if there is no usable signal

        Raises:
            MalformedFrameError: If the frame has the wrong length or non-finite samples
        """
        buf = self._validate(frame)

        rms = float(np.sqrt(np.mean(buf**2)))
        if rms < self.MIN_RMS:
            logger.debug(f"Signal too weak: rms={rms:.4f} < {self.MIN_RMS}")
            return None

        correlations = self._correlations(buf)
        return self._pick_period(correlations, frame.sample_rate)

    def _validate(self, frame: SampleFrame) -> np.ndarray:
        buf = np.asarray(frame.samples, dtype=np.float64)
        if buf.ndim != 1 or len(buf) != self._frame_size:
            raise MalformedFrameError(
                f"Expected {self._frame_size} mono samples, got shape {buf.shape}"
            )
        if not np.all(np.isfinite(buf)):
            raise MalformedFrameError("Frame contains non-finite samples")
        if not frame.sample_rate > 0:
            raise MalformedFrameError(f"Invalid sample rate: {frame.sample_rate}")
        return buf

    def _correlations(self, buf: np.ndarray) -> List[Correlation]:
        """Score every lag in [0, N/2) as 1 - mean |buf[i] - buf[i + lag]|."""
        half = len(buf) // 2
        # Row `lag` is buf[lag:lag + half]
        shifted = sliding_window_view(buf, half)[:half]
        differences = np.abs(shifted - buf[:half]).sum(axis=1)
        return (1.0 - differences / half).tolist()

    def _pick_period(
        self, correlations: List[Correlation], sample_rate: float
    ) -> Optional[Frequency]:
        best_offset = -1
        best_correlation = 0.0
        locked = False
        last_correlation = 1.0

        for offset, correlation in enumerate(correlations):
            if (
                correlation > self.LOCK_ON_CORRELATION
                and correlation > last_correlation
            ):
                locked = True
                if correlation > best_correlation:
                    best_correlation = correlation
                    best_offset = offset
            elif locked:
                # Past the peak: refine the lag from its neighbours
                shift = (
                    correlations[best_offset + 1] - correlations[best_offset - 1]
                ) / max(correlations[best_offset], 1.0)
                frequency = sample_rate / (
                    best_offset + self.INTERPOLATION_FACTOR * shift
                )
                logger.debug(
                    f"Locked on lag {best_offset} (corr={best_correlation:.4f}, "
                    f"shift={shift:.4f}) -> {frequency:.2f}Hz"
                )
                return frequency
            last_correlation = correlation

        if best_correlation > self.FALLBACK_CORRELATION and best_offset > 0:
            return sample_rate / best_offset

        return None
