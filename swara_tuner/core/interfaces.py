"""Defines the core interfaces for the Swara Tuner engine."""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional

from ..note_types import SampleFrame


class IAudioSource(ABC):
    """Interface for audio frame sources (capture devices, files)."""

    @abstractmethod
    def open(self) -> None:
        """Acquire the underlying device handle.

        Raises:
            DeviceUnavailableError: If the device cannot be acquired
        """
        pass

    @abstractmethod
    def read_frame(self) -> Optional[SampleFrame]:
        """Return the latest frame, or None if no complete frame is ready yet.

        Raises:
            DeviceUnavailableError: If the source stopped delivering audio
        """
        pass

    @abstractmethod
    def close(self) -> None:
        """Release the device handle. Safe to call when not open."""
        pass

    @property
    @abstractmethod
    def is_open(self) -> bool:
        """Whether a device handle is currently held."""
        pass

    @property
    @abstractmethod
    def sample_rate(self) -> int:
        """The sample rate of the audio stream."""
        pass

    @property
    @abstractmethod
    def frame_size(self) -> int:
        """Number of samples per frame."""
        pass


class IPitchDetector(ABC):
    """Interface for fundamental-frequency estimators."""

    @abstractmethod
    def detect(self, frame: SampleFrame) -> Optional[float]:
        """Estimate the fundamental frequency of a frame, None when silent."""
        pass
