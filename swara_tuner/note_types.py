"""Type definitions for the Swara Tuner project."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

import numpy as np


class SignalStatus(Enum):
    """Status flag carried by every Reading."""

    LISTENING = "listening"  # A pitched signal was detected this tick
    WAITING = "waiting"  # Signal too weak, waiting for sound
    UNAVAILABLE = "unavailable"  # Capture device failed


@dataclass(frozen=True, eq=False)
class SampleFrame:
    """A captured block of mono audio samples. Immutable once captured."""

    samples: np.ndarray = field(repr=False)
    sample_rate: float

    @classmethod
    def from_samples(cls, samples, sample_rate: float) -> "SampleFrame":
        """Copy samples into a read-only float64 array and wrap them."""
        data = np.array(samples, dtype=np.float64).reshape(-1)
        data.setflags(write=False)
        return cls(samples=data, sample_rate=float(sample_rate))

    def __len__(self) -> int:
        return len(self.samples)


@dataclass(frozen=True)
class NoteClassification:
    """A frequency named in the Western, swara and solfege systems."""

    note_name: str  # Western pitch class (e.g., 'A', 'C#')
    octave: Optional[int]  # Scientific pitch octave, None when unknown
    swara: str  # e.g. 'Dha'
    solfege: str  # e.g. 'La'

    @property
    def is_unknown(self) -> bool:
        return self.octave is None

    def __str__(self):
        if self.is_unknown:
            return self.note_name
        return f"{self.note_name}{self.octave}"


UNKNOWN_LABEL = "---"

# Sentinel returned for silence or unusable frequencies
UNKNOWN = NoteClassification(
    note_name=UNKNOWN_LABEL, octave=None, swara=UNKNOWN_LABEL, solfege=UNKNOWN_LABEL
)


@dataclass(frozen=True)
class NoteEvent:
    """A note accepted by the recorder, stamped with the tick time in seconds."""

    classification: NoteClassification
    timestamp: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "note_name": self.classification.note_name,
            "octave": self.classification.octave,
            "swara": self.classification.swara,
            "solfege": self.classification.solfege,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class Reading:
    """What the display sees after each tick."""

    frequency: Optional[float]  # Smoothed frequency in Hz, None when silent
    note_name: str
    octave: Optional[int]
    swara: str
    solfege: str
    status: SignalStatus

    @classmethod
    def from_classification(
        cls,
        frequency: Optional[float],
        classification: NoteClassification,
        status: SignalStatus,
    ) -> "Reading":
        return cls(
            frequency=frequency,
            note_name=classification.note_name,
            octave=classification.octave,
            swara=classification.swara,
            solfege=classification.solfege,
            status=status,
        )

    @classmethod
    def waiting(cls) -> "Reading":
        return cls.from_classification(None, UNKNOWN, SignalStatus.WAITING)

    @classmethod
    def unavailable(cls) -> "Reading":
        return cls.from_classification(None, UNKNOWN, SignalStatus.UNAVAILABLE)
