"""Swara Tuner: real-time pitch detection and note classification."""

from .note_types import (
    UNKNOWN,
    NoteClassification,
    NoteEvent,
    Reading,
    SampleFrame,
    SignalStatus,
)
from .note_utils import classify_frequency
from .note_recorder import NoteRecorder
from .detection.smoother import Smoother
from .detection.history import HistoryBuffer
from .audio.pitch_detector import PitchDetector
from .audio.tuner_service import Tuner, TunerSession
from .core.errors import DeviceUnavailableError, MalformedFrameError, TunerError

__all__ = [
    "UNKNOWN",
    "NoteClassification",
    "NoteEvent",
    "Reading",
    "SampleFrame",
    "SignalStatus",
    "classify_frequency",
    "NoteRecorder",
    "Smoother",
    "HistoryBuffer",
    "PitchDetector",
    "Tuner",
    "TunerSession",
    "DeviceUnavailableError",
    "MalformedFrameError",
    "TunerError",
]
