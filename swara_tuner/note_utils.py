"""Utility functions for working with musical notes and frequencies."""

import math
from typing import List, Optional

from .logger import get_logger
from .note_types import UNKNOWN, NoteClassification

logger = get_logger(__name__)

# Standard reference: A4 = 440Hz = MIDI note 69
A4_FREQUENCY = 440.0
A4_NOTE_NUMBER = 69

# Pitch-class tables, indexed from C. The tonic is fixed at C = Sa = Do.
WESTERN_NOTES: List[str] = [
    "C",
    "C#",
    "D",
    "D#",
    "E",
    "F",
    "F#",
    "G",
    "G#",
    "A",
    "A#",
    "B",
]
SWARA_NOTES: List[str] = [
    "Sa",
    "ri",
    "Re",
    "ga",
    "Ga",
    "ma",
    "Ma",
    "Pa",
    "da",
    "Dha",
    "ni",
    "Ni",
]
SOLFEGE_NOTES: List[str] = [
    "Do",
    "Di",
    "Re",
    "Ri",
    "Mi",
    "Fa",
    "Fi",
    "Sol",
    "Si",
    "La",
    "Li",
    "Ti",
]


def note_number(freq: float) -> int:
    """Nearest equal-tempered MIDI note number for a frequency in Hz."""
    return round(12 * math.log2(freq / A4_FREQUENCY) + A4_NOTE_NUMBER)


def standard_frequency(note_num: int) -> float:
    """Equal-tempered frequency of a MIDI note number."""
    return A4_FREQUENCY * 2.0 ** ((note_num - A4_NOTE_NUMBER) / 12.0)


def classify_frequency(freq: Optional[float]) -> NoteClassification:
    """Name a frequency in the Western, swara and solfege systems.

    Args:
        freq: Frequency in Hz, or None for no signal

    Returns:
        The classification of the nearest equal-tempered note, or UNKNOWN
        when the input is silent or not a usable frequency

    Note:
        - Middle C is C4 (261.63 Hz) = Sa = Do
        - A4 is 440 Hz = Dha = La
        - Octave numbers change between B and C (e.g., B3 -> C4)
    """
    if freq is None or not math.isfinite(freq) or freq <= 0:
        return UNKNOWN

    note_num = note_number(freq)
    pitch_class = note_num % 12
    # SPN octave calculation (C4 is middle C)
    octave = note_num // 12 - 1

    return NoteClassification(
        note_name=WESTERN_NOTES[pitch_class],
        octave=octave,
        swara=SWARA_NOTES[pitch_class],
        solfege=SOLFEGE_NOTES[pitch_class],
    )
