"""Tuning deviation helpers for displays.

These compare a reading against an instrument's target frequency. The
signal chain never depends on them.
"""

import math
import re
from typing import Optional

IN_TUNE = "in-tune"
SHARP = "sharp"
FLAT = "flat"
WAITING = "waiting"

DEFAULT_TOLERANCE_CENTS = 5.0

_TARGET_PATTERN = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(?:hz)?\s*$", re.IGNORECASE)


def parse_target_frequency(text: Optional[str]) -> Optional[float]:
    """Parse a tuning frequency such as "440Hz" or "432 hz".

    Returns:
        The frequency in Hz, or None for values like "Variable" or an empty string
    """
    if not text:
        return None
    match = _TARGET_PATTERN.match(text)
    if match is None:
        return None
    value = float(match.group(1))
    return value if value > 0 else None


def cents_off(frequency: float, target: float) -> float:
    """Signed distance from target in cents, positive when sharp."""
    return 1200.0 * math.log2(frequency / target)


def tuning_status(
    frequency: Optional[float],
    target: Optional[float],
    tolerance_cents: float = DEFAULT_TOLERANCE_CENTS,
) -> str:
    if frequency is None or frequency <= 0 or not target:
        return WAITING
    cents = cents_off(frequency, target)
    if abs(cents) <= tolerance_cents:
        return IN_TUNE
    return SHARP if cents > 0 else FLAT
