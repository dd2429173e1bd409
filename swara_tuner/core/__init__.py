"""Core components for the Swara Tuner engine."""

# Import interfaces for easier access
from .interfaces import IAudioSource, IPitchDetector

__all__ = ["IAudioSource", "IPitchDetector"]
