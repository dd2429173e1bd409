"""Exception types raised by the tuner engine."""


class TunerError(Exception):
    """Base class for tuner engine errors."""


class DeviceUnavailableError(TunerError):
    """Raised when an audio source cannot be acquired or stops delivering audio.

    This covers permission denial, a missing or busy capture device and an
    unreadable sound file. It is fatal to the capture session only.
    """


class MalformedFrameError(TunerError, ValueError):
    """Raised when a sample frame has the wrong length or non-finite samples."""
