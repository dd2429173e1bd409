"""Audio source that replays a sound file frame by frame."""

from __future__ import annotations
import numpy as np
import soundfile as sf
from typing import Optional

from ..logger import get_logger
from ..note_types import SampleFrame
from ..core.errors import DeviceUnavailableError
from ..core.interfaces import IAudioSource

logger = get_logger(__name__)


class WavFileSource(IAudioSource):
    """Provides frames by reading consecutive blocks from a sound file.

    Each read_frame() call consumes the next frame_size samples. The last
    partial block is zero padded. When the file runs out read_frame() returns
    None, or starts over if loop is set.
    """

    def __init__(
        self,
        file_path: str,
        frame_size: int = 2048,
        loop: bool = False,
        gain: float = 1.0,
    ):
        self._file_path = file_path
        self._frame_size = frame_size
        self._loop = loop
        self._gain = gain
        self._file: Optional[sf.SoundFile] = None
        self._sample_rate = 0
        self._exhausted = False

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def frame_size(self) -> int:
        return self._frame_size

    @property
    def is_open(self) -> bool:
        return self._file is not None

    @property
    def exhausted(self) -> bool:
        """True once a non-looping file has been read to the end."""
        return self._exhausted

    def open(self) -> None:
        if self._file is not None:
            return
        try:
            self._file = sf.SoundFile(self._file_path)
        except (RuntimeError, OSError) as e:
            raise DeviceUnavailableError(
                f"Could not open sound file {self._file_path}: {e}"
            ) from e
        self._sample_rate = self._file.samplerate
        self._exhausted = False
        logger.info(
            f"Opened {self._file_path}: {self._file.samplerate}Hz, "
            f"{self._file.channels} channel(s), {self._file.frames} frames"
        )

    def read_frame(self) -> Optional[SampleFrame]:
        if self._file is None:
            raise DeviceUnavailableError("Sound file is not open")

        try:
            data = self._file.read(self._frame_size, dtype="float32", always_2d=True)
            if len(data) == 0 and self._loop:
                self._file.seek(0)
                data = self._file.read(
                    self._frame_size, dtype="float32", always_2d=True
                )
        except (RuntimeError, OSError) as e:
            raise DeviceUnavailableError(
                f"Error reading {self._file_path}: {e}"
            ) from e

        if len(data) == 0:
            self._exhausted = True
            return None

        # First channel only, as for live input
        samples = data[:, 0]
        if len(samples) < self._frame_size:
            padding = np.zeros(self._frame_size - len(samples), dtype=samples.dtype)
            samples = np.concatenate((samples, padding))

        if self._gain != 1.0:
            samples = samples * self._gain

        return SampleFrame.from_samples(samples, self._sample_rate)

    def close(self) -> None:
        file, self._file = self._file, None
        if file is not None:
            file.close()
            logger.info(f"Closed {self._file_path}")
