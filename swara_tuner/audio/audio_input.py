"""Live audio capture using the sounddevice library."""

from __future__ import annotations
import threading
import numpy as np
import sounddevice as sd
from typing import Any, ClassVar, Dict, List, Optional

from ..logger import get_logger
from ..note_types import SampleFrame
from ..core.errors import DeviceUnavailableError
from ..core.interfaces import IAudioSource

logger = get_logger(__name__)


def list_input_devices() -> List[Dict[str, Any]]:
    """Return the devices that have at least one input channel."""
    devices = []
    for device_id, device in enumerate(sd.query_devices()):
        if device["max_input_channels"] > 0:
            devices.append(
                {
                    "id": device_id,
                    "name": device["name"],
                    "channels": device["max_input_channels"],
                    "default_samplerate": device["default_samplerate"],
                }
            )
    return devices


class SoundDeviceSource(IAudioSource):
    """Audio source reading from an input device through sounddevice.

    The stream callback runs on the audio thread and copies each block into
    a ring of frame_size samples. read_frame() hands out a copy of the ring
    once it has been filled.
    """

    # Audio configuration
    SAMPLE_RATE: ClassVar[int] = 44100  # Hz
    FRAME_SIZE: ClassVar[int] = 2048  # Must match the pitch detector frame size
    BLOCK_SIZE: ClassVar[int] = 512  # Frames per stream callback
    CHANNELS: ClassVar[int] = 1  # Mono audio

    def __init__(
        self,
        device_id: Optional[int] = None,
        sample_rate: Optional[int] = None,
        frame_size: Optional[int] = None,
        channels: Optional[int] = None,
        block_size: Optional[int] = None,
    ) -> None:
        """Initialize the audio source. No device is touched until open().

        Args:
            device_id: Audio input device ID, or None for the default input
            sample_rate: Sample rate in Hz, or None for default (44100)
            frame_size: Samples per frame, or None for default (2048)
            channels: Number of audio channels, or None for default (1)
            block_size: Frames per stream callback, or None for default (512)
        """
        self._device_id = device_id
        self._sample_rate = sample_rate or self.SAMPLE_RATE
        self._frame_size = frame_size or self.FRAME_SIZE
        self._channels = channels or self.CHANNELS
        self._block_size = block_size or self.BLOCK_SIZE

        self._stream: Optional[sd.InputStream] = None
        self._lock = threading.Lock()
        self._ring = np.zeros(self._frame_size, dtype=np.float32)
        self._filled = 0
        self._failure: Optional[str] = None

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def frame_size(self) -> int:
        return self._frame_size

    @property
    def is_open(self) -> bool:
        return self._stream is not None

    def open(self) -> None:
        """Open and start the input stream.

        Raises:
            DeviceUnavailableError: If the device is missing, busy or access is denied
        """
        if self._stream is not None:
            logger.warning("Audio input already open")
            return

        with self._lock:
            self._ring[:] = 0.0
            self._filled = 0
            self._failure = None

        stream = None
        try:
            sd.check_input_settings(
                device=self._device_id,
                channels=self._channels,
                samplerate=self._sample_rate,
            )
            stream = sd.InputStream(
                device=self._device_id,
                samplerate=self._sample_rate,
                blocksize=self._block_size,
                channels=self._channels,
                dtype="float32",
                callback=self._audio_callback,
                finished_callback=self._stream_finished,
            )
            stream.start()
        except (sd.PortAudioError, ValueError) as e:
            if stream is not None:
                stream.close()
            raise DeviceUnavailableError(
                f"Could not open input device {self._device_id}: {e}"
            ) from e

        self._stream = stream
        logger.info(
            f"Audio input started: device={self._device_id}, rate={self._sample_rate}Hz"
        )

    def _audio_callback(
        self,
        indata: np.ndarray,
        _frames: int,
        _time_info,
        status: sd.CallbackFlags,
    ) -> None:
        """Copy a block into the ring. Runs on the audio thread, keep it short."""
        if status:
            logger.warning(f"Audio callback status: {status}")

        # Extract mono audio data (take first channel if multi-channel)
        block = indata[:, 0] if indata.ndim > 1 else indata
        block = block[-self._frame_size :]
        n = len(block)
        if n == 0:
            return

        with self._lock:
            self._ring = np.roll(self._ring, -n)
            self._ring[-n:] = block
            self._filled = min(self._frame_size, self._filled + n)

    def _stream_finished(self) -> None:
        # Fires on normal close too; only matters while we still hold the stream
        if self._stream is not None:
            with self._lock:
                self._failure = "Input stream finished unexpectedly"

    def read_frame(self) -> Optional[SampleFrame]:
        """Return the latest frame_size samples, or None until the ring is full.

        Raises:
            DeviceUnavailableError: If the stream stopped on its own
        """
        if self._stream is None:
            raise DeviceUnavailableError("Audio input is not open")

        with self._lock:
            failure = self._failure
            if failure is None and self._filled >= self._frame_size:
                samples = self._ring.copy()
            else:
                samples = None

        if failure is not None:
            raise DeviceUnavailableError(failure)
        if samples is None:
            return None
        return SampleFrame.from_samples(samples, self._sample_rate)

    def close(self) -> None:
        """Stop and release the input stream. Safe to call when not open."""
        stream, self._stream = self._stream, None
        if stream is None:
            return

        try:
            stream.stop()
            stream.close()
            logger.info("Audio input stopped")
        except sd.PortAudioError as e:
            logger.error(f"Error stopping audio input: {e}")
