"""Tuner service tying the signal chain to an audio source."""

from __future__ import annotations
import time
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..logger import get_logger
from ..note_types import NoteEvent, Reading, SampleFrame, SignalStatus
from ..note_utils import classify_frequency
from ..note_recorder import NoteRecorder
from ..detection.smoother import Smoother
from ..detection.history import HistoryBuffer
from ..core.errors import DeviceUnavailableError, TunerError
from ..core.events import TunerEvents
from ..core.interfaces import IAudioSource, IPitchDetector
from .pitch_detector import PitchDetector

logger = get_logger(__name__)


class TunerSession:
    """A single capture session holding one open audio source.

    Returned by Tuner.start(). The external scheduler calls tick() once per
    display refresh and registers its cancellation with add_cancel_callback()
    so that dispose() stops it along with the device.
    """

    def __init__(self, tuner: "Tuner", source: IAudioSource) -> None:
        self._tuner = tuner
        self._source = source
        self._cancel_callbacks: List[Callable[[], None]] = []
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    @property
    def source(self) -> IAudioSource:
        return self._source

    def add_cancel_callback(self, callback: Callable[[], None]) -> None:
        """Register a function that cancels the scheduled ticks of this session."""
        self._cancel_callbacks.append(callback)

    def tick(self, now: Optional[float] = None) -> Reading:
        """Pull one frame from the source and run it through the tuner.

        Args:
            now: Tick time in seconds, or None to use the tuner's clock

        Returns:
            The new Reading, or the previous one if no frame was ready

        Raises:
            DeviceUnavailableError: If the source failed; the session is disposed first
            TunerError: If the session was already disposed
        """
        if not self._active:
            raise TunerError("tick() called on a disposed session")

        try:
            frame = self._source.read_frame()
        except DeviceUnavailableError as e:
            self._tuner._handle_device_failure(self, e)
            raise

        if frame is None:
            return self._tuner.last_reading
        return self._tuner.step(frame, now)

    def dispose(self) -> None:
        """Cancel scheduled ticks and release the audio source. Idempotent."""
        if not self._active:
            return
        self._active = False

        for callback in self._cancel_callbacks:
            try:
                callback()
            except Exception as e:
                logger.error(f"Error cancelling scheduled ticks: {e}")
        self._cancel_callbacks = []

        try:
            self._source.close()
        finally:
            self._tuner._session_disposed(self)
            logger.info("Tuner session disposed")

    def __enter__(self) -> "TunerSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()


class Tuner:
    """Facade over the pitch detector, smoother, classifier, recorder and history.

    step() is a pure per-frame operation and can be driven without any audio
    source. start()/stop() manage the single capture session.
    """

    def __init__(
        self,
        frame_size: int = PitchDetector.DEFAULT_FRAME_SIZE,
        detector: Optional[IPitchDetector] = None,
        debounce_interval: float = NoteRecorder.DEBOUNCE_INTERVAL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """Initialize the tuner.

        Args:
            frame_size: Samples per frame for the default detector
            detector: Pitch detector, or None to create a PitchDetector
            debounce_interval: Minimum seconds between recorded note changes
            clock: Source of tick times when step() is not given one
        """
        self._detector = detector or PitchDetector(frame_size)
        self._smoother = Smoother()
        self._history = HistoryBuffer()
        self._recorder = NoteRecorder(debounce_interval)
        self._clock = clock
        self._session: Optional[TunerSession] = None
        self._last_reading = Reading.waiting()
        self.events = TunerEvents()

    @property
    def session(self) -> Optional[TunerSession]:
        return self._session

    @property
    def recorder(self) -> NoteRecorder:
        return self._recorder

    @property
    def history(self) -> HistoryBuffer:
        return self._history

    @property
    def last_reading(self) -> Reading:
        return self._last_reading

    def is_running(self) -> bool:
        """Check if a capture session is active."""
        return self._session is not None

    def step(self, frame: SampleFrame, now: Optional[float] = None) -> Reading:
        """Process one frame and return the reading for this tick.

        Raises:
            MalformedFrameError: If the frame is rejected by the detector
        """
        if now is None:
            now = self._clock()

        estimate = self._detector.detect(frame)
        frequency = self._smoother.update(estimate)
        self._history.push(frequency)

        classification = classify_frequency(frequency)
        status = SignalStatus.WAITING if frequency is None else SignalStatus.LISTENING

        event = self._recorder.observe(classification, now)
        if event is not None:
            self.events.emit_note_recorded(event)

        reading = Reading.from_classification(frequency, classification, status)
        self._last_reading = reading
        self.events.emit_reading(reading)
        return reading

    def start(self, source: IAudioSource) -> TunerSession:
        """Open a capture session on the given source.

        Any active session is disposed first, so at most one source is open.

        Raises:
            DeviceUnavailableError: If the source could not be opened; nothing is left open
            ValueError: If the source frame size does not match the detector
        """
        self.stop()

        frame_size = getattr(self._detector, "frame_size", source.frame_size)
        if source.frame_size != frame_size:
            raise ValueError(
                f"Source frame size {source.frame_size} does not match detector "
                f"frame size {frame_size}"
            )

        try:
            source.open()
        except Exception as e:
            logger.error(f"Could not open audio source: {e}")
            source.close()
            raise

        self._smoother.reset()
        self._session = TunerSession(self, source)
        logger.info(f"Tuner session started at {source.sample_rate} Hz")
        return self._session

    def stop(self) -> None:
        """Dispose the active session, if any. Safe to call at any time."""
        if self._session is not None:
            self._session.dispose()

    def start_recording(self) -> None:
        self._recorder.start()

    def stop_recording(self) -> None:
        self._recorder.stop()

    def recorded_events(self) -> Tuple[NoteEvent, ...]:
        return self._recorder.events

    def export_events(self) -> List[Dict[str, Any]]:
        """Recorded events as plain dicts for a document generator."""
        return self._recorder.export()

    def history_snapshot(self) -> Tuple[float, ...]:
        return self._history.snapshot()

    def _session_disposed(self, session: TunerSession) -> None:
        if self._session is session:
            self._session = None
            self._smoother.reset()
            self._last_reading = Reading.waiting()

    def _handle_device_failure(
        self, session: TunerSession, error: DeviceUnavailableError
    ) -> None:
        logger.error(f"Audio device failed: {error}")
        # Recorded notes survive the failure
        self._recorder.stop()
        session.dispose()
        self._last_reading = Reading.unavailable()
        self.events.emit_device_error(error)
        self.events.emit_reading(self._last_reading)
