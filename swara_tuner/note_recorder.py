"""Debounced recording of note changes."""

from typing import Any, Dict, List, Optional, Tuple

from .logger import get_logger
from .note_types import NoteClassification, NoteEvent

# Get logger for this module
logger = get_logger(__name__)


class NoteRecorder:
    """Records a note event each time the played note changes.

    The recorder is Idle until start() arms it. While armed, observe() appends
    an event when the note name differs from the last recorded one and more
    than the debounce interval has passed since that event. stop() returns to
    Idle and keeps the log; only the next start() discards it.
    """

    DEBOUNCE_INTERVAL = 0.2  # seconds

    def __init__(self, debounce_interval: float = DEBOUNCE_INTERVAL):
        self._debounce_interval = debounce_interval
        self._events: List[NoteEvent] = []
        self._armed = False
        self._last_note_name: Optional[str] = None
        self._last_event_time: Optional[float] = None

    @property
    def is_armed(self) -> bool:
        return self._armed

    @property
    def events(self) -> Tuple[NoteEvent, ...]:
        return tuple(self._events)

    def start(self) -> None:
        """Arm the recorder with an empty log, discarding any previous one."""
        if self._events:
            logger.info(f"Discarding previous recording of {len(self._events)} notes")
        self._events = []
        self._last_note_name = None
        self._last_event_time = None
        self._armed = True
        logger.info("Recording started")

    def stop(self) -> None:
        """Disarm the recorder. The log is kept for export."""
        if not self._armed:
            return
        self._armed = False
        logger.info(f"Recording stopped with {len(self._events)} notes")

    def observe(
        self, classification: NoteClassification, now: float
    ) -> Optional[NoteEvent]:
        """Offer one tick's classification to the recorder.

        Args:
            classification: The note heard this tick
            now: Tick time in seconds

        Returns:
            The new NoteEvent if one was recorded, None otherwise
        """
        if not self._armed or classification.is_unknown:
            return None

        if classification.note_name == self._last_note_name:
            return None

        if (
            self._last_event_time is not None
            and now - self._last_event_time <= self._debounce_interval
        ):
            logger.debug(
                f"Debounced {classification} at {now:.3f}s "
                f"({now - self._last_event_time:.3f}s since last note)"
            )
            return None

        event = NoteEvent(classification=classification, timestamp=now)
        self._events.append(event)
        self._last_note_name = classification.note_name
        self._last_event_time = now
        logger.debug(f"Recorded {classification} at {now:.3f}s")
        return event

    def export(self) -> List[Dict[str, Any]]:
        """The recorded events as plain dicts, in recording order."""
        return [event.to_dict() for event in self._events]
