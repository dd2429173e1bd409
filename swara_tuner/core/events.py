"""Event system for Swara Tuner components."""

from typing import Dict, List, Callable, Any
from enum import Enum, auto

from ..logger import get_logger

logger = get_logger(__name__)


class TunerEventType(Enum):
    """Event types emitted by the tuner."""

    READING = auto()
    NOTE_RECORDED = auto()
    DEVICE_ERROR = auto()


class EventEmitter:
    """Event emitter for Swara Tuner components."""

    def __init__(self):
        """Initialize the event emitter."""
        self._listeners: Dict[Any, List[Callable]] = {}

    def on(self, event_type: Any, callback: Callable) -> None:
        """Register a callback for an event type.

        Args:
            event_type: Event type to listen for
            callback: Function to call when the event occurs
        """
        if event_type not in self._listeners:
            self._listeners[event_type] = []

        if callback not in self._listeners[event_type]:
            self._listeners[event_type].append(callback)
            logger.debug(f"Added listener for event {event_type}")

    def emit(self, event_type: Any, *args, **kwargs) -> None:
        """Emit an event.

        Listener errors are logged and do not stop the remaining listeners.

        Args:
            event_type: Event type to emit
            *args: Positional arguments to pass to listeners
            **kwargs: Keyword arguments to pass to listeners
        """
        if event_type not in self._listeners:
            return

        for callback in self._listeners[event_type]:
            try:
                callback(*args, **kwargs)
            except Exception as e:
                logger.error(f"Error in event listener for {event_type}: {e}")

    def clear(self) -> None:
        """Remove all event listeners."""
        self._listeners = {}
        logger.debug("Cleared all event listeners")


class TunerEvents:
    """Typed facade over EventEmitter for tuner events."""

    def __init__(self):
        self._emitter = EventEmitter()

    def on_reading(self, callback: Callable) -> None:
        """Register a callback receiving every Reading."""
        self._emitter.on(TunerEventType.READING, callback)

    def on_note_recorded(self, callback: Callable) -> None:
        """Register a callback receiving each recorded NoteEvent."""
        self._emitter.on(TunerEventType.NOTE_RECORDED, callback)

    def on_device_error(self, callback: Callable) -> None:
        """Register a callback receiving DeviceUnavailableError instances."""
        self._emitter.on(TunerEventType.DEVICE_ERROR, callback)

    def emit_reading(self, reading) -> None:
        self._emitter.emit(TunerEventType.READING, reading)

    def emit_note_recorded(self, event) -> None:
        self._emitter.emit(TunerEventType.NOTE_RECORDED, event)

    def emit_device_error(self, error) -> None:
        self._emitter.emit(TunerEventType.DEVICE_ERROR, error)

    def clear(self) -> None:
        """Remove all event listeners."""
        self._emitter.clear()
