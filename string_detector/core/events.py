"""Event system for string detector components."""

from typing import Dict, List, Callable, Any
from enum import Enum, auto

from ..logger import get_logger

logger = get_logger(__name__)


class DetectionEventType(Enum):
    """Event types published by the detection service."""

    SNAPSHOT_PUBLISHED = auto()
    LOCK_CHANGED = auto()
    READ_ERROR = auto()


class EventEmitter:
    """Minimal synchronous event emitter."""

    def __init__(self):
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

        A failing listener is logged and does not prevent the others from running.

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


class DetectionEvents:
    """Event emitter specifically for string detection events."""

    def __init__(self):
        self._emitter = EventEmitter()

    def on_snapshot(self, callback: Callable) -> None:
        """Register a callback receiving every published Snapshot."""
        self._emitter.on(DetectionEventType.SNAPSHOT_PUBLISHED, callback)

    def on_lock_changed(self, callback: Callable) -> None:
        """Register a callback receiving (previous, current) GuitarString on lock changes."""
        self._emitter.on(DetectionEventType.LOCK_CHANGED, callback)

    def on_read_error(self, callback: Callable) -> None:
        """Register a callback receiving the FrameReadError of a skipped cycle."""
        self._emitter.on(DetectionEventType.READ_ERROR, callback)

    def emit_snapshot(self, snapshot) -> None:
        self._emitter.emit(DetectionEventType.SNAPSHOT_PUBLISHED, snapshot)

    def emit_lock_changed(self, previous, current) -> None:
        self._emitter.emit(DetectionEventType.LOCK_CHANGED, previous, current)

    def emit_read_error(self, error) -> None:
        self._emitter.emit(DetectionEventType.READ_ERROR, error)

    def clear(self) -> None:
        """Remove all event listeners."""
        self._emitter.clear()
