"""
Session event bus.

The tracker side publishes hand, gesture and injection notifications here and
the UI side (status line, preview, logs) subscribes, so neither holds a
reference to the other. Delivery is synchronous on the emitting thread, in
emit order, which keeps gesture notifications in frame order.

Usage:
    bus = EventBus()
    bus.subscribe(Events.GESTURE_DETECTED, on_gesture)
    bus.emit(Events.GESTURE_DETECTED, event=gesture_event)
"""

import time
import logging
import threading
from collections import deque
from typing import Callable, Dict, List, NamedTuple

logger = logging.getLogger(__name__)


class _Listener(NamedTuple):
    priority: int
    callback: Callable


def _name(callback) -> str:
    return getattr(callback, "__name__", repr(callback))


class EventBus:
    """Publish/subscribe channel owned by one gesture session.

    Listeners receive the keyword arguments given to emit(). Higher priority
    listeners run first; equal priorities run in subscription order.
    """

    def __init__(self, max_history: int = 100):
        self._lock = threading.Lock()
        self._listeners: Dict[str, List[_Listener]] = {}
        self._history = deque(maxlen=max_history)

    def subscribe(self, event_name: str, callback: Callable, priority: int = 0):
        with self._lock:
            listeners = self._listeners.setdefault(event_name, [])
            # Insert after every listener of the same or higher priority
            index = len(listeners)
            for i, listener in enumerate(listeners):
                if listener.priority < priority:
                    index = i
                    break
            listeners.insert(index, _Listener(priority, callback))
        logger.debug("Listener %s subscribed to '%s' (priority=%d)",
                     _name(callback), event_name, priority)

    def unsubscribe(self, event_name: str, callback: Callable):
        with self._lock:
            listeners = self._listeners.get(event_name, [])
            self._listeners[event_name] = [
                listener for listener in listeners if listener.callback is not callback
            ]

    def emit(self, event_name: str, **kwargs):
        """Deliver an event to its listeners.

        A listener that raises is logged and skipped; delivery continues.
        """
        with self._lock:
            listeners = tuple(self._listeners.get(event_name, ()))
            self._history.append({
                "event": event_name,
                "time": time.time(),
                "data_keys": list(kwargs),
            })

        for listener in listeners:
            try:
                listener.callback(**kwargs)
            except Exception as e:
                logger.error("Listener %s failed on '%s': %s",
                             _name(listener.callback), event_name, e)

    def clear(self, event_name: str = None):
        """Drop all listeners, or only those of one event."""
        with self._lock:
            if event_name is None:
                self._listeners.clear()
            else:
                self._listeners.pop(event_name, None)

    @property
    def listener_count(self) -> int:
        with self._lock:
            return sum(len(listeners) for listeners in self._listeners.values())

    def get_history(self, last_n: int = 10) -> list:
        """Most recent emits, oldest first."""
        with self._lock:
            return list(self._history)[-last_n:]


class Events:
    """Event names published by the gesture session."""

    # Hand tracking
    HAND_DETECTED = "hand_detected"        # landmark_count
    HAND_LOST = "hand_lost"
    GESTURE_DETECTED = "gesture_detected"  # event

    # Pointer injection
    INJECTION_PERFORMED = "injection_performed"  # event
    INJECTION_FAILED = "injection_failed"        # event

    # Session lifecycle
    TRACKING_STARTED = "tracking_started"  # mode
    TRACKING_STOPPED = "tracking_stopped"
