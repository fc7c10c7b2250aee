"""
Temporal Gesture Classifier
============================

Rule-based, frame-synchronous gesture recognition over hand landmarks.

Each frame runs through three independent trackers that share the frame's
pose as a gate:

- Pinch channel: thumb-to-index distance, direction taken from the change
  against the previous frame (closing = PINCH_IN, opening = PINCH_OUT).
- Point/hold channel: a still pointing finger fires POINT once per hold
  duration.
- Swipe channel: horizontal travel of the pointing finger beyond a threshold
  fires SWIPE_LEFT/SWIPE_RIGHT and rebases.

The two-finger activation sign short-circuits everything else. At most one
event is produced per frame; when hold and swipe fire together, the swipe
wins.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from handgesture.core.types import (
    ClassifierState,
    GestureEvent,
    GestureKind,
    LandmarkFrame,
    NUM_LANDMARKS,
)
from handgesture.recognition.geometry import (
    INDEX_TIP,
    THUMB_TIP,
    as_points,
    distance3,
    is_pointing,
    is_two_fingers,
    midpoint,
)

logger = logging.getLogger(__name__)

PINCH_THRESHOLD = 0.05
POINT_THRESHOLD = 0.1
SWIPE_THRESHOLD = 0.15
HOLD_DURATION_MS = 1000


@dataclass
class GestureClassifierConfig:
    """Gesture classifier thresholds, in normalized landmark units."""
    # Thumb-index distance below which the hand is pinching
    pinch_threshold: float = PINCH_THRESHOLD
    # Fingertip travel below which a point counts as held still
    point_threshold: float = POINT_THRESHOLD
    # Horizontal travel beyond which a pointing finger swipes
    swipe_threshold: float = SWIPE_THRESHOLD
    # Still time before a held point fires a tap
    hold_duration_ms: float = HOLD_DURATION_MS

    @classmethod
    def from_dict(cls, config: dict) -> "GestureClassifierConfig":
        """Create config from dictionary (YAML parsed)."""
        return cls(
            pinch_threshold=config.get("pinch_threshold", PINCH_THRESHOLD),
            point_threshold=config.get("point_threshold", POINT_THRESHOLD),
            swipe_threshold=config.get("swipe_threshold", SWIPE_THRESHOLD),
            hold_duration_ms=config.get("hold_duration_ms", HOLD_DURATION_MS),
        )


def classify_frame(
    state: ClassifierState,
    frame: LandmarkFrame,
    now: float,
    config: GestureClassifierConfig,
) -> Optional[GestureEvent]:
    """Run one frame through the trackers, updating ``state`` in place.

    Args:
        state: Tracker state carried between frames
        frame: 21 hand landmarks
        now: Monotonic timestamp in milliseconds
        config: Thresholds

    Returns:
        The recognized gesture, or None
    """
    points = as_points(frame)

    # 1. Activation sign: edge-triggered on every qualifying frame, no state
    if is_two_fingers(points):
        return GestureEvent(GestureKind.TWO_FINGERS, 0.0, 0.0)

    # 2. Pinch
    thumb_tip = points[THUMB_TIP]
    index_tip = points[INDEX_TIP]
    pinch_distance = distance3(thumb_tip, index_tip)

    if pinch_distance < config.pinch_threshold:
        if state.last_pinch_distance > 0 and pinch_distance < state.last_pinch_distance:
            kind = GestureKind.PINCH_IN
        else:
            kind = GestureKind.PINCH_OUT
        center_x, center_y = midpoint(thumb_tip, index_tip)
        state.last_pinch_distance = pinch_distance
        return GestureEvent(kind, center_x, center_y)

    state.last_pinch_distance = pinch_distance

    # 3. Pointing pose gates both the hold and the swipe trackers
    if not is_pointing(points):
        state.last_point_position = None
        state.point_start_time = 0.0
        state.last_swipe_x = 0.0
        return None

    current_x = float(index_tip[0])
    current_y = float(index_tip[1])
    event = None

    # Hold-to-tap
    if state.last_point_position is not None:
        last_x, last_y = state.last_point_position
        moved = distance3((current_x, current_y, 0.0), (last_x, last_y, 0.0))

        if moved < config.point_threshold:
            hold_time = now - state.point_start_time
            if hold_time >= config.hold_duration_ms:
                event = GestureEvent(GestureKind.POINT, current_x, current_y)
                # Restart the window so a held finger repeats once per hold duration
                state.point_start_time = now
        else:
            state.last_point_position = (current_x, current_y)
            state.point_start_time = now
    else:
        state.last_point_position = (current_x, current_y)
        state.point_start_time = now

    # Swipe; overwrites a POINT from the same frame
    if state.last_swipe_x > 0:
        delta = current_x - state.last_swipe_x
        if abs(delta) > config.swipe_threshold:
            kind = GestureKind.SWIPE_RIGHT if delta > 0 else GestureKind.SWIPE_LEFT
            event = GestureEvent(kind, current_x, current_y)
            state.last_swipe_x = current_x
    else:
        state.last_swipe_x = current_x

    return event


class GestureClassifier:
    """
    Stateful per-hand gesture classifier.

    Owns one ClassifierState for the duration of a tracking session and must
    be driven from a single thread, one frame at a time. Timestamps are
    supplied by the caller so tests can drive virtual time.

    Example:
        >>> classifier = GestureClassifier()
        >>> event = classifier.classify(landmarks, now=time.monotonic() * 1000)
        >>> if event is not None:
        ...     print(event.kind, event.x, event.y)
        >>> classifier.reset()  # tracking stopped
    """

    def __init__(self, config: Optional[GestureClassifierConfig] = None,
                 state: Optional[ClassifierState] = None):
        self.config = config or GestureClassifierConfig()
        self._state = state if state is not None else ClassifierState()

    def classify(self, frame: LandmarkFrame, now: float) -> Optional[GestureEvent]:
        """
        Classify one frame of landmarks.

        Never raises. Frames with fewer than 21 landmarks are ignored and
        leave the state untouched.

        Args:
            frame: Hand landmarks for one instant
            now: Monotonic timestamp in milliseconds

        Returns:
            Recognized gesture event or None
        """
        try:
            if frame is None or len(frame) < NUM_LANDMARKS:
                logger.debug("Ignoring malformed frame (%s landmarks)",
                             None if frame is None else len(frame))
                return None
        except TypeError:
            logger.debug("Ignoring frame of type %s", type(frame).__name__)
            return None

        snapshot = self._state.copy()
        try:
            event = classify_frame(self._state, frame, now, self.config)
        except Exception:
            logger.exception("Gesture classification failed; frame dropped")
            self._restore(snapshot)
            return None

        if event is not None:
            logger.debug("Gesture: %r", event)
        return event

    def reset(self):
        """Return all trackers to their initial condition (tracking stopped)."""
        self._state.clear()
        logger.debug("Classifier state reset")

    def _restore(self, snapshot: ClassifierState):
        self._state.last_point_position = snapshot.last_point_position
        self._state.point_start_time = snapshot.point_start_time
        self._state.last_swipe_x = snapshot.last_swipe_x
        self._state.last_pinch_distance = snapshot.last_pinch_distance

    @property
    def state(self) -> ClassifierState:
        return self._state
