"""
Shared domain types for the touchless gesture input system.

Centralizes enums, data classes, and type definitions used across modules
to eliminate circular imports and ensure type consistency.
"""

from dataclasses import dataclass, replace
from enum import Enum, IntEnum
from typing import NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np


# =============================================================================
# Landmarks
# =============================================================================

class LandmarkIndex(IntEnum):
    """Hand landmark indices following MediaPipe convention."""
    WRIST = 0
    THUMB_CMC = 1
    THUMB_MCP = 2
    THUMB_IP = 3
    THUMB_TIP = 4
    INDEX_MCP = 5
    INDEX_PIP = 6
    INDEX_DIP = 7
    INDEX_TIP = 8
    MIDDLE_MCP = 9
    MIDDLE_PIP = 10
    MIDDLE_DIP = 11
    MIDDLE_TIP = 12
    RING_MCP = 13
    RING_PIP = 14
    RING_DIP = 15
    RING_TIP = 16
    PINKY_MCP = 17
    PINKY_PIP = 18
    PINKY_DIP = 19
    PINKY_TIP = 20


NUM_LANDMARKS = 21


class Landmark(NamedTuple):
    """A single landmark point with normalized coordinates."""
    x: float  # 0.0 to 1.0, normalized by image width
    y: float  # 0.0 to 1.0, normalized by image height (smaller = higher)
    z: float  # Depth relative to wrist

    def to_pixel(self, width: int, height: int) -> Tuple[int, int]:
        """Convert normalized coordinates to pixel coordinates."""
        return (int(self.x * width), int(self.y * height))


# One hand at one instant: 21 (x, y, z) points, as tuples, Landmarks or an
# (N, 3) array.
LandmarkFrame = Union[Sequence[Sequence[float]], np.ndarray]


# =============================================================================
# Gestures
# =============================================================================

class GestureKind(Enum):
    """All gesture kinds the classifier can emit."""
    NONE = "none"
    POINT = "point"
    SWIPE_LEFT = "swipe_left"
    SWIPE_RIGHT = "swipe_right"
    PINCH_IN = "pinch_in"
    PINCH_OUT = "pinch_out"
    TWO_FINGERS = "two_fingers"

    @classmethod
    def from_string(cls, name: str) -> "GestureKind":
        """Convert a string gesture name to GestureKind, safely."""
        try:
            return cls(name)
        except ValueError:
            return cls.NONE

    @property
    def drives_input(self) -> bool:
        """Whether this gesture is replayed as pointer input."""
        return self in (GestureKind.POINT, GestureKind.SWIPE_LEFT, GestureKind.SWIPE_RIGHT)

    @property
    def label(self) -> str:
        return _GESTURE_LABELS[self]


_GESTURE_LABELS = {
    GestureKind.NONE: "",
    GestureKind.POINT: "TAP detected!",
    GestureKind.SWIPE_LEFT: "SWIPE LEFT",
    GestureKind.SWIPE_RIGHT: "SWIPE RIGHT",
    GestureKind.PINCH_IN: "PINCH IN (Zoom out)",
    GestureKind.PINCH_OUT: "PINCH OUT (Zoom in)",
    GestureKind.TWO_FINGERS: "TWO FINGERS (Activation)",
}


@dataclass(frozen=True)
class GestureEvent:
    """A recognized gesture at a normalized position.

    TWO_FINGERS carries the conventional position (0, 0).
    """
    kind: GestureKind
    x: float = 0.0
    y: float = 0.0

    def __repr__(self):
        return f"GestureEvent({self.kind.value}, x={self.x:.3f}, y={self.y:.3f})"


@dataclass
class ClassifierState:
    """Temporal trackers owned by a single gesture classifier.

    Zero is the "unset" sentinel for the scalar fields.
    """
    last_point_position: Optional[Tuple[float, float]] = None
    point_start_time: float = 0.0
    last_swipe_x: float = 0.0
    last_pinch_distance: float = 0.0

    def copy(self) -> "ClassifierState":
        return replace(self)

    def clear(self):
        """Return every tracker to its sentinel value."""
        self.last_point_position = None
        self.point_start_time = 0.0
        self.last_swipe_x = 0.0
        self.last_pinch_distance = 0.0


# =============================================================================
# Input synthesis
# =============================================================================

@dataclass(frozen=True)
class PathStroke:
    """One finger's straight-line path in screen coordinates."""
    points: Tuple[Tuple[float, float], ...]
    start_offset_ms: int = 0
    duration_ms: int = 100

    @property
    def start(self) -> Tuple[float, float]:
        return self.points[0]

    @property
    def end(self) -> Tuple[float, float]:
        return self.points[-1]


@dataclass(frozen=True)
class Viewport:
    """Host surface dimensions in device pixels."""
    width: int
    height: int

    def denormalize(self, x: float, y: float) -> Tuple[float, float]:
        """Scale normalized coordinates to the viewport. No clamping."""
        return (x * self.width, y * self.height)

    @classmethod
    def from_dict(cls, config: dict,
                  screen_size: Optional[Tuple[int, int]] = None) -> "Viewport":
        """Build the viewport from the queried screen size or the config.

        A queried ``screen_size`` wins while ``auto`` is on (the default);
        the configured width and height are the override and the fallback.
        """
        if screen_size is not None and config.get("auto", True):
            return cls(width=screen_size[0], height=screen_size[1])
        return cls(
            width=config.get("width", 1920),
            height=config.get("height", 1080),
        )


@dataclass
class InjectionRecord:
    """A gesture handed to an injector, kept for inspection."""
    strokes: Tuple[PathStroke, ...]
    accepted: bool
