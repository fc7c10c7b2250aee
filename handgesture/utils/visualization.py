"""
Visualization Module
=====================

Preview overlays: hand skeleton, status line and the last gesture.
"""

import cv2
import numpy as np
from typing import Optional, Sequence, Tuple
from dataclasses import dataclass

from handgesture.core.types import GestureEvent, LandmarkIndex

FINGER_TIPS = (
    LandmarkIndex.THUMB_TIP,
    LandmarkIndex.INDEX_TIP,
    LandmarkIndex.MIDDLE_TIP,
    LandmarkIndex.RING_TIP,
    LandmarkIndex.PINKY_TIP,
)


@dataclass
class VisualizerConfig:
    """Visualization settings."""
    show_preview: bool = True
    draw_landmarks: bool = True

    # Colors (BGR format)
    landmark_color: Tuple[int, int, int] = (0, 255, 0)       # Green
    tip_color: Tuple[int, int, int] = (0, 0, 255)            # Red
    connection_color: Tuple[int, int, int] = (255, 255, 255)  # White
    text_color: Tuple[int, int, int] = (0, 255, 255)         # Yellow

    font_scale: float = 0.7
    font_thickness: int = 2

    @classmethod
    def from_dict(cls, config: dict) -> "VisualizerConfig":
        """Create config from dictionary."""
        return cls(
            show_preview=config.get("show_preview", True),
            draw_landmarks=config.get("draw_landmarks", True),
            font_scale=config.get("font_scale", 0.7),
            font_thickness=config.get("font_thickness", 2),
        )


class Visualizer:
    """
    Draws tracking feedback on BGR camera frames.

    Example:
        >>> viz = Visualizer()
        >>> viz.draw_hand(frame.image, landmarks)
        >>> viz.draw_status(frame.image, session.status)
        >>> cv2.imshow("Gestures", frame.image)
    """

    HAND_CONNECTIONS = [
        (0, 1), (1, 2), (2, 3), (3, 4),         # Thumb
        (0, 5), (5, 6), (6, 7), (7, 8),         # Index
        (5, 9), (9, 10), (10, 11), (11, 12),    # Middle
        (9, 13), (13, 14), (14, 15), (15, 16),  # Ring
        (13, 17), (17, 18), (18, 19), (19, 20),  # Pinky
        (0, 17),                                # Palm base
    ]

    def __init__(self, config: Optional[VisualizerConfig] = None):
        self.config = config or VisualizerConfig()
        self._font = cv2.FONT_HERSHEY_SIMPLEX

    def draw_hand(self, image: np.ndarray, landmarks: Sequence) -> np.ndarray:
        """Draw the hand skeleton from normalized landmarks."""
        if not self.config.draw_landmarks or landmarks is None:
            return image

        height, width = image.shape[:2]
        pixels = [(int(lm[0] * width), int(lm[1] * height)) for lm in landmarks]

        for start_idx, end_idx in self.HAND_CONNECTIONS:
            if end_idx < len(pixels):
                cv2.line(image, pixels[start_idx], pixels[end_idx],
                         self.config.connection_color, 2)

        for i, pos in enumerate(pixels):
            color = self.config.tip_color if i in FINGER_TIPS else self.config.landmark_color
            cv2.circle(image, pos, 5, color, -1)

        return image

    def draw_status(self, image: np.ndarray, status: str, tracking: bool = True) -> np.ndarray:
        """Draw the session status line at the top left."""
        color = self.config.text_color if tracking else self.config.connection_color
        cv2.putText(image, status, (20, 35), self._font,
                    self.config.font_scale, color, self.config.font_thickness)
        return image

    def draw_gesture(self, image: np.ndarray, event: Optional[GestureEvent]) -> np.ndarray:
        """Mark the position of the last positional gesture."""
        if event is None or not event.kind.drives_input:
            return image

        height, width = image.shape[:2]
        center = (int(event.x * width), int(event.y * height))
        cv2.circle(image, center, 18, self.config.text_color, 2)
        cv2.putText(image, event.kind.value, (center[0] + 22, center[1]), self._font,
                    self.config.font_scale * 0.8, self.config.text_color,
                    self.config.font_thickness)
        return image

    def draw_instructions(self, image: np.ndarray) -> np.ndarray:
        """Draw key bindings at the bottom left."""
        height = image.shape[0]
        lines = ["SPACE: start/stop tracking", "Q: quit"]
        for i, line in enumerate(lines):
            cv2.putText(image, line, (20, height - 20 - (len(lines) - 1 - i) * 25),
                        self._font, 0.5, self.config.connection_color, 1)
        return image
