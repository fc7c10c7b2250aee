"""
Input synthesizer: gesture events -> pointer path gestures.

Maps POINT and SWIPE events onto time-parameterized strokes in screen
coordinates and hands them to the injection backend. Pinch injection is
available as a capability but no gesture event drives it.

Failure is reported, never retried: a gesture event is transient and
replaying a stale coordinate later would land somewhere the user no longer
points.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from handgesture.control.injectors import PathInjector
from handgesture.core.types import GestureEvent, GestureKind, PathStroke, Viewport

logger = logging.getLogger(__name__)


@dataclass
class InputSynthesizerConfig:
    """Durations (ms) and distances (device pixels) of synthesized gestures."""
    tap_duration_ms: int = 100
    swipe_duration_ms: int = 300
    pinch_duration_ms: int = 300
    swipe_distance_px: float = 200.0

    @classmethod
    def from_dict(cls, config: dict) -> "InputSynthesizerConfig":
        """Create config from dictionary."""
        return cls(
            tap_duration_ms=config.get("tap_duration_ms", 100),
            swipe_duration_ms=config.get("swipe_duration_ms", 300),
            pinch_duration_ms=config.get("pinch_duration_ms", 300),
            swipe_distance_px=config.get("swipe_distance_px", 200.0),
        )


class InputSynthesizer:
    """
    Translates gestures into path gestures for an injector.

    Coordinates come in normalized and are scaled independently by viewport
    width and height. Results are not clamped; off-screen points are the
    injector's concern.

    Example:
        >>> synthesizer = InputSynthesizer(SimulatedInjector())
        >>> synthesizer.synthesize(GestureEvent(GestureKind.POINT, 0.5, 0.5),
        ...                        Viewport(1080, 2400))
        True
    """

    def __init__(self, injector: PathInjector, config: Optional[InputSynthesizerConfig] = None):
        self._injector = injector
        self.config = config or InputSynthesizerConfig()

    # =========================================================================
    # Stroke construction
    # =========================================================================

    def build_tap(self, x: float, y: float, viewport: Viewport) -> List[PathStroke]:
        screen_x, screen_y = viewport.denormalize(x, y)
        return [PathStroke(((screen_x, screen_y),), 0, self.config.tap_duration_ms)]

    def build_swipe(self, x: float, y: float, viewport: Viewport,
                    distance_px: float) -> List[PathStroke]:
        """Horizontal swipe of ``distance_px`` (negative = leftwards)."""
        start_x, start_y = viewport.denormalize(x, y)
        end_x = start_x + distance_px
        return [PathStroke(((start_x, start_y), (end_x, start_y)), 0,
                           self.config.swipe_duration_ms)]

    def build_pinch(self, x: float, y: float, viewport: Viewport,
                    start_distance: float, end_distance: float) -> List[PathStroke]:
        """Two fingers moving symmetrically about the center.

        start_distance > end_distance pinches in (zoom out); the reverse
        spreads (zoom in). Distances are finger separations in pixels.
        """
        center_x, center_y = viewport.denormalize(x, y)
        start_offset = start_distance / 2
        end_offset = end_distance / 2
        duration = self.config.pinch_duration_ms

        first = PathStroke(((center_x - start_offset, center_y),
                            (center_x - end_offset, center_y)), 0, duration)
        second = PathStroke(((center_x + start_offset, center_y),
                             (center_x + end_offset, center_y)), 0, duration)
        return [first, second]

    # =========================================================================
    # Dispatch
    # =========================================================================

    def tap(self, x: float, y: float, viewport: Viewport) -> bool:
        return self._dispatch("tap", self.build_tap(x, y, viewport))

    def swipe(self, x: float, y: float, viewport: Viewport, distance_px: float) -> bool:
        return self._dispatch("swipe", self.build_swipe(x, y, viewport, distance_px))

    def pinch(self, x: float, y: float, viewport: Viewport,
              start_distance: float, end_distance: float) -> bool:
        return self._dispatch(
            "pinch", self.build_pinch(x, y, viewport, start_distance, end_distance))

    def synthesize(self, event: GestureEvent, viewport: Viewport) -> Optional[bool]:
        """Inject the pointer action for a gesture event.

        Returns:
            True/False for the injection outcome, or None when the gesture
            kind does not drive input (pinch, activation)
        """
        if event.kind == GestureKind.POINT:
            return self.tap(event.x, event.y, viewport)
        if event.kind == GestureKind.SWIPE_LEFT:
            return self.swipe(event.x, event.y, viewport, -self.config.swipe_distance_px)
        if event.kind == GestureKind.SWIPE_RIGHT:
            return self.swipe(event.x, event.y, viewport, self.config.swipe_distance_px)
        return None

    def _dispatch(self, name: str, strokes: List[PathStroke]) -> bool:
        try:
            accepted = self._injector.dispatch_path_gesture(strokes)
        except Exception as e:
            logger.error("Injector failed during %s: %s", name, e)
            return False

        if not accepted:
            logger.warning("Injection unavailable, %s dropped", name)
            return False

        logger.debug("%s injected: %s", name.capitalize(), strokes)
        return True

    @property
    def injector(self) -> PathInjector:
        return self._injector
