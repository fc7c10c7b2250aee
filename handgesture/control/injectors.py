"""
Pointer injection backends.

An injector replays synthesized path gestures on the host surface. The
input synthesizer receives one as a constructor dependency; nothing looks
an injector up through global state.

Backends:
    - xdotool: X11 pointer control via the xdotool binary
    - simulated: logs gestures only (demo mode, tests, headless hosts)
"""

import logging
import subprocess
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, Tuple

from handgesture.core.types import InjectionRecord, PathStroke

logger = logging.getLogger(__name__)


class PathInjector(ABC):
    """Abstract contract for path-gesture injection."""

    @abstractmethod
    def dispatch_path_gesture(self, strokes: Sequence[PathStroke]) -> bool:
        """Replay concurrent strokes. False means injection is unavailable."""

    @abstractmethod
    def is_available(self) -> bool:
        """Whether the backend can currently inject input."""

    def screen_size(self) -> Optional[Tuple[int, int]]:
        """Pixel size of the host surface, or None when it cannot be queried."""
        return None


class SimulatedInjector(PathInjector):
    """Logs gestures instead of injecting them."""

    def __init__(self, available: bool = True):
        self._available = available
        self._dispatched: List[InjectionRecord] = []

    def dispatch_path_gesture(self, strokes: Sequence[PathStroke]) -> bool:
        strokes = tuple(strokes)
        self._dispatched.append(InjectionRecord(strokes=strokes, accepted=self._available))
        if not self._available:
            logger.debug("[SIMULATED] Injection unavailable, dropped %d stroke(s)", len(strokes))
            return False

        for stroke in strokes:
            logger.info("[SIMULATED] Stroke %s -> %s (+%dms, %dms)",
                        _fmt_point(stroke.start), _fmt_point(stroke.end),
                        stroke.start_offset_ms, stroke.duration_ms)
        return True

    def is_available(self) -> bool:
        return self._available

    def set_available(self, available: bool):
        self._available = available

    @property
    def dispatched(self) -> List[InjectionRecord]:
        return self._dispatched


class XdotoolInjector(PathInjector):
    """
    Replays single-pointer gestures with xdotool (X11).

    A stroke becomes one chained xdotool invocation: press at the first
    point, move along the path in evenly timed steps, release at the last
    point. Multi-stroke gestures (pinch) need more than one pointer and are
    rejected.

    Example:
        >>> injector = XdotoolInjector({"steps": 10})
        >>> injector.dispatch_path_gesture([PathStroke(((100, 200), (300, 200)), 0, 300)])
        True
    """

    def __init__(self, config: dict = None):
        config = config or {}
        self._steps = max(1, int(config.get("steps", 10)))
        self._button = int(config.get("button", 1))
        self._timeout_s = config.get("timeout_s", 2.0)
        self._xdotool_available = self._check_xdotool()

        if not self._xdotool_available:
            logger.warning("xdotool not found - pointer injection unavailable")

    @staticmethod
    def _check_xdotool() -> bool:
        """Check if xdotool is available."""
        try:
            result = subprocess.run(
                ["which", "xdotool"],
                stdout=subprocess.PIPE, stderr=subprocess.PIPE,
                timeout=2,
            )
            return result.returncode == 0
        except (OSError, subprocess.SubprocessError):
            return False

    def is_available(self) -> bool:
        return self._xdotool_available

    def screen_size(self) -> Optional[Tuple[int, int]]:
        """Query the X display size with ``xdotool getdisplaygeometry``."""
        if not self._xdotool_available:
            return None

        try:
            result = subprocess.run(
                ["xdotool", "getdisplaygeometry"],
                stdout=subprocess.PIPE, stderr=subprocess.PIPE,
                timeout=self._timeout_s,
            )
        except (OSError, subprocess.SubprocessError) as e:
            logger.warning("Failed to query display geometry: %s", e)
            return None

        if result.returncode != 0:
            logger.warning("xdotool getdisplaygeometry exited with %d", result.returncode)
            return None

        try:
            width, height = (int(v) for v in result.stdout.decode().split()[:2])
        except ValueError:
            logger.warning("Unexpected display geometry: %r", result.stdout)
            return None
        return (width, height)

    def dispatch_path_gesture(self, strokes: Sequence[PathStroke]) -> bool:
        if not self._xdotool_available:
            return False
        if len(strokes) != 1:
            logger.warning("xdotool drives a single pointer; cannot replay %d strokes", len(strokes))
            return False

        command = self.build_command(strokes[0])
        try:
            result = subprocess.run(
                command,
                stdout=subprocess.PIPE, stderr=subprocess.PIPE,
                timeout=self._timeout_s + strokes[0].duration_ms / 1000.0,
            )
        except subprocess.TimeoutExpired:
            logger.warning("xdotool timed out replaying stroke")
            return False
        except OSError as e:
            logger.error("Failed to run xdotool: %s", e)
            return False

        if result.returncode != 0:
            logger.warning("xdotool exited with %d: %s", result.returncode,
                           result.stderr.decode(errors="replace").strip())
            return False

        logger.debug("xdotool replayed stroke %s -> %s", strokes[0].start, strokes[0].end)
        return True

    def build_command(self, stroke: PathStroke) -> List[str]:
        """Build the chained xdotool command for one stroke."""
        command = ["xdotool"]
        if stroke.start_offset_ms > 0:
            command += ["sleep", _seconds(stroke.start_offset_ms)]

        start_x, start_y = stroke.start
        command += ["mousemove", _px(start_x), _px(start_y), "mousedown", str(self._button)]

        waypoints = _interpolate(stroke.points, self._steps)
        if waypoints:
            step_delay = stroke.duration_ms / len(waypoints)
            for x, y in waypoints:
                command += ["sleep", _seconds(step_delay), "mousemove", _px(x), _px(y)]
        else:
            # A tap: hold the button down for the stroke duration
            command += ["sleep", _seconds(stroke.duration_ms)]

        command += ["mouseup", str(self._button)]
        return command


def create_injector(config: dict = None) -> PathInjector:
    """Create the injector named by ``config['backend']``.

    Falls back to the simulated backend when the backend name is unknown, and
    when xdotool is requested but missing unless ``fallback`` is disabled.
    """
    config = config or {}
    backend = config.get("backend", "xdotool")

    if backend == "simulated":
        return SimulatedInjector()

    if backend == "xdotool":
        injector = XdotoolInjector(config.get("xdotool", {}))
        if injector.is_available() or not config.get("fallback", True):
            return injector
        logger.warning("Falling back to simulated injection")
        return SimulatedInjector()

    logger.warning("Unknown injection backend '%s', using simulated", backend)
    return SimulatedInjector()


def _interpolate(points, steps: int):
    """Evenly spaced waypoints after the first point; empty for a single point."""
    waypoints = []
    for (x0, y0), (x1, y1) in zip(points, points[1:]):
        for i in range(1, steps + 1):
            t = i / steps
            waypoints.append((x0 + (x1 - x0) * t, y0 + (y1 - y0) * t))
    return waypoints


def _px(value: float) -> str:
    return str(int(round(value)))


def _seconds(ms: float) -> str:
    return f"{ms / 1000.0:.3f}"


def _fmt_point(point) -> str:
    return f"({point[0]:.0f}, {point[1]:.0f})"
