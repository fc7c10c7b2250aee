"""
Landmark geometry primitives for gesture recognition.

Distance and relative-position tests over a single frame of 21 hand
landmarks. Everything here is stateless; the temporal logic lives in
the gesture classifier.

Coordinates follow the image convention: smaller y is higher on screen.
"""

from typing import Sequence, Tuple

import numpy as np

from handgesture.core.types import LandmarkIndex

THUMB_TIP = LandmarkIndex.THUMB_TIP
INDEX_MCP = LandmarkIndex.INDEX_MCP
INDEX_TIP = LandmarkIndex.INDEX_TIP
MIDDLE_TIP = LandmarkIndex.MIDDLE_TIP
RING_TIP = LandmarkIndex.RING_TIP
PINKY_TIP = LandmarkIndex.PINKY_TIP


def as_points(frame) -> np.ndarray:
    """Convert a landmark frame to a float array of shape (N, 3).

    Accepts (x, y, z) sequences, Landmark tuples or an existing array.
    """
    points = np.asarray(frame, dtype=np.float64)
    if points.ndim != 2 or points.shape[1] < 3:
        raise ValueError(f"Expected (N, 3) landmarks, got shape {points.shape}")
    return points[:, :3]


def distance3(p: Sequence[float], q: Sequence[float]) -> float:
    """Euclidean distance between two 3D points."""
    return float(np.linalg.norm(np.asarray(p[:3], dtype=np.float64) -
                                np.asarray(q[:3], dtype=np.float64)))


def midpoint(p: Sequence[float], q: Sequence[float]) -> Tuple[float, float]:
    """Planar midpoint of two landmarks."""
    return (float(p[0] + q[0]) / 2, float(p[1] + q[1]) / 2)


def _above_knuckle(points: np.ndarray, tip: int) -> bool:
    return bool(points[tip][1] < points[INDEX_MCP][1])


def _below_knuckle(points: np.ndarray, tip: int) -> bool:
    return bool(points[tip][1] > points[INDEX_MCP][1])


def is_pointing(frame) -> bool:
    """Index finger extended above the index knuckle, the other three curled below it."""
    points = as_points(frame)
    return (_above_knuckle(points, INDEX_TIP) and
            _below_knuckle(points, MIDDLE_TIP) and
            _below_knuckle(points, RING_TIP) and
            _below_knuckle(points, PINKY_TIP))


def is_two_fingers(frame) -> bool:
    """Index and middle extended above the knuckle, ring and pinky curled below it.

    This is the activation sign and takes priority over every other gesture.
    """
    points = as_points(frame)
    return (_above_knuckle(points, INDEX_TIP) and
            _above_knuckle(points, MIDDLE_TIP) and
            _below_knuckle(points, RING_TIP) and
            _below_knuckle(points, PINKY_TIP))
