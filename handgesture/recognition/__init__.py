"""Gesture recognition module."""
from .gesture_classifier import GestureClassifier, GestureClassifierConfig, classify_frame
from .geometry import distance3, is_pointing, is_two_fingers

__all__ = [
    "GestureClassifier",
    "GestureClassifierConfig",
    "classify_frame",
    "distance3",
    "is_pointing",
    "is_two_fingers",
]
