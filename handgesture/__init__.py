"""
Touchless Gesture Input
========================

Turns a per-frame stream of hand landmarks into debounced gestures
(tap, swipe, pinch, activation sign) and replays them as synthetic
pointer input on the host surface.

Modules:
    - core: Shared types, event bus, session pipeline
    - recognition: Landmark geometry and the temporal gesture classifier
    - control: Input synthesis and pointer injection backends
    - capture: Camera frame acquisition
    - detection: MediaPipe hand landmark detection
    - utils: Configuration, logging, visualization
"""

__version__ = "1.0.0"
__author__ = "HCI Team"
