"""
Session pipeline: landmarks -> gesture -> pointer input.

A GestureSession is the single consumer of the landmark stream. It owns the
tracking lifecycle (start/stop with classifier reset), feeds frames to the
classifier one at a time, routes input-driving gestures to the synthesizer
and publishes everything on the event bus for the UI side.

Architecture:
    Camera -> HandTracker -> GestureSession.process()
    -> GestureClassifier -> InputSynthesizer -> PathInjector
"""

import time
import logging
from typing import Optional

from handgesture.control.input_synthesizer import InputSynthesizer
from handgesture.core.events import EventBus, Events
from handgesture.core.types import GestureEvent, LandmarkFrame, NUM_LANDMARKS, Viewport
from handgesture.recognition.gesture_classifier import GestureClassifier
from handgesture.utils.logger import GestureLogger

logger = logging.getLogger(__name__)

MODES = ("control", "demo")


class GestureSession:
    """Tracking session driving the classifier and the synthesizer.

    Modes:
    - control: recognized taps and swipes are injected
    - demo: gestures are recognized and reported only
    """

    def __init__(
        self,
        classifier: GestureClassifier,
        synthesizer: InputSynthesizer,
        viewport: Viewport,
        event_bus: Optional[EventBus] = None,
        mode: str = "control",
    ):
        if mode not in MODES:
            raise ValueError(f"Unknown mode '{mode}', expected one of {MODES}")

        self._classifier = classifier
        self._synthesizer = synthesizer
        self._viewport = viewport
        self._bus = event_bus or EventBus()
        self._mode = mode
        self._gesture_logger = GestureLogger()

        # State
        self._tracking = False
        self._status = "Ready - Press Start to begin tracking"
        self._last_event: Optional[GestureEvent] = None
        self._frame_count = 0
        self._event_count = 0

    # =========================================================================
    # Lifecycle
    # =========================================================================

    def start_tracking(self) -> bool:
        """Begin consuming frames. Refused in control mode without an injector."""
        if self._mode == "control" and not self._synthesizer.injector.is_available():
            self._set_status("Injection unavailable - enable the input service")
            logger.warning("Cannot start tracking: pointer injection unavailable")
            return False

        self._tracking = True
        self._set_status("Tracking active - Show your hand")
        logger.info("Tracking started (mode=%s)", self._mode)
        self._bus.emit(Events.TRACKING_STARTED, mode=self._mode)
        return True

    def stop_tracking(self):
        """Stop consuming frames and wipe the classifier's temporal state."""
        self._tracking = False
        self._classifier.reset()
        self._set_status("Tracking stopped")
        logger.info("Tracking stopped")
        self._bus.emit(Events.TRACKING_STOPPED)

    def toggle_tracking(self) -> bool:
        """Start or stop tracking. Returns the new tracking state."""
        if self._tracking:
            self.stop_tracking()
        else:
            self.start_tracking()
        return self._tracking

    # =========================================================================
    # Frame processing
    # =========================================================================

    def process(self, frame: Optional[LandmarkFrame], now: float) -> Optional[GestureEvent]:
        """Handle one tracker result.

        Args:
            frame: Landmarks of the tracked hand, or None when no hand was found
            now: Monotonic timestamp in milliseconds

        Returns:
            The gesture recognized in this frame, if any
        """
        if not self._tracking:
            return None

        # An incomplete hand counts as no hand
        if frame is None or len(frame) < NUM_LANDMARKS:
            self._set_status("No hand detected")
            self._bus.emit(Events.HAND_LOST)
            return None

        self._frame_count += 1
        self._set_status(f"Hand detected - {len(frame)} landmarks")
        self._bus.emit(Events.HAND_DETECTED, landmark_count=len(frame))

        start = time.perf_counter()
        event = self._classifier.classify(frame, now)
        latency_ms = (time.perf_counter() - start) * 1000

        if event is None:
            return None

        self._event_count += 1
        self._last_event = event
        self._set_status(event.kind.label)
        self._gesture_logger.log_gesture(event, latency_ms=latency_ms)
        self._bus.emit(Events.GESTURE_DETECTED, event=event)

        if self._mode == "control" and event.kind.drives_input:
            self._inject(event)

        return event

    def report_error(self, message: str):
        """Surface an upstream tracker failure."""
        logger.error("Hand tracking error: %s", message)
        self._set_status(f"Error: {message}")

    def _inject(self, event: GestureEvent):
        success = self._synthesizer.synthesize(event, self._viewport)
        if success is None:
            return

        self._gesture_logger.log_injection(event.kind.value, success)
        if success:
            self._bus.emit(Events.INJECTION_PERFORMED, event=event)
        else:
            self._set_status("Injection unavailable")
            self._bus.emit(Events.INJECTION_FAILED, event=event)

    def _set_status(self, message: str):
        if message != self._status:
            logger.debug("Status: %s", message)
        self._status = message

    # =========================================================================
    # Properties
    # =========================================================================

    @property
    def is_tracking(self) -> bool:
        return self._tracking

    @property
    def mode(self) -> str:
        return self._mode

    @property
    def viewport(self) -> Viewport:
        return self._viewport

    @property
    def status(self) -> str:
        return self._status

    @property
    def last_event(self) -> Optional[GestureEvent]:
        return self._last_event

    @property
    def frame_count(self) -> int:
        return self._frame_count

    @property
    def event_count(self) -> int:
        return self._event_count

    @property
    def event_bus(self) -> EventBus:
        return self._bus

    @property
    def gesture_logger(self) -> GestureLogger:
        return self._gesture_logger
