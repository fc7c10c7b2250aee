"""
Touchless Gesture Input - application entry point.

Wires camera -> hand tracker -> gesture session -> pointer injection and
shows a preview window.

Usage:
    handgesture                       # Control mode, inject taps and swipes
    handgesture --mode demo           # Recognize and report only
    handgesture --config my.yaml      # Custom configuration
    handgesture --no-preview          # Headless, tracking starts immediately
"""

import sys
import time
import signal
import argparse
import logging

import cv2

from handgesture.capture.camera import Camera, CameraConfig
from handgesture.control.injectors import create_injector
from handgesture.control.input_synthesizer import InputSynthesizer, InputSynthesizerConfig
from handgesture.core.events import EventBus, Events
from handgesture.core.pipeline import GestureSession
from handgesture.core.types import Viewport
from handgesture.detection.hand_tracker import HandTracker, HandTrackerConfig
from handgesture.recognition.gesture_classifier import GestureClassifier, GestureClassifierConfig
from handgesture.utils.config import Config
from handgesture.utils.logger import setup_logging
from handgesture.utils.visualization import Visualizer, VisualizerConfig

logger = logging.getLogger(__name__)

WINDOW_NAME = "Touchless Gesture Input"


class GestureInputApp:
    """Main application: owns the devices and drives the session loop."""

    def __init__(self, config: Config, mode: str = "control", preview: bool = True):
        self._config = config
        self._running = False

        self._bus = EventBus()
        self._camera = Camera(CameraConfig.from_dict(config.camera))
        self._tracker = HandTracker(HandTrackerConfig.from_dict(config.detection))

        injector = create_injector(config.injection)
        viewport = Viewport.from_dict(config.viewport, injector.screen_size())
        logger.info("Viewport %dx%d", viewport.width, viewport.height)

        self._session = GestureSession(
            classifier=GestureClassifier(GestureClassifierConfig.from_dict(config.recognition)),
            synthesizer=InputSynthesizer(injector, InputSynthesizerConfig.from_dict(config.synthesis)),
            viewport=viewport,
            event_bus=self._bus,
            mode=mode,
        )

        vis_config = VisualizerConfig.from_dict(config.visualization)
        self._preview = preview and vis_config.show_preview
        self._visualizer = Visualizer(vis_config)
        self._landmarks = None

        self._bus.subscribe(Events.INJECTION_FAILED, self._on_injection_failed)

        logger.info("GestureInputApp initialized (mode=%s, injector=%s)",
                    mode, type(injector).__name__)

    def _on_injection_failed(self, **kwargs):
        event = kwargs.get("event")
        logger.warning("Pointer injection unavailable, %s not delivered",
                       event.kind.value if event else "gesture")

    def run(self) -> int:
        """Run until quit. Returns the process exit code."""
        if not self._camera.start():
            logger.error("Failed to open camera. Check connection and permissions.")
            return 1

        if not self._tracker.start():
            self._camera.stop()
            return 1

        # Without a window there is no key to press, so start right away
        if not self._preview and not self._session.start_tracking():
            logger.error("Cannot track headless: %s", self._session.status)
            self._shutdown()
            return 1

        self._running = True
        try:
            self._loop()
        finally:
            self._shutdown()
        return 0

    def _loop(self):
        while self._running:
            frame = self._camera.read()
            if frame is None:
                if self._preview:
                    self._handle_key(cv2.waitKey(1) & 0xFF)
                else:
                    time.sleep(0.005)
                continue

            if self._session.is_tracking:
                try:
                    self._landmarks = self._tracker.process(frame.rgb)
                except Exception as e:
                    self._landmarks = None
                    self._session.report_error(f"Processing error: {e}")
                else:
                    self._session.process(self._landmarks, now=frame.timestamp * 1000)
            else:
                self._landmarks = None

            if self._preview:
                self._render(frame.image)
                self._handle_key(cv2.waitKey(1) & 0xFF)

    def _render(self, image):
        self._visualizer.draw_hand(image, self._landmarks)
        self._visualizer.draw_gesture(image, self._session.last_event)
        self._visualizer.draw_status(image, self._session.status, self._session.is_tracking)
        self._visualizer.draw_instructions(image)
        cv2.imshow(WINDOW_NAME, image)

    def _handle_key(self, key: int):
        if key == ord("q"):
            self._running = False
        elif key == ord(" "):
            self._session.toggle_tracking()

    def _shutdown(self):
        logger.info("Shutting down...")
        self._running = False
        if self._session.is_tracking:
            self._session.stop_tracking()
        self._tracker.stop()
        self._camera.stop()
        if self._preview:
            cv2.destroyAllWindows()
        stats = self._session.gesture_logger.injection_stats
        logger.info("Session: %d frames, %d gestures, %d injected, %d failed",
                    self._session.frame_count, self._session.event_count,
                    stats["injected"], stats["failed"])

    @property
    def session(self) -> GestureSession:
        return self._session

    def handle_signal(self, signum, frame):
        """Handle SIGINT/SIGTERM for graceful shutdown."""
        logger.info("Signal %d received, shutting down...", signum)
        self._running = False


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Touchless Gesture Input - hand gestures to pointer taps and swipes"
    )
    parser.add_argument(
        "--mode", choices=["control", "demo"], default="control",
        help="control injects taps/swipes, demo only reports gestures"
    )
    parser.add_argument(
        "--config", type=str, default=None,
        help="Path to config.yaml"
    )
    parser.add_argument(
        "--camera", type=int, default=None,
        help="Camera device ID"
    )
    parser.add_argument(
        "--log-level", type=str, default=None,
        help="Logging level (DEBUG, INFO, WARNING)"
    )
    parser.add_argument(
        "--log-file", type=str, default=None,
        help="Write a rotating debug log to this file"
    )
    parser.add_argument(
        "--no-preview", action="store_true",
        help="Run without the preview window"
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    config = Config()
    config.load(config_path=args.config)

    setup_logging(
        level=args.log_level or config.get("logging.level", "INFO"),
        log_file=args.log_file or config.get("logging.file"),
    )

    if args.camera is not None:
        config.camera["device_id"] = args.camera

    app = GestureInputApp(config, mode=args.mode, preview=not args.no_preview)
    signal.signal(signal.SIGINT, app.handle_signal)
    signal.signal(signal.SIGTERM, app.handle_signal)

    return app.run()


if __name__ == "__main__":
    sys.exit(main())
