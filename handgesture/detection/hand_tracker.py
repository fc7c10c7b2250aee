"""
Hand Tracking Module - MediaPipe Tasks API
===========================================

Wraps the MediaPipe HandLandmarker to produce one landmark frame per image:
the first tracked hand's 21 landmarks, or None when no hand is visible.
"""

import logging
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

import numpy as np
import mediapipe as mp
from mediapipe.tasks import python as mp_tasks
from mediapipe.tasks.python import vision

from handgesture.core.types import Landmark, NUM_LANDMARKS
from handgesture.utils.logger import log_timing

logger = logging.getLogger(__name__)

HAND_LANDMARKER_MODEL_URL = (
    "https://storage.googleapis.com/mediapipe-models/hand_landmarker/"
    "hand_landmarker/float16/1/hand_landmarker.task"
)
DEFAULT_MODEL_PATH = Path(__file__).resolve().parent.parent.parent / "models" / "hand_landmarker.task"


@dataclass
class HandTrackerConfig:
    """Configuration for the hand tracker."""
    model_path: str = ""
    min_detection_confidence: float = 0.5
    min_presence_confidence: float = 0.5
    min_tracking_confidence: float = 0.5

    @classmethod
    def from_dict(cls, d: dict) -> "HandTrackerConfig":
        """Create config from dictionary."""
        return cls(
            model_path=d.get("model_path", "") or "",
            min_detection_confidence=d.get("min_detection_confidence", 0.5),
            min_presence_confidence=d.get("min_presence_confidence", 0.5),
            min_tracking_confidence=d.get("min_tracking_confidence", 0.5),
        )


def download_model(url: str, save_path: Path) -> bool:
    """Download the hand landmarker model if not present."""
    if save_path.exists():
        return True

    try:
        save_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Downloading hand landmarker model to %s...", save_path)
        urllib.request.urlretrieve(url, save_path)
        logger.info("Model download complete")
        return True
    except OSError as e:
        logger.error("Failed to download model: %s", e)
        return False


class HandTracker:
    """
    Single-hand landmark tracker.

    Example:
        >>> tracker = HandTracker()
        >>> tracker.start()
        >>> landmarks = tracker.process(rgb_image)  # RGB format!
        >>> if landmarks is None:
        ...     print("no hand")
        >>> tracker.stop()
    """

    def __init__(self, config: Optional[HandTrackerConfig] = None):
        self.config = config or HandTrackerConfig()
        self._landmarker: Optional[vision.HandLandmarker] = None

    def start(self) -> bool:
        """Create the landmarker, downloading the model on first use."""
        model_path = Path(self.config.model_path) if self.config.model_path else DEFAULT_MODEL_PATH

        if not download_model(HAND_LANDMARKER_MODEL_URL, model_path):
            logger.error("Hand landmarker model unavailable: %s", model_path)
            return False

        options = vision.HandLandmarkerOptions(
            base_options=mp_tasks.BaseOptions(model_asset_path=str(model_path)),
            running_mode=vision.RunningMode.IMAGE,
            num_hands=1,
            min_hand_detection_confidence=self.config.min_detection_confidence,
            min_hand_presence_confidence=self.config.min_presence_confidence,
            min_tracking_confidence=self.config.min_tracking_confidence,
        )

        try:
            self._landmarker = vision.HandLandmarker.create_from_options(options)
        except (RuntimeError, ValueError) as e:
            logger.error("Failed to initialize HandLandmarker: %s", e)
            return False

        logger.info("HandLandmarker initialized with model: %s", model_path)
        return True

    def stop(self) -> None:
        """Release resources."""
        if self._landmarker:
            self._landmarker.close()
            self._landmarker = None
            logger.info("HandLandmarker stopped")

    @log_timing
    def process(self, image: np.ndarray) -> Optional[List[Landmark]]:
        """
        Track the hand in an RGB image.

        Args:
            image: RGB image as numpy array (H, W, 3)

        Returns:
            21 landmarks of the first hand, or None if no hand was found
        """
        if self._landmarker is None:
            raise RuntimeError("HandTracker not initialized. Call start() first.")

        mp_image = mp.Image(image_format=mp.ImageFormat.SRGB, data=np.ascontiguousarray(image))
        result = self._landmarker.detect(mp_image)

        if not result.hand_landmarks:
            return None

        landmarks = [Landmark(x=lm.x, y=lm.y, z=lm.z) for lm in result.hand_landmarks[0]]
        if len(landmarks) < NUM_LANDMARKS:
            logger.debug("Incomplete hand: %d landmarks", len(landmarks))
        return landmarks

    @property
    def is_running(self) -> bool:
        return self._landmarker is not None

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.stop()
        return False
