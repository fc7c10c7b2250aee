"""
Tests for the MediaPipe hand tracker wrapper
=============================================
"""

import pytest
import numpy as np
import sys
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

sys.path.insert(0, str(Path(__file__).parent.parent))

from handgesture.core.types import Landmark
from handgesture.detection.hand_tracker import HandTracker, HandTrackerConfig, download_model


def landmarker_result(hands):
    """Build a HandLandmarkerResult-like object from lists of (x, y, z)."""
    return SimpleNamespace(hand_landmarks=[
        [SimpleNamespace(x=x, y=y, z=z) for x, y, z in hand] for hand in hands
    ])


@pytest.fixture
def mock_landmarker():
    with patch("handgesture.detection.hand_tracker.vision.HandLandmarker") as cls, \
         patch("handgesture.detection.hand_tracker.download_model", return_value=True):
        landmarker = MagicMock()
        cls.create_from_options.return_value = landmarker
        yield landmarker


class TestHandTrackerConfig:

    def test_from_dict(self):
        config = HandTrackerConfig.from_dict({"min_detection_confidence": 0.7, "model_path": None})

        assert config.min_detection_confidence == 0.7
        assert config.min_tracking_confidence == 0.5
        assert config.model_path == ""


class TestHandTracker:

    def test_process_before_start(self):
        with pytest.raises(RuntimeError):
            HandTracker().process(np.zeros((4, 4, 3), dtype=np.uint8))

    def test_start_fails_without_model(self):
        with patch("handgesture.detection.hand_tracker.download_model", return_value=False):
            tracker = HandTracker()

            assert tracker.start() is False
            assert not tracker.is_running

    def test_no_hand(self, mock_landmarker):
        mock_landmarker.detect.return_value = landmarker_result([])
        tracker = HandTracker()
        tracker.start()

        assert tracker.process(np.zeros((4, 4, 3), dtype=np.uint8)) is None

    def test_first_hand_landmarks(self, mock_landmarker):
        first = [(i / 21, 0.5, 0.0) for i in range(21)]
        second = [(0.9, 0.9, 0.0)] * 21
        mock_landmarker.detect.return_value = landmarker_result([first, second])
        tracker = HandTracker()
        tracker.start()

        landmarks = tracker.process(np.zeros((4, 4, 3), dtype=np.uint8))

        assert len(landmarks) == 21
        assert landmarks[0] == Landmark(*first[0])
        assert isinstance(landmarks[8], Landmark)

    def test_stop_closes_landmarker(self, mock_landmarker):
        with HandTracker() as tracker:
            assert tracker.is_running

        mock_landmarker.close.assert_called_once()
        assert not tracker.is_running


class TestDownloadModel:

    def test_existing_file_skips_download(self, tmp_path):
        model = tmp_path / "hand_landmarker.task"
        model.write_bytes(b"model")

        with patch("handgesture.detection.hand_tracker.urllib.request.urlretrieve") as fetch:
            assert download_model("http://example.invalid/m.task", model) is True
            fetch.assert_not_called()

    def test_download_failure(self, tmp_path):
        with patch("handgesture.detection.hand_tracker.urllib.request.urlretrieve",
                   side_effect=OSError("offline")):
            assert download_model("http://example.invalid/m.task", tmp_path / "m.task") is False


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
