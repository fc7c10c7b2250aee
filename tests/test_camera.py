"""
Tests for Camera Module
========================
"""

import pytest
import numpy as np
import sys
from pathlib import Path
from unittest.mock import patch, MagicMock

sys.path.insert(0, str(Path(__file__).parent.parent))

from handgesture.capture.camera import Camera, CameraConfig, Frame


class TestCameraConfig:
    """Test suite for CameraConfig."""

    def test_default_values(self):
        """Test default configuration values."""
        config = CameraConfig()

        assert config.device_id == 0
        assert config.width == 640
        assert config.height == 480
        assert config.fps == 30
        assert config.flip_horizontal

    def test_from_dict_partial(self):
        """Test creating config from partial dictionary."""
        config = CameraConfig.from_dict({"device_id": 2, "threaded": False})

        assert config.device_id == 2
        assert not config.threaded
        assert config.width == 640  # Default


class TestFrame:
    """Test suite for Frame class."""

    def test_rgb_conversion(self):
        """Test BGR to RGB conversion."""
        image = np.zeros((1, 1, 3), dtype=np.uint8)
        image[0, 0] = [255, 0, 0]  # Blue in BGR

        rgb = Frame(image=image, timestamp=0, frame_number=0).rgb

        assert list(rgb[0, 0]) == [0, 0, 255]


class TestCamera:
    """Test suite for Camera class."""

    @pytest.fixture
    def mock_capture(self):
        """Mock OpenCV VideoCapture returning a frame with a marked left column."""
        image = np.zeros((480, 640, 3), dtype=np.uint8)
        image[:, 0] = 255
        with patch("handgesture.capture.camera.cv2.VideoCapture") as mock:
            cap = MagicMock()
            cap.isOpened.return_value = True
            cap.read.side_effect = lambda: (True, image.copy())
            mock.return_value = cap
            yield cap

    def test_camera_init(self):
        camera = Camera(CameraConfig(device_id=0))

        assert not camera.is_running
        assert camera.read() is None

    def test_start_failure(self):
        with patch("handgesture.capture.camera.cv2.VideoCapture") as mock:
            cap = MagicMock()
            cap.isOpened.return_value = False
            mock.return_value = cap

            camera = Camera(CameraConfig(warmup_frames=0))

            assert camera.start() is False
            assert not camera.is_running
            cap.release.assert_called_once()

    def test_synchronous_read(self, mock_capture):
        camera = Camera(CameraConfig(warmup_frames=0, threaded=False))
        camera.start()

        first = camera.read()
        second = camera.read()
        camera.stop()

        assert first.frame_number == 1
        assert second.frame_number == 2
        assert second.timestamp >= first.timestamp

    def test_flip_horizontal(self, mock_capture):
        camera = Camera(CameraConfig(warmup_frames=0, threaded=False))
        camera.start()

        frame = camera.read()
        camera.stop()

        assert frame.image[0, -1, 0] == 255
        assert frame.image[0, 0, 0] == 0

    def test_warmup_frames_discarded(self, mock_capture):
        camera = Camera(CameraConfig(warmup_frames=3, threaded=False))
        camera.start()

        frame = camera.read()
        camera.stop()

        assert mock_capture.read.call_count == 4
        assert frame.frame_number == 1

    def test_threaded_read_returns_each_frame_once(self):
        camera = Camera(CameraConfig(threaded=True))
        # Stand in for the capture thread
        camera._running = True
        camera._latest_frame = Frame(np.zeros((2, 2, 3), np.uint8), 1.0, 7)

        assert camera.read().frame_number == 7
        assert camera.read() is None

        camera._latest_frame = Frame(np.zeros((2, 2, 3), np.uint8), 1.1, 8)
        assert camera.read().frame_number == 8

    def test_context_manager(self, mock_capture):
        with Camera(CameraConfig(warmup_frames=0, threaded=False)) as camera:
            assert camera.is_running

        assert not camera.is_running
        mock_capture.release.assert_called_once()

    def test_resolution_property(self):
        assert Camera(CameraConfig(width=800, height=600)).resolution == (800, 600)


class TestCameraIntegration:
    """Integration tests requiring a real camera."""

    @pytest.mark.skip(reason="Requires physical camera")
    def test_real_camera_capture(self):
        camera = Camera(CameraConfig(warmup_frames=5))

        try:
            if camera.start():
                frame = None
                for _ in range(100):
                    frame = camera.read()
                    if frame is not None:
                        break
                assert frame is not None
        finally:
            camera.stop()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
