"""
Tests for the command line entry point
=======================================
"""

import pytest
import sys
from pathlib import Path
from unittest.mock import MagicMock, patch

sys.path.insert(0, str(Path(__file__).parent.parent))

from handgesture.core.types import Viewport
from handgesture.main import GestureInputApp, parse_args
from handgesture.utils.config import Config


class TestParseArgs:

    def test_defaults(self):
        args = parse_args([])

        assert args.mode == "control"
        assert args.config is None
        assert args.camera is None
        assert not args.no_preview

    def test_options(self):
        args = parse_args(["--mode", "demo", "--camera", "2", "--no-preview",
                           "--log-level", "DEBUG"])

        assert args.mode == "demo"
        assert args.camera == 2
        assert args.no_preview
        assert args.log_level == "DEBUG"

    def test_invalid_mode(self):
        with pytest.raises(SystemExit):
            parse_args(["--mode", "replay"])


class TestGestureInputApp:

    @pytest.fixture
    def config(self):
        Config.reset()
        config = Config()
        config._data["injection"]["backend"] = "simulated"
        yield config
        Config.reset()

    def test_camera_failure_exit_code(self, config):
        with patch("handgesture.main.Camera") as camera_cls, \
             patch("handgesture.main.HandTracker") as tracker_cls:
            camera_cls.return_value.start.return_value = False

            app = GestureInputApp(config, mode="demo", preview=False)

            assert app.run() == 1
            tracker_cls.return_value.start.assert_not_called()

    def test_headless_control_refused_exits(self, config):
        config._data["injection"] = {"backend": "xdotool", "fallback": False}
        with patch("handgesture.main.Camera") as camera_cls, \
             patch("handgesture.main.HandTracker") as tracker_cls, \
             patch("handgesture.control.injectors.subprocess.run") as run:
            run.return_value = MagicMock(returncode=1)
            camera = camera_cls.return_value
            tracker = tracker_cls.return_value
            camera.start.return_value = True
            tracker.start.return_value = True

            app = GestureInputApp(config, mode="control", preview=False)

            assert app.run() == 1
            camera.read.assert_not_called()
            tracker.process.assert_not_called()
            tracker.stop.assert_called_once()
            camera.stop.assert_called_once()

    def test_viewport_from_display(self, config):
        config._data["injection"] = {"backend": "xdotool"}
        with patch("handgesture.main.Camera"), \
             patch("handgesture.main.HandTracker"), \
             patch("handgesture.control.injectors.subprocess.run") as run:
            run.return_value = MagicMock(returncode=0, stdout=b"2560 1440\n")

            app = GestureInputApp(config, mode="control", preview=False)

        assert app.session.viewport == Viewport(2560, 1440)

    def test_viewport_from_config_for_simulated(self, config):
        with patch("handgesture.main.Camera"), patch("handgesture.main.HandTracker"):
            app = GestureInputApp(config, mode="demo", preview=False)

        assert app.session.viewport == Viewport(1920, 1080)

    def test_headless_run_tracks_until_signal(self, config):
        with patch("handgesture.main.Camera") as camera_cls, \
             patch("handgesture.main.HandTracker") as tracker_cls:
            camera = camera_cls.return_value
            tracker = tracker_cls.return_value
            camera.start.return_value = True
            tracker.start.return_value = True
            tracker.process.return_value = None

            app = GestureInputApp(config, mode="demo", preview=False)

            def read():
                app.handle_signal(2, None)
                return MagicMock(timestamp=1.0)

            camera.read.side_effect = read

            assert app.run() == 0
            tracker.process.assert_called_once()
            tracker.stop.assert_called_once()
            camera.stop.assert_called_once()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
