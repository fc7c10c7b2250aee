"""
Tests for pointer injection backends
=====================================
"""

import subprocess
import pytest
import sys
from pathlib import Path
from unittest.mock import Mock, patch

sys.path.insert(0, str(Path(__file__).parent.parent))

from handgesture.control.injectors import (
    SimulatedInjector,
    XdotoolInjector,
    create_injector,
)
from handgesture.core.types import PathStroke, Viewport

TAP = PathStroke(((540.0, 1200.0),), 0, 100)
SWIPE = PathStroke(((100.0, 200.0), (300.0, 200.0)), 0, 300)


@pytest.fixture
def mock_run():
    """Mock subprocess.run: xdotool present and every command succeeds."""
    with patch("handgesture.control.injectors.subprocess.run") as mock:
        mock.return_value = Mock(returncode=0, stderr=b"")
        yield mock


class TestSimulatedInjector:

    def test_records_dispatch(self):
        injector = SimulatedInjector()

        assert injector.dispatch_path_gesture([TAP]) is True
        assert injector.dispatched[0].strokes == (TAP,)
        assert injector.dispatched[0].accepted

    def test_unavailable(self):
        injector = SimulatedInjector(available=False)

        assert not injector.is_available()
        assert injector.dispatch_path_gesture([TAP]) is False

    def test_toggle_availability(self):
        injector = SimulatedInjector()
        injector.set_available(False)

        assert injector.dispatch_path_gesture([SWIPE]) is False

        injector.set_available(True)
        assert injector.dispatch_path_gesture([SWIPE]) is True
        assert [r.accepted for r in injector.dispatched] == [False, True]


class TestXdotoolInjector:

    def test_available_when_binary_found(self, mock_run):
        injector = XdotoolInjector()

        assert injector.is_available()
        assert mock_run.call_args[0][0] == ["which", "xdotool"]

    def test_unavailable_when_binary_missing(self, mock_run):
        mock_run.return_value = Mock(returncode=1)

        injector = XdotoolInjector()

        assert not injector.is_available()
        assert injector.dispatch_path_gesture([TAP]) is False
        assert mock_run.call_count == 1

    def test_unavailable_when_which_fails(self, mock_run):
        mock_run.side_effect = OSError("no which")

        assert not XdotoolInjector().is_available()

    def test_tap_command(self, mock_run):
        injector = XdotoolInjector()

        assert injector.build_command(TAP) == [
            "xdotool",
            "mousemove", "540", "1200", "mousedown", "1",
            "sleep", "0.100",
            "mouseup", "1",
        ]

    def test_swipe_command(self, mock_run):
        injector = XdotoolInjector({"steps": 2})

        assert injector.build_command(SWIPE) == [
            "xdotool",
            "mousemove", "100", "200", "mousedown", "1",
            "sleep", "0.150", "mousemove", "200", "200",
            "sleep", "0.150", "mousemove", "300", "200",
            "mouseup", "1",
        ]

    def test_start_offset_and_button(self, mock_run):
        injector = XdotoolInjector({"button": 3})
        stroke = PathStroke(((10.4, 20.6),), 250, 100)

        command = injector.build_command(stroke)

        assert command[:6] == ["xdotool", "sleep", "0.250", "mousemove", "10", "21"]
        assert command[-2:] == ["mouseup", "3"]

    def test_dispatch_runs_command(self, mock_run):
        injector = XdotoolInjector()

        assert injector.dispatch_path_gesture([TAP]) is True
        assert mock_run.call_args[0][0] == injector.build_command(TAP)

    def test_dispatch_nonzero_exit(self, mock_run):
        injector = XdotoolInjector()
        mock_run.return_value = Mock(returncode=1, stderr=b"Can't open display")

        assert injector.dispatch_path_gesture([TAP]) is False

    def test_dispatch_timeout(self, mock_run):
        injector = XdotoolInjector()
        mock_run.side_effect = subprocess.TimeoutExpired("xdotool", 2.1)

        assert injector.dispatch_path_gesture([TAP]) is False

    def test_multi_stroke_rejected(self, mock_run):
        injector = XdotoolInjector()
        mock_run.reset_mock()

        assert injector.dispatch_path_gesture([SWIPE, SWIPE]) is False
        mock_run.assert_not_called()


class TestScreenSize:

    def test_display_geometry(self, mock_run):
        injector = XdotoolInjector()
        mock_run.return_value = Mock(returncode=0, stdout=b"2560 1440\n")

        assert injector.screen_size() == (2560, 1440)
        assert mock_run.call_args[0][0] == ["xdotool", "getdisplaygeometry"]

    def test_no_display(self, mock_run):
        injector = XdotoolInjector()
        mock_run.return_value = Mock(returncode=1, stdout=b"")

        assert injector.screen_size() is None

    def test_garbled_output(self, mock_run):
        injector = XdotoolInjector()
        mock_run.return_value = Mock(returncode=0, stdout=b"Can't open display\n")

        assert injector.screen_size() is None

    def test_timeout(self, mock_run):
        injector = XdotoolInjector()
        mock_run.side_effect = subprocess.TimeoutExpired("xdotool", 2.0)

        assert injector.screen_size() is None

    def test_unavailable_skips_query(self, mock_run):
        mock_run.return_value = Mock(returncode=1)
        injector = XdotoolInjector()
        mock_run.reset_mock()

        assert injector.screen_size() is None
        mock_run.assert_not_called()

    def test_simulated_has_no_screen(self):
        assert SimulatedInjector().screen_size() is None


class TestViewportResolution:

    def test_queried_size_wins(self):
        assert Viewport.from_dict({"width": 1920, "height": 1080}, (1366, 768)) == Viewport(1366, 768)

    def test_config_override(self):
        viewport = Viewport.from_dict({"auto": False, "width": 1280, "height": 720}, (1366, 768))

        assert viewport == Viewport(1280, 720)

    def test_config_fallback(self):
        assert Viewport.from_dict({}, None) == Viewport(1920, 1080)


class TestCreateInjector:

    def test_simulated_backend(self):
        assert isinstance(create_injector({"backend": "simulated"}), SimulatedInjector)

    def test_unknown_backend(self):
        assert isinstance(create_injector({"backend": "wayland"}), SimulatedInjector)

    def test_xdotool_backend(self, mock_run):
        assert isinstance(create_injector({"backend": "xdotool"}), XdotoolInjector)

    def test_xdotool_missing_falls_back(self, mock_run):
        mock_run.return_value = Mock(returncode=1)

        assert isinstance(create_injector({"backend": "xdotool"}), SimulatedInjector)

    def test_xdotool_missing_without_fallback(self, mock_run):
        mock_run.return_value = Mock(returncode=1)

        injector = create_injector({"backend": "xdotool", "fallback": False})

        assert isinstance(injector, XdotoolInjector)
        assert not injector.is_available()

    def test_xdotool_options_passed(self, mock_run):
        injector = create_injector({"backend": "xdotool", "xdotool": {"steps": 2}})

        assert injector.build_command(SWIPE).count("mousemove") == 3


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
