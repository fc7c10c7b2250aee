"""
Centralized configuration manager.
Loads the YAML config and provides typed access with defaults.

    - Built-in defaults, deep-merged with the user's file
    - Schema validation for critical fields (warnings only)
    - Reset support for testing
"""

import copy
import os
import yaml
import logging

logger = logging.getLogger(__name__)

_BASE_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))
_CONFIG_DIR = os.path.join(_BASE_DIR, "config")

_DEFAULTS = {
    "camera": {
        "device_id": 0,
        "width": 640,
        "height": 480,
        "fps": 30,
        "flip_horizontal": True,
        "threaded": True,
    },
    "detection": {
        "model_path": "",
        "min_detection_confidence": 0.5,
        "min_presence_confidence": 0.5,
        "min_tracking_confidence": 0.5,
    },
    "recognition": {
        "pinch_threshold": 0.05,
        "point_threshold": 0.1,
        "swipe_threshold": 0.15,
        "hold_duration_ms": 1000,
    },
    "synthesis": {
        "tap_duration_ms": 100,
        "swipe_duration_ms": 300,
        "pinch_duration_ms": 300,
        "swipe_distance_px": 200,
    },
    "injection": {
        "backend": "xdotool",
        "fallback": True,
        "xdotool": {"steps": 10, "button": 1},
    },
    "viewport": {
        "auto": True,
        "width": 1920,
        "height": 1080,
    },
    "visualization": {
        "show_preview": True,
        "draw_landmarks": True,
    },
    "logging": {
        "level": "INFO",
        "file": None,
    },
}

# Schema: sections and their expected field types
_CONFIG_SCHEMA = {
    "camera": {
        "device_id": int,
        "width": int,
        "height": int,
        "fps": int,
    },
    "recognition": {
        "pinch_threshold": float,
        "point_threshold": float,
        "swipe_threshold": float,
        "hold_duration_ms": int,
    },
    "synthesis": {
        "tap_duration_ms": int,
        "swipe_duration_ms": int,
        "pinch_duration_ms": int,
        "swipe_distance_px": float,
    },
    "injection": {
        "backend": str,
    },
    "viewport": {
        "auto": bool,
        "width": int,
        "height": int,
    },
}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base dict."""
    merged = base.copy()
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Config:
    """Singleton configuration manager."""

    _instance = None
    _data = {}

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._data = copy.deepcopy(_DEFAULTS)
        return cls._instance

    def load(self, config_path=None):
        """Load configuration from a YAML file over the built-in defaults."""
        config_path = config_path or os.path.join(_CONFIG_DIR, "config.yaml")

        user_data = {}
        try:
            with open(config_path, "r") as f:
                user_data = yaml.safe_load(f) or {}
            logger.info("Loaded config from %s", config_path)
        except FileNotFoundError:
            logger.warning("Config file not found: %s, using defaults", config_path)

        if not isinstance(user_data, dict):
            logger.warning("Config root should be a mapping, got %s; using defaults",
                           type(user_data).__name__)
            user_data = {}

        self._data = _deep_merge(copy.deepcopy(_DEFAULTS), user_data)
        self._validate()
        return self

    def _validate(self):
        """Validate critical config fields against schema."""
        warnings = []
        for section_name, fields in _CONFIG_SCHEMA.items():
            section = self._data.get(section_name)
            if not isinstance(section, dict):
                warnings.append(f"Section '{section_name}' should be a dict, got {type(section).__name__}")
                continue
            for field_name, expected_type in fields.items():
                if field_name in section:
                    value = section[field_name]
                    # Allow int where float is expected
                    if expected_type is float and isinstance(value, (int, float)):
                        continue
                    if not isinstance(value, expected_type):
                        warnings.append(
                            f"{section_name}.{field_name}: expected {expected_type.__name__}, "
                            f"got {type(value).__name__} ({value!r})"
                        )

        if warnings:
            for w in warnings:
                logger.warning("Config validation: %s", w)
        else:
            logger.debug("Config validation passed")
        return warnings

    def get(self, key_path: str, default=None):
        """Get nested config value using dot notation: 'camera.width'."""
        keys = key_path.split(".")
        value = self._data
        for key in keys:
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def get_section(self, section: str) -> dict:
        """Get an entire config section."""
        value = self._data.get(section, {})
        return value if isinstance(value, dict) else {}

    @property
    def camera(self) -> dict:
        return self.get_section("camera")

    @property
    def detection(self) -> dict:
        return self.get_section("detection")

    @property
    def recognition(self) -> dict:
        return self.get_section("recognition")

    @property
    def synthesis(self) -> dict:
        return self.get_section("synthesis")

    @property
    def injection(self) -> dict:
        return self.get_section("injection")

    @property
    def viewport(self) -> dict:
        return self.get_section("viewport")

    @property
    def visualization(self) -> dict:
        return self.get_section("visualization")

    @property
    def logging(self) -> dict:
        return self.get_section("logging")

    @property
    def base_dir(self) -> str:
        return _BASE_DIR

    @classmethod
    def reset(cls):
        """Reset singleton instance (for testing)."""
        cls._instance = None
        cls._data = {}
