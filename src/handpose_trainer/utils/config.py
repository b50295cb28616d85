"""
Configuration manager.
Loads a YAML config, merges it over built-in defaults and provides
dot-path access.
"""

import copy
import os
import yaml
import logging

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = os.path.join("config", "config.yaml")

DEFAULTS = {
    "camera": {
        "device_id": 0,
        "width": 640,
        "height": 480,
        "fps": 30,
        "flip_horizontal": True,
    },
    "mediapipe": {
        "model_path": "models/hand_landmarker.task",
        "max_num_hands": 2,
        "min_detection_confidence": 0.5,
        "min_tracking_confidence": 0.5,
        "min_presence_confidence": 0.5,
    },
    "classifier": {
        "hidden_units": [16],
        "learning_rate": 0.01,
        "batch_size": 32,
        "epochs": 50,
    },
    "training": {
        "train_ratio": 0.8,
        "seed": 42,
    },
    "model": {
        "directory": "models",
        "name": "model",
    },
    "dataset": {
        "path": "data/samples.json",
    },
    "labels": ["happy", "sad", "angry", "surprised"],
    "logging": {
        "level": "INFO",
        "file": None,
    },
    "visualization": {},
}

# Fields whose type is checked after loading
_CONFIG_SCHEMA = {
    "camera": {"device_id": int, "width": int, "height": int, "fps": int},
    "classifier": {"learning_rate": float, "batch_size": int, "epochs": int},
    "training": {"train_ratio": float},
    "model": {"directory": str, "name": str},
}


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into a copy of base."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


class Config:
    """YAML-backed configuration with defaults."""

    def __init__(self, data: dict = None):
        self._data = _deep_merge(DEFAULTS, data or {})

    @classmethod
    def load(cls, config_path=None) -> "Config":
        """Load configuration from a YAML file; missing file -> defaults."""
        config_path = config_path or DEFAULT_CONFIG_PATH
        try:
            with open(config_path, "r") as f:
                data = yaml.safe_load(f) or {}
            logger.info("Loaded config from %s", config_path)
        except FileNotFoundError:
            logger.warning("Config file not found: %s, using defaults", config_path)
            data = {}

        if not isinstance(data, dict):
            raise ValueError("Config root must be a mapping, got %s" % type(data).__name__)

        config = cls(data)
        config.validate()
        return config

    def validate(self) -> list:
        """Log and return type mismatches and out-of-range values."""
        warnings = []
        for section_name, fields in _CONFIG_SCHEMA.items():
            section = self._data.get(section_name)
            if not isinstance(section, dict):
                warnings.append(f"Section '{section_name}' should be a dict, got {type(section).__name__}")
                continue
            for field_name, expected_type in fields.items():
                if field_name not in section:
                    continue
                value = section[field_name]
                if expected_type is float and isinstance(value, (int, float)) and not isinstance(value, bool):
                    continue
                if not isinstance(value, expected_type) or isinstance(value, bool):
                    warnings.append(
                        f"{section_name}.{field_name}: expected {expected_type.__name__}, "
                        f"got {type(value).__name__} ({value!r})"
                    )

        ratio = self.get("training.train_ratio")
        if isinstance(ratio, (int, float)) and not 0.0 <= ratio <= 1.0:
            warnings.append(f"training.train_ratio: must be within [0, 1], got {ratio!r}")

        labels = self._data.get("labels")
        if not isinstance(labels, list) or not all(isinstance(l, str) for l in labels):
            warnings.append(f"labels: expected a list of strings, got {labels!r}")

        for w in warnings:
            logger.warning("Config validation: %s", w)
        return warnings

    def override(self, values: dict) -> "Config":
        """Merge values over the current data (e.g. CLI flags)."""
        self._data = _deep_merge(self._data, values)
        return self

    def reset(self) -> "Config":
        """Drop loaded values and overrides, back to DEFAULTS."""
        self._data = copy.deepcopy(DEFAULTS)
        return self

    def get(self, key_path: str, default=None):
        """Get nested config value using dot notation: 'camera.width'."""
        value = self._data
        for key in key_path.split("."):
            if isinstance(value, dict) and key in value:
                value = value[key]
            else:
                return default
        return value

    def get_section(self, section: str) -> dict:
        value = self._data.get(section)
        return value if isinstance(value, dict) else {}

    @property
    def camera(self) -> dict:
        return self.get_section("camera")

    @property
    def mediapipe(self) -> dict:
        return self.get_section("mediapipe")

    @property
    def classifier(self) -> dict:
        return self.get_section("classifier")

    @property
    def training(self) -> dict:
        return self.get_section("training")

    @property
    def model(self) -> dict:
        return self.get_section("model")

    @property
    def visualization(self) -> dict:
        return self.get_section("visualization")

    @property
    def labels(self) -> list:
        return list(self._data.get("labels") or [])

    def to_dict(self) -> dict:
        return copy.deepcopy(self._data)
