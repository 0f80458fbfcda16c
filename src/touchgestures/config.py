"""Default thresholds and timeouts shared by the recognizers.

Distances are in surface pixels, durations in milliseconds, velocities in
pixels per second. Load overrides from YAML:

    config = GestureConfig.from_yaml("gestures.yml")
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

from touchgestures.errors import ConfigurationError

logger = logging.getLogger("touchgestures.config")


@dataclass
class GestureConfig:
    touch_slop: float = 8.0
    double_tap_touch_slop: float = 16.0
    tap_timeout: float = 100.0
    long_press_timeout: float = 500.0
    double_tap_timeout: float = 300.0
    maximum_fling_velocity: float = 8000.0
    edge_margin: float = 20.0
    surface_width: Optional[float] = None
    surface_height: Optional[float] = None
    swipe_distance_threshold: float = 100.0
    swipe_velocity_threshold: float = 100.0
    swipe_max_slop_time: float = 150.0
    swipe_max_duration: float = 300.0
    rotation_threshold: float = 0.008

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if not isinstance(value, (int, float)) or value < 0:
                raise ConfigurationError(f"{f.name} must be a non-negative number, got {value!r}")

    @property
    def touch_slop_square(self) -> float:
        return self.touch_slop * self.touch_slop

    @property
    def double_tap_touch_slop_square(self) -> float:
        return self.double_tap_touch_slop * self.double_tap_touch_slop

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> GestureConfig:
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown config keys: {sorted(unknown)}")
        return cls(**data)

    @classmethod
    def from_yaml(cls, path: str | Path) -> GestureConfig:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
        # A full recognizer document keeps thresholds under "config"
        if "recognizers" in data or "config" in data:
            data = data.get("config") or {}
        logger.info("Loaded gesture config from %s", path)
        return cls.from_dict(data)

    def to_yaml(self, path: str | Path):
        with open(path, "w") as f:
            yaml.dump(self.to_dict(), f, default_flow_style=False, sort_keys=False)
