"""
heading.py — Compass heading from magnetometer vectors.

Raw vectors are resolved with atan2(x, y) so that the sensor's magnetic "up"
axis reads 0°. Only x and y are used; a z component is accepted and ignored
(device tilt is not modelled).
"""

import logging
import math
from collections.abc import Mapping
from typing import Optional

import numpy as np

from geo import normalize_deg
from state import HeadingSample

log = logging.getLogger("echoes.heading")


def heading_from_vector(vec) -> float:
    """Resolve a 2- or 3-axis magnetic vector (sequence, array or {x, y}) to degrees."""
    try:
        if isinstance(vec, Mapping):
            x, y = vec["x"], vec["y"]
        else:
            arr = np.asarray(vec, dtype=float).ravel()
            if arr.size < 2:
                raise ValueError(f"magnetic vector needs at least x and y, got {arr.size} values")
            x, y = arr[0], arr[1]
        x, y = float(x), float(y)
    except (KeyError, TypeError) as e:
        raise ValueError(f"not a magnetic vector: {vec!r} ({e!r})") from None
    if not (math.isfinite(x) and math.isfinite(y)):
        raise ValueError(f"magnetic vector must be finite, got ({x}, {y})")
    return normalize_deg(math.degrees(math.atan2(x, y)))


class HeadingTracker:

    def __init__(self, config: dict):
        self.offset = float(config.get("heading_offset_deg", 0.0))
        self.alpha = float(config.get("heading_smoothing", 0.0))
        if not 0.0 <= self.alpha < 1.0:
            raise ValueError(f"heading_smoothing must be in [0, 1), got {self.alpha}")
        self._current: Optional[HeadingSample] = None
        self._unit = None   # smoothed unit vector (sin, cos)

    @property
    def current(self) -> Optional[HeadingSample]:
        return self._current

    def reset(self):
        self._current = None
        self._unit = None

    def update_vector(self, vec) -> HeadingSample:
        return self.update_degrees(heading_from_vector(vec))

    def update_degrees(self, degrees: float) -> HeadingSample:
        """Push a resolved heading; returns the new current sample."""
        degrees = float(degrees)
        if not math.isfinite(degrees):
            raise ValueError(f"heading must be finite, got {degrees}")
        raw = normalize_deg(degrees + self.offset)

        if self.alpha == 0.0 or self._unit is None:
            self._unit = self._to_unit(raw)
            out = raw
        else:
            # EMA on the unit circle so 359° and 1° blend to 0°, not 180°
            self._unit = self.alpha * self._unit + (1.0 - self.alpha) * self._to_unit(raw)
            if np.hypot(*self._unit) < 1e-12:
                # opposite headings cancelled out, take the newest
                self._unit = self._to_unit(raw)
            out = normalize_deg(math.degrees(math.atan2(self._unit[0], self._unit[1])))

        self._current = HeadingSample(out)
        log.debug("heading raw=%.1f out=%.1f", raw, out)
        return self._current

    @staticmethod
    def _to_unit(deg: float) -> np.ndarray:
        r = math.radians(deg)
        return np.array([math.sin(r), math.cos(r)])
