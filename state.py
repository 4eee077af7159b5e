"""
state.py — Value types for the AR overlay and the per-session view state.
"""

import math
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from geo import normalize_deg


class Classification(Enum):
    NEAR        = "NEAR"
    FAR_VISIBLE = "FAR_VISIBLE"
    FAR_HIDDEN  = "FAR_HIDDEN"


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float

    def __post_init__(self):
        lat, lon = self.latitude, self.longitude
        if not (math.isfinite(lat) and math.isfinite(lon)):
            raise ValueError(f"GeoPoint must be finite, got ({lat}, {lon})")
        if not -90.0 <= lat <= 90.0:
            raise ValueError(f"latitude {lat} outside [-90, 90]")
        if not -180.0 <= lon <= 180.0:
            raise ValueError(f"longitude {lon} outside [-180, 180]")


@dataclass(frozen=True)
class MediaMarker:
    id: str
    location: Optional[GeoPoint]    # None → not geotagged, never projected
    media_ref: Any = None           # uri / thumbnail handle, opaque here
    media_type: str = "photo"


@dataclass(frozen=True)
class HeadingSample:
    degrees: float
    timestamp: float = field(default_factory=time.monotonic)

    def __post_init__(self):
        if not math.isfinite(self.degrees):
            raise ValueError(f"heading must be finite, got {self.degrees}")
        object.__setattr__(self, "degrees", normalize_deg(self.degrees))


@dataclass(frozen=True)
class ProjectedMarker:
    marker: MediaMarker
    distance_m: float
    bearing_deg: float
    angular_offset_deg: float
    screen_x: Optional[float]       # only set for FAR_VISIBLE
    screen_y: Optional[float]
    scale: float
    classification: Classification

    def to_dict(self) -> dict:
        return {
            "marker_id": self.marker.id,
            "classification": self.classification.value,
            "distance_m": round(self.distance_m, 3),
            "bearing_deg": round(self.bearing_deg, 3),
            "offset_deg": round(self.angular_offset_deg, 3),
            "screen_x": None if self.screen_x is None else round(self.screen_x, 1),
            "screen_y": None if self.screen_y is None else round(self.screen_y, 1),
            "scale": round(self.scale, 4),
        }


@dataclass
class ViewState:
    # --- Inputs (most recent sample wins) ---
    position: Optional[GeoPoint]        = None
    heading: Optional[HeadingSample]    = None

    # --- Output ---
    projection: list = field(default_factory=list)
    recompute_count: int                = 0

    @property
    def heading_deg(self) -> float:
        return self.heading.degrees if self.heading else 0.0

    def to_dict(self) -> dict:
        return {
            "lat": self.position.latitude if self.position else None,
            "lon": self.position.longitude if self.position else None,
            "heading_deg": self.heading_deg,
            "markers": len(self.projection),
            "recompute_count": self.recompute_count,
        }
