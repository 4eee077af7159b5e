"""
projection.py — Geotagged media → screen-space AR markers.

1-D angular projection: horizontal screen position carries the angle between
the marker's bearing and the device heading; the vertical anchor is fixed.
Device pitch/roll is not modelled.

Every call recomputes the whole list from (position, heading, markers).
There is no incremental state; the candidate set is small.
"""

import logging
import math
from typing import Iterable, Optional

from config import DEFAULT_CONFIG, validate_config
from geo import bearing, distance, within_box, wrap_deg
from state import Classification, GeoPoint, MediaMarker, ProjectedMarker

log = logging.getLogger("echoes.projection")

_ENGINE_KEYS = (
    "camera_hfov_deg", "viewport_w", "viewport_h", "near_far_threshold_m",
    "location_match_tol_deg", "scale_cap", "scale_numerator",
    "marker_half_width_px", "marker_anchor_frac",
)


def screen_x_for_offset(offset_deg: float, fov_deg: float, width: float,
                        half_width: float = 0.0) -> float:
    """Left edge of a marker whose centre sits offset_deg from screen centre."""
    return ((offset_deg + fov_deg / 2) / fov_deg) * width - half_width


def distance_scale(distance_m: float, numerator: float, cap: float) -> float:
    """Inverse-distance size cue, floored at 1 m and capped."""
    return min(cap, numerator / max(distance_m, 1.0))


class ProjectionEngine:

    def __init__(self, config: dict):
        cfg = {k: config.get(k, DEFAULT_CONFIG[k]) for k in _ENGINE_KEYS}
        errors = validate_config(cfg)
        if errors:
            raise ValueError("Invalid projection config: " + "; ".join(errors))

        self.fov = float(cfg["camera_hfov_deg"])
        self.width = float(cfg["viewport_w"])
        self.height = float(cfg["viewport_h"])
        self.threshold = float(cfg["near_far_threshold_m"])
        self.tolerance = float(cfg["location_match_tol_deg"])
        self.scale_cap = float(cfg["scale_cap"])
        self.scale_numerator = float(cfg["scale_numerator"])
        self.half_width = float(cfg["marker_half_width_px"])
        self.anchor_y = self.height * float(cfg["marker_anchor_frac"]) - self.half_width

        self.last_projection: list[ProjectedMarker] = []

    # =====================================================================
    # PER-MARKER
    # =====================================================================

    def project_marker(self, position: GeoPoint, heading_deg: float,
                       marker: MediaMarker) -> Optional[ProjectedMarker]:
        """
        Project one candidate. Returns None when the marker has no location
        or falls outside the coarse lat/lon box around `position`.
        """
        loc = marker.location
        if loc is None:
            return None
        if not within_box(position, loc, self.tolerance):
            return None

        dist = distance(position, loc)
        brg = bearing(position, loc)
        offset = wrap_deg(brg - heading_deg)
        scale = distance_scale(dist, self.scale_numerator, self.scale_cap)

        screen_x = screen_y = None
        if dist < self.threshold:
            cls = Classification.NEAR
        elif abs(offset) > self.fov / 2:
            cls = Classification.FAR_HIDDEN
        else:
            cls = Classification.FAR_VISIBLE
            screen_x = screen_x_for_offset(offset, self.fov, self.width, self.half_width)
            screen_y = self.anchor_y

        return ProjectedMarker(
            marker=marker,
            distance_m=dist,
            bearing_deg=brg,
            angular_offset_deg=offset,
            screen_x=screen_x,
            screen_y=screen_y,
            scale=scale,
            classification=cls,
        )

    # =====================================================================
    # FULL PASS
    # =====================================================================

    def project(self, position: GeoPoint, heading_deg: float,
                markers: Iterable[MediaMarker]) -> list[ProjectedMarker]:
        """Project all candidates, keeping input order. Replaces last_projection."""
        heading_deg = float(heading_deg)
        if not math.isfinite(heading_deg):
            raise ValueError(f"heading must be finite, got {heading_deg}")
        out = []
        for m in markers:
            p = self.project_marker(position, heading_deg, m)
            if p is not None:
                out.append(p)
        self.last_projection = out
        log.debug("projected %d markers at (%.6f, %.6f) heading %.1f",
                  len(out), position.latitude, position.longitude, heading_deg)
        return out


def paint_order(projected: Iterable[ProjectedMarker]) -> list[ProjectedMarker]:
    """Back-to-front order for overlapping overlays: farthest first, then id."""
    return sorted(projected, key=lambda p: (-p.distance_m, p.marker.id))
