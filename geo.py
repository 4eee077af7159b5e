"""
geo.py — Geodetic utility functions.
"""

from math import radians, degrees, sin, cos, sqrt, atan2

EARTH_RADIUS_M = 6_371_000  # mean Earth radius


def normalize_deg(angle: float) -> float:
    """Map any angle into [0, 360)."""
    a = angle % 360.0
    # float % can round a tiny negative up to exactly 360.0
    return 0.0 if a >= 360.0 else a


def wrap_deg(angle: float) -> float:
    """Map any angle into (-180, 180]. 0 = dead ahead, negative = left."""
    a = -((180.0 - angle) % 360.0 - 180.0)
    if a <= -180.0:
        a += 360.0
    return a + 0.0  # no -0.0


def haversine_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Returns horizontal distance in meters between two GPS coordinates.
    """
    phi1, phi2 = radians(lat1), radians(lat2)
    dphi = radians(lat2 - lat1)
    dlam = radians(lon2 - lon1)
    a = sin(dphi / 2) ** 2 + cos(phi1) * cos(phi2) * sin(dlam / 2) ** 2
    a = min(1.0, a)
    return EARTH_RADIUS_M * 2 * atan2(sqrt(a), sqrt(1 - a))


def initial_bearing_deg(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """
    Forward azimuth from point 1 to point 2, degrees clockwise from north.
    Identical points give 0.0.
    """
    phi1, phi2 = radians(lat1), radians(lat2)
    dlam = radians(lon2 - lon1)
    y = sin(dlam) * cos(phi2)
    x = cos(phi1) * sin(phi2) - sin(phi1) * cos(phi2) * cos(dlam)
    if x == 0.0 and y == 0.0:
        return 0.0
    return normalize_deg(degrees(atan2(y, x)))


def distance(a, b) -> float:
    """Great-circle distance in meters between two GeoPoints."""
    return haversine_m(a.latitude, a.longitude, b.latitude, b.longitude)


def bearing(origin, target) -> float:
    """Initial bearing in [0, 360) from one GeoPoint to another."""
    return initial_bearing_deg(origin.latitude, origin.longitude,
                               target.latitude, target.longitude)


def within_box(a, b, tolerance_deg: float) -> bool:
    """
    Coarse gate: True when both |dlat| and |dlon| are below tolerance_deg.
    dlon is taken across the antimeridian.
    """
    dlat = abs(a.latitude - b.latitude)
    dlon = abs(wrap_deg(a.longitude - b.longitude))
    return dlat < tolerance_deg and dlon < tolerance_deg
