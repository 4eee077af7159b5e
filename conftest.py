import math

import pytest

from config import DEFAULT_CONFIG
from geo import EARTH_RADIUS_M
from state import GeoPoint, MediaMarker

SF = GeoPoint(37.7749, -122.4194)

# metres per degree of latitude on the haversine sphere
M_PER_DEG_LAT = math.pi * EARTH_RADIUS_M / 180.0


def north_of(origin: GeoPoint, meters: float) -> GeoPoint:
    """Point exactly due north (same longitude) of origin."""
    return GeoPoint(origin.latitude + meters / M_PER_DEG_LAT, origin.longitude)


def east_of(origin: GeoPoint, meters: float) -> GeoPoint:
    """Point roughly due east (same latitude) of origin."""
    m_per_deg_lon = M_PER_DEG_LAT * math.cos(math.radians(origin.latitude))
    return GeoPoint(origin.latitude, origin.longitude + meters / m_per_deg_lon)


@pytest.fixture
def config():
    cfg = dict(DEFAULT_CONFIG)
    cfg.update({"viewport_w": 400, "viewport_h": 800})
    return cfg


@pytest.fixture
def origin():
    return SF


@pytest.fixture
def markers():
    return [
        MediaMarker("ahead", north_of(SF, 100.0), "file://ahead.jpg"),
        MediaMarker("close", north_of(SF, 10.0), "file://close.jpg"),
        MediaMarker("east", east_of(SF, 200.0), "file://east.jpg"),
        MediaMarker("untagged", None, "file://untagged.jpg"),
        MediaMarker("far-away", GeoPoint(40.7128, -74.0060), "file://nyc.jpg"),
    ]
