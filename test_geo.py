import itertools

import pytest

from conftest import SF, east_of, north_of
from geo import (bearing, distance, haversine_m, initial_bearing_deg,
                 normalize_deg, within_box, wrap_deg)
from state import GeoPoint

POINTS = [
    GeoPoint(0.0, 0.0),
    GeoPoint(37.7749, -122.4194),
    GeoPoint(-33.8688, 151.2093),
    GeoPoint(89.9, 45.0),
    GeoPoint(-89.9, -179.9),
    GeoPoint(51.5074, -0.1278),
]


@pytest.mark.parametrize("p", POINTS)
def test_distance_to_self_is_zero(p):
    assert distance(p, p) == 0.0


@pytest.mark.parametrize("a,b", list(itertools.combinations(POINTS, 2)))
def test_distance_is_symmetric(a, b):
    assert distance(a, b) == pytest.approx(distance(b, a), rel=1e-6)


@pytest.mark.parametrize("a,b", list(itertools.permutations(POINTS, 2)))
def test_bearing_in_range(a, b):
    assert 0.0 <= bearing(a, b) < 360.0


def test_one_degree_longitude_at_equator():
    d = distance(GeoPoint(0, 0), GeoPoint(0, 1))
    assert d == pytest.approx(111_195, rel=0.01)


def test_haversine_matches_geopoint_front_end():
    assert haversine_m(0, 0, 0, 1) == distance(GeoPoint(0, 0), GeoPoint(0, 1))


def test_bearing_of_identical_points_is_zero():
    assert bearing(SF, SF) == 0.0
    assert initial_bearing_deg(10, 20, 10, 20) == 0.0


def test_cardinal_bearings():
    assert bearing(SF, north_of(SF, 100)) == 0.0
    assert bearing(north_of(SF, 100), SF) == pytest.approx(180.0, abs=1e-9)
    assert bearing(SF, east_of(SF, 100)) == pytest.approx(90.0, abs=0.01)
    assert bearing(east_of(SF, 100), SF) == pytest.approx(270.0, abs=0.01)


def test_north_of_helper_distance():
    assert distance(SF, north_of(SF, 100)) == pytest.approx(100.0, abs=1e-3)


@pytest.mark.parametrize("angle,expected", [
    (0, 0), (359.5, 359.5), (360, 0), (-90, 270), (725, 5), (-720, 0),
])
def test_normalize_deg(angle, expected):
    assert normalize_deg(angle) == pytest.approx(expected)


def test_normalize_deg_never_returns_360():
    assert 0.0 <= normalize_deg(-1e-20) < 360.0


@pytest.mark.parametrize("bearing_deg,heading,expected", [
    (350, 0, -10),      # just left of ahead, not +350
    (10, 350, 20),      # wraps across north
    (0, 0, 0),
    (180, 0, 180),      # directly behind maps to +180, never -180
    (0, 180, 180),
    (90, 0, 90),
    (270, 0, -90),
])
def test_wrap_deg_offsets(bearing_deg, heading, expected):
    assert wrap_deg(bearing_deg - heading) == expected


@pytest.mark.parametrize("x", [-1e9, -540.0, -180.0, -1e-20, 0.0, 179.999, 180.0, 900.5])
def test_wrap_deg_range(x):
    assert -180.0 < wrap_deg(x) <= 180.0


def test_within_box_is_strict_and_per_axis():
    a = GeoPoint(10.0, 10.0)
    assert within_box(a, GeoPoint(10.04, 9.96), 0.05)
    assert not within_box(a, GeoPoint(10.06, 10.0), 0.05)
    assert not within_box(a, GeoPoint(10.0, 10.06), 0.05)


def test_within_box_across_antimeridian():
    assert within_box(GeoPoint(0, 179.99), GeoPoint(0, -179.99), 0.05)
