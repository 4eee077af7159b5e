import math

import numpy as np
import pytest

from geo import wrap_deg
from heading import HeadingTracker, heading_from_vector
from state import HeadingSample


@pytest.mark.parametrize("vec,expected", [
    ([0.0, 1.0], 0.0),
    ([1.0, 0.0], 90.0),
    ([0.0, -1.0], 180.0),
    ([-1.0, 0.0], 270.0),
    ([1.0, 1.0, -40.0], 45.0),      # z ignored
    (np.array([-3.0, 3.0]), 315.0),
    ({"x": 1.0, "y": 0.0, "z": 12.0}, 90.0),
])
def test_heading_from_vector(vec, expected):
    assert heading_from_vector(vec) == pytest.approx(expected)


@pytest.mark.parametrize("bad", [
    [1.0], [float("nan"), 1.0], {"x": math.inf, "y": 0},
    {"x": 1.0}, None, object(), {"x": "north", "y": 0},
])
def test_heading_from_vector_rejects_bad_input(bad):
    with pytest.raises(ValueError):
        heading_from_vector(bad)


def test_each_sample_overwrites(config):
    tracker = HeadingTracker(config)
    assert tracker.current is None
    tracker.update_degrees(10)
    sample = tracker.update_degrees(200)
    assert isinstance(sample, HeadingSample)
    assert tracker.current.degrees == 200


def test_vector_update_normalizes(config):
    tracker = HeadingTracker(config)
    assert tracker.update_vector([-1.0, 0.0]).degrees == pytest.approx(270.0)


def test_offset_applied_and_wrapped(config):
    config["heading_offset_deg"] = 10.0
    tracker = HeadingTracker(config)
    assert tracker.update_degrees(355).degrees == pytest.approx(5.0)


def test_smoothing_blends_across_north(config):
    config["heading_smoothing"] = 0.5
    tracker = HeadingTracker(config)
    tracker.update_degrees(350)
    out = tracker.update_degrees(10).degrees
    assert abs(wrap_deg(out)) < 1e-6


def test_smoothing_moves_toward_new_sample(config):
    config["heading_smoothing"] = 0.75
    tracker = HeadingTracker(config)
    tracker.update_degrees(0)
    out = tracker.update_degrees(90).degrees
    assert 0 < out < 45


def test_smoothing_opposite_headings_takes_newest(config):
    config["heading_smoothing"] = 0.5
    tracker = HeadingTracker(config)
    tracker.update_degrees(0)
    assert tracker.update_degrees(180).degrees == pytest.approx(180.0)


def test_bad_sample_keeps_previous(config):
    tracker = HeadingTracker(config)
    tracker.update_degrees(42)
    with pytest.raises(ValueError):
        tracker.update_degrees(float("nan"))
    assert tracker.current.degrees == 42


def test_reset(config):
    tracker = HeadingTracker(config)
    tracker.update_degrees(42)
    tracker.reset()
    assert tracker.current is None


def test_invalid_smoothing_rejected(config):
    config["heading_smoothing"] = 1.0
    with pytest.raises(ValueError):
        HeadingTracker(config)


def test_heading_sample_normalizes():
    assert HeadingSample(-90).degrees == 270
    assert HeadingSample(720).degrees == 0
