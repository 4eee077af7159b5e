from conftest import SF, east_of, north_of
from classifier import MarkerSplit, classify, near_markers, visible_overlay_markers
from projection import ProjectionEngine
from state import Classification, MediaMarker


def test_split_by_classification(config, markers):
    projected = ProjectionEngine(config).project(SF, 0.0, markers)
    split = classify(projected)
    assert isinstance(split, MarkerSplit)
    assert [p.marker.id for p in split.near] == ["close"]
    assert [p.marker.id for p in split.visible] == ["ahead"]
    # "east" is FAR_HIDDEN: computed but not exposed
    assert any(p.classification is Classification.FAR_HIDDEN for p in projected)
    assert all(p.marker.id != "east" for p in split.near + split.visible)


def test_near_sorted_by_distance_then_id(config):
    same = north_of(SF, 5)
    ms = [
        MediaMarker("z", north_of(SF, 20)),
        MediaMarker("b", same),
        MediaMarker("a", same),
        MediaMarker("m", east_of(SF, 1)),
    ]
    projected = ProjectionEngine(config).project(SF, 0.0, ms)
    assert [p.marker.id for p in near_markers(projected)] == ["m", "a", "b", "z"]


def test_visible_keeps_projection_order(config):
    ms = [MediaMarker("far", north_of(SF, 900)), MediaMarker("mid", north_of(SF, 90))]
    projected = ProjectionEngine(config).project(SF, 0.0, ms)
    assert [p.marker.id for p in visible_overlay_markers(projected)] == ["far", "mid"]


def test_empty_projection():
    assert classify([]) == MarkerSplit((), ())


def test_classify_accepts_iterators(config, markers):
    projected = ProjectionEngine(config).project(SF, 0.0, markers)
    assert classify(iter(projected)) == classify(projected)
