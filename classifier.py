"""
classifier.py — Split a projection into the "close by" strip and the AR overlay.
"""

from typing import Iterable, NamedTuple

from state import Classification, ProjectedMarker


class MarkerSplit(NamedTuple):
    near: tuple        # ascending distance, then id
    visible: tuple     # projection order


def near_markers(projected: Iterable[ProjectedMarker]) -> tuple:
    near = [p for p in projected if p.classification is Classification.NEAR]
    return tuple(sorted(near, key=lambda p: (p.distance_m, p.marker.id)))


def visible_overlay_markers(projected: Iterable[ProjectedMarker]) -> tuple:
    return tuple(p for p in projected if p.classification is Classification.FAR_VISIBLE)


def classify(projected: Iterable[ProjectedMarker]) -> MarkerSplit:
    # FAR_HIDDEN is dropped here; the renderer never sees it
    projected = list(projected)
    return MarkerSplit(near_markers(projected), visible_overlay_markers(projected))
