"""
media_source.py — In-memory media library feeding the AR candidate set.

Photos and videos are paged separately, each with its own cursor, the way
platform media libraries expose them. Per-asset metadata is resolved lazily
and cached by id for the lifetime of the library (no eviction; bounded by
the number of assets).
"""

import json
import logging
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from geo import within_box
from state import GeoPoint, MediaMarker

log = logging.getLogger("echoes.media")

MEDIA_TYPES = ("photo", "video")


@dataclass(frozen=True)
class MediaAsset:
    id: str
    uri: str
    media_type: str = "photo"
    location: Optional[GeoPoint] = None
    duration_s: Optional[float] = None
    local_uri: Optional[str] = None

    def to_marker(self) -> MediaMarker:
        return MediaMarker(
            id=self.id,
            location=self.location,
            media_ref=self.local_uri or self.uri,
            media_type=self.media_type,
        )


def load_assets_json(path: str) -> list[MediaAsset]:
    """
    Read assets from a JSON list of objects:
      {"id", "uri", "media_type"?, "latitude"?, "longitude"?, "duration_s"?}
    Entries without both coordinates are kept but carry no location.
    """
    with open(path, "r") as f:
        raw = json.load(f)

    assets = []
    for item in raw:
        lat, lon = item.get("latitude"), item.get("longitude")
        loc = GeoPoint(float(lat), float(lon)) if lat is not None and lon is not None else None
        assets.append(MediaAsset(
            id=str(item["id"]),
            uri=item.get("uri", ""),
            media_type=item.get("media_type", "photo"),
            location=loc,
            duration_s=item.get("duration_s"),
            local_uri=item.get("local_uri"),
        ))
    log.info("Loaded %d assets from %s", len(assets), path)
    return assets


class MediaLibrary:

    def __init__(self, assets: Iterable[MediaAsset], page_size: int = 10,
                 resolver: Optional[Callable[[MediaAsset], MediaAsset]] = None,
                 tolerance_deg: float = 0.05):
        if page_size <= 0:
            raise ValueError(f"page_size must be > 0, got {page_size}")
        self.page_size = page_size
        self.tolerance = tolerance_deg
        self._resolver = resolver or (lambda a: a)
        self._listing = {t: [] for t in MEDIA_TYPES}
        for a in assets:
            self._listing.setdefault(a.media_type, []).append(a)
        self._cursor = {t: 0 for t in self._listing}
        self._cache: dict[str, MediaAsset] = {}
        self._markers: dict[str, MediaMarker] = {}

    @property
    def has_next_page(self) -> bool:
        return any(self._cursor[t] < len(self._listing[t]) for t in self._listing)

    @property
    def markers(self) -> tuple:
        """Read-only snapshot of the candidate set, in load order."""
        return tuple(self._markers.values())

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    def resolve(self, asset: MediaAsset) -> MediaAsset:
        cached = self._cache.get(asset.id)
        if cached is None:
            cached = self._resolver(asset)
            self._cache[asset.id] = cached
        return cached

    def load_more(self, position: GeoPoint) -> list[MediaMarker]:
        """
        Fetch the next page of each media type and add geotagged assets inside
        the coarse box around `position`. Returns only newly added markers.
        """
        added = []
        for media_type, listing in self._listing.items():
            start = self._cursor[media_type]
            page = listing[start:start + self.page_size]
            self._cursor[media_type] = start + len(page)

            for asset in page:
                info = self.resolve(asset)
                if info.location is None:
                    continue
                if not within_box(info.location, position, self.tolerance):
                    continue
                if info.id in self._markers:
                    continue
                marker = info.to_marker()
                self._markers[info.id] = marker
                added.append(marker)

        log.info("Loaded %d new markers (%d total, more=%s)",
                 len(added), len(self._markers), self.has_next_page)
        return added

    def load_all(self, position: GeoPoint) -> tuple:
        while self.has_next_page:
            self.load_more(position)
        return self.markers
