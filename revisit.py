"""
revisit.py — Detects when the user is back where a memory was captured.

RevisitMonitor.check:
  Reports each geotagged marker within revisit_tol_deg of the current
  position, at most once per revisit_cooldown_s per marker.

RevisitMonitor.visit:
  Remembers positions seen this session and reports whether the current
  one was seen before.

Wording and delivery of any notification belong to the caller.
"""

import logging
import time
from typing import Iterable, Optional

from geo import within_box
from state import GeoPoint, MediaMarker

log = logging.getLogger("echoes.revisit")


class RevisitMonitor:

    def __init__(self, config: dict):
        self.tolerance = float(config.get("revisit_tol_deg", 0.01))
        self.cooldown = float(config.get("revisit_cooldown_s", 600.0))
        self._last_reported: dict[str, float] = {}
        self._visited: list[GeoPoint] = []

    def check(self, position: GeoPoint, markers: Iterable[MediaMarker],
              now: Optional[float] = None) -> list[MediaMarker]:
        now = time.monotonic() if now is None else now
        hits = []
        for m in markers:
            if m.location is None or not within_box(position, m.location, self.tolerance):
                continue
            last = self._last_reported.get(m.id)
            if last is not None and now - last <= self.cooldown:
                continue
            self._last_reported[m.id] = now
            hits.append(m)
        if hits:
            log.info("Revisit: %d memories near (%.5f, %.5f)",
                     len(hits), position.latitude, position.longitude)
        return hits

    def visit(self, position: GeoPoint) -> bool:
        """True if a previously visited place matches; otherwise remember this one."""
        if any(within_box(position, p, self.tolerance) for p in self._visited):
            return True
        self._visited.append(position)
        return False

    def reset(self):
        self._last_reported.clear()
        self._visited.clear()
