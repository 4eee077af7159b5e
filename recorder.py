"""
recorder.py — CSV log of projections for post-session analysis.

One row per projected marker per recomputation.
"""

import csv
import logging
import os
from datetime import datetime

log = logging.getLogger("echoes.recorder")

FIELDNAMES = [
    "timestamp", "recompute", "lat", "lon", "heading_deg",
    "marker_id", "classification", "distance_m", "bearing_deg",
    "offset_deg", "screen_x", "screen_y", "scale",
]


class ProjectionRecorder:

    def __init__(self, log_dir: str = "logs"):
        self.log_dir = log_dir
        self.path = None
        self._file = None
        self._writer = None

    def _init_csv(self):
        os.makedirs(self.log_dir, exist_ok=True)
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        self.path = os.path.join(self.log_dir, f"projection_{ts}.csv")
        self._file = open(self.path, "w", newline="")
        self._writer = csv.DictWriter(self._file, fieldnames=FIELDNAMES)
        self._writer.writeheader()
        log.info("Logging projections to %s", self.path)

    def record(self, view: dict, projected: list):
        if self._writer is None:
            self._init_csv()
        now = datetime.now().isoformat()
        for p in projected:
            row = {
                "timestamp": now,
                "recompute": view["recompute_count"],
                "lat": view["lat"],
                "lon": view["lon"],
                "heading_deg": round(view["heading_deg"], 2),
            }
            row.update(p.to_dict())
            self._writer.writerow(row)
        self._file.flush()

    def close(self):
        if self._file:
            self._file.close()
            self._file = None
            self._writer = None
