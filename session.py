"""
session.py — Event-driven AR session.

Two independent push streams drive recomputation:
  • position updates (GeoPoint, or (lat, lon) pairs)
  • heading updates (degrees, raw magnetometer vectors, or HeadingSample)

Each sample is handled to completion inside its callback: store it, project
the whole candidate set from scratch, hand the result to the renderer if it
changed. Everything runs on one event loop; there is no locking.

Stream failures (permission denied, sensor missing) are logged and the session
carries on with its last known position/heading.
"""

import asyncio
import logging
import numbers
from typing import Callable, Iterable, Optional

from classifier import MarkerSplit, classify
from heading import HeadingTracker
from projection import ProjectionEngine
from recorder import ProjectionRecorder
from revisit import RevisitMonitor
from state import GeoPoint, HeadingSample, MediaMarker, ViewState

log = logging.getLogger("echoes.session")

Renderer = Callable[[list, MarkerSplit], None]


class Subscription:
    """Cancellable handle for one consumed stream."""

    def __init__(self, task: asyncio.Task, name: str):
        self.task = task
        self.name = name

    @property
    def active(self) -> bool:
        return not self.task.done()

    def remove(self):
        if not self.task.done():
            self.task.cancel()
            log.info("Unsubscribed from %s stream", self.name)


def as_geopoint(value) -> GeoPoint:
    if isinstance(value, GeoPoint):
        return value
    try:
        lat, lon = value
        lat, lon = float(lat), float(lon)
    except (TypeError, ValueError):
        raise ValueError(f"position must be a GeoPoint or (lat, lon) pair, got {value!r}") from None
    return GeoPoint(lat, lon)


class ARSession:

    def __init__(self,
                 config: dict,
                 engine: ProjectionEngine,
                 tracker: HeadingTracker,
                 markers: Iterable[MediaMarker] = (),
                 renderer: Optional[Renderer] = None,
                 revisit: Optional[RevisitMonitor] = None,
                 recorder: Optional[ProjectionRecorder] = None,
                 on_revisit: Optional[Callable[[list], None]] = None):
        self.config = config
        self.engine = engine
        self.tracker = tracker
        self.renderer = renderer
        self.revisit = revisit
        self.recorder = recorder
        self.on_revisit = on_revisit
        self.view = ViewState()
        self.split = MarkerSplit((), ())
        self._markers = tuple(markers)
        self._delivered = None
        self._subscriptions: list[Subscription] = []

    @property
    def markers(self) -> tuple:
        return self._markers

    # =====================================================================
    # INPUT HANDLERS — synchronous, called once per sample
    # =====================================================================

    def set_markers(self, markers: Iterable[MediaMarker]) -> list:
        """Replace the candidate snapshot (e.g. after another media page)."""
        self._markers = tuple(markers)
        return self.recompute()

    def on_position(self, point) -> list:
        point = as_geopoint(point)
        self.view.position = point
        if self.revisit is not None:
            hits = self.revisit.check(point, self._markers)
            if hits and self.on_revisit:
                self.on_revisit(hits)
        return self.recompute()

    def on_heading(self, value) -> list:
        if isinstance(value, HeadingSample):
            sample = self.tracker.update_degrees(value.degrees)
        elif isinstance(value, numbers.Real):
            sample = self.tracker.update_degrees(value)
        else:
            sample = self.tracker.update_vector(value)
        self.view.heading = sample
        return self.recompute()

    def on_heading_vector(self, vec) -> list:
        self.view.heading = self.tracker.update_vector(vec)
        return self.recompute()

    # =====================================================================
    # RECOMPUTE
    # =====================================================================

    def recompute(self) -> list:
        """Project from the latest inputs. No position yet → empty projection."""
        if self.view.position is None:
            return []

        projected = self.engine.project(self.view.position, self.view.heading_deg, self._markers)
        self.view.projection = projected
        self.view.recompute_count += 1
        self.split = classify(projected)

        if self.recorder is not None:
            self.recorder.record(self.view.to_dict(), projected)

        if projected != self._delivered:
            self._delivered = projected
            if self.renderer is not None:
                self.renderer(projected, self.split)
        return projected

    # =====================================================================
    # STREAMS
    # =====================================================================

    def subscribe_position(self, stream) -> Subscription:
        return self._subscribe(stream, self.on_position, "position")

    def subscribe_heading(self, stream) -> Subscription:
        return self._subscribe(stream, self.on_heading, "heading")

    def _subscribe(self, stream, handler, name: str) -> Subscription:
        # must be called from inside the running loop
        task = asyncio.get_running_loop().create_task(self._consume(stream, handler, name))
        sub = Subscription(task, name)
        # forget streams that already ended or were removed
        self._subscriptions = [s for s in self._subscriptions if s.active]
        self._subscriptions.append(sub)
        log.info("Subscribed to %s stream", name)
        return sub

    async def _consume(self, stream, handler, name: str):
        try:
            async for sample in stream:
                try:
                    handler(sample)
                except ValueError as e:
                    log.warning("Dropped bad %s sample %r: %s", name, sample, e)
        except asyncio.CancelledError:
            raise
        except Exception:
            log.exception("%s stream failed, keeping last known %s", name, name)

    async def run(self, position_stream, heading_stream):
        """Consume both streams until they end or the session is closed."""
        subs = [self.subscribe_position(position_stream),
                self.subscribe_heading(heading_stream)]
        try:
            await asyncio.gather(*(s.task for s in subs), return_exceptions=True)
        finally:
            self.close()

    def close(self):
        for sub in self._subscriptions:
            sub.remove()
        self._subscriptions.clear()
        if self.recorder is not None:
            self.recorder.close()
