from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
import logging
from typing import Protocol

from devkit.clock import now_utc
from geo_engine.models import Coordinate

from marker_engine.exceptions import LocationUnavailable
from marker_engine.models import Marker
from marker_engine.proximity import ProximityQueryEngine

logger = logging.getLogger(__name__)

NEARBY_RADIUS_KM = 5.0
RECENTER_ANIMATION_MS = 1000
REGION_DELTA = 0.01
CENTERED_TOLERANCE_DEGREES = 0.0001


@dataclass(frozen=True)
class Region:
    center: Coordinate
    latitude_delta: float = REGION_DELTA
    longitude_delta: float = REGION_DELTA


class LocationProvider(Protocol):
    async def current_location(self) -> Coordinate: ...


class RenderingSurface(Protocol):
    async def show_markers(self, markers: list[Marker]) -> None: ...

    async def recenter(self, region: Region, duration_ms: int) -> None: ...


class MarkerSet:
    """Markers currently shown, applied with last-issued-wins semantics.

    Every query is stamped with ``issue()``; a result is only applied when
    its generation is still the latest one issued.
    """

    def __init__(self) -> None:
        self._issued = 0
        self._applied = 0
        self._markers: list[Marker] = []

    @property
    def markers(self) -> list[Marker]:
        return list(self._markers)

    @property
    def generation(self) -> int:
        return self._applied

    def issue(self) -> int:
        self._issued += 1
        return self._issued

    def apply(self, generation: int, markers: list[Marker]) -> bool:
        if generation != self._issued:
            logger.debug(
                "stale_markers_discarded",
                extra={"component": "marker_engine", "generation": generation, "latest": self._issued},
            )
            return False
        self._markers = list(markers)
        self._applied = generation
        return True


class RecenterController:
    def __init__(
        self,
        engine: ProximityQueryEngine,
        location_provider: LocationProvider,
        surface: RenderingSurface,
        *,
        marker_set: MarkerSet | None = None,
        clock: Callable[[], datetime] = now_utc,
        radius_km: float = NEARBY_RADIUS_KM,
        animation_ms: int = RECENTER_ANIMATION_MS,
    ) -> None:
        self._engine = engine
        self._location_provider = location_provider
        self._surface = surface
        self._marker_set = marker_set if marker_set is not None else MarkerSet()
        self._clock = clock
        self._radius_km = radius_km
        self._animation_ms = animation_ms
        self._last_location: Coordinate | None = None
        self._animating = False
        self._off_center = False

    @property
    def marker_set(self) -> MarkerSet:
        return self._marker_set

    @property
    def last_location(self) -> Coordinate | None:
        return self._last_location

    @property
    def is_animating(self) -> bool:
        return self._animating

    @property
    def is_off_center(self) -> bool:
        return self._off_center

    async def refresh(self) -> bool:
        """Reload markers around the live position without moving the viewport."""
        location = await self._locate()
        return await self.load_markers(location)

    async def select_place(self, lat: float, lng: float) -> bool:
        target = Coordinate(latitude=lat, longitude=lng)
        if not target.is_valid:
            raise ValueError(f"selected place out of range: {lat}, {lng}")
        if self._animating:
            await self.load_markers(target)
            return False
        return await self.recenter(target)

    async def recenter(self, target: Coordinate | None = None) -> bool:
        """Query around ``target`` and move the viewport there.

        Returns ``False`` when suppressed because another recenter is still
        waiting for the surface to acknowledge.
        """
        if self._animating:
            logger.debug("recenter_suppressed", extra={"component": "marker_engine"})
            return False
        self._animating = True
        try:
            if target is None:
                target = self._last_location or await self._locate()
            await self.load_markers(target)
            await self._surface.recenter(self.compute_target_region(target), self._animation_ms)
            self._off_center = False
        finally:
            self._animating = False
        return True

    async def load_markers(self, center: Coordinate) -> bool:
        generation = self._marker_set.issue()
        markers = await self._engine.find_nearby_markers(center, self._radius_km, self._clock())
        if not self._marker_set.apply(generation, markers):
            return False
        await self._surface.show_markers(self._marker_set.markers)
        return True

    def compute_target_region(self, target: Coordinate) -> Region:
        return Region(center=target)

    def is_centered(self, region: Region) -> bool:
        if self._last_location is None:
            return True
        return (
            abs(region.center.latitude - self._last_location.latitude) < CENTERED_TOLERANCE_DEGREES
            and abs(region.center.longitude - self._last_location.longitude) < CENTERED_TOLERANCE_DEGREES
        )

    def on_region_change(self, region: Region) -> bool:
        """Track whether the user panned away; returns the off-center state."""
        self._off_center = not self.is_centered(region)
        return self._off_center

    async def _locate(self) -> Coordinate:
        try:
            location = await self._location_provider.current_location()
        except LocationUnavailable:
            raise
        except Exception as exc:
            raise LocationUnavailable("current location is unavailable") from exc
        self._last_location = location
        return location
