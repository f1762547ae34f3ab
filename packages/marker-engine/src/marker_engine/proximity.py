from __future__ import annotations

from datetime import datetime
import logging

from geo_engine.bounding_box import bounding_box
from geo_engine.distance import DistanceCalculator
from geo_engine.geofence import is_point_inside_radius
from geo_engine.models import Coordinate

from marker_engine.exceptions import StoreQueryFailure
from marker_engine.freshness import freshness_cutoff
from marker_engine.models import Marker
from marker_engine.store import MarkerStore

logger = logging.getLogger(__name__)


class ProximityQueryEngine:
    """Selects markers that are both near a center and fresh.

    The store answers a coarse bounding box + freshness range query; every
    candidate is then checked against the true great-circle distance.
    """

    def __init__(self, store: MarkerStore, calculator: DistanceCalculator | None = None) -> None:
        self._store = store
        self._calculator = calculator if calculator is not None else DistanceCalculator()

    @property
    def calculator(self) -> DistanceCalculator:
        return self._calculator

    async def find_nearby_markers(
        self,
        center: Coordinate,
        radius_km: float,
        now: datetime,
    ) -> list[Marker]:
        if not center.is_valid:
            raise ValueError(f"center out of range: {center.latitude}, {center.longitude}")
        box = bounding_box(center, radius_km)
        since = freshness_cutoff(now)
        try:
            candidates = await self._store.query_markers(box, since)
        except StoreQueryFailure:
            raise
        except Exception as exc:
            logger.warning("nearby_markers_query_failed", extra={"component": "marker_engine"})
            raise StoreQueryFailure("marker query failed") from exc

        nearby: dict[str, Marker] = {}
        for marker in candidates:
            if marker.marker_id in nearby:
                continue
            if is_point_inside_radius(center, marker.coordinate, radius_km, calculator=self._calculator):
                nearby[marker.marker_id] = marker
        logger.debug(
            "nearby_markers_query",
            extra={
                "component": "marker_engine",
                "candidate_count": len(candidates),
                "result_count": len(nearby),
            },
        )
        return list(nearby.values())
