from __future__ import annotations

from collections.abc import Callable
from dataclasses import asdict
from datetime import datetime

from devkit.clock import now_utc
from geo_engine.models import Coordinate
from marker_engine.models import Report, ReportSubmission
from marker_engine.proximity import ProximityQueryEngine
from marker_engine.recenter import NEARBY_RADIUS_KM
from marker_engine.reports import ReportAggregator
from marker_engine.store import MarkerStore

from marker_api.schemas.markers import (
    MarkerItem,
    MarkerReportsResult,
    NearbyMarkersResult,
    ReportCreateRequest,
    ReportItem,
)


class MarkerService:
    def __init__(
        self,
        store: MarkerStore,
        engine: ProximityQueryEngine | None = None,
        aggregator: ReportAggregator | None = None,
        clock: Callable[[], datetime] = now_utc,
        default_radius_km: float = NEARBY_RADIUS_KM,
    ) -> None:
        self._store = store
        self._engine = engine if engine is not None else ProximityQueryEngine(store)
        self._aggregator = aggregator if aggregator is not None else ReportAggregator(store)
        self._clock = clock
        self.default_radius_km = default_radius_km

    async def nearby_markers(
        self,
        lat: float,
        lng: float,
        radius_km: float | None = None,
    ) -> NearbyMarkersResult:
        radius = self.default_radius_km if radius_km is None else radius_km
        markers = await self._engine.find_nearby_markers(
            Coordinate(latitude=lat, longitude=lng),
            radius,
            self._clock(),
        )
        return NearbyMarkersResult(
            radius_km=radius,
            items=[MarkerItem(**asdict(marker)) for marker in markers],
        )

    async def marker_reports(self, marker_id: str) -> MarkerReportsResult:
        reports = await self._aggregator.get_reports_for_marker(marker_id, self._clock())
        return MarkerReportsResult(
            marker_id=marker_id,
            items=[self._to_item(report) for report in reports],
        )

    async def submit_report(self, request: ReportCreateRequest) -> ReportItem:
        submission = ReportSubmission(**request.model_dump())
        report = await self._store.submit_report(submission, self._clock())
        return self._to_item(report)

    @staticmethod
    def _to_item(report: Report) -> ReportItem:
        return ReportItem(**asdict(report))
