from __future__ import annotations

from devkit.config import load_settings
from geo_engine.distance import DistanceCalculator, InMemoryDistanceCache
from marker_engine.proximity import ProximityQueryEngine
from marker_engine.reports import ReportAggregator
from marker_engine.sql_store import SqlMarkerStore
from marker_engine.store import InMemoryMarkerStore, MarkerStore

from marker_api.services.marker_service import MarkerService

settings = load_settings("marker-api")

if settings.DATABASE_URL:
    _marker_store: MarkerStore = SqlMarkerStore.from_dsn(settings.DATABASE_URL)
else:
    _marker_store = InMemoryMarkerStore()

_distance_calculator = DistanceCalculator(
    InMemoryDistanceCache(max_entries=settings.DISTANCE_CACHE_MAX_ENTRIES),
)
_marker_service = MarkerService(
    store=_marker_store,
    engine=ProximityQueryEngine(_marker_store, calculator=_distance_calculator),
    aggregator=ReportAggregator(_marker_store),
    default_radius_km=settings.NEARBY_RADIUS_KM,
)


def get_marker_service() -> MarkerService:
    return _marker_service
