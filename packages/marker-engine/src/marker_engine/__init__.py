"""Nearby incident marker engine."""

from geo_engine.bounding_box import DegenerateBoundingBoxError

from marker_engine.exceptions import (
    LocationUnavailable,
    MarkerEngineError,
    MarkerNotFoundError,
    StoreQueryFailure,
)
from marker_engine.freshness import FRESHNESS_WINDOW, freshness_cutoff, is_fresh
from marker_engine.models import Marker, Report, ReportSubmission
from marker_engine.proximity import ProximityQueryEngine
from marker_engine.recenter import (
    NEARBY_RADIUS_KM,
    RECENTER_ANIMATION_MS,
    LocationProvider,
    MarkerSet,
    RecenterController,
    Region,
    RenderingSurface,
)
from marker_engine.reports import ReportAggregator
from marker_engine.store import InMemoryMarkerStore, MarkerStore

__all__ = [
    "FRESHNESS_WINDOW",
    "NEARBY_RADIUS_KM",
    "RECENTER_ANIMATION_MS",
    "DegenerateBoundingBoxError",
    "InMemoryMarkerStore",
    "LocationProvider",
    "LocationUnavailable",
    "Marker",
    "MarkerEngineError",
    "MarkerNotFoundError",
    "MarkerSet",
    "MarkerStore",
    "ProximityQueryEngine",
    "RecenterController",
    "Region",
    "RenderingSurface",
    "Report",
    "ReportAggregator",
    "ReportSubmission",
    "StoreQueryFailure",
    "freshness_cutoff",
    "is_fresh",
]
