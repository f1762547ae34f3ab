"""Geo engine core package."""

from geo_engine.bounding_box import DegenerateBoundingBoxError, bounding_box
from geo_engine.distance import (
    EARTH_RADIUS_KM,
    DistanceCache,
    DistanceCalculator,
    InMemoryDistanceCache,
    haversine_distance_km,
)
from geo_engine.geofence import is_point_inside_radius
from geo_engine.models import BoundingBox, Coordinate

__all__ = [
    "EARTH_RADIUS_KM",
    "BoundingBox",
    "Coordinate",
    "DegenerateBoundingBoxError",
    "DistanceCache",
    "DistanceCalculator",
    "InMemoryDistanceCache",
    "bounding_box",
    "haversine_distance_km",
    "is_point_inside_radius",
]
