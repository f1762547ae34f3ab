from __future__ import annotations

import math

from geo_engine.distance import EARTH_RADIUS_KM
from geo_engine.models import BoundingBox, Coordinate


class DegenerateBoundingBoxError(ValueError):
    """Raised when the radius/latitude combination has no longitude span."""


def _wrap_longitude(value: float) -> float:
    if value > 180.0:
        return value - 360.0
    if value < -180.0:
        return value + 360.0
    return value


def bounding_box(center: Coordinate, radius_km: float) -> BoundingBox:
    """Approximate lat/lng rectangle enclosing a circle of ``radius_km``.

    Longitude bounds are wrapped into [-180, 180]; a box spanning the
    antimeridian comes back with ``min_lng > max_lng``. Latitude bounds are
    not clamped.
    """
    if radius_km < 0:
        raise ValueError("radius_km must be >= 0")
    lat = math.radians(center.latitude)
    lng = math.radians(center.longitude)
    delta_lat = radius_km / EARTH_RADIUS_KM

    cos_lat = math.cos(lat)
    ratio = math.sin(delta_lat) / cos_lat if cos_lat > 0 else math.inf
    if not abs(ratio) <= 1:
        raise DegenerateBoundingBoxError(
            f"radius {radius_km} km is undefined at latitude {center.latitude}"
        )
    delta_lng = math.asin(ratio)

    return BoundingBox(
        min_lat=math.degrees(lat - delta_lat),
        max_lat=math.degrees(lat + delta_lat),
        min_lng=_wrap_longitude(math.degrees(lng - delta_lng)),
        max_lng=_wrap_longitude(math.degrees(lng + delta_lng)),
    )
