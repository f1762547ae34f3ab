from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Coordinate:
    latitude: float
    longitude: float

    @property
    def is_valid(self) -> bool:
        return -90.0 <= self.latitude <= 90.0 and -180.0 <= self.longitude <= 180.0


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lng: float
    max_lng: float

    @property
    def crosses_antimeridian(self) -> bool:
        return self.min_lng > self.max_lng

    def contains(self, point: Coordinate) -> bool:
        if not self.min_lat <= point.latitude <= self.max_lat:
            return False
        if self.crosses_antimeridian:
            return point.longitude >= self.min_lng or point.longitude <= self.max_lng
        return self.min_lng <= point.longitude <= self.max_lng
