from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from geo_engine.models import Coordinate


@dataclass(frozen=True)
class Marker:
    marker_id: str
    latitude: float
    longitude: float
    last_created_report_at: datetime

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(latitude=self.latitude, longitude=self.longitude)


@dataclass(frozen=True)
class Report:
    report_id: str
    marker_id: str
    title: str
    description: str
    latitude: float
    longitude: float
    created_at: datetime
    user_id: str
    author_first_name: str
    author_last_name: str
    image_url: str | None = None


@dataclass(frozen=True)
class ReportSubmission:
    """A new report; without ``marker_id`` a marker is created at its location."""

    title: str
    description: str
    latitude: float
    longitude: float
    user_id: str
    author_first_name: str
    author_last_name: str
    image_url: str | None = None
    marker_id: str | None = None

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(latitude=self.latitude, longitude=self.longitude)
