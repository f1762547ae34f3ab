from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import replace
from datetime import datetime
from uuid import uuid4

from devkit.clock import to_utc
from geo_engine.models import BoundingBox

from marker_engine.exceptions import MarkerNotFoundError
from marker_engine.models import Marker, Report, ReportSubmission


class MarkerStore(ABC):
    @abstractmethod
    async def query_markers(self, box: BoundingBox, since: datetime) -> list[Marker]:
        """Markers inside ``box`` whose last report is at or after ``since``."""
        raise NotImplementedError

    @abstractmethod
    async def query_reports(self, marker_id: str, since: datetime) -> list[Report]:
        """Reports of ``marker_id`` created at or after ``since``."""
        raise NotImplementedError

    @abstractmethod
    async def submit_report(self, submission: ReportSubmission, now: datetime) -> Report:
        raise NotImplementedError


def new_id() -> str:
    return uuid4().hex


def build_report(submission: ReportSubmission, marker_id: str, created_at: datetime) -> Report:
    return Report(
        report_id=new_id(),
        marker_id=marker_id,
        title=submission.title.strip(),
        description=submission.description.strip(),
        latitude=submission.latitude,
        longitude=submission.longitude,
        created_at=created_at,
        user_id=submission.user_id,
        author_first_name=submission.author_first_name,
        author_last_name=submission.author_last_name,
        image_url=submission.image_url,
    )


class InMemoryMarkerStore(MarkerStore):
    def __init__(self) -> None:
        self._markers: dict[str, Marker] = {}
        self._reports: list[Report] = []

    async def query_markers(self, box: BoundingBox, since: datetime) -> list[Marker]:
        since = to_utc(since)
        return [
            marker
            for marker in self._markers.values()
            if box.contains(marker.coordinate) and marker.last_created_report_at >= since
        ]

    async def query_reports(self, marker_id: str, since: datetime) -> list[Report]:
        since = to_utc(since)
        items = [
            report
            for report in self._reports
            if report.marker_id == marker_id and report.created_at >= since
        ]
        return sorted(items, key=lambda report: report.created_at)

    async def submit_report(self, submission: ReportSubmission, now: datetime) -> Report:
        now = to_utc(now)
        if submission.marker_id is None:
            marker = Marker(
                marker_id=new_id(),
                latitude=submission.latitude,
                longitude=submission.longitude,
                last_created_report_at=now,
            )
        else:
            existing = self._markers.get(submission.marker_id)
            if existing is None:
                raise MarkerNotFoundError(f"marker {submission.marker_id} does not exist")
            marker = replace(
                existing,
                last_created_report_at=max(existing.last_created_report_at, now),
            )
        self._markers[marker.marker_id] = marker
        report = build_report(submission, marker.marker_id, now)
        self._reports.append(report)
        return report

    def add_marker(self, marker: Marker) -> None:
        self._markers[marker.marker_id] = replace(
            marker,
            last_created_report_at=to_utc(marker.last_created_report_at),
        )

    def add_report(self, report: Report) -> None:
        self._reports.append(replace(report, created_at=to_utc(report.created_at)))
