from __future__ import annotations

from datetime import datetime
import logging

from marker_engine.exceptions import StoreQueryFailure
from marker_engine.freshness import freshness_cutoff
from marker_engine.models import Report
from marker_engine.store import MarkerStore

logger = logging.getLogger(__name__)


class ReportAggregator:
    def __init__(self, store: MarkerStore) -> None:
        self._store = store

    async def get_reports_for_marker(self, marker_id: str, now: datetime) -> list[Report]:
        # A marker that just passed the freshness check may already have no
        # fresh reports; an empty list is a valid answer.
        try:
            reports = await self._store.query_reports(marker_id, freshness_cutoff(now))
        except StoreQueryFailure:
            raise
        except Exception as exc:
            logger.warning(
                "marker_reports_query_failed",
                extra={"component": "marker_engine", "marker_id": marker_id},
            )
            raise StoreQueryFailure("report query failed") from exc
        return sorted(reports, key=lambda report: report.created_at)
