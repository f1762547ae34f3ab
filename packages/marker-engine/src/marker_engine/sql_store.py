from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from datetime import datetime
import logging
from typing import TypeVar

from devkit.clock import to_utc
from devkit.db import AsyncDatabaseManager, Base, create_all_tables, is_transient_db_error
from geo_engine.models import BoundingBox
from sqlalchemy import DateTime, Float, ForeignKey, String, Text, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Mapped, mapped_column

from marker_engine.exceptions import MarkerNotFoundError, StoreQueryFailure
from marker_engine.models import Marker, Report, ReportSubmission
from marker_engine.store import MarkerStore, build_report, new_id

T = TypeVar("T")
logger = logging.getLogger(__name__)


class MarkerORM(Base):
    __tablename__ = "markers"

    marker_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    latitude: Mapped[float] = mapped_column(Float, index=True, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    last_created_report_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True, nullable=False)


class ReportORM(Base):
    __tablename__ = "reports"

    report_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    marker_id: Mapped[str] = mapped_column(ForeignKey("markers.marker_id"), index=True, nullable=False)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True, nullable=False)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    author_first_name: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    author_last_name: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    image_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)


class SqlMarkerStore(MarkerStore):
    """Marker store backed by SQLAlchemy.

    Database errors surface as ``StoreQueryFailure``; nothing is retried.
    """

    def __init__(self, db: AsyncDatabaseManager) -> None:
        self._db = db
        self._orm_ready = False
        self._orm_lock = asyncio.Lock()

    @classmethod
    def from_dsn(cls, dsn: str) -> SqlMarkerStore:
        return cls(AsyncDatabaseManager(dsn))

    async def query_markers(self, box: BoundingBox, since: datetime) -> list[Marker]:
        async def _run(session: AsyncSession) -> list[Marker]:
            if box.crosses_antimeridian:
                longitude = or_(MarkerORM.longitude >= box.min_lng, MarkerORM.longitude <= box.max_lng)
            else:
                longitude = MarkerORM.longitude.between(box.min_lng, box.max_lng)
            query = select(MarkerORM).where(
                MarkerORM.latitude.between(box.min_lat, box.max_lat),
                longitude,
                MarkerORM.last_created_report_at >= to_utc(since),
            )
            rows = (await session.scalars(query)).all()
            return [self._to_marker(row) for row in rows]

        return await self._execute("query_markers", _run)

    async def query_reports(self, marker_id: str, since: datetime) -> list[Report]:
        async def _run(session: AsyncSession) -> list[Report]:
            query = (
                select(ReportORM)
                .where(ReportORM.marker_id == marker_id, ReportORM.created_at >= to_utc(since))
                .order_by(ReportORM.created_at)
            )
            rows = (await session.scalars(query)).all()
            return [self._to_report(row) for row in rows]

        return await self._execute("query_reports", _run)

    async def submit_report(self, submission: ReportSubmission, now: datetime) -> Report:
        now = to_utc(now)

        async def _run(session: AsyncSession) -> Report:
            if submission.marker_id is None:
                marker = MarkerORM(
                    marker_id=new_id(),
                    latitude=submission.latitude,
                    longitude=submission.longitude,
                    last_created_report_at=now,
                )
                session.add(marker)
                await session.flush()
            else:
                marker = await session.get(MarkerORM, submission.marker_id)
                if marker is None:
                    raise MarkerNotFoundError(f"marker {submission.marker_id} does not exist")
                if to_utc(marker.last_created_report_at) < now:
                    marker.last_created_report_at = now
            report = build_report(submission, marker.marker_id, now)
            session.add(
                ReportORM(
                    report_id=report.report_id,
                    marker_id=report.marker_id,
                    title=report.title,
                    description=report.description,
                    latitude=report.latitude,
                    longitude=report.longitude,
                    created_at=report.created_at,
                    user_id=report.user_id,
                    author_first_name=report.author_first_name,
                    author_last_name=report.author_last_name,
                    image_url=report.image_url,
                )
            )
            return report

        return await self._execute("submit_report", _run)

    async def close(self) -> None:
        await self._db.disconnect()

    async def _execute(self, operation: str, fn: Callable[[AsyncSession], Awaitable[T]]) -> T:
        try:
            await self._ensure_orm_ready()
            return await self._db.run_with_session(fn)
        except (SQLAlchemyError, OSError, TimeoutError) as exc:
            transient = isinstance(exc, (OSError, TimeoutError)) or is_transient_db_error(exc)
            logger.warning(
                "marker_store_query_failed",
                extra={"component": "marker_engine", "operation": operation, "transient": transient},
            )
            raise StoreQueryFailure(f"{operation} failed", transient=transient) from exc

    async def _ensure_orm_ready(self) -> None:
        if self._orm_ready:
            return
        async with self._orm_lock:
            if self._orm_ready:
                return
            await self._db.connect()
            await create_all_tables(self._db.engine, Base.metadata)
            self._orm_ready = True

    @staticmethod
    def _to_marker(row: MarkerORM) -> Marker:
        return Marker(
            marker_id=row.marker_id,
            latitude=float(row.latitude),
            longitude=float(row.longitude),
            last_created_report_at=to_utc(row.last_created_report_at),
        )

    @staticmethod
    def _to_report(row: ReportORM) -> Report:
        return Report(
            report_id=row.report_id,
            marker_id=row.marker_id,
            title=row.title,
            description=row.description,
            latitude=float(row.latitude),
            longitude=float(row.longitude),
            created_at=to_utc(row.created_at),
            user_id=row.user_id,
            author_first_name=row.author_first_name,
            author_last_name=row.author_last_name,
            image_url=row.image_url,
        )
