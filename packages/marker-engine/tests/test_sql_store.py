import asyncio
from datetime import timedelta

import pytest
import pytest_asyncio
from sqlalchemy.exc import OperationalError

from geo_engine.bounding_box import bounding_box
from geo_engine.models import Coordinate

from marker_engine.exceptions import MarkerNotFoundError, StoreQueryFailure
from marker_engine.models import ReportSubmission
from marker_engine import sql_store as sql_store_module
from marker_engine.sql_store import SqlMarkerStore
from marker_fixtures import MANILA, NOW, north_of


def _submission(at=MANILA, marker_id: str | None = None) -> ReportSubmission:
    return ReportSubmission(
        title="Road closed",
        description="Police checkpoint",
        latitude=at.latitude,
        longitude=at.longitude,
        user_id="user-3",
        author_first_name="Ana",
        author_last_name="Reyes",
        marker_id=marker_id,
    )


@pytest_asyncio.fixture
async def store(tmp_path):
    sql_store = SqlMarkerStore.from_dsn(f"sqlite+aiosqlite:///{tmp_path / 'markers.db'}")
    yield sql_store
    await sql_store.close()


@pytest.mark.asyncio
async def test_submit_and_query_markers(store: SqlMarkerStore) -> None:
    near = await store.submit_report(_submission(north_of(MANILA, 1)), NOW)
    await store.submit_report(_submission(north_of(MANILA, 40)), NOW)
    await store.submit_report(_submission(north_of(MANILA, 2)), NOW - timedelta(hours=30))

    markers = await store.query_markers(bounding_box(MANILA, 5), NOW - timedelta(hours=24))

    assert [marker.marker_id for marker in markers] == [near.marker_id]
    assert markers[0].last_created_report_at == NOW


@pytest.mark.asyncio
async def test_reports_are_fresh_and_ordered(store: SqlMarkerStore) -> None:
    first = await store.submit_report(_submission(), NOW - timedelta(hours=30))
    second = await store.submit_report(_submission(marker_id=first.marker_id), NOW - timedelta(hours=2))
    third = await store.submit_report(_submission(marker_id=first.marker_id), NOW - timedelta(hours=1))

    reports = await store.query_reports(first.marker_id, NOW - timedelta(hours=24))

    assert [report.report_id for report in reports] == [second.report_id, third.report_id]
    assert reports[0].author_first_name == "Ana"
    assert reports[0].image_url is None


@pytest.mark.asyncio
async def test_report_bumps_marker_freshness(store: SqlMarkerStore) -> None:
    first = await store.submit_report(_submission(), NOW - timedelta(hours=30))
    await store.submit_report(_submission(marker_id=first.marker_id), NOW)

    markers = await store.query_markers(bounding_box(MANILA, 1), NOW - timedelta(hours=24))

    assert [marker.marker_id for marker in markers] == [first.marker_id]


@pytest.mark.asyncio
async def test_unknown_marker_raises(store: SqlMarkerStore) -> None:
    with pytest.raises(MarkerNotFoundError):
        await store.submit_report(_submission(marker_id="missing"), NOW)


@pytest.mark.asyncio
async def test_database_errors_become_store_failures(store: SqlMarkerStore) -> None:
    async def _broken(_fn):
        raise OperationalError("SELECT", {}, Exception("database is locked"))

    store._db.run_with_session = _broken  # type: ignore[method-assign]

    with pytest.raises(StoreQueryFailure) as exc_info:
        await store.query_markers(bounding_box(MANILA, 5), NOW - timedelta(hours=24))

    assert exc_info.value.transient is True
    assert isinstance(exc_info.value.__cause__, OperationalError)


@pytest.mark.asyncio
async def test_query_markers_across_antimeridian(store: SqlMarkerStore) -> None:
    center = Coordinate(latitude=-16.5, longitude=179.99)
    across = await store.submit_report(_submission(Coordinate(latitude=-16.5, longitude=-179.99)), NOW)
    same_side = await store.submit_report(_submission(Coordinate(latitude=-16.5, longitude=179.97)), NOW)
    await store.submit_report(_submission(Coordinate(latitude=-16.5, longitude=0.0)), NOW)

    markers = await store.query_markers(bounding_box(center, 5), NOW - timedelta(hours=24))

    assert {marker.marker_id for marker in markers} == {across.marker_id, same_side.marker_id}


@pytest.mark.asyncio
async def test_concurrent_first_queries_create_tables_once(
    store: SqlMarkerStore, monkeypatch: pytest.MonkeyPatch
) -> None:
    calls = 0
    create_all_tables = sql_store_module.create_all_tables

    async def _counting_create_all(engine, metadata) -> None:
        nonlocal calls
        calls += 1
        await asyncio.sleep(0)
        await create_all_tables(engine, metadata)

    monkeypatch.setattr(sql_store_module, "create_all_tables", _counting_create_all)
    box = bounding_box(MANILA, 5)

    results = await asyncio.gather(
        store.query_markers(box, NOW - timedelta(hours=24)),
        store.query_markers(box, NOW - timedelta(hours=24)),
    )

    assert calls == 1
    assert results == [[], []]
