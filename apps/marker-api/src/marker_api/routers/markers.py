from __future__ import annotations

from collections.abc import Awaitable, Callable
import logging

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel

from marker_api.dependencies import get_marker_service
from marker_api.errors import to_api_error
from marker_api.response import success_response
from marker_api.schemas.markers import ReportCreateRequest
from marker_api.services.marker_service import MarkerService

router = APIRouter(prefix="/v1", tags=["markers"])
logger = logging.getLogger(__name__)


async def _call_service(action: Callable[[], Awaitable[BaseModel]]) -> dict:
    try:
        data = await action()
    except Exception as exc:
        api_error = to_api_error(exc)
        if api_error is None:
            raise
        if api_error.status_code >= 500:
            logger.warning(
                "marker_request_failed",
                extra={"component": "marker_api", "code": api_error.code},
                exc_info=exc,
            )
        raise api_error from exc
    return success_response(data.model_dump(mode="json"), meta={})


@router.get("/markers/nearby")
async def nearby_markers(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    radius_km: float | None = Query(default=None, gt=0, le=100),
    service: MarkerService = Depends(get_marker_service),
) -> dict:
    return await _call_service(lambda: service.nearby_markers(lat, lng, radius_km))


@router.get("/markers/{marker_id}/reports")
async def marker_reports(
    marker_id: str,
    service: MarkerService = Depends(get_marker_service),
) -> dict:
    return await _call_service(lambda: service.marker_reports(marker_id))


@router.post("/reports", status_code=201)
async def submit_report(
    payload: ReportCreateRequest,
    service: MarkerService = Depends(get_marker_service),
) -> dict:
    return await _call_service(lambda: service.submit_report(payload))
