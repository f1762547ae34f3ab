from __future__ import annotations

from dataclasses import dataclass

from marker_engine.exceptions import LocationUnavailable, MarkerNotFoundError, StoreQueryFailure


@dataclass
class ApiError(Exception):
    code: str
    message: str
    status_code: int


def to_api_error(exc: Exception) -> ApiError | None:
    """Map a marker engine failure to its HTTP shape; ``None`` if unknown."""
    if isinstance(exc, MarkerNotFoundError):
        return ApiError("MARKER_NOT_FOUND", str(exc), 404)
    if isinstance(exc, StoreQueryFailure):
        return ApiError("STORE_UNAVAILABLE", "Marker store is unavailable, please retry", 503)
    if isinstance(exc, LocationUnavailable):
        return ApiError("LOCATION_UNAVAILABLE", str(exc), 503)
    if isinstance(exc, ValueError):
        return ApiError("VALIDATION_ERROR", str(exc), 422)
    return None
