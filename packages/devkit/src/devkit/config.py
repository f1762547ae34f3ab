from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict

from devkit.clock import configure_utc_timezone


class ServiceSettings(BaseSettings):
    model_config = SettingsConfigDict(extra="ignore")

    SERVICE_NAME: str = "service"
    DATABASE_URL: str | None = None
    LOG_LEVEL: str = "INFO"
    NEARBY_RADIUS_KM: float = 5.0
    DISTANCE_CACHE_MAX_ENTRIES: int | None = None


def load_settings(service_name: str) -> ServiceSettings:
    configure_utc_timezone()
    return ServiceSettings(SERVICE_NAME=service_name)
