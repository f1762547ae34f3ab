from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class MarkerItem(BaseModel):
    marker_id: str
    latitude: float
    longitude: float
    last_created_report_at: datetime


class NearbyMarkersResult(BaseModel):
    radius_km: float
    items: list[MarkerItem]


class ReportItem(BaseModel):
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


class MarkerReportsResult(BaseModel):
    marker_id: str
    items: list[ReportItem]


class ReportCreateRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    title: str = Field(min_length=1, max_length=255)
    description: str = Field(default="", max_length=5000)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    user_id: str = Field(min_length=1, max_length=128)
    author_first_name: str = Field(default="", max_length=128)
    author_last_name: str = Field(default="", max_length=128)
    image_url: str | None = Field(default=None, max_length=1024)
    marker_id: str | None = Field(default=None, max_length=64)
