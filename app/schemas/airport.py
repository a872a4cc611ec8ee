from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class AirportItem(BaseModel):
    code: str = Field(..., min_length=3, max_length=3)
    city: str
    country: str
    country_code: str = Field(..., max_length=2)
    name: str | None = None


class AirportSearchItem(AirportItem):
    match_score: int
    matched_fields: list[str]


class AirportListResponse(BaseModel):
    items: list[AirportItem]


class AirportSearchResponse(BaseModel):
    query: str
    items: list[AirportSearchItem]


class DirectoryStatusItem(BaseModel):
    is_loaded: bool
    airport_count: int
    loaded_at: datetime
    source: str


class RefreshResponse(BaseModel):
    success: bool
    count: int
    status: DirectoryStatusItem | None = None
