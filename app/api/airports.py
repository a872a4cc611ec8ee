from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from app.api.deps import get_airport_directory
from app.core.config import settings
from app.core.errors import CoreError
from app.schemas.airport import (
    AirportItem,
    AirportListResponse,
    AirportSearchItem,
    AirportSearchResponse,
    DirectoryStatusItem,
    RefreshResponse,
)
from app.services.airport_directory import AirportDirectory


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/airports", tags=["airports"])

AIRPORT_LIST_CACHE_CONTROL = "public, max-age=86400, s-maxage=86400"


@router.get("", response_model=AirportListResponse)
def list_airports(
    response: Response,
    q: str | None = Query(None, description="Airport code, city or country"),
    directory: AirportDirectory = Depends(get_airport_directory),
) -> AirportListResponse:
    response.headers["Cache-Control"] = AIRPORT_LIST_CACHE_CONTROL
    if q is None or not q.strip():
        airports = directory.get_all()
    else:
        try:
            airports = [result.airport for result in directory.search(q, limit=len(directory))]
        except CoreError as exc:
            logger.warning("Airport list filter failed for %r: %s", q, exc)
            airports = []
    return AirportListResponse(items=[AirportItem(**airport.as_dict()) for airport in airports])


@router.get("/search", response_model=AirportSearchResponse)
def search_airports(
    q: str = Query("", description="Airport code, city or country"),
    limit: int = Query(settings.search_default_limit, le=settings.search_max_limit),
    directory: AirportDirectory = Depends(get_airport_directory),
) -> AirportSearchResponse:
    try:
        results = directory.search(q, limit=limit)
    except CoreError as exc:
        logger.warning("Airport search failed for %r (limit=%s): %s", q, limit, exc)
        results = []
    return AirportSearchResponse(
        query=q,
        items=[AirportSearchItem(**result.as_dict()) for result in results],
    )


@router.get("/popular", response_model=AirportListResponse)
def popular_airports(
    directory: AirportDirectory = Depends(get_airport_directory),
) -> AirportListResponse:
    return AirportListResponse(items=[AirportItem(**airport.as_dict()) for airport in directory.get_popular()])


@router.post("/refresh", response_model=RefreshResponse)
def refresh_airports(
    directory: AirportDirectory = Depends(get_airport_directory),
) -> RefreshResponse:
    try:
        airports = directory.refresh()
        status = directory.status()
    except CoreError as exc:
        logger.warning("Airport directory refresh failed: %s", exc)
        return RefreshResponse(success=False, count=0)
    return RefreshResponse(
        success=True,
        count=len(airports),
        status=DirectoryStatusItem(
            is_loaded=status.is_loaded,
            airport_count=status.airport_count,
            loaded_at=status.loaded_at,
            source=status.source,
        ),
    )


@router.get("/{code}", response_model=AirportItem)
def get_airport(
    code: str,
    directory: AirportDirectory = Depends(get_airport_directory),
) -> AirportItem:
    airport = directory.get_by_code(code)
    if airport is None:
        raise HTTPException(status_code=404, detail={"code": "airport_not_found", "airport": code.upper()})
    return AirportItem(**airport.as_dict())
