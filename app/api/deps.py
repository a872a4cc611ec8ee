from __future__ import annotations

from fastapi import HTTPException, Request, status

from app.services.airport_directory import AirportDirectory


def get_airport_directory(request: Request) -> AirportDirectory:
    directory = getattr(request.app.state, "airport_directory", None)
    if directory is None:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="airport_directory_unavailable")
    return directory
