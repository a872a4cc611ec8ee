from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from app.core.errors import InvalidArgument


logger = logging.getLogger(__name__)

# Weight per match tier. Only the best tier of each field counts and the
# fields add up, so a city + country hit beats a country-only hit.
CODE_EXACT_WEIGHT = 100
CODE_PREFIX_WEIGHT = 90
CODE_CONTAINS_WEIGHT = 70
CITY_EXACT_WEIGHT = 80
CITY_PREFIX_WEIGHT = 70
CITY_CONTAINS_WEIGHT = 50
COUNTRY_CONTAINS_WEIGHT = 40

POPULAR_AIRPORT_CODES: tuple[str, ...] = (
    "LHR", "JFK", "DXB", "LAX", "ORD", "CDG", "FRA", "AMS",
    "IST", "SIN", "HKG", "ICN", "DEL", "BOM", "SYD", "BKK",
    "NRT", "MAD", "BCN", "FCO",
)


@dataclass(frozen=True, slots=True)
class Airport:
    code: str
    city: str
    country: str
    country_code: str
    name: str | None = None

    def as_dict(self) -> dict:
        return {
            "code": self.code,
            "city": self.city,
            "country": self.country,
            "country_code": self.country_code,
            "name": self.name,
        }


@dataclass(frozen=True, slots=True)
class AirportSearchResult:
    airport: Airport
    match_score: int
    matched_fields: tuple[str, ...]

    def as_dict(self) -> dict:
        payload = self.airport.as_dict()
        payload["match_score"] = self.match_score
        payload["matched_fields"] = list(self.matched_fields)
        return payload


@dataclass(frozen=True, slots=True)
class DirectoryStatus:
    is_loaded: bool
    airport_count: int
    loaded_at: datetime
    source: str


def score_airport(airport: Airport, query: str) -> tuple[int, tuple[str, ...]]:
    """Score one airport against an already normalised (trimmed, casefolded) query."""

    code = airport.code.casefold()
    city = airport.city.casefold()
    country = airport.country.casefold()

    score = 0
    matched: list[str] = []

    if code == query:
        score += CODE_EXACT_WEIGHT
        matched.append("code")
    elif code.startswith(query):
        score += CODE_PREFIX_WEIGHT
        matched.append("code")
    elif query in code:
        score += CODE_CONTAINS_WEIGHT
        matched.append("code")

    if city == query:
        score += CITY_EXACT_WEIGHT
        matched.append("city")
    elif city.startswith(query):
        score += CITY_PREFIX_WEIGHT
        matched.append("city")
    elif query in city:
        score += CITY_CONTAINS_WEIGHT
        matched.append("city")

    if query in country:
        score += COUNTRY_CONTAINS_WEIGHT
        matched.append("country")

    return score, tuple(matched)


class AirportDirectory:
    """Immutable in-memory airport set with code lookup and ranked search.

    Built once at startup and shared by every request; nothing mutates it
    afterwards, so concurrent readers need no locking.
    """

    def __init__(
        self,
        airports: Iterable[Airport],
        source: str = "static",
        popular_codes: Sequence[str] = POPULAR_AIRPORT_CODES,
    ) -> None:
        ordered: list[Airport] = []
        index: dict[str, Airport] = {}
        for airport in airports:
            key = airport.code.upper()
            if key in index:
                logger.warning("Duplicate airport code %s ignored", key)
                continue
            index[key] = airport
            ordered.append(airport)

        self._airports: tuple[Airport, ...] = tuple(ordered)
        self._index: Mapping[str, Airport] = MappingProxyType(index)
        self._popular: tuple[Airport, ...] = tuple(
            index[code] for code in (c.upper() for c in popular_codes) if code in index
        )
        self._source = source
        self._loaded_at = datetime.now(UTC)
        logger.info("Airport directory ready: %s airports from %s", len(self._airports), source)

    def __len__(self) -> int:
        return len(self._airports)

    def __contains__(self, code: object) -> bool:
        return isinstance(code, str) and code.strip().upper() in self._index

    def get_all(self) -> tuple[Airport, ...]:
        return self._airports

    def get_by_code(self, code: str) -> Airport | None:
        if not isinstance(code, str):
            raise InvalidArgument("airport code must be a string")
        return self._index.get(code.strip().upper())

    def display_name(self, code: str) -> str:
        airport = self.get_by_code(code)
        if airport is None:
            return code
        return airport.name or airport.city or code

    def search(self, query: str, limit: int = 10) -> list[AirportSearchResult]:
        """Rank airports by how well they match ``query``.

        Results are ordered by descending score; ties keep dataset order.
        Blank queries return nothing and airports without any matching
        field are never returned.
        """
        if not isinstance(query, str):
            raise InvalidArgument("query must be a string")
        if isinstance(limit, bool) or not isinstance(limit, int):
            raise InvalidArgument("limit must be an integer")
        if limit < 0:
            raise InvalidArgument("limit must not be negative")

        normalized = query.strip().casefold()
        if not normalized or limit == 0:
            return []

        results: list[AirportSearchResult] = []
        for airport in self._airports:
            score, matched = score_airport(airport, normalized)
            if score > 0:
                results.append(AirportSearchResult(airport=airport, match_score=score, matched_fields=matched))

        # sort is stable, so equal scores stay in dataset order
        results.sort(key=lambda result: result.match_score, reverse=True)
        return results[:limit]

    def get_popular(self) -> tuple[Airport, ...]:
        return self._popular

    def refresh(self) -> tuple[Airport, ...]:
        # Static source: nothing to reload.
        logger.debug("Airport directory refresh requested (%s source)", self._source)
        return self._airports

    def status(self) -> DirectoryStatus:
        return DirectoryStatus(
            is_loaded=bool(self._airports),
            airport_count=len(self._airports),
            loaded_at=self._loaded_at,
            source=self._source,
        )


__all__ = [
    "Airport",
    "AirportDirectory",
    "AirportSearchResult",
    "DirectoryStatus",
    "POPULAR_AIRPORT_CODES",
    "score_airport",
]
