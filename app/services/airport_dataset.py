"""Load the airport dataset the directory is built from.

Two sources are supported: the JSON file bundled with the service (default)
and the Vyspa ``get_airports`` feed. Both produce flat records that go
through the same normalisation before reaching :class:`AirportDirectory`.
"""

from __future__ import annotations

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Any, Iterable, Iterator, Mapping
from urllib.parse import quote

import requests
from airportsdata import load as load_airportsdata

from app.core.cache import cached_json
from app.core.config import Settings, settings as default_settings
from app.core.errors import DataUnavailable
from app.services.airport_directory import Airport, AirportDirectory


logger = logging.getLogger(__name__)

VYSPA_AIRPORTS_CACHE_KEY = "vyspa:airports:v1"

COUNTRY_NAME_TO_ISO2 = {
    "UNITED KINGDOM": "GB",
    "UK": "GB",
    "GREAT BRITAIN": "GB",
    "UNITED STATES": "US",
    "USA": "US",
    "U.S.A.": "US",
    "UNITED ARAB EMIRATES": "AE",
    "UAE": "AE",
    "U.A.E.": "AE",
    "SAUDI ARABIA": "SA",
    "KSA": "SA",
    "TURKEY": "TR",
    "TÜRKİYE": "TR",
    "TÜRKIYE": "TR",
    "TURKIYE": "TR",
    "SOUTH KOREA": "KR",
    "KOREA, REPUBLIC OF": "KR",
    "NETHERLANDS": "NL",
    "GERMANY": "DE",
    "FRANCE": "FR",
    "SPAIN": "ES",
    "ITALY": "IT",
    "CANADA": "CA",
    "INDIA": "IN",
    "AUSTRALIA": "AU",
    "JAPAN": "JP",
    "CHINA": "CN",
    "BRAZIL": "BR",
    "MEXICO": "MX",
    "RUSSIA": "RU",
    "ZAMBIA": "ZM",
}

ISO3_TO_ISO2 = {
    "GBR": "GB",
    "USA": "US",
    "CAN": "CA",
    "AUS": "AU",
    "IND": "IN",
}


def normalize_country_code(value: str | None, iata_code: str | None = None) -> str:
    """Coerce a country name, ISO2 or ISO3 value into an ISO2 code."""

    if not value:
        return _iata_country(iata_code) or ""
    upper = str(value).strip().upper()
    if upper in COUNTRY_NAME_TO_ISO2:
        return COUNTRY_NAME_TO_ISO2[upper]
    if len(upper) == 2 and upper.isalpha() and upper.isascii():
        return upper
    if len(upper) == 3 and upper in ISO3_TO_ISO2:
        return ISO3_TO_ISO2[upper]
    return _iata_country(iata_code) or upper[:2]


def normalize_airport_record(raw: Mapping[str, Any]) -> Airport | None:
    """Map a source record (``id``/``country_code`` or ``code``/``countryCode``) to an Airport.

    Returns ``None`` for records without a three-character IATA code.
    """
    code = _text(raw.get("code") or raw.get("id")).upper()
    if len(code) != 3 or not (code.isascii() and code.isalnum()):
        return None
    city = _text(raw.get("city"))
    country = _text(raw.get("country"))
    country_code = normalize_country_code(
        raw.get("country_code") or raw.get("countryCode") or raw.get("country"),
        iata_code=code,
    )
    name = _text(raw.get("name")) or None
    return Airport(
        code=code,
        city=city or code,
        country=country or country_code,
        country_code=country_code,
        name=name,
    )


def normalize_records(rows: Iterable[Mapping[str, Any]], enrich: bool = False) -> list[Airport]:
    airports: list[Airport] = []
    skipped = 0
    for raw in rows:
        if not isinstance(raw, Mapping):
            skipped += 1
            continue
        airport = normalize_airport_record(raw)
        if airport is None:
            skipped += 1
            continue
        airports.append(enrich_name(airport) if enrich else airport)
    if skipped:
        logger.debug("Skipped %s airport records without a valid IATA code", skipped)
    return airports


def enrich_name(airport: Airport) -> Airport:
    """Fill in the display name from the bundled airportsdata index when missing."""

    if airport.name:
        return airport
    info = _airportsdata_index().get(airport.code)
    if not info or not info.get("name"):
        return airport
    return Airport(
        code=airport.code,
        city=airport.city,
        country=airport.country,
        country_code=airport.country_code,
        name=info["name"],
    )


def load_static_airports(path: Path | str, enrich: bool = False) -> list[Airport]:
    path = Path(path)
    try:
        with path.open("r", encoding="utf-8") as fh:
            payload = json.load(fh)
    except FileNotFoundError as exc:
        raise DataUnavailable(f"Airport dataset not found: {path}") from exc
    except (OSError, json.JSONDecodeError) as exc:
        raise DataUnavailable(f"Airport dataset unreadable: {path} ({exc})") from exc

    if not isinstance(payload, list):
        raise DataUnavailable(f"Airport dataset must be a JSON array: {path}")

    airports = normalize_records(payload, enrich=enrich)
    if not airports:
        raise DataUnavailable(f"Airport dataset is empty: {path}")
    return airports


class VyspaAirportClient:
    """Thin wrapper around the Vyspa ``/rest/v4/get_airports`` endpoint."""

    def __init__(
        self,
        base_url: str | None = None,
        username: str | None = None,
        password: str | None = None,
        api_version: str | None = None,
        timeout: float | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = (base_url or default_settings.vyspa_api_url).rstrip("/")
        self.username = username or default_settings.vyspa_username
        self.password = password or default_settings.vyspa_password
        self.api_version = api_version or default_settings.vyspa_api_version
        self.timeout = timeout if timeout is not None else default_settings.vyspa_timeout_sec
        self.session = session or requests.Session()

        if not self.username or not self.password:
            raise DataUnavailable("Vyspa credentials are not configured.")

    def iter_rows(self, query: str | None = None) -> Iterator[dict]:
        path = "/rest/v4/get_airports"
        if query and query.strip():
            path = f"{path}/{quote(query.strip(), safe='')}"
        try:
            response = self.session.get(
                f"{self.base_url}{path}",
                headers={"Content-Type": "application/json", "Api-Version": self.api_version},
                auth=(self.username, self.password),
                timeout=self.timeout,
            )
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            raise DataUnavailable(f"Vyspa airport request failed: {exc}") from exc
        except ValueError as exc:
            raise DataUnavailable("Vyspa airport response is not JSON") from exc

        if isinstance(payload, dict) and "error" in payload:
            raise DataUnavailable(f"Vyspa airport API error: {payload['error']}")
        if not isinstance(payload, list):
            raise DataUnavailable("Vyspa airport response has an invalid format")
        logger.debug("Fetched %s airport rows from Vyspa", len(payload))
        yield from payload


def load_vyspa_airports(
    client: VyspaAirportClient,
    ttl_seconds: int,
    enrich: bool = False,
    use_cache: bool = True,
) -> list[Airport]:
    if use_cache:
        rows = cached_json(VYSPA_AIRPORTS_CACHE_KEY, ttl_seconds, lambda: list(client.iter_rows()))
    else:
        rows = list(client.iter_rows())
    airports = normalize_records(rows or [], enrich=enrich)
    if not airports:
        raise DataUnavailable("Vyspa returned no airports")
    return airports


def build_airport_directory(
    config: Settings | None = None,
    client: VyspaAirportClient | None = None,
) -> AirportDirectory:
    """Load the configured dataset once and wrap it in a directory."""

    config = config or default_settings
    if config.airports_source == "vyspa":
        client = client or VyspaAirportClient(
            base_url=config.vyspa_api_url,
            username=config.vyspa_username,
            password=config.vyspa_password,
            api_version=config.vyspa_api_version,
            timeout=config.vyspa_timeout_sec,
        )
        airports = load_vyspa_airports(
            client,
            ttl_seconds=config.airports_cache_ttl_seconds,
            enrich=config.airports_enrich_names,
        )
    else:
        airports = load_static_airports(config.airports_data_path, enrich=config.airports_enrich_names)
    return AirportDirectory(airports, source=config.airports_source)


@lru_cache(maxsize=1)
def _airportsdata_index() -> dict:
    return load_airportsdata("IATA")


def _iata_country(iata_code: str | None) -> str | None:
    if not iata_code:
        return None
    info = _airportsdata_index().get(iata_code.strip().upper())
    if info and info.get("country"):
        return str(info["country"]).upper()
    return None


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


__all__ = [
    "VyspaAirportClient",
    "build_airport_directory",
    "enrich_name",
    "load_static_airports",
    "load_vyspa_airports",
    "normalize_airport_record",
    "normalize_country_code",
    "normalize_records",
]
