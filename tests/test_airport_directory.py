from __future__ import annotations

from pathlib import Path
import sys

sys.path.append(str(Path(__file__).resolve().parents[1]))

import pytest

from app.core.config import DEFAULT_AIRPORTS_PATH
from app.core.errors import InvalidArgument
from app.services.airport_dataset import load_static_airports
from app.services.airport_directory import (
    POPULAR_AIRPORT_CODES,
    Airport,
    AirportDirectory,
    score_airport,
)


@pytest.fixture(scope="module")
def bundled_directory() -> AirportDirectory:
    return AirportDirectory(load_static_airports(DEFAULT_AIRPORTS_PATH))


@pytest.fixture()
def small_directory() -> AirportDirectory:
    return AirportDirectory(
        [
            Airport(code="LHR", city="London", country="United Kingdom", country_code="GB"),
            Airport(code="LGW", city="London", country="United Kingdom", country_code="GB"),
            Airport(code="LDY", city="Londonderry", country="United Kingdom", country_code="GB"),
            Airport(code="KWI", city="Kuwait City", country="Kuwait", country_code="KW"),
            Airport(code="XKW", city="Jahra", country="Kuwait", country_code="KW"),
            Airport(code="JFK", city="New York", country="United States", country_code="US"),
        ]
    )


def test_get_by_code_round_trips_every_airport(bundled_directory: AirportDirectory):
    for airport in bundled_directory.get_all():
        assert bundled_directory.get_by_code(airport.code) == airport
        assert bundled_directory.get_by_code(airport.code.lower()) == airport


def test_get_by_code_unknown_returns_none(small_directory: AirportDirectory):
    assert small_directory.get_by_code("ZZZ") is None
    assert small_directory.get_by_code("") is None
    assert "lhr" in small_directory
    assert "ZZZ" not in small_directory


@pytest.mark.parametrize("query", ["", "   ", "\t\n"])
@pytest.mark.parametrize("limit", [0, 1, 10, 500])
def test_blank_query_returns_nothing(bundled_directory: AirportDirectory, query: str, limit: int):
    assert bundled_directory.search(query, limit) == []


def test_search_respects_limit_and_order(bundled_directory: AirportDirectory):
    results = bundled_directory.search("a", 5)

    assert len(results) == 5
    scores = [result.match_score for result in results]
    assert scores == sorted(scores, reverse=True)
    assert all(result.match_score > 0 for result in results)


def test_search_excludes_unmatched_airports(bundled_directory: AirportDirectory):
    assert bundled_directory.search("qqqq", 10) == []


def test_exact_code_ranks_first(bundled_directory: AirportDirectory):
    results = bundled_directory.search("  lhr ", 3)

    assert results[0].airport.code == "LHR"
    assert results[0].match_score == 100
    assert results[0].matched_fields == ("code",)


def test_city_ties_keep_dataset_order(small_directory: AirportDirectory):
    results = small_directory.search("London", 10)

    assert [r.airport.code for r in results] == ["LHR", "LGW", "LDY"]
    assert [r.match_score for r in results] == [80, 80, 70]


def test_multi_field_match_outranks_single_field(small_directory: AirportDirectory):
    results = small_directory.search("kuwait", 10)

    assert [r.airport.code for r in results] == ["KWI", "XKW"]
    assert results[0].matched_fields == ("city", "country")
    assert results[1].matched_fields == ("country",)
    assert results[0].match_score > results[1].match_score


def test_score_airport_sums_fields():
    airport = Airport(code="SIN", city="Singapore", country="Singapore", country_code="SG")

    assert score_airport(airport, "sin") == (100 + 70 + 40, ("code", "city", "country"))
    assert score_airport(airport, "singapore") == (80 + 40, ("city", "country"))
    assert score_airport(airport, "in") == (70 + 50 + 40, ("code", "city", "country"))


def test_search_rejects_bad_arguments(small_directory: AirportDirectory):
    with pytest.raises(InvalidArgument):
        small_directory.search(None, 5)  # type: ignore[arg-type]
    with pytest.raises(InvalidArgument):
        small_directory.search("lon", -1)
    with pytest.raises(InvalidArgument):
        small_directory.search("lon", True)  # type: ignore[arg-type]


def test_zero_limit_returns_nothing(small_directory: AirportDirectory):
    assert small_directory.search("lon", 0) == []


def test_popular_airports_follow_curated_order(bundled_directory: AirportDirectory):
    popular = bundled_directory.get_popular()

    assert [a.code for a in popular] == list(POPULAR_AIRPORT_CODES)


def test_popular_airports_skip_missing_codes(small_directory: AirportDirectory):
    assert [a.code for a in small_directory.get_popular()] == ["LHR", "JFK"]


def test_refresh_is_idempotent(bundled_directory: AirportDirectory):
    first = bundled_directory.refresh()
    second = bundled_directory.refresh()

    assert first == second
    assert len(first) == len(bundled_directory.get_all())
    assert bundled_directory.status().airport_count == len(first)


def test_duplicate_codes_keep_first_record():
    directory = AirportDirectory(
        [
            Airport(code="LHR", city="London", country="United Kingdom", country_code="GB"),
            Airport(code="lhr", city="Elsewhere", country="Nowhere", country_code="NW"),
        ]
    )

    assert len(directory) == 1
    assert directory.get_by_code("LHR").city == "London"


def test_display_name_falls_back_to_city_then_code(small_directory: AirportDirectory):
    named = AirportDirectory(
        [Airport(code="LHR", city="London", country="United Kingdom", country_code="GB", name="Heathrow")]
    )

    assert named.display_name("lhr") == "Heathrow"
    assert small_directory.display_name("LHR") == "London"
    assert small_directory.display_name("ZZZ") == "ZZZ"


def test_status_reports_source(small_directory: AirportDirectory):
    status = small_directory.status()

    assert status.is_loaded is True
    assert status.airport_count == 6
    assert status.source == "static"
