from __future__ import annotations

import json

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from app.core import cache
from app.core.cache import cached_json


class FakeRedis:
    def __init__(self, fail: bool = False) -> None:
        self.store: dict[str, str] = {}
        self.ttls: dict[str, int] = {}
        self.fail = fail

    def get(self, key: str):
        if self.fail:
            raise RedisConnectionError("redis down")
        return self.store.get(key)

    def setex(self, key: str, ttl: int, value: str) -> None:
        if self.fail:
            raise RedisConnectionError("redis down")
        self.store[key] = value
        self.ttls[key] = ttl


@pytest.fixture()
def fake_redis(monkeypatch) -> FakeRedis:
    client = FakeRedis()
    monkeypatch.setattr(cache, "_client", client)
    return client


def test_miss_calls_loader_and_stores(fake_redis: FakeRedis):
    value = cached_json("airports", 86400, lambda: [{"id": "LHR"}])

    assert value == [{"id": "LHR"}]
    assert json.loads(fake_redis.store["airports"]) == [{"id": "LHR"}]
    assert fake_redis.ttls["airports"] == 86400


def test_hit_skips_loader(fake_redis: FakeRedis):
    fake_redis.store["airports"] = json.dumps([{"id": "JFK"}])

    def loader():
        raise AssertionError("loader should not run on a cache hit")

    assert cached_json("airports", 60, loader) == [{"id": "JFK"}]


def test_none_is_not_cached(fake_redis: FakeRedis):
    assert cached_json("airports", 60, lambda: None) is None
    assert "airports" not in fake_redis.store


def test_corrupt_entry_is_reloaded(fake_redis: FakeRedis):
    fake_redis.store["airports"] = "[{"

    assert cached_json("airports", 60, lambda: ["fresh"]) == ["fresh"]
    assert json.loads(fake_redis.store["airports"]) == ["fresh"]


def test_redis_outage_falls_through_to_loader(monkeypatch):
    monkeypatch.setattr(cache, "_client", FakeRedis(fail=True))

    assert cached_json("airports", 60, lambda: ["live"]) == ["live"]
