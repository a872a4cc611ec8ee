import json
import logging
from typing import Any, Callable, Optional

import redis
from redis.exceptions import RedisError

from app.core.config import settings


logger = logging.getLogger(__name__)

_client: Optional[redis.Redis] = None


def get_redis() -> redis.Redis:
    global _client
    if _client is None:
        _client = redis.from_url(settings.redis_url, decode_responses=True)
    return _client


def cached_json(key: str, ttl_seconds: int, loader: Callable[[], Any]) -> Any:
    """Return the JSON value stored under ``key`` or compute and store it.

    Redis being unreachable never fails the caller: reads fall through to
    ``loader`` and writes are skipped. ``None`` results are not cached.
    """
    r = get_redis()
    try:
        cached = r.get(key)
    except RedisError as exc:
        logger.debug("Redis read failed for %s: %s", key, exc)
        cached = None
    if cached is not None:
        try:
            decoded = json.loads(cached)
            if decoded is not None:
                return decoded
        except json.JSONDecodeError:
            logger.warning("Discarding undecodable cache entry %s", key)
    data = loader()
    if data is not None:
        try:
            r.setex(key, ttl_seconds, json.dumps(data))
        except RedisError as exc:
            logger.debug("Redis write failed for %s: %s", key, exc)
    return data

