"""Redis cache helpers for the feed domain.

Key schema
----------
feed:city:{city_id}    "1"    TTL city_cache_ttl_s   known-city marker

Every call is best-effort: a missing client or any RedisError is logged
and treated as a cache miss. Only positive lookups are cached.
"""

import logging

from redis.asyncio import Redis
from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

_CITY_TTL_S: int = 600  # 10 minutes


def _city_key(city_id: str) -> str:
    return f"feed:city:{city_id}"


async def is_known_city(city_id: str, redis: Redis | None) -> bool:
    """Return True only when the city is cached as existing."""
    if redis is None:
        return False
    try:
        return await redis.get(_city_key(city_id)) is not None
    except RedisError as exc:
        logger.warning("Redis unavailable for city lookup %s: %s", city_id, exc)
        return False


async def remember_city(
    city_id: str, redis: Redis | None, ttl_s: int = _CITY_TTL_S
) -> None:
    if redis is None:
        return
    try:
        await redis.setex(_city_key(city_id), ttl_s, "1")
    except RedisError as exc:
        logger.warning("Redis unavailable while caching city %s: %s", city_id, exc)
