from typing import Any

import redis.asyncio as redis

RedisClient = redis.Redis


def get_redis_client(redis_url: str, **kwargs: Any) -> redis.Redis:
    """Build a lazily-connecting async client; no round-trip happens here."""
    kwargs.setdefault("encoding", "utf-8")
    return redis.from_url(redis_url, decode_responses=True, **kwargs)
