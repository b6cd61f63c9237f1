from fastapi import Request
from redis.asyncio import Redis

from app.config import Settings


def get_settings() -> Settings:
    return Settings()


def get_redis(request: Request) -> Redis | None:
    """Redis client created in the app lifespan, or None when caching is off."""
    return getattr(request.app.state, "redis", None)
