"""Feed controller: orchestration layer between router and service."""

from uuid import UUID

from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.database import StorageUnavailableError
from app.exceptions import NotFoundError, ServiceUnavailableError
from app.feed import service
from app.feed.exceptions import CityNotFoundError
from app.feed.schemas import CityFeedResponse
from app.models.enums import ItemKind


async def get_city_feed(
    city_id: str,
    db: AsyncSession,
    redis: Redis | None,
    settings: Settings,
    viewer_id: UUID | None = None,
    page: int = 1,
    limit: int = 20,
    kind: ItemKind | None = None,
) -> CityFeedResponse:
    try:
        feed = await service.get_city_feed(
            city_id,
            db,
            redis,
            viewer_id=viewer_id,
            page=page,
            page_size=min(limit, settings.feed_max_page_size),
            kind=kind,
            city_cache_ttl_s=settings.city_cache_ttl_s,
        )
    except CityNotFoundError:
        raise NotFoundError("City")
    except StorageUnavailableError:
        raise ServiceUnavailableError()
    return CityFeedResponse(
        reports=feed.items,
        has_more=feed.has_more,
        page=feed.page,
        total=feed.total,
    )
