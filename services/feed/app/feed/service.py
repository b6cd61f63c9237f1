"""Feed service: pure business logic, no FastAPI imports.

City feed pipeline
------------------
1. Reject unknown cities (Redis-cached catalog lookup, DB fallback).
2. Fetch every item of the city, newest first.
3. Drop cross-city and viewer-hidden items.
4. Recompute each engagement score at read time (the stored score is a hint).
5. Sort by score, newer first on ties, then page.
6. Annotate the page with the viewer's like / view / share flags.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from uuid import UUID

from redis.asyncio import Redis
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import translate_storage_errors
from app.feed import cache as feed_cache
from app.feed.exceptions import CityNotFoundError
from app.feed.personalization import annotate, load_viewer_interactions
from app.feed.schemas import FeedItem
from app.feed.scoring import score_item
from app.feed.visibility import filter_visible
from app.hidden.service import get_hidden_item_ids
from app.models.city import City
from app.models.enums import ItemKind
from app.models.item import ContentItem

logger = logging.getLogger(__name__)


@dataclass
class FeedPage:
    items: list[FeedItem] = field(default_factory=list)
    has_more: bool = False
    page: int = 1
    total: int = 0


def _created_ts(item: ContentItem) -> float:
    created = item.created_at
    if created.tzinfo is None:
        created = created.replace(tzinfo=timezone.utc)
    return created.timestamp()


def rank_items(
    items: list[ContentItem], now: datetime
) -> list[tuple[float, ContentItem]]:
    """Score every item and sort: higher score first, newer first on ties.

    The sort is stable, so items that also share created_at keep the
    order they were fetched in.
    """
    scored = [(score_item(item, now), item) for item in items]
    scored.sort(key=lambda pair: (-pair[0], -_created_ts(pair[1])))
    return scored


def paginate(total: int, page: int, page_size: int) -> tuple[int, int, bool]:
    """Return (start, end, has_more) slice bounds for a 1-indexed page."""
    skip = (page - 1) * page_size
    return skip, skip + page_size, skip + page_size < total


async def ensure_city_exists(
    city_id: str, db: AsyncSession, redis: Redis | None = None, cache_ttl_s: int = 600
) -> None:
    """Raise CityNotFoundError unless the city is in the tenant catalog."""
    if await feed_cache.is_known_city(city_id, redis):
        return
    found = await db.scalar(select(City.city_id).where(City.city_id == city_id))
    if found is None:
        logger.info("Feed requested for unknown city %s", city_id)
        raise CityNotFoundError(city_id)
    await feed_cache.remember_city(city_id, redis, cache_ttl_s)


async def fetch_city_items(
    city_id: str, db: AsyncSession, kind: ItemKind | None = None
) -> list[ContentItem]:
    q = select(ContentItem).where(ContentItem.city_id == city_id)
    if kind is not None:
        q = q.where(ContentItem.kind == kind)
    q = q.order_by(ContentItem.created_at.desc(), ContentItem.item_id)
    return list((await db.execute(q)).scalars().all())


@translate_storage_errors
async def get_city_feed(
    city_id: str,
    db: AsyncSession,
    redis: Redis | None = None,
    viewer_id: UUID | None = None,
    page: int = 1,
    page_size: int = 20,
    kind: ItemKind | None = None,
    now: datetime | None = None,
    city_cache_ttl_s: int = 600,
) -> FeedPage:
    """Ranked, personalised page of a city's feed.

    Raises CityNotFoundError for a city missing from the catalog. A known
    city with no visible content yields an empty page.
    """
    if page < 1 or page_size < 1:
        raise ValueError("page and page_size must be >= 1")

    await ensure_city_exists(city_id, db, redis, city_cache_ttl_s)

    hidden = await get_hidden_item_ids(viewer_id, db) if viewer_id else frozenset()
    items = filter_visible(await fetch_city_items(city_id, db, kind), city_id, hidden)
    if not items:
        return FeedPage(items=[], has_more=False, page=page, total=0)

    now = now or datetime.now(timezone.utc)
    ranked = rank_items(items, now)
    total = len(ranked)
    start, end, has_more = paginate(total, page, page_size)
    page_slice = ranked[start:end]

    viewer = await load_viewer_interactions(
        viewer_id, [item.item_id for _, item in page_slice], db
    )
    logger.debug(
        "City %s feed: %d visible, page %d returns %d", city_id, total, page, len(page_slice)
    )
    return FeedPage(
        items=[annotate(item, score, viewer) for score, item in page_slice],
        has_more=has_more,
        page=page,
        total=total,
    )
