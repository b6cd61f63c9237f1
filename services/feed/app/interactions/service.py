"""Interactions service: pure business logic, no FastAPI imports.

The three interaction kinds follow different state machines:

  like   toggle       a second call undoes the first
  view   monotone     stored duration only ever grows
  share  single-fire  only the first call has an effect

Every mutator locks the item row (SELECT ... FOR UPDATE) before reading
the interaction log, so two concurrent requests for the same item are
applied one after the other. The denormalized counters and the cached
engagement score are updated on the locked row in the same transaction
as the log row; the request-scoped session commits once or rolls back.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Literal
from uuid import UUID

from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import translate_storage_errors
from app.feed.scoring import score_item
from app.interactions.exceptions import (
    InvalidDurationError,
    ItemNotFoundError,
    TenantIsolationError,
)
from app.models.interaction import ItemLike, ItemShare, ItemView
from app.models.item import ContentItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LikeResult:
    likes_count: int
    is_liked: bool
    action: Literal["added", "removed"]


@dataclass(frozen=True)
class ViewResult:
    views_count: int
    duration: float
    updated: bool


@dataclass(frozen=True)
class ShareResult:
    shares_count: int
    already_shared: bool


# ---------------------------------------------------------------------------
# Item access
# ---------------------------------------------------------------------------


def item_query(item_id: UUID, for_update: bool = False) -> Select[tuple[ContentItem]]:
    """SELECT for one item; with ``for_update`` it takes the row lock mutators rely on."""
    q = select(ContentItem).where(ContentItem.item_id == item_id)
    if for_update:
        q = q.with_for_update()
    return q


async def get_item(
    item_id: UUID,
    db: AsyncSession,
    city_id: str | None = None,
    for_update: bool = False,
) -> ContentItem:
    """Load an item, enforcing that it belongs to ``city_id`` when given.

    Raises ItemNotFoundError or TenantIsolationError.
    """
    item = (await db.execute(item_query(item_id, for_update))).scalar_one_or_none()
    if item is None:
        raise ItemNotFoundError(item_id)
    if city_id is not None and item.city_id != city_id:
        logger.warning(
            "Tenant isolation: caller city %s tried to act on item %s of city %s",
            city_id,
            item_id,
            item.city_id,
        )
        raise TenantIsolationError(item_id, city_id, item.city_id)
    return item


def refresh_score(item: ContentItem, now: datetime) -> None:
    item.engagement_score = score_item(item, now)
    item.last_score_update = now


def _now(now: datetime | None) -> datetime:
    return now or datetime.now(timezone.utc)


# ---------------------------------------------------------------------------
# Like (toggle)
# ---------------------------------------------------------------------------


@translate_storage_errors
async def toggle_like(
    item_id: UUID,
    user_id: UUID,
    db: AsyncSession,
    city_id: str | None = None,
    now: datetime | None = None,
) -> LikeResult:
    """Like the item, or remove the like if the user already liked it."""
    now = _now(now)
    item = await get_item(item_id, db, city_id, for_update=True)

    existing = await db.scalar(
        select(ItemLike).where(ItemLike.item_id == item_id, ItemLike.user_id == user_id)
    )
    if existing is not None:
        await db.delete(existing)
        item.like_count = max(0, (item.like_count or 0) - 1)
        action: Literal["added", "removed"] = "removed"
    else:
        db.add(ItemLike(item_id=item_id, user_id=user_id, liked_at=now))
        item.like_count = (item.like_count or 0) + 1
        action = "added"

    refresh_score(item, now)
    await db.flush()

    logger.info("Like %s: item=%s user=%s likes=%d", action, item_id, user_id, item.like_count)
    return LikeResult(likes_count=item.like_count, is_liked=action == "added", action=action)


# ---------------------------------------------------------------------------
# View (monotone duration)
# ---------------------------------------------------------------------------


def _validate_duration(duration: float | None) -> float:
    if duration is None:
        return 0.0
    value = float(duration)
    if math.isnan(value) or math.isinf(value) or value < 0:
        raise InvalidDurationError(f"Invalid view duration: {duration!r}")
    return value


@translate_storage_errors
async def register_view(
    item_id: UUID,
    user_id: UUID,
    db: AsyncSession,
    duration: float | None = None,
    city_id: str | None = None,
    now: datetime | None = None,
) -> ViewResult:
    """Record that the user viewed the item for ``duration`` seconds.

    One view per user. A repeat view only replaces the stored duration when
    it is strictly longer, and only then moves viewed_at forward.
    """
    seconds = _validate_duration(duration)
    now = _now(now)
    item = await get_item(item_id, db, city_id, for_update=True)

    view = await db.scalar(
        select(ItemView).where(ItemView.item_id == item_id, ItemView.user_id == user_id)
    )
    updated = False
    if view is None:
        view = ItemView(item_id=item_id, user_id=user_id, viewed_at=now, duration=seconds)
        db.add(view)
        item.view_count = (item.view_count or 0) + 1
        item.view_duration_total = (item.view_duration_total or 0.0) + seconds
        updated = True
    elif seconds > view.duration:
        item.view_duration_total = (item.view_duration_total or 0.0) + (seconds - view.duration)
        view.duration = seconds
        view.viewed_at = now
        updated = True

    refresh_score(item, now)
    await db.flush()

    logger.info(
        "View registered: item=%s user=%s duration=%.1fs updated=%s",
        item_id,
        user_id,
        view.duration,
        updated,
    )
    return ViewResult(views_count=item.view_count, duration=view.duration, updated=updated)


# ---------------------------------------------------------------------------
# Share (single-fire)
# ---------------------------------------------------------------------------


@translate_storage_errors
async def register_share(
    item_id: UUID,
    user_id: UUID,
    db: AsyncSession,
    city_id: str | None = None,
    now: datetime | None = None,
) -> ShareResult:
    """Record the user's first share of the item; later calls are no-ops."""
    now = _now(now)
    item = await get_item(item_id, db, city_id, for_update=True)

    existing = await db.scalar(
        select(ItemShare.share_id).where(
            ItemShare.item_id == item_id, ItemShare.user_id == user_id
        )
    )
    if existing is not None:
        return ShareResult(shares_count=item.share_count, already_shared=True)

    db.add(ItemShare(item_id=item_id, user_id=user_id, shared_at=now))
    item.share_count = (item.share_count or 0) + 1
    refresh_score(item, now)
    await db.flush()

    logger.info("Share registered: item=%s user=%s shares=%d", item_id, user_id, item.share_count)
    return ShareResult(shares_count=item.share_count, already_shared=False)
