"""Per-viewer feed annotations (already liked / viewed / shared).

Read-only: nothing here writes to the interaction tables.
"""

from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.feed.schemas import FeedItem
from app.models.interaction import ItemLike, ItemShare, ItemView
from app.models.item import ContentItem


@dataclass(frozen=True)
class ViewerInteractions:
    """Item ids the viewer has liked, viewed and shared (within one page)."""

    liked: frozenset[UUID] = field(default_factory=frozenset)
    viewed: frozenset[UUID] = field(default_factory=frozenset)
    shared: frozenset[UUID] = field(default_factory=frozenset)


ANONYMOUS = ViewerInteractions()


async def load_viewer_interactions(
    user_id: UUID | None, item_ids: list[UUID], db: AsyncSession
) -> ViewerInteractions:
    """Batch-resolve the viewer's interactions for the given items (3 queries)."""
    if user_id is None or not item_ids:
        return ANONYMOUS

    async def _ids(model) -> frozenset[UUID]:
        rows = await db.execute(
            select(model.item_id).where(
                model.user_id == user_id, model.item_id.in_(item_ids)
            )
        )
        return frozenset(rows.scalars().all())

    return ViewerInteractions(
        liked=await _ids(ItemLike),
        viewed=await _ids(ItemView),
        shared=await _ids(ItemShare),
    )


def annotate(
    item: ContentItem, score: float, viewer: ViewerInteractions = ANONYMOUS
) -> FeedItem:
    return FeedItem(
        item_id=item.item_id,
        kind=item.kind,
        city_id=item.city_id,
        author_id=item.author_id,
        title=item.title,
        description=item.description,
        image_url=item.image_url,
        address=item.address,
        status=item.status,
        created_at=item.created_at,
        engagement_score=score,
        likes_count=item.like_count or 0,
        views_count=item.view_count or 0,
        shares_count=item.share_count or 0,
        is_liked_by_user=item.item_id in viewer.liked,
        is_viewed_by_user=item.item_id in viewer.viewed,
        is_shared_by_user=item.item_id in viewer.shared,
    )
