"""Hidden items and content reports: pure business logic, no FastAPI imports.

A user's hidden set removes items from that user's feed only. Filing a
content report hides the item for the reporter permanently; manual hides
can be undone.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import translate_storage_errors
from app.hidden.exceptions import (
    AlreadyReportedError,
    PermanentlyHiddenError,
    SelfReportError,
)
from app.interactions.service import get_item
from app.models.enums import ContentReportReason, ContentReportStatus
from app.models.hidden import ContentReport, HiddenItem

logger = logging.getLogger(__name__)


async def get_hidden_item_ids(user_id: UUID, db: AsyncSession) -> frozenset[UUID]:
    result = await db.execute(select(HiddenItem.item_id).where(HiddenItem.user_id == user_id))
    return frozenset(result.scalars().all())


@translate_storage_errors
async def list_hidden_items(user_id: UUID, db: AsyncSession) -> list[HiddenItem]:
    result = await db.execute(
        select(HiddenItem)
        .where(HiddenItem.user_id == user_id)
        .order_by(HiddenItem.hidden_at.desc())
    )
    return list(result.scalars().all())


async def _upsert_hidden(
    user_id: UUID,
    item_id: UUID,
    db: AsyncSession,
    permanent: bool,
    now: datetime,
) -> HiddenItem:
    lookup = select(HiddenItem).where(
        HiddenItem.user_id == user_id, HiddenItem.item_id == item_id
    )
    hidden = await db.scalar(lookup)
    if hidden is None:
        hidden = HiddenItem(
            user_id=user_id, item_id=item_id, is_permanent=permanent, hidden_at=now
        )
        try:
            async with db.begin_nested():
                db.add(hidden)
            return hidden
        except IntegrityError:
            # A concurrent hide of the same item committed first.
            hidden = await db.scalar(lookup)
    if permanent and not hidden.is_permanent:
        hidden.is_permanent = True
    await db.flush()
    return hidden


@translate_storage_errors
async def hide_item(
    user_id: UUID,
    item_id: UUID,
    db: AsyncSession,
    city_id: str | None = None,
    now: datetime | None = None,
) -> HiddenItem:
    """Add the item to the user's hidden set. Idempotent."""
    await get_item(item_id, db, city_id)
    hidden = await _upsert_hidden(
        user_id, item_id, db, permanent=False, now=now or datetime.now(timezone.utc)
    )
    logger.info("Item %s hidden for user %s", item_id, user_id)
    return hidden


@translate_storage_errors
async def unhide_item(user_id: UUID, item_id: UUID, db: AsyncSession) -> bool:
    """Remove the item from the user's hidden set.

    Returns False when it was not hidden. Raises PermanentlyHiddenError
    when the hide came from a content report.
    """
    hidden = await db.scalar(
        select(HiddenItem).where(HiddenItem.user_id == user_id, HiddenItem.item_id == item_id)
    )
    if hidden is None:
        return False
    if hidden.is_permanent:
        raise PermanentlyHiddenError()
    await db.execute(delete(HiddenItem).where(HiddenItem.hidden_id == hidden.hidden_id))
    await db.flush()
    logger.info("Item %s unhidden for user %s", item_id, user_id)
    return True


@translate_storage_errors
async def file_content_report(
    item_id: UUID,
    reporter_id: UUID,
    reason: ContentReportReason,
    db: AsyncSession,
    details: str | None = None,
    city_id: str | None = None,
    now: datetime | None = None,
) -> ContentReport:
    """Record a moderation report and hide the item for the reporter for good.

    Raises ItemNotFoundError, TenantIsolationError, SelfReportError or
    AlreadyReportedError.
    """
    now = now or datetime.now(timezone.utc)
    item = await get_item(item_id, db, city_id)
    if item.author_id == reporter_id:
        raise SelfReportError()

    existing = await db.scalar(
        select(ContentReport.report_id).where(
            ContentReport.item_id == item_id, ContentReport.reporter_id == reporter_id
        )
    )
    if existing is not None:
        raise AlreadyReportedError()

    report = ContentReport(
        item_id=item_id,
        reporter_id=reporter_id,
        reason=reason,
        details=details,
        status=ContentReportStatus.PENDING,
        created_at=now,
    )
    db.add(report)
    try:
        await db.flush()
    except IntegrityError:
        # A concurrent report by the same user won the unique constraint;
        # the request transaction is rolled back by get_db.
        raise AlreadyReportedError()

    await _upsert_hidden(reporter_id, item_id, db, permanent=True, now=now)
    logger.info(
        "Content report %s filed on item %s by user %s (%s)",
        report.report_id,
        item_id,
        reporter_id,
        reason.value,
    )
    return report
