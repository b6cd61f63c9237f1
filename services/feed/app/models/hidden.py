import uuid
from datetime import datetime, timezone

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from shared.database.postgres import Base

from .enums import (
    ContentReportReason,
    ContentReportStatus,
    content_report_reason_enum,
    content_report_status_enum,
)


class HiddenItem(Base):
    """One entry of a user's hidden set."""

    __tablename__ = "hidden_items"

    hidden_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # Soft reference; User lives in the identity store
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    item_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("content_items.item_id", ondelete="CASCADE"),
        nullable=False,
    )
    # Set when the user filed a content report; such entries cannot be unhidden
    is_permanent: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    hidden_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        UniqueConstraint("user_id", "item_id", name="uq_hidden_items_user_item"),
        Index("ix_hidden_items_user_id", "user_id"),
    )


class ContentReport(Base):
    """A citizen's moderation report against a feed item."""

    __tablename__ = "content_reports"

    report_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    item_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("content_items.item_id", ondelete="CASCADE"),
        nullable=False,
    )
    reporter_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    reason: Mapped[ContentReportReason] = mapped_column(
        content_report_reason_enum, nullable=False
    )
    details: Mapped[str | None] = mapped_column(String(500), nullable=True)
    status: Mapped[ContentReportStatus] = mapped_column(
        content_report_status_enum, nullable=False, default=ContentReportStatus.PENDING
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )

    __table_args__ = (
        UniqueConstraint("item_id", "reporter_id", name="uq_content_reports_item_reporter"),
        Index("ix_content_reports_status", "status"),
    )
