"""Interaction log tables.

One table per interaction kind: likes toggle, views only grow, shares fire
once. Each keeps at most one row per (item, user).
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, Float, ForeignKey, Index, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.database.postgres import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ItemLike(Base):
    __tablename__ = "item_likes"

    like_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    item_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("content_items.item_id", ondelete="CASCADE"),
        nullable=False,
    )
    # Soft reference; User lives in the identity store
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    liked_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    item = relationship("ContentItem", back_populates="likes", lazy="noload")

    __table_args__ = (
        UniqueConstraint("item_id", "user_id", name="uq_item_likes_item_user"),
        Index("ix_item_likes_user_id", "user_id"),
    )


class ItemView(Base):
    __tablename__ = "item_views"

    view_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    item_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("content_items.item_id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    # Refreshed whenever duration grows
    viewed_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )
    # Seconds the user spent on the item; never decreases
    duration: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    item = relationship("ContentItem", back_populates="views", lazy="noload")

    __table_args__ = (
        UniqueConstraint("item_id", "user_id", name="uq_item_views_item_user"),
        CheckConstraint("duration >= 0", name="ck_item_views_duration_non_negative"),
        Index("ix_item_views_user_id", "user_id"),
    )


class ItemShare(Base):
    __tablename__ = "item_shares"

    share_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    item_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("content_items.item_id", ondelete="CASCADE"),
        nullable=False,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    shared_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=_utcnow
    )

    item = relationship("ContentItem", back_populates="shares", lazy="noload")

    __table_args__ = (
        UniqueConstraint("item_id", "user_id", name="uq_item_shares_item_user"),
        Index("ix_item_shares_user_id", "user_id"),
    )
