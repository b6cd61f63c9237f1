import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, Float, ForeignKey, Index, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from shared.database.postgres import Base

from .enums import ItemKind, item_kind_enum


class ContentItem(Base):
    """A Report or PositivePost shown in a city's feed.

    The interaction tables are the durable log; the *_count and
    view_duration_total columns are denormalized from them and are only
    written by app.interactions.service while the row is locked.
    """

    __tablename__ = "content_items"

    item_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    kind: Mapped[ItemKind] = mapped_column(item_kind_enum, nullable=False, default=ItemKind.REPORT)
    city_id: Mapped[str] = mapped_column(
        String(100),
        ForeignKey("cities.city_id", ondelete="CASCADE"),
        nullable=False,
    )
    # Soft reference; User lives in the identity store
    author_id: Mapped[uuid.UUID] = mapped_column(Uuid, nullable=False)
    title: Mapped[str | None] = mapped_column(String(300), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    address: Mapped[str | None] = mapped_column(String(500), nullable=True)
    # Free-form moderation status (e.g. "pendente", "resolvido"); mutated by moderation
    status: Mapped[str] = mapped_column(String(50), nullable=False, default="pendente")

    like_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    view_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    share_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    # Sum of ItemView.duration (seconds); avg watch time = total / view_count
    view_duration_total: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    # Last score computed on write. Feed reads always recompute.
    engagement_score: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    last_score_update: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc)
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )

    city = relationship("City", lazy="noload")
    likes = relationship(
        "ItemLike", back_populates="item", lazy="noload", passive_deletes=True
    )
    views = relationship(
        "ItemView", back_populates="item", lazy="noload", passive_deletes=True
    )
    shares = relationship(
        "ItemShare", back_populates="item", lazy="noload", passive_deletes=True
    )

    __table_args__ = (
        Index("ix_content_items_city_created", "city_id", "created_at"),
        Index("ix_content_items_city_kind", "city_id", "kind"),
        Index("ix_content_items_engagement_score", "engagement_score"),
    )
