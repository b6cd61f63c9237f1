"""Feed domain Pydantic V2 schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import Field

from app.models.enums import ItemKind
from shared.models import CamelModel


class FeedItem(CamelModel):
    """A ranked feed card, annotated for the requesting viewer."""

    item_id: UUID
    kind: ItemKind = Field(description="REPORT or POSITIVE_POST.")
    city_id: str
    author_id: UUID = Field(description="User ID of the author (identity store reference).")
    title: str | None = None
    description: str | None = None
    image_url: str | None = None
    address: str | None = None
    status: str
    created_at: datetime
    engagement_score: float = Field(description="Score computed at read time.")
    likes_count: int
    views_count: int
    shares_count: int
    is_liked_by_user: bool = False
    is_viewed_by_user: bool = False
    is_shared_by_user: bool = False


class CityFeedResponse(CamelModel):
    """Page-numbered ranked feed for one city."""

    reports: list[FeedItem]
    has_more: bool = Field(description="True when another page exists.")
    page: int = Field(description="Requested page (1-indexed).")
    total: int = Field(description="Visible items in the city for this viewer.")
