"""Hidden items and content report Pydantic V2 schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import ConfigDict, Field

from app.models.enums import ContentReportReason, ContentReportStatus
from shared.models import CamelModel


class HideRequest(CamelModel):
    city_id: str | None = Field(
        default=None,
        min_length=1,
        max_length=100,
        description="Caller's city. When present it must match the item's city.",
    )


class HiddenItemResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    item_id: UUID
    hidden_at: datetime
    is_permanent: bool = Field(
        description="True when the hide came from a content report and cannot be undone."
    )


class HiddenItemListResponse(CamelModel):
    items: list[HiddenItemResponse]


class CreateContentReportRequest(CamelModel):
    item_id: UUID
    user_id: UUID = Field(description="Reporting user.")
    reason: ContentReportReason
    details: str | None = Field(default=None, max_length=500)
    city_id: str | None = Field(default=None, min_length=1, max_length=100)


class ContentReportResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    report_id: UUID
    item_id: UUID
    reporter_id: UUID
    reason: ContentReportReason
    details: str | None
    status: ContentReportStatus
    created_at: datetime
