"""Interactions domain Pydantic V2 schemas.

Request and response bodies are camelCase on the wire (userId, cityId,
likesCount, ...). All fields carry Field(description=...) for OpenAPI.
"""

from __future__ import annotations

from uuid import UUID

from pydantic import Field

from shared.models import CamelModel


class InteractionRequest(CamelModel):
    """Body shared by the like and share endpoints."""

    user_id: UUID = Field(description="Acting user (identity store ID).")
    city_id: str | None = Field(
        default=None,
        min_length=1,
        max_length=100,
        description="Caller's city. When present it must match the item's city.",
    )


class ViewRequest(InteractionRequest):
    duration: float | None = Field(
        default=None,
        ge=0,
        allow_inf_nan=False,
        description="Seconds spent on the item. Only a longer duration replaces the stored one.",
    )


class LikeResponse(CamelModel):
    """Like state after a toggle."""

    message: str
    likes_count: int = Field(description="Current like count.")
    is_liked: bool = Field(description="True if the user now likes the item.")


class ViewResponse(CamelModel):
    message: str
    views_count: int = Field(description="Distinct users who viewed the item.")


class ShareResponse(CamelModel):
    message: str
    shares_count: int = Field(description="Distinct users who shared the item.")
    already_shared: bool = Field(
        description="True when this user had already shared; nothing was recorded."
    )
