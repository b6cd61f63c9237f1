"""Interactions router: like / view / share endpoints under /api/v1/feed.

Zero business logic: delegates entirely to controller.
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.interactions import controller
from app.interactions.schemas import (
    InteractionRequest,
    LikeResponse,
    ShareResponse,
    ViewRequest,
    ViewResponse,
)
from app.rate_limit import INTERACTION_LIMIT, limiter

router = APIRouter(prefix="/feed", tags=["Interactions"])

_403 = {"description": "Item belongs to another city"}
_404 = {"description": "Item not found"}
_422 = {"description": "Validation error: malformed itemId, userId, cityId or duration"}
_429 = {"description": "Rate limit exceeded"}
_503 = {"description": "Storage unavailable: safe to retry"}

_RESPONSES = {403: _403, 404: _404, 422: _422, 429: _429, 503: _503}


@router.post(
    "/like/{item_id}",
    response_model=LikeResponse,
    summary="Toggle like",
    description=(
        "Likes the item, or removes the like if the user already liked it. "
        "Repeated calls alternate between liked and not liked. "
        "When `cityId` is sent it must match the item's city."
    ),
    responses=_RESPONSES,
)
@limiter.limit(INTERACTION_LIMIT)
async def toggle_like(
    request: Request,
    item_id: UUID,
    body: InteractionRequest,
    db: AsyncSession = Depends(get_db),
) -> LikeResponse:
    return await controller.toggle_like(item_id, body, db)


@router.post(
    "/view/{item_id}",
    response_model=ViewResponse,
    summary="Register or extend a view",
    description=(
        "One view per user per item. A repeat view only replaces the stored "
        "duration when the new `duration` (seconds) is longer."
    ),
    responses=_RESPONSES,
)
@limiter.limit(INTERACTION_LIMIT)
async def register_view(
    request: Request,
    item_id: UUID,
    body: ViewRequest,
    db: AsyncSession = Depends(get_db),
) -> ViewResponse:
    return await controller.register_view(item_id, body, db)


@router.post(
    "/share/{item_id}",
    response_model=ShareResponse,
    summary="Register a share",
    description=(
        "Counts the user's first share only. Later calls return "
        "`alreadyShared: true` and change nothing."
    ),
    responses=_RESPONSES,
)
@limiter.limit(INTERACTION_LIMIT)
async def register_share(
    request: Request,
    item_id: UUID,
    body: InteractionRequest,
    db: AsyncSession = Depends(get_db),
) -> ShareResponse:
    return await controller.register_share(item_id, body, db)
