"""Hidden items and content report endpoints.

Zero business logic: delegates entirely to controller.
"""

from uuid import UUID

from fastapi import APIRouter, Body, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.hidden import controller
from app.hidden.schemas import (
    ContentReportResponse,
    CreateContentReportRequest,
    HiddenItemListResponse,
    HiddenItemResponse,
    HideRequest,
)

router = APIRouter(tags=["Hidden items"])

_403 = {"description": "Item belongs to another city"}
_404 = {"description": "Item not found"}
_409 = {"description": "Conflict: already reported / permanently hidden"}


@router.get(
    "/users/{user_id}/hidden-items",
    response_model=HiddenItemListResponse,
    summary="List a user's hidden items",
)
async def list_hidden_items(
    user_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> HiddenItemListResponse:
    return await controller.list_hidden_items(user_id, db)


@router.post(
    "/users/{user_id}/hidden-items/{item_id}",
    response_model=HiddenItemResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Hide an item from the user's feed",
    description="Idempotent. The item disappears from this user's feed only.",
    responses={403: _403, 404: _404},
)
async def hide_item(
    user_id: UUID,
    item_id: UUID,
    body: HideRequest | None = Body(default=None),
    db: AsyncSession = Depends(get_db),
) -> HiddenItemResponse:
    return await controller.hide_item(user_id, item_id, body, db)


@router.delete(
    "/users/{user_id}/hidden-items/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Unhide an item",
    description="Returns 409 when the item was hidden by filing a content report.",
    responses={404: {"description": "Item was not hidden"}, 409: _409},
)
async def unhide_item(
    user_id: UUID,
    item_id: UUID,
    db: AsyncSession = Depends(get_db),
) -> None:
    await controller.unhide_item(user_id, item_id, db)


@router.post(
    "/content-reports",
    response_model=ContentReportResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Report an item to moderation",
    description=(
        "Files a moderation report and permanently hides the item from the "
        "reporter's feed. One report per user per item; authors cannot "
        "report their own items."
    ),
    responses={400: {"description": "Self-report"}, 403: _403, 404: _404, 409: _409},
)
async def file_content_report(
    body: CreateContentReportRequest,
    db: AsyncSession = Depends(get_db),
) -> ContentReportResponse:
    return await controller.file_content_report(body, db)
