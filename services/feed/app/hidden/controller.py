"""Hidden items controller: orchestration layer between router and service."""

from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import StorageUnavailableError
from app.exceptions import BadRequestError, ConflictError, NotFoundError
from app.hidden import service
from app.hidden.exceptions import (
    AlreadyReportedError,
    PermanentlyHiddenError,
    SelfReportError,
)
from app.hidden.schemas import (
    ContentReportResponse,
    CreateContentReportRequest,
    HiddenItemListResponse,
    HiddenItemResponse,
    HideRequest,
)
from app.interactions.controller import to_http_error
from app.interactions.exceptions import ItemNotFoundError, TenantIsolationError

_ITEM_ERRORS = (ItemNotFoundError, TenantIsolationError, StorageUnavailableError)


async def list_hidden_items(user_id: UUID, db: AsyncSession) -> HiddenItemListResponse:
    try:
        hidden = await service.list_hidden_items(user_id, db)
    except StorageUnavailableError as exc:
        raise to_http_error(exc)
    return HiddenItemListResponse(
        items=[HiddenItemResponse.model_validate(h) for h in hidden]
    )


async def hide_item(
    user_id: UUID, item_id: UUID, payload: HideRequest | None, db: AsyncSession
) -> HiddenItemResponse:
    city_id = payload.city_id if payload else None
    try:
        hidden = await service.hide_item(user_id, item_id, db, city_id=city_id)
    except _ITEM_ERRORS as exc:
        raise to_http_error(exc)
    return HiddenItemResponse.model_validate(hidden)


async def unhide_item(user_id: UUID, item_id: UUID, db: AsyncSession) -> None:
    try:
        removed = await service.unhide_item(user_id, item_id, db)
    except PermanentlyHiddenError:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="You reported this item; it stays hidden from your feed.",
        )
    except StorageUnavailableError as exc:
        raise to_http_error(exc)
    if not removed:
        raise NotFoundError("Hidden item")


async def file_content_report(
    payload: CreateContentReportRequest, db: AsyncSession
) -> ContentReportResponse:
    try:
        report = await service.file_content_report(
            payload.item_id,
            payload.user_id,
            payload.reason,
            db,
            details=payload.details,
            city_id=payload.city_id,
        )
    except SelfReportError:
        raise BadRequestError("You cannot report your own item.")
    except AlreadyReportedError:
        raise ConflictError(
            "You have already reported this item. It will no longer appear in your feed."
        )
    except _ITEM_ERRORS as exc:
        raise to_http_error(exc)
    return ContentReportResponse.model_validate(report)
