"""Interactions controller: orchestration layer between router and service."""

import logging
from uuid import UUID

from fastapi import HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import StorageUnavailableError
from app.exceptions import (
    TENANT_MISMATCH_DETAIL,
    ForbiddenError,
    NotFoundError,
    ServiceUnavailableError,
)
from app.interactions import service
from app.interactions.exceptions import (
    InvalidDurationError,
    ItemNotFoundError,
    TenantIsolationError,
)
from app.interactions.schemas import (
    InteractionRequest,
    LikeResponse,
    ShareResponse,
    ViewRequest,
    ViewResponse,
)

logger = logging.getLogger(__name__)


def to_http_error(exc: Exception) -> HTTPException:
    """Map an interaction-domain exception to its HTTP error."""
    if isinstance(exc, ItemNotFoundError):
        return NotFoundError("Item")
    if isinstance(exc, TenantIsolationError):
        return ForbiddenError(TENANT_MISMATCH_DETAIL)
    if isinstance(exc, StorageUnavailableError):
        return ServiceUnavailableError()
    if isinstance(exc, InvalidDurationError):
        return HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    logger.error("No HTTP mapping for %s: %s", type(exc).__name__, exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="An unexpected error occurred",
    )


_DOMAIN_ERRORS = (
    ItemNotFoundError,
    TenantIsolationError,
    StorageUnavailableError,
    InvalidDurationError,
)


async def toggle_like(
    item_id: UUID, payload: InteractionRequest, db: AsyncSession
) -> LikeResponse:
    try:
        result = await service.toggle_like(
            item_id, payload.user_id, db, city_id=payload.city_id
        )
    except _DOMAIN_ERRORS as exc:
        raise to_http_error(exc)
    return LikeResponse(
        message="Like added." if result.is_liked else "Like removed.",
        likes_count=result.likes_count,
        is_liked=result.is_liked,
    )


async def register_view(
    item_id: UUID, payload: ViewRequest, db: AsyncSession
) -> ViewResponse:
    try:
        result = await service.register_view(
            item_id,
            payload.user_id,
            db,
            duration=payload.duration,
            city_id=payload.city_id,
        )
    except _DOMAIN_ERRORS as exc:
        raise to_http_error(exc)
    return ViewResponse(message="View registered.", views_count=result.views_count)


async def register_share(
    item_id: UUID, payload: InteractionRequest, db: AsyncSession
) -> ShareResponse:
    try:
        result = await service.register_share(
            item_id, payload.user_id, db, city_id=payload.city_id
        )
    except _DOMAIN_ERRORS as exc:
        raise to_http_error(exc)
    return ShareResponse(
        message="You have already shared this item." if result.already_shared else "Share registered.",
        shares_count=result.shares_count,
        already_shared=result.already_shared,
    )
