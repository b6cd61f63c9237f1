from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query
from redis.asyncio import Redis
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.database import get_db
from app.dependencies import get_redis, get_settings
from app.feed import controller
from app.feed.schemas import CityFeedResponse
from app.models.enums import ItemKind

router = APIRouter(prefix="/feed", tags=["Feed"])


@router.get(
    "/city/{city_id}",
    response_model=CityFeedResponse,
    summary="Ranked city feed",
    description=(
        "Returns the city's items ranked by engagement score: "
        "(likes×3 + views×0.5 + avg watch time×2 + shares×10) "
        "× 0.5^(age days / 7) × recency boost (2× under 24 h, 1.5× under 48 h). "
        "Scores are computed at request time; ties go to the newer item. "
        "Pass `userId` to exclude the user's hidden items and to fill the "
        "`isLikedByUser` / `isViewedByUser` / `isSharedByUser` flags. "
        "Unknown cities return 404; a city with no content returns an empty page."
    ),
    responses={404: {"description": "City not found"}},
)
async def get_city_feed(
    city_id: str = Path(..., min_length=1, max_length=100, pattern=r"\S"),
    user_id: UUID | None = Query(None, alias="userId", description="Viewer (optional)."),
    page: int = Query(1, ge=1, description="Page number (1-indexed)."),
    limit: int = Query(20, ge=1, le=100, description="Page size."),
    kind: ItemKind | None = Query(None, description="Restrict to REPORT or POSITIVE_POST."),
    db: AsyncSession = Depends(get_db),
    redis: Redis | None = Depends(get_redis),
    settings: Settings = Depends(get_settings),
) -> CityFeedResponse:
    return await controller.get_city_feed(
        city_id=city_id,
        db=db,
        redis=redis,
        settings=settings,
        viewer_id=user_id,
        page=page,
        limit=limit,
        kind=kind,
    )
