import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from app.database import TRANSIENT_STORAGE_ERRORS, init_db
from app.dependencies import get_settings
from app.feed.router import router as feed_router
from app.hidden.router import router as hidden_router
from app.interactions.router import router as interactions_router
from app.logging_config import configure_logging
from app.rate_limit import limiter
from shared.database import get_redis_client
from shared.middleware import error_envelope, error_envelope_middleware, request_id_middleware

logger = logging.getLogger(__name__)

# Swagger tag groups displayed in the OpenAPI docs sidebar
_OPENAPI_TAGS = [
    {
        "name": "Feed",
        "description": (
            "Per-city feed ranked by engagement score with a 7-day half-life "
            "and a recency boost for items under 48 h. Personalised when "
            "`userId` is given."
        ),
    },
    {
        "name": "Interactions",
        "description": (
            "Likes (toggle), views (one per user, duration only grows) and "
            "shares (counted once per user). Every interaction is checked "
            "against the caller's city."
        ),
    },
    {
        "name": "Hidden items",
        "description": (
            "Per-user hidden items and content reports. Reporting an item "
            "hides it from the reporter's feed permanently."
        ),
    },
    {
        "name": "Health",
        "description": "Liveness probe.",
    },
]


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    init_db(settings.feed_database_url)
    # Lazily connecting; cache helpers treat any Redis failure as a miss.
    redis_client = get_redis_client(settings.redis_url)
    app.state.redis = redis_client

    yield

    await redis_client.aclose()


async def _storage_unavailable_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.warning("Storage unavailable on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content=error_envelope(
            request, "storage_unavailable", "Storage temporarily unavailable. Please retry."
        ),
    )


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(
        title="Civic Feed Service",
        description=(
            "Engagement-ranked, city-isolated feed of citizen reports and city "
            "hall posts, with like / view / share tracking."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_tags=_OPENAPI_TAGS,
        lifespan=lifespan,
    )

    # Attach rate limiter state before middleware
    app.state.limiter = limiter
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    # Driver errors escaping the request transaction (e.g. at commit time)
    for exc_type in TRANSIENT_STORAGE_ERRORS:
        app.add_exception_handler(exc_type, _storage_unavailable_handler)

    # Middleware is applied in reverse-registration order (last added = outermost).
    # CORS must be outermost so ALL responses (including 429s) carry CORS headers.
    app.add_middleware(SlowAPIMiddleware)
    app.middleware("http")(request_id_middleware)
    app.middleware("http")(error_envelope_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )

    app.include_router(feed_router, prefix="/api/v1")
    app.include_router(interactions_router, prefix="/api/v1")
    app.include_router(hidden_router, prefix="/api/v1")

    @app.get("/health", tags=["Health"])
    async def health() -> dict:
        """Lightweight liveness probe. Does not hit the database."""
        return {"status": "ok", "service": "feed"}

    return app


app = create_app()
