import os
import uuid
from collections.abc import AsyncGenerator
from datetime import datetime, timedelta, timezone

# Set env vars BEFORE importing the app so Settings picks them up correctly
os.environ.setdefault("ENV_NAME", "test")
os.environ.setdefault("RATE_LIMIT_ENABLED", "false")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.database import set_session_factory
from app.dependencies import get_redis
from app.main import app
from app.models import City, ContentItem
from app.models.enums import ItemKind
from shared.database.postgres import Base

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

NOW = datetime(2026, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    engine = create_async_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def db_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def async_client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    set_session_factory(session_factory)
    app.dependency_overrides[get_redis] = lambda: None
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
    set_session_factory(None)


# ---------------------------------------------------------------------------
# Seed helpers
# ---------------------------------------------------------------------------


async def add_city(db: AsyncSession, city_id: str = "campinas", label: str | None = None) -> City:
    city = City(city_id=city_id, label=label or city_id.title())
    db.add(city)
    await db.flush()
    return city


async def add_item(
    db: AsyncSession,
    city_id: str = "campinas",
    *,
    age: timedelta = timedelta(hours=1),
    now: datetime = NOW,
    likes: int = 0,
    views: int = 0,
    shares: int = 0,
    view_duration_total: float = 0.0,
    author_id: uuid.UUID | None = None,
    kind: ItemKind = ItemKind.REPORT,
    title: str = "Buraco na rua",
) -> ContentItem:
    item = ContentItem(
        city_id=city_id,
        kind=kind,
        author_id=author_id or uuid.uuid4(),
        title=title,
        status="pendente",
        like_count=likes,
        view_count=views,
        share_count=shares,
        view_duration_total=view_duration_total,
        created_at=now - age,
    )
    db.add(item)
    await db.flush()
    return item


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def make_city():
    return add_city


@pytest.fixture
def make_item():
    return add_item
