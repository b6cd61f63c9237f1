#!/usr/bin/env python3
"""
Seed the dev feed database with a couple of cities and feed items.
Run from repo root after migrating: python scripts/seed-data.py
Uses FEED_DATABASE_URL from env or .env.
"""
import asyncio
import os
import random
import sys
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path

# Service and shared packages on path
repo_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(repo_root / "shared"))
sys.path.insert(0, str(repo_root / "services" / "feed"))

from sqlalchemy import select  # noqa: E402
from sqlalchemy.exc import SQLAlchemyError  # noqa: E402

from app.config import Settings  # noqa: E402
from app.feed.scoring import score_item  # noqa: E402
from app.models import City, ContentItem, ItemLike, ItemShare, ItemView  # noqa: E402
from app.models.enums import ItemKind  # noqa: E402
from shared.database.postgres import get_async_session_factory  # noqa: E402

CITIES = {
    "campinas": "Campinas",
    "sorocaba": "Sorocaba",
}

TITLES = [
    "Buraco na Rua das Flores",
    "Poste sem luz na praça",
    "Lixo acumulado no terreno baldio",
    "Nova ciclovia inaugurada",
    "Praça central revitalizada",
]


POSITIVE_TITLES = {"Nova ciclovia inaugurada", "Praça central revitalizada"}


def build_item(city_id: str, title: str, rng: random.Random, now: datetime) -> list:
    """One item plus the like / view / share rows its counters summarize."""
    item = ContentItem(
        item_id=uuid.uuid4(),
        city_id=city_id,
        kind=ItemKind.POSITIVE_POST if title in POSITIVE_TITLES else ItemKind.REPORT,
        author_id=uuid.uuid4(),
        title=title,
        created_at=now - timedelta(hours=rng.randint(0, 24 * 21)),
    )
    likes = [
        ItemLike(item_id=item.item_id, user_id=uuid.uuid4(), liked_at=now)
        for _ in range(rng.randint(0, 40))
    ]
    views = [
        ItemView(
            item_id=item.item_id,
            user_id=uuid.uuid4(),
            viewed_at=now,
            duration=float(rng.randint(2, 30)),
        )
        for _ in range(rng.randint(0, 200))
    ]
    shares = [
        ItemShare(item_id=item.item_id, user_id=uuid.uuid4(), shared_at=now)
        for _ in range(rng.randint(0, 5))
    ]
    item.like_count = len(likes)
    item.view_count = len(views)
    item.share_count = len(shares)
    item.view_duration_total = sum(v.duration for v in views)
    item.engagement_score = score_item(item, now)
    item.last_score_update = now
    return [item, *likes, *views, *shares]


async def seed_feed(url: str, items_per_city: int = 10) -> None:
    factory = get_async_session_factory(url, expire_on_commit=False)
    now = datetime.now(timezone.utc)
    rng = random.Random(42)

    async with factory() as session:
        for city_id, label in CITIES.items():
            if await session.scalar(select(City.city_id).where(City.city_id == city_id)):
                print(f"Feed: city {city_id} already seeded, skipping")
                continue
            session.add(City(city_id=city_id, label=label))
            # Items reference the city row
            await session.flush()
            for n in range(items_per_city):
                session.add_all(build_item(city_id, TITLES[n % len(TITLES)], rng, now))
            print(f"Feed: seeded {label} with {items_per_city} items")
        await session.commit()


def main() -> None:
    url = os.environ.get("FEED_DATABASE_URL") or Settings().feed_database_url
    try:
        asyncio.run(seed_feed(url))
    except SQLAlchemyError as e:
        print(f"Feed seed failed: {e}", file=sys.stderr)
        sys.exit(1)
    print("Seed done.")


if __name__ == "__main__":
    main()
