import logging
import uuid
from datetime import timedelta

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy import func, select

from app.feed import cache as feed_cache
from app.feed.exceptions import CityNotFoundError
from app.feed.service import get_city_feed, paginate
from app.feed.visibility import filter_visible
from app.hidden.service import hide_item
from app.interactions.service import register_share, register_view, toggle_like
from app.models import ContentItem, ItemLike
from app.models.enums import ItemKind


class FakeRedis:
    def __init__(self, fail: bool = False) -> None:
        self.store: dict[str, str] = {}
        self.fail = fail

    async def get(self, key):
        if self.fail:
            raise RedisConnectionError("down")
        return self.store.get(key)

    async def setex(self, key, ttl, value):
        if self.fail:
            raise RedisConnectionError("down")
        self.store[key] = value


@pytest.mark.asyncio
async def test_items_ranked_by_score(db_session, make_city, make_item, now) -> None:
    await make_city(db_session, "campinas")
    low = await make_item(db_session, likes=1, age=timedelta(days=3))
    high = await make_item(db_session, likes=50, age=timedelta(days=3))
    mid = await make_item(db_session, likes=10, age=timedelta(days=3))

    feed = await get_city_feed("campinas", db_session, now=now)

    assert [i.item_id for i in feed.items] == [high.item_id, mid.item_id, low.item_id]
    assert feed.total == 3
    assert feed.has_more is False
    assert feed.items[0].engagement_score > feed.items[1].engagement_score


@pytest.mark.asyncio
async def test_stored_score_is_ignored(db_session, make_city, make_item, now) -> None:
    await make_city(db_session, "campinas")
    stale = await make_item(db_session, likes=0, age=timedelta(days=1))
    stale.engagement_score = 9999.0
    liked = await make_item(db_session, likes=2, age=timedelta(days=1))
    await db_session.flush()

    feed = await get_city_feed("campinas", db_session, now=now)

    assert [i.item_id for i in feed.items] == [liked.item_id, stale.item_id]
    assert feed.items[1].engagement_score == 0.0


@pytest.mark.asyncio
async def test_feed_only_contains_own_city(db_session, make_city, make_item, now) -> None:
    await make_city(db_session, "campinas")
    await make_city(db_session, "sorocaba")
    ours = await make_item(db_session, "campinas", likes=1)
    await make_item(db_session, "sorocaba", likes=1000, shares=500)

    feed = await get_city_feed("campinas", db_session, now=now)

    assert [i.item_id for i in feed.items] == [ours.item_id]
    assert all(i.city_id == "campinas" for i in feed.items)


def test_filter_visible_drops_foreign_items(caplog) -> None:
    ours = ContentItem(item_id=uuid.uuid4(), city_id="campinas")
    foreign = ContentItem(item_id=uuid.uuid4(), city_id="sorocaba")
    hidden = ContentItem(item_id=uuid.uuid4(), city_id="campinas")
    last = ContentItem(item_id=uuid.uuid4(), city_id="campinas")

    with caplog.at_level(logging.WARNING, logger="app.feed.visibility"):
        visible = filter_visible([ours, foreign, hidden, last], "campinas", {hidden.item_id})

    assert visible == [ours, last]
    assert "Security" in caplog.text
    assert str(foreign.item_id) in caplog.text


@pytest.mark.asyncio
async def test_hidden_items_excluded_for_that_user_only(
    db_session, make_city, make_item, now
) -> None:
    await make_city(db_session, "campinas")
    item = await make_item(db_session)
    other = await make_item(db_session)
    alice, bob = uuid.uuid4(), uuid.uuid4()
    await hide_item(alice, item.item_id, db_session, now=now)

    alice_feed = await get_city_feed("campinas", db_session, viewer_id=alice, now=now)
    bob_feed = await get_city_feed("campinas", db_session, viewer_id=bob, now=now)

    assert [i.item_id for i in alice_feed.items] == [other.item_id]
    assert alice_feed.total == 1
    assert {i.item_id for i in bob_feed.items} == {item.item_id, other.item_id}


@pytest.mark.asyncio
async def test_pages_partition_the_ranking(db_session, make_city, make_item, now) -> None:
    await make_city(db_session, "campinas")
    for n in range(7):
        await make_item(db_session, likes=n, age=timedelta(hours=60 + n))

    full = await get_city_feed("campinas", db_session, page_size=100, now=now)
    pages = [
        await get_city_feed("campinas", db_session, page=p, page_size=3, now=now)
        for p in (1, 2, 3)
    ]

    assert [len(p.items) for p in pages] == [3, 3, 1]
    assert [p.has_more for p in pages] == [True, True, False]
    assert [i.item_id for p in pages for i in p.items] == [i.item_id for i in full.items]

    beyond = await get_city_feed("campinas", db_session, page=4, page_size=3, now=now)
    assert beyond.items == []
    assert beyond.has_more is False
    assert beyond.total == 7


def test_paginate_bounds() -> None:
    assert paginate(7, 1, 3) == (0, 3, True)
    assert paginate(7, 3, 3) == (6, 9, False)
    assert paginate(6, 2, 3) == (3, 6, False)


@pytest.mark.asyncio
async def test_invalid_page_rejected(db_session, make_city) -> None:
    await make_city(db_session, "campinas")
    with pytest.raises(ValueError):
        await get_city_feed("campinas", db_session, page=0)
    with pytest.raises(ValueError):
        await get_city_feed("campinas", db_session, page_size=0)


@pytest.mark.asyncio
async def test_empty_city_returns_empty_page(db_session, make_city, now) -> None:
    await make_city(db_session, "jundiai")

    feed = await get_city_feed("jundiai", db_session, viewer_id=uuid.uuid4(), now=now)

    assert feed.items == []
    assert feed.has_more is False
    assert feed.total == 0


@pytest.mark.asyncio
async def test_unknown_city_raises(db_session, make_city) -> None:
    await make_city(db_session, "campinas")
    with pytest.raises(CityNotFoundError):
        await get_city_feed("atlantis", db_session)


@pytest.mark.asyncio
async def test_ties_go_to_newer_item(db_session, make_city, make_item, now) -> None:
    await make_city(db_session, "campinas")
    older = await make_item(db_session, age=timedelta(days=20))
    newer = await make_item(db_session, age=timedelta(days=10))

    feed = await get_city_feed("campinas", db_session, now=now)

    assert [i.engagement_score for i in feed.items] == [0.0, 0.0]
    assert [i.item_id for i in feed.items] == [newer.item_id, older.item_id]


@pytest.mark.asyncio
async def test_personalization_flags(db_session, make_city, make_item, now) -> None:
    await make_city(db_session, "campinas")
    liked = await make_item(db_session, age=timedelta(days=1))
    viewed = await make_item(db_session, age=timedelta(days=2))
    untouched = await make_item(db_session, age=timedelta(days=3))
    viewer = uuid.uuid4()
    await toggle_like(liked.item_id, viewer, db_session, now=now)
    await register_view(viewed.item_id, viewer, db_session, duration=4, now=now)
    await register_share(viewed.item_id, viewer, db_session, now=now)

    feed = await get_city_feed("campinas", db_session, viewer_id=viewer, now=now)
    by_id = {i.item_id: i for i in feed.items}

    assert by_id[liked.item_id].is_liked_by_user is True
    assert by_id[liked.item_id].is_viewed_by_user is False
    assert by_id[viewed.item_id].is_viewed_by_user is True
    assert by_id[viewed.item_id].is_shared_by_user is True
    assert by_id[viewed.item_id].is_liked_by_user is False
    assert not any(
        (
            by_id[untouched.item_id].is_liked_by_user,
            by_id[untouched.item_id].is_viewed_by_user,
            by_id[untouched.item_id].is_shared_by_user,
        )
    )

    anonymous = await get_city_feed("campinas", db_session, now=now)
    assert not any(i.is_liked_by_user or i.is_viewed_by_user for i in anonymous.items)


@pytest.mark.asyncio
async def test_feed_read_does_not_mutate(db_session, make_city, make_item, now) -> None:
    await make_city(db_session, "campinas")
    item = await make_item(db_session, likes=3, views=4, shares=1)
    viewer = uuid.uuid4()

    await get_city_feed("campinas", db_session, viewer_id=viewer, now=now)

    assert (item.like_count, item.view_count, item.share_count) == (3, 4, 1)
    likes = await db_session.scalar(select(func.count()).select_from(ItemLike))
    assert likes == 0


@pytest.mark.asyncio
async def test_kind_filter(db_session, make_city, make_item, now) -> None:
    await make_city(db_session, "campinas")
    report = await make_item(db_session, kind=ItemKind.REPORT)
    post = await make_item(db_session, kind=ItemKind.POSITIVE_POST)

    posts = await get_city_feed("campinas", db_session, kind=ItemKind.POSITIVE_POST, now=now)
    reports = await get_city_feed("campinas", db_session, kind=ItemKind.REPORT, now=now)

    assert [i.item_id for i in posts.items] == [post.item_id]
    assert [i.item_id for i in reports.items] == [report.item_id]


@pytest.mark.asyncio
async def test_deleting_item_cascades_interactions(
    db_session, make_city, make_item, now
) -> None:
    await make_city(db_session, "campinas")
    item = await make_item(db_session)
    await toggle_like(item.item_id, uuid.uuid4(), db_session, now=now)
    await db_session.commit()

    await db_session.delete(item)
    await db_session.commit()

    likes = await db_session.scalar(select(func.count()).select_from(ItemLike))
    assert likes == 0


@pytest.mark.asyncio
async def test_city_lookup_uses_cache(db_session, make_city) -> None:
    await make_city(db_session, "campinas")
    redis = FakeRedis()

    await get_city_feed("campinas", db_session, redis)

    assert redis.store == {"feed:city:campinas": "1"}
    assert await feed_cache.is_known_city("campinas", redis) is True
    # Unknown cities are never cached
    with pytest.raises(CityNotFoundError):
        await get_city_feed("atlantis", db_session, redis)
    assert "feed:city:atlantis" not in redis.store


@pytest.mark.asyncio
async def test_redis_failure_falls_back_to_database(db_session, make_city, make_item) -> None:
    await make_city(db_session, "campinas")
    await make_item(db_session)

    feed = await get_city_feed("campinas", db_session, FakeRedis(fail=True))

    assert feed.total == 1
