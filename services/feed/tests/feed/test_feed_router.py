import uuid
from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient


def _recent() -> datetime:
    return datetime.now(timezone.utc)


@pytest.mark.asyncio
async def test_health(async_client: AsyncClient) -> None:
    response = await async_client.get("/health")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["service"] == "feed"


@pytest.mark.asyncio
async def test_city_feed_shape(async_client, db_session, make_city, make_item) -> None:
    await make_city(db_session, "campinas")
    item = await make_item(
        db_session, likes=2, views=3, shares=1, view_duration_total=30.0, now=_recent()
    )
    await db_session.commit()

    response = await async_client.get("/api/v1/feed/city/campinas")

    assert response.status_code == 200
    body = response.json()
    assert body["hasMore"] is False
    assert body["page"] == 1
    assert body["total"] == 1
    [card] = body["reports"]
    assert card["itemId"] == str(item.item_id)
    assert card["cityId"] == "campinas"
    assert card["kind"] == "REPORT"
    assert card["likesCount"] == 2
    assert card["viewsCount"] == 3
    assert card["sharesCount"] == 1
    assert card["engagementScore"] > 0
    assert card["isLikedByUser"] is False


@pytest.mark.asyncio
async def test_city_feed_paging(async_client, db_session, make_city, make_item) -> None:
    await make_city(db_session, "campinas")
    now = _recent()
    for n in range(5):
        await make_item(db_session, likes=n, age=timedelta(days=3, minutes=n), now=now)
    await db_session.commit()

    first = (await async_client.get("/api/v1/feed/city/campinas?page=1&limit=2")).json()
    last = (await async_client.get("/api/v1/feed/city/campinas?page=3&limit=2")).json()

    assert len(first["reports"]) == 2
    assert first["hasMore"] is True
    assert len(last["reports"]) == 1
    assert last["hasMore"] is False
    assert first["reports"][0]["likesCount"] == 4


@pytest.mark.asyncio
async def test_city_feed_for_viewer(async_client, db_session, make_city, make_item) -> None:
    await make_city(db_session, "campinas")
    item = await make_item(db_session, now=_recent())
    await db_session.commit()
    viewer = str(uuid.uuid4())

    liked = await async_client.post(
        f"/api/v1/feed/like/{item.item_id}", json={"userId": viewer}
    )
    assert liked.status_code == 200

    body = (await async_client.get(f"/api/v1/feed/city/campinas?userId={viewer}")).json()
    assert body["reports"][0]["isLikedByUser"] is True
    assert body["reports"][0]["likesCount"] == 1


@pytest.mark.asyncio
async def test_unknown_city_is_404(async_client, db_session, make_city) -> None:
    await make_city(db_session, "campinas")
    await db_session.commit()

    response = await async_client.get("/api/v1/feed/city/atlantis")

    assert response.status_code == 404
    assert response.json()["detail"] == "City not found."


@pytest.mark.asyncio
async def test_empty_city_is_empty_page(async_client, db_session, make_city) -> None:
    await make_city(db_session, "jundiai")
    await db_session.commit()

    response = await async_client.get("/api/v1/feed/city/jundiai")

    assert response.status_code == 200
    assert response.json() == {"reports": [], "hasMore": False, "page": 1, "total": 0}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "query",
    ["page=0", "limit=0", "limit=101", "page=abc", "userId=not-a-uuid", "kind=MEME"],
)
async def test_bad_query_is_422(async_client, db_session, make_city, query) -> None:
    await make_city(db_session, "campinas")
    await db_session.commit()

    response = await async_client.get(f"/api/v1/feed/city/campinas?{query}")

    assert response.status_code == 422


@pytest.mark.asyncio
async def test_request_id_is_echoed(async_client) -> None:
    response = await async_client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"
