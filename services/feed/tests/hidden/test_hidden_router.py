import uuid

import pytest
import pytest_asyncio
from httpx import AsyncClient


@pytest_asyncio.fixture
async def item(db_session, make_city, make_item):
    await make_city(db_session, "campinas")
    item = await make_item(db_session, "campinas")
    await db_session.commit()
    return item


@pytest.mark.asyncio
async def test_hide_list_unhide(async_client: AsyncClient, item) -> None:
    user = uuid.uuid4()
    base = f"/api/v1/users/{user}/hidden-items"

    hidden = await async_client.post(f"{base}/{item.item_id}")
    assert hidden.status_code == 201
    assert hidden.json()["itemId"] == str(item.item_id)
    assert hidden.json()["isPermanent"] is False

    listing = (await async_client.get(base)).json()
    assert [h["itemId"] for h in listing["items"]] == [str(item.item_id)]

    feed = (await async_client.get(f"/api/v1/feed/city/campinas?userId={user}")).json()
    assert feed["reports"] == []

    removed = await async_client.delete(f"{base}/{item.item_id}")
    assert removed.status_code == 204
    again = await async_client.delete(f"{base}/{item.item_id}")
    assert again.status_code == 404


@pytest.mark.asyncio
async def test_hide_with_wrong_city_is_403(async_client: AsyncClient, item) -> None:
    response = await async_client.post(
        f"/api/v1/users/{uuid.uuid4()}/hidden-items/{item.item_id}",
        json={"cityId": "sorocaba"},
    )
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_content_report_flow(async_client: AsyncClient, item) -> None:
    reporter = str(uuid.uuid4())
    payload = {
        "itemId": str(item.item_id),
        "userId": reporter,
        "reason": "INAPPROPRIATE_CONTENT",
        "details": "Conteúdo impróprio",
    }

    created = await async_client.post("/api/v1/content-reports", json=payload)
    assert created.status_code == 201
    body = created.json()
    assert body["status"] == "PENDING"
    assert body["reporterId"] == reporter

    duplicate = await async_client.post("/api/v1/content-reports", json=payload)
    assert duplicate.status_code == 409

    unhide = await async_client.delete(
        f"/api/v1/users/{reporter}/hidden-items/{item.item_id}"
    )
    assert unhide.status_code == 409


@pytest.mark.asyncio
async def test_self_report_is_400(async_client: AsyncClient, item) -> None:
    response = await async_client.post(
        "/api/v1/content-reports",
        json={"itemId": str(item.item_id), "userId": str(item.author_id), "reason": "OTHER"},
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_report_validation(async_client: AsyncClient, item) -> None:
    base = {"itemId": str(item.item_id), "userId": str(uuid.uuid4())}

    bad_reason = await async_client.post(
        "/api/v1/content-reports", json={**base, "reason": "BORING"}
    )
    too_long = await async_client.post(
        "/api/v1/content-reports", json={**base, "reason": "OTHER", "details": "x" * 501}
    )

    assert bad_reason.status_code == 422
    assert too_long.status_code == 422
