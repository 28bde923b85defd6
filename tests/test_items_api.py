"""
Item API tests - listing, browse filters, detail and withdrawal.
"""

import pytest
from httpx import AsyncClient


def item_payload(category_id: int, **overrides) -> dict:
    payload = {
        "title": "Denim jacket",
        "description": "Classic blue, barely worn",
        "category_id": category_id,
        "size": "M",
        "condition": "like new",
        "point_value": 60,
        "tags": ["denim", "casual"],
        "images": ["https://img.example.com/jacket.jpg"],
    }
    payload.update(overrides)
    return payload


@pytest.mark.asyncio
async def test_list_items_empty(client: AsyncClient):
    response = await client.get("/api/v1/items")
    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.asyncio
async def test_create_item_requires_auth(client: AsyncClient, category):
    response = await client.post("/api/v1/items", json=item_payload(category.id))
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_item_pays_listing_reward(client: AsyncClient, auth_headers: dict, test_user, category):
    response = await client.post("/api/v1/items", headers=auth_headers, json=item_payload(category.id))
    assert response.status_code == 201
    data = response.json()
    assert data["title"] == "Denim jacket"
    assert data["status"] == "active"
    assert data["is_approved"] is True
    assert data["owner"]["id"] == test_user.id
    assert data["category"]["name"] == category.name

    me = (await client.get("/api/v1/users/me", headers=auth_headers)).json()
    assert me["points_balance"] == 150
    history = (await client.get("/api/v1/users/me/transactions", headers=auth_headers)).json()
    assert history[0]["type"] == "earned"
    assert history[0]["points"] == 50
    assert history[0]["item_id"] == data["id"]
    assert history[0]["balance_after"] == 150


@pytest.mark.asyncio
async def test_create_item_unknown_category(client: AsyncClient, auth_headers: dict, category):
    response = await client.post("/api/v1/items", headers=auth_headers, json=item_payload(999))
    assert response.status_code == 404
    body = response.json()
    assert body["success"] is False
    assert body["error"]["code"] == "CATEGORY_NOT_FOUND"

    me = (await client.get("/api/v1/users/me", headers=auth_headers)).json()
    assert me["points_balance"] == 100


@pytest.mark.asyncio
@pytest.mark.parametrize("overrides", [{"point_value": 0}, {"images": []}, {"title": ""}])
async def test_create_item_validation(client: AsyncClient, auth_headers: dict, category, overrides):
    response = await client.post("/api/v1/items", headers=auth_headers, json=item_payload(category.id, **overrides))
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_get_item_counts_views(client: AsyncClient, auth_headers: dict, category):
    created = (await client.post("/api/v1/items", headers=auth_headers, json=item_payload(category.id))).json()

    first = await client.get(f"/api/v1/items/{created['id']}")
    second = await client.get(f"/api/v1/items/{created['id']}")

    assert first.status_code == 200
    assert first.json()["views"] == 1
    assert second.json()["views"] == 2


@pytest.mark.asyncio
async def test_get_missing_item(client: AsyncClient):
    response = await client.get("/api/v1/items/424242")
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "ITEM_NOT_FOUND"


@pytest.mark.asyncio
async def test_browse_filters(client: AsyncClient, make_user, make_item, headers_for):
    alice = await make_user("alice")
    bob = await make_user("bob")
    await make_item(alice, title="Wool sweater")
    await make_item(bob, title="Leather boots")
    await make_item(bob, title="Old sweater", is_approved=False)

    found = (await client.get("/api/v1/items", params={"search": "SWEATER"})).json()
    assert [i["title"] for i in found] == ["Wool sweater"]

    by_bob = (await client.get("/api/v1/items", params={"owner_id": bob.id})).json()
    assert [i["title"] for i in by_bob] == ["Leather boots"]

    # Owners also see their listings awaiting approval
    own = (await client.get("/api/v1/items", params={"owner_id": bob.id}, headers=headers_for(bob))).json()
    assert sorted(i["title"] for i in own) == ["Leather boots", "Old sweater"]

    others = (await client.get("/api/v1/items", params={"exclude_own": True}, headers=headers_for(alice))).json()
    assert [i["title"] for i in others] == ["Leather boots"]

    none = (await client.get("/api/v1/items", params={"category": "Shoes"})).json()
    assert none == []


@pytest.mark.asyncio
async def test_withdraw_item(client: AsyncClient, make_user, make_item, headers_for):
    owner = await make_user("owner")
    stranger = await make_user("stranger")
    item = await make_item(owner)

    denied = await client.delete(f"/api/v1/items/{item.id}", headers=headers_for(stranger))
    assert denied.status_code == 403

    response = await client.delete(f"/api/v1/items/{item.id}", headers=headers_for(owner))
    assert response.status_code == 204
    assert (await client.get("/api/v1/items")).json() == []
    detail = (await client.get(f"/api/v1/items/{item.id}")).json()
    assert detail["status"] == "removed"

    again = await client.delete(f"/api/v1/items/{item.id}", headers=headers_for(owner))
    assert again.status_code == 409
    assert again.json()["error"]["code"] == "ITEM_UNAVAILABLE"


@pytest.mark.asyncio
async def test_list_categories(client: AsyncClient, category):
    response = await client.get("/api/v1/categories")
    assert response.status_code == 200
    names = [c["name"] for c in response.json()]
    assert len(names) == 6
    assert "Outerwear" in names


@pytest.mark.asyncio
async def test_search_without_elasticsearch_returns_empty(client: AsyncClient, monkeypatch):
    async def unavailable(*args, **kwargs):
        return []

    monkeypatch.setattr("swapshop.api.v1.endpoints.search.search_items", unavailable)
    response = await client.get("/api/v1/search/items", params={"q": "jacket"})
    assert response.status_code == 200
    assert response.json() == {"query": "jacket", "results": [], "count": 0}
