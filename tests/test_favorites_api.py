"""
Favorite API tests.
"""

import pytest
from httpx import AsyncClient

from swapshop.db.models import ItemStatus
from swapshop.db.repositories.favorite_repository import FavoriteRepository
from swapshop.services.favorite_service import FavoriteService


@pytest.mark.asyncio
async def test_favorite_lifecycle(client: AsyncClient, auth_headers: dict, make_user, make_item):
    owner = await make_user("owner")
    item = await make_item(owner)
    url = f"/api/v1/favorites/{item.id}"

    first = await client.post(url, headers=auth_headers)
    second = await client.post(url, headers=auth_headers)
    assert first.json()["created"] is True
    assert second.json()["created"] is False
    assert (await client.get(f"{url}/check", headers=auth_headers)).json()["is_favorite"] is True

    favorites = (await client.get("/api/v1/users/me/favorites", headers=auth_headers)).json()
    assert [f["id"] for f in favorites] == [item.id]

    assert (await client.delete(url, headers=auth_headers)).status_code == 204
    assert (await client.get(f"{url}/check", headers=auth_headers)).json()["is_favorite"] is False


@pytest.mark.asyncio
async def test_favorites_list_only_active_items(client: AsyncClient, auth_headers: dict, make_user, make_item):
    owner = await make_user("owner")
    listed = await make_item(owner, title="Listed")
    gone = await make_item(owner, title="Gone", status=ItemStatus.SWAPPED)
    for item in (listed, gone):
        await client.post(f"/api/v1/favorites/{item.id}", headers=auth_headers)

    favorites = (await client.get("/api/v1/users/me/favorites", headers=auth_headers)).json()

    assert [f["title"] for f in favorites] == ["Listed"]


@pytest.mark.asyncio
async def test_favorite_missing_item(client: AsyncClient, auth_headers: dict):
    response = await client.post("/api/v1/favorites/999", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_concurrent_duplicate_favorite_is_not_an_error(session, monkeypatch, make_user, make_item):
    user = await make_user("fan")
    owner = await make_user("owner")
    item = await make_item(owner)
    user_id, item_id = user.id, item.id
    service = FavoriteService(session)
    assert await service.add(user_id, item_id) is True

    # The other add read "no favorite yet" before this one committed
    async def not_found(self, user_id, item_id):
        return None

    monkeypatch.setattr(FavoriteRepository, "get_pair", not_found)

    assert await service.add(user_id, item_id) is False
    monkeypatch.undo()
    assert await service.is_favorite(user_id, item_id) is True
