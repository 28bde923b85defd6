"""
Admin moderation, ledger audit and statistics tests.
"""

import pytest
from httpx import AsyncClient

from swapshop.config import get_settings
from swapshop.db.models import Item, ItemStatus, SwapRequestStatus
from swapshop.schemas.swap_request import ItemOffer
from swapshop.services.stats_service import StatsService
from swapshop.services.swap_service import SwapService


@pytest.mark.asyncio
async def test_admin_routes_require_admin(client: AsyncClient, auth_headers: dict, test_user):
    response = await client.get(f"/api/v1/admin/users/{test_user.id}/ledger-audit", headers=auth_headers)
    assert response.status_code == 403
    assert response.json()["error"]["code"] == "FORBIDDEN"


@pytest.mark.asyncio
async def test_ledger_audit(client: AsyncClient, make_user, headers_for, test_user):
    admin = await make_user("admin", is_admin=True)

    response = await client.get(f"/api/v1/admin/users/{test_user.id}/ledger-audit", headers=headers_for(admin))

    assert response.status_code == 200
    assert response.json() == {
        "user_id": test_user.id,
        "balance": 100,
        "ledger_total": 100,
        "entries": 1,
        "consistent": True,
    }


@pytest.mark.asyncio
async def test_moderation_queue_and_approval(client: AsyncClient, make_user, make_item, headers_for):
    admin = await make_user("admin", is_admin=True)
    seller = await make_user("seller")
    pending = await make_item(seller, title="Awaiting review", is_approved=False)
    await make_item(seller, title="Already live")

    queue = (await client.get("/api/v1/admin/items", headers=headers_for(admin))).json()
    assert [i["title"] for i in queue] == ["Awaiting review"]

    approved = await client.patch(
        f"/api/v1/admin/items/{pending.id}/approve", headers=headers_for(admin), json={"is_approved": True}
    )
    assert approved.status_code == 200
    assert approved.json()["is_approved"] is True
    assert len((await client.get("/api/v1/items")).json()) == 2

    removed = await client.delete(f"/api/v1/admin/items/{pending.id}", headers=headers_for(admin))
    assert removed.status_code == 204
    detail = (await client.get(f"/api/v1/items/{pending.id}")).json()
    assert detail["status"] == "removed"


@pytest.mark.asyncio
async def test_items_require_approval_setting(client: AsyncClient, auth_headers: dict, category, monkeypatch):
    monkeypatch.setattr(get_settings(), "items_require_approval", True)
    payload = {
        "title": "Trench coat",
        "description": "Beige, belted",
        "category_id": category.id,
        "size": "L",
        "condition": "good",
        "point_value": 80,
        "images": ["https://img.example.com/trench.jpg"],
    }

    created = (await client.post("/api/v1/items", headers=auth_headers, json=payload)).json()

    assert created["is_approved"] is False
    assert (await client.get("/api/v1/items")).json() == []


@pytest.mark.asyncio
async def test_user_and_platform_stats(session, make_user, make_item):
    x = await make_user("xavier", points=100)
    y = await make_user("yolanda")
    coat = await make_item(y, point_value=60)
    shirt = await make_item(x, point_value=40)
    x_id, y_id = x.id, y.id
    service = SwapService(session)
    request = await service.create(x_id, coat.id, ItemOffer(item_id=shirt.id))
    await service.update_status(request.id, y_id, SwapRequestStatus.ACCEPTED)

    stats = StatsService(session)
    mine = await stats.user_stats(x_id)
    assert mine.items_listed == 1
    assert mine.successful_swaps == 1
    assert mine.points_balance == 125
    assert mine.rating == 0

    # The receiver did not initiate, so it is not counted as their swap
    assert (await stats.user_stats(y_id)).successful_swaps == 0

    platform = await stats.platform_stats()
    assert platform.total_users == 2
    assert platform.items_listed == 2
    assert platform.successful_swaps == 0

    await service.complete(request.id, y_id)
    assert (await stats.platform_stats(use_cache=False)).successful_swaps == 1
    assert (await session.get(Item, coat.id, populate_existing=True)).status == ItemStatus.SWAPPED
