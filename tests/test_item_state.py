"""
Item availability state machine tests.
"""

import pytest

from swapshop.core.exceptions import ItemNotFound, ItemUnavailable
from swapshop.db.models import Item, ItemStatus
from swapshop.services.item_state import TERMINAL_STATUSES, ItemEvent, ItemStateMachine, next_status


@pytest.mark.parametrize(
    "current,event,expected",
    [
        (ItemStatus.ACTIVE, ItemEvent.REDEMPTION_STARTED, ItemStatus.PROCESSING),
        (ItemStatus.PROCESSING, ItemEvent.REDEMPTION_CANCELLED, ItemStatus.ACTIVE),
        (ItemStatus.PROCESSING, ItemEvent.REDEMPTION_COMPLETED, ItemStatus.SWAPPED),
        (ItemStatus.ACTIVE, ItemEvent.SWAP_ACCEPTED, ItemStatus.SWAPPED),
        (ItemStatus.ACTIVE, ItemEvent.REMOVED, ItemStatus.REMOVED),
        (ItemStatus.PROCESSING, ItemEvent.SWAP_ACCEPTED, None),
        (ItemStatus.ACTIVE, ItemEvent.REDEMPTION_COMPLETED, None),
    ],
)
def test_transition_table(current, event, expected):
    assert next_status(current, event) == expected


@pytest.mark.parametrize("status", sorted(TERMINAL_STATUSES, key=lambda s: s.value))
def test_terminal_statuses_have_no_exits(status):
    assert all(next_status(status, event) is None for event in ItemEvent)


@pytest.mark.asyncio
async def test_apply_moves_item(session, make_user, make_item):
    owner = await make_user("owner")
    item = await make_item(owner)

    moved = await ItemStateMachine(session).apply(item.id, ItemEvent.REDEMPTION_STARTED)

    assert moved.status == ItemStatus.PROCESSING


@pytest.mark.asyncio
async def test_apply_rejects_unlisted_transition(session, make_user, make_item):
    owner = await make_user("owner")
    item = await make_item(owner, status=ItemStatus.SWAPPED)

    with pytest.raises(ItemUnavailable) as exc:
        await ItemStateMachine(session).apply(item.id, ItemEvent.SWAP_ACCEPTED)
    assert exc.value.details == {"item_id": item.id, "status": "swapped"}


@pytest.mark.asyncio
async def test_apply_unknown_item(session):
    with pytest.raises(ItemNotFound):
        await ItemStateMachine(session).apply(12345, ItemEvent.REMOVED)


@pytest.mark.asyncio
async def test_apply_many_is_all_or_none(session, make_user, make_item):
    owner = await make_user("owner")
    free = await make_item(owner, title="Free")
    busy = await make_item(owner, title="Busy", status=ItemStatus.PROCESSING)
    free_id = free.id

    with pytest.raises(ItemUnavailable):
        await ItemStateMachine(session).apply_many([free_id, busy.id], ItemEvent.SWAP_ACCEPTED)

    refreshed = await session.get(Item, free_id)
    assert refreshed.status == ItemStatus.ACTIVE


@pytest.mark.asyncio
async def test_apply_if_skips_disallowed_event(session, make_user, make_item):
    owner = await make_user("owner")
    item = await make_item(owner, status=ItemStatus.REMOVED)

    assert await ItemStateMachine(session).apply_if(item.id, ItemEvent.REDEMPTION_CANCELLED) is None
    refreshed = await session.get(Item, item.id)
    assert refreshed.status == ItemStatus.REMOVED
