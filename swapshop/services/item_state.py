"""
Item availability state machine.

Item.status is only ever written here. Each transition locks the item row,
checks the (status, event) pair against TRANSITIONS and applies the target
status; anything not in the table means the item is not available for that event.
"""

import enum
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from swapshop.core.exceptions import ItemNotFound, ItemUnavailable
from swapshop.db.models.item import Item, ItemStatus
from swapshop.db.repositories.item_repository import ItemRepository

logger = logging.getLogger(__name__)


class ItemEvent(str, enum.Enum):
    REDEMPTION_STARTED = "redemption_started"
    REDEMPTION_CANCELLED = "redemption_cancelled"
    REDEMPTION_COMPLETED = "redemption_completed"
    SWAP_ACCEPTED = "swap_accepted"
    REMOVED = "removed"


TRANSITIONS: dict[tuple[ItemStatus, ItemEvent], ItemStatus] = {
    (ItemStatus.ACTIVE, ItemEvent.REDEMPTION_STARTED): ItemStatus.PROCESSING,
    (ItemStatus.PROCESSING, ItemEvent.REDEMPTION_CANCELLED): ItemStatus.ACTIVE,
    (ItemStatus.PROCESSING, ItemEvent.REDEMPTION_COMPLETED): ItemStatus.SWAPPED,
    (ItemStatus.ACTIVE, ItemEvent.SWAP_ACCEPTED): ItemStatus.SWAPPED,
    (ItemStatus.ACTIVE, ItemEvent.REMOVED): ItemStatus.REMOVED,
    (ItemStatus.PROCESSING, ItemEvent.REMOVED): ItemStatus.REMOVED,
}

TERMINAL_STATUSES = frozenset({ItemStatus.SWAPPED, ItemStatus.REMOVED})


def next_status(current: ItemStatus, event: ItemEvent) -> ItemStatus | None:
    return TRANSITIONS.get((current, event))


def can_apply(item: Item, event: ItemEvent) -> bool:
    return next_status(item.status, event) is not None


class ItemStateMachine:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.item_repo = ItemRepository(session)

    def _advance(self, item: Item, event: ItemEvent) -> Item:
        target = next_status(item.status, event)
        if target is None:
            raise ItemUnavailable(
                item.id,
                item.status.value,
                f"Item {item.id} cannot go through '{event.value}' while {item.status.value}",
            )
        logger.debug("item %s: %s --%s--> %s", item.id, item.status.value, event.value, target.value)
        item.status = target
        return item

    async def apply(self, item_id: int, event: ItemEvent) -> Item:
        """Lock one item and move it through event."""
        item = await self.item_repo.get_for_update(item_id)
        if item is None:
            raise ItemNotFound(item_id)
        self._advance(item, event)
        await self.session.flush()
        return item

    async def apply_many(self, item_ids: list[int], event: ItemEvent) -> list[Item]:
        """Lock several items (ascending id order) and move all of them, or none."""
        locked = await self.item_repo.lock_many(item_ids)
        for item_id in item_ids:
            if item_id not in locked:
                raise ItemNotFound(item_id)
        # Check every item before touching any of them
        for item in locked.values():
            if not can_apply(item, event):
                raise ItemUnavailable(item.id, item.status.value)
        items = [self._advance(locked[item_id], event) for item_id in item_ids]
        await self.session.flush()
        return items

    async def apply_if(self, item_id: int, event: ItemEvent) -> Item | None:
        """Apply event only when the current status allows it; returns None otherwise.

        Used by compensation paths where the item may have moved on already
        (e.g. moderation removed it while a redemption was pending).
        """
        item = await self.item_repo.get_for_update(item_id)
        if item is None:
            raise ItemNotFound(item_id)
        if not can_apply(item, event):
            logger.info("item %s: skipping '%s' while %s", item_id, event.value, item.status.value)
            return None
        self._advance(item, event)
        await self.session.flush()
        return item
