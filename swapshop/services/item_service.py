"""
Item service - listing, browsing and moderation of items.
Orchestrates repository, ledger (listing reward), cache and search indexing;
keeps controllers thin.
"""

import json
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from swapshop.cache.redis_client import cache_delete, cache_get, cache_set
from swapshop.config import get_settings
from swapshop.core.exceptions import CategoryNotFound, Forbidden, ItemNotFound
from swapshop.db.models.item import Item, ItemStatus
from swapshop.db.models.transaction import TransactionType
from swapshop.db.repositories.category_repository import CategoryRepository
from swapshop.db.repositories.item_repository import ItemRepository
from swapshop.db.session import atomic
from swapshop.queue.tasks import enqueue_item_index
from swapshop.schemas.category import CategoryResponse
from swapshop.schemas.item import ItemCreate, ItemWithOwnerResponse
from swapshop.schemas.user import UserPublic
from swapshop.services.item_state import ItemEvent, ItemStateMachine
from swapshop.services.ledger import LedgerService

logger = logging.getLogger(__name__)

CACHE_PREFIX = "item:"


def item_cache_key(item_id: int) -> str:
    return f"{CACHE_PREFIX}{item_id}"


def item_to_doc(item: Item) -> dict:
    """Search document for an item with its category loaded."""
    return {
        "id": item.id,
        "title": item.title,
        "description": item.description,
        "tags": item.tags or [],
        "category": item.category.name,
        "size": item.size,
        "condition": item.condition,
        "status": item.status.value,
        "is_approved": item.is_approved,
        "point_value": item.point_value,
        "owner_id": item.owner_id,
        "created_at": item.created_at.isoformat() if item.created_at else None,
    }


def item_to_response(item: Item) -> ItemWithOwnerResponse:
    """Map an item with owner and category loaded to the API response."""
    return ItemWithOwnerResponse(
        id=item.id,
        owner_id=item.owner_id,
        category_id=item.category_id,
        title=item.title,
        description=item.description,
        size=item.size,
        condition=item.condition,
        point_value=item.point_value,
        tags=item.tags or [],
        images=item.images or [],
        status=item.status,
        is_approved=item.is_approved,
        views=item.views,
        created_at=item.created_at,
        owner=UserPublic.model_validate(item.owner),
        category=CategoryResponse.model_validate(item.category),
    )


class ItemService:
    """Handles item use cases. Status changes are delegated to the state machine."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.settings = get_settings()
        self.item_repo = ItemRepository(session)
        self.category_repo = CategoryRepository(session)
        self.ledger = LedgerService(session)
        self.state = ItemStateMachine(session)

    async def create(self, owner_id: int, data: ItemCreate) -> ItemWithOwnerResponse:
        """List an item and pay the owner the listing reward in the same unit of work."""
        async with atomic(self.session):
            if await self.category_repo.get_by_id(data.category_id) is None:
                raise CategoryNotFound(data.category_id)
            item = await self.item_repo.add(
                Item(
                    owner_id=owner_id,
                    category_id=data.category_id,
                    title=data.title,
                    description=data.description,
                    size=data.size,
                    condition=data.condition,
                    point_value=data.point_value,
                    tags=data.tags,
                    images=data.images,
                    status=ItemStatus.ACTIVE,
                    is_approved=not self.settings.items_require_approval,
                )
            )
            if self.settings.listing_reward_points > 0:
                await self.ledger.apply(
                    owner_id,
                    self.settings.listing_reward_points,
                    TransactionType.EARNED,
                    "Item listed",
                    item_id=item.id,
                )
        logger.info("item %s listed by user %s", item.id, owner_id)
        await self.publish_changes([item.id])
        return item_to_response(await self.item_repo.get_by_id_with_owner(item.id))

    async def get_by_id(self, id: int, count_view: bool = True) -> ItemWithOwnerResponse:
        """Item detail. Bumps the view counter; the body comes from cache when warm.

        The cached body keeps the view count it was stored with, so a cache hit
        takes the live count from the increment.
        """
        views = None
        if count_view:
            async with atomic(self.session):
                views = await self.item_repo.increment_views(id)
        cached = await cache_get(item_cache_key(id))
        if cached:
            resp = ItemWithOwnerResponse(**json.loads(cached))
            if views is not None:
                resp = resp.model_copy(update={"views": views})
            return resp
        item = await self.item_repo.get_by_id_with_owner(id)
        if item is None:
            raise ItemNotFound(id)
        resp = item_to_response(item)
        await cache_set(item_cache_key(id), resp.model_dump(mode="json"), self.settings.item_cache_ttl)
        return resp

    async def list_items(
        self,
        *,
        category: str | None = None,
        search: str | None = None,
        owner_id: int | None = None,
        exclude_owner_id: int | None = None,
        status: ItemStatus | None = ItemStatus.ACTIVE,
        is_approved: bool | None = None,
        skip: int = 0,
        limit: int = 20,
    ) -> list[ItemWithOwnerResponse]:
        items = await self.item_repo.search(
            category=category,
            search=search,
            owner_id=owner_id,
            exclude_owner_id=exclude_owner_id,
            status=status,
            is_approved=is_approved,
            skip=skip,
            limit=limit,
        )
        return [item_to_response(i) for i in items]

    async def withdraw(self, item_id: int, acting_user_id: int) -> None:
        """Owner takes a listing down (soft delete)."""
        async with atomic(self.session):
            item = await self.item_repo.get_by_id(item_id)
            if item is None:
                raise ItemNotFound(item_id)
            if item.owner_id != acting_user_id:
                raise Forbidden("Only the owner can withdraw this item", {"item_id": item_id})
            await self.state.apply(item_id, ItemEvent.REMOVED)
        logger.info("item %s withdrawn by owner %s", item_id, acting_user_id)
        await self.publish_changes([item_id])

    async def remove(self, item_id: int, admin_id: int) -> None:
        """Moderation removal."""
        async with atomic(self.session):
            await self.state.apply(item_id, ItemEvent.REMOVED)
        logger.info("item %s removed by admin %s", item_id, admin_id)
        await self.publish_changes([item_id])

    async def set_approval(self, item_id: int, is_approved: bool) -> ItemWithOwnerResponse:
        async with atomic(self.session):
            item = await self.item_repo.get_for_update(item_id)
            if item is None:
                raise ItemNotFound(item_id)
            item.is_approved = is_approved
        await self.publish_changes([item_id])
        return item_to_response(await self.item_repo.get_by_id_with_owner(item_id))

    async def publish_changes(self, item_ids: list[int]) -> None:
        """After commit: drop cached details and re-index the items for search."""
        await cache_delete(*(item_cache_key(i) for i in item_ids))
        if not self.settings.search_indexing_enabled:
            return
        for item_id in item_ids:
            item = await self.item_repo.get_by_id_with_owner(item_id)
            if item is not None:
                enqueue_item_index(item_to_doc(item))
