"""
Item endpoints - browse, detail, listing and withdrawal.
Thin controllers; ItemService holds the business logic.
"""

from fastapi import APIRouter, Query, status

from swapshop.config import get_settings
from swapshop.core.dependencies import CurrentUserId, OptionalUserId
from swapshop.db.models.item import ItemStatus
from swapshop.db.session import DbSession
from swapshop.schemas.item import ItemCreate, ItemWithOwnerResponse
from swapshop.services.item_service import ItemService

router = APIRouter()
settings = get_settings()


@router.get("", response_model=list[ItemWithOwnerResponse])
async def list_items(
    session: DbSession,
    viewer_id: OptionalUserId,
    category: str | None = Query(None, description="Category name"),
    search: str | None = Query(None, min_length=1),
    owner_id: int | None = None,
    item_status: ItemStatus | None = Query(ItemStatus.ACTIVE, alias="status"),
    exclude_own: bool = Query(False, description="Hide the caller's own listings"),
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
):
    """Browse listings, newest first. Unapproved items are only shown to their owner."""
    own_listing = owner_id is not None and owner_id == viewer_id
    return await ItemService(session).list_items(
        category=category,
        search=search,
        owner_id=owner_id,
        exclude_owner_id=viewer_id if exclude_own else None,
        status=item_status,
        is_approved=None if own_listing else True,
        skip=skip,
        limit=limit,
    )


@router.get("/{item_id}", response_model=ItemWithOwnerResponse)
async def get_item(session: DbSession, item_id: int):
    """Item detail; counts a view. Served from Redis when cached."""
    return await ItemService(session).get_by_id(item_id)


@router.post("", response_model=ItemWithOwnerResponse, status_code=status.HTTP_201_CREATED)
async def create_item(session: DbSession, data: ItemCreate, user_id: CurrentUserId):
    """List an item. The owner earns the listing reward."""
    return await ItemService(session).create(user_id, data)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def withdraw_item(session: DbSession, item_id: int, user_id: CurrentUserId):
    """Owner withdraws the listing (status becomes removed)."""
    await ItemService(session).withdraw(item_id, user_id)
