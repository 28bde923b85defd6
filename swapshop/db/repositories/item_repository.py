"""
Item repository - item data access and browse filters.
Uses selectinload so owner and category never lazy-load in async code.
"""

from sqlalchemy import or_, select, update
from sqlalchemy.orm import selectinload

from swapshop.db.models.category import Category
from swapshop.db.models.item import Item, ItemStatus
from swapshop.db.repositories.base_repository import BaseRepository


class ItemRepository(BaseRepository[Item]):
    """Item-specific queries."""

    def __init__(self, session):
        super().__init__(session, Item)

    async def get_by_id_with_owner(self, id: int) -> Item | None:
        """Fetch item with owner and category in one round of eager loads."""
        result = await self.session.execute(
            select(Item)
            .where(Item.id == id)
            .options(selectinload(Item.owner), selectinload(Item.category))
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def lock_many(self, ids: list[int]) -> dict[int, Item]:
        """Row-lock several items in ascending id order (consistent lock order avoids deadlocks)."""
        locked: dict[int, Item] = {}
        for item_id in sorted(set(ids)):
            item = await self.get_for_update(item_id)
            if item is not None:
                locked[item_id] = item
        return locked

    async def search(
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
    ) -> list[Item]:
        """Browse listing with the marketplace filters, newest first."""
        stmt = select(Item).options(selectinload(Item.owner), selectinload(Item.category))
        if category:
            stmt = stmt.join(Category, Item.category_id == Category.id).where(Category.name == category)
        if search:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(Item.title.ilike(pattern), Item.description.ilike(pattern)))
        if owner_id is not None:
            stmt = stmt.where(Item.owner_id == owner_id)
        if exclude_owner_id is not None:
            stmt = stmt.where(Item.owner_id != exclude_owner_id)
        if status is not None:
            stmt = stmt.where(Item.status == status)
        if is_approved is not None:
            stmt = stmt.where(Item.is_approved.is_(is_approved))
        stmt = stmt.order_by(Item.created_at.desc(), Item.id.desc()).offset(skip).limit(limit)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def increment_views(self, id: int) -> int | None:
        """Bump the view counter; returns the new count, None for an unknown item."""
        await self.session.execute(
            update(Item)
            .where(Item.id == id)
            .values(views=Item.views + 1)
            .execution_options(synchronize_session=False)
        )
        result = await self.session.execute(select(Item.views).where(Item.id == id))
        return result.scalar_one_or_none()
