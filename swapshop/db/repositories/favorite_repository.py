"""
Favorite repository.
"""

from sqlalchemy import delete, select
from sqlalchemy.orm import selectinload

from swapshop.db.models.favorite import Favorite
from swapshop.db.models.item import Item, ItemStatus
from swapshop.db.repositories.base_repository import BaseRepository


class FavoriteRepository(BaseRepository[Favorite]):
    def __init__(self, session):
        super().__init__(session, Favorite)

    async def get_pair(self, user_id: int, item_id: int) -> Favorite | None:
        result = await self.session.execute(
            select(Favorite).where(Favorite.user_id == user_id, Favorite.item_id == item_id)
        )
        return result.scalar_one_or_none()

    async def remove_pair(self, user_id: int, item_id: int) -> int:
        result = await self.session.execute(
            delete(Favorite).where(Favorite.user_id == user_id, Favorite.item_id == item_id)
        )
        return result.rowcount or 0

    async def list_active_items(self, user_id: int) -> list[Item]:
        """Favorited items that are still listed, most recently favorited first."""
        result = await self.session.execute(
            select(Item)
            .join(Favorite, Favorite.item_id == Item.id)
            .where(Favorite.user_id == user_id, Item.status == ItemStatus.ACTIVE)
            .options(selectinload(Item.owner), selectinload(Item.category))
            .order_by(Favorite.created_at.desc(), Favorite.id.desc())
        )
        return list(result.scalars().all())
