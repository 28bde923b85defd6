"""
Favorite service - bookmarks on items.
"""

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from swapshop.core.exceptions import ItemNotFound
from swapshop.db.models.favorite import Favorite
from swapshop.db.repositories.favorite_repository import FavoriteRepository
from swapshop.db.repositories.item_repository import ItemRepository
from swapshop.db.session import atomic
from swapshop.schemas.item import ItemWithOwnerResponse
from swapshop.services.item_service import item_to_response


class FavoriteService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = FavoriteRepository(session)
        self.item_repo = ItemRepository(session)

    async def add(self, user_id: int, item_id: int) -> bool:
        """Favorite an item. Returns False if it was already a favorite."""
        try:
            async with atomic(self.session):
                if await self.item_repo.get_by_id(item_id) is None:
                    raise ItemNotFound(item_id)
                if await self.repo.get_pair(user_id, item_id) is not None:
                    return False
                await self.repo.add(Favorite(user_id=user_id, item_id=item_id))
        except IntegrityError:
            # A concurrent add inserted the same pair first
            return False
        return True

    async def remove(self, user_id: int, item_id: int) -> bool:
        async with atomic(self.session):
            removed = await self.repo.remove_pair(user_id, item_id)
        return removed > 0

    async def is_favorite(self, user_id: int, item_id: int) -> bool:
        return await self.repo.get_pair(user_id, item_id) is not None

    async def list_items(self, user_id: int) -> list[ItemWithOwnerResponse]:
        """Favorited items still listed as active."""
        return [item_to_response(i) for i in await self.repo.list_active_items(user_id)]
