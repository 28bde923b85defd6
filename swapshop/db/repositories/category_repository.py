"""
Category repository.
"""

from sqlalchemy import select

from swapshop.db.models.category import Category
from swapshop.db.repositories.base_repository import BaseRepository


class CategoryRepository(BaseRepository[Category]):
    def __init__(self, session):
        super().__init__(session, Category)

    async def list_all(self) -> list[Category]:
        result = await self.session.execute(select(Category).order_by(Category.name))
        return list(result.scalars().all())
