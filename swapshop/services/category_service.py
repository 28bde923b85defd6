"""
Category service - listing and first-run seeding.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from swapshop.db.models.category import DEFAULT_CATEGORIES, Category
from swapshop.db.repositories.category_repository import CategoryRepository
from swapshop.db.session import atomic

logger = logging.getLogger(__name__)


class CategoryService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.repo = CategoryRepository(session)

    async def list_all(self) -> list[Category]:
        return await self.repo.list_all()

    async def seed_defaults(self) -> int:
        """Insert the default categories that are missing. Returns how many were added."""
        async with atomic(self.session):
            existing = {c.name for c in await self.repo.list_all()}
            missing = [(n, d) for n, d in DEFAULT_CATEGORIES if n not in existing]
            for name, description in missing:
                self.session.add(Category(name=name, description=description))
        if missing:
            logger.info("seeded %d categories", len(missing))
        return len(missing)
