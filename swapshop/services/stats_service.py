"""
Stats aggregator - derived counts, no mutation path.
Platform totals are cached in Redis for a short TTL.
"""

import json
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from swapshop.cache.redis_client import cache_get, cache_set
from swapshop.config import get_settings
from swapshop.core.exceptions import UserNotFound
from swapshop.db.models.item import Item
from swapshop.db.models.swap_request import SwapRequest, SwapRequestStatus
from swapshop.db.repositories.item_repository import ItemRepository
from swapshop.db.repositories.swap_request_repository import SwapRequestRepository
from swapshop.db.repositories.user_repository import UserRepository
from swapshop.schemas.stats import PlatformStats, UserStats

logger = logging.getLogger(__name__)

PLATFORM_STATS_KEY = "stats:platform"
SUCCESSFUL_STATUSES = (SwapRequestStatus.ACCEPTED, SwapRequestStatus.COMPLETED)


class StatsService:
    def __init__(self, session: AsyncSession):
        self.settings = get_settings()
        self.user_repo = UserRepository(session)
        self.item_repo = ItemRepository(session)
        self.request_repo = SwapRequestRepository(session)

    async def user_stats(self, user_id: int) -> UserStats:
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFound(user_id)
        items_listed = await self.item_repo.count(Item.owner_id == user_id)
        successful_swaps = await self.request_repo.count(
            SwapRequest.requester_id == user_id,
            SwapRequest.status.in_(SUCCESSFUL_STATUSES),
        )
        return UserStats(
            items_listed=items_listed,
            successful_swaps=successful_swaps,
            rating=user.rating / 100,
            points_balance=user.points_balance,
        )

    async def platform_stats(self, use_cache: bool = True) -> PlatformStats:
        """Platform totals, cached for stats_cache_ttl seconds.

        Nothing invalidates the cached totals: new users, listings and
        completed swaps show up once the entry expires. use_cache=False
        always counts from the database.
        """
        if use_cache:
            cached = await cache_get(PLATFORM_STATS_KEY)
            if cached:
                return PlatformStats(**json.loads(cached))
        stats = PlatformStats(
            total_users=await self.user_repo.count(),
            items_listed=await self.item_repo.count(),
            successful_swaps=await self.request_repo.count(SwapRequest.status == SwapRequestStatus.COMPLETED),
        )
        if use_cache:
            await cache_set(PLATFORM_STATS_KEY, stats.model_dump(), self.settings.stats_cache_ttl)
        return stats
