"""
Platform statistics (public).
"""

from fastapi import APIRouter

from swapshop.db.session import DbSession
from swapshop.schemas.stats import PlatformStats
from swapshop.services.stats_service import StatsService

router = APIRouter()


@router.get("/platform", response_model=PlatformStats)
async def platform_stats(session: DbSession):
    return await StatsService(session).platform_stats()
