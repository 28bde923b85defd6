"""
API v1 router - aggregates all endpoint modules.
"""

from fastapi import APIRouter

from swapshop.api.v1.endpoints import (
    admin,
    categories,
    favorites,
    health,
    items,
    search,
    stats,
    swap_requests,
    users,
)

api_router = APIRouter(prefix="/v1")

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(users.router, prefix="/users", tags=["users"])
api_router.include_router(categories.router, prefix="/categories", tags=["categories"])
api_router.include_router(items.router, prefix="/items", tags=["items"])
api_router.include_router(search.router, prefix="/search", tags=["search"])
api_router.include_router(swap_requests.router, prefix="/swap-requests", tags=["swap-requests"])
api_router.include_router(favorites.router, prefix="/favorites", tags=["favorites"])
api_router.include_router(stats.router, prefix="/stats", tags=["stats"])
api_router.include_router(admin.router, prefix="/admin", tags=["admin"])
