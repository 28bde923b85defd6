"""
Favorite endpoints.
"""

from fastapi import APIRouter, status

from swapshop.core.dependencies import CurrentUserId
from swapshop.db.session import DbSession
from swapshop.services.favorite_service import FavoriteService

router = APIRouter()


@router.post("/{item_id}", status_code=status.HTTP_201_CREATED)
async def add_favorite(session: DbSession, item_id: int, user_id: CurrentUserId):
    created = await FavoriteService(session).add(user_id, item_id)
    return {"item_id": item_id, "is_favorite": True, "created": created}


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_favorite(session: DbSession, item_id: int, user_id: CurrentUserId):
    await FavoriteService(session).remove(user_id, item_id)


@router.get("/{item_id}/check")
async def check_favorite(session: DbSession, item_id: int, user_id: CurrentUserId):
    return {"item_id": item_id, "is_favorite": await FavoriteService(session).is_favorite(user_id, item_id)}
