"""
Category endpoints.
"""

from fastapi import APIRouter

from swapshop.db.session import DbSession
from swapshop.schemas.category import CategoryResponse
from swapshop.services.category_service import CategoryService

router = APIRouter()


@router.get("", response_model=list[CategoryResponse])
async def list_categories(session: DbSession):
    categories = await CategoryService(session).list_all()
    return [CategoryResponse.model_validate(c) for c in categories]
