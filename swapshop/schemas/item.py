"""Item request/response schemas - REST API contract."""

from datetime import datetime

from pydantic import BaseModel, Field

from swapshop.db.models.item import ItemStatus
from swapshop.schemas.category import CategoryResponse
from swapshop.schemas.user import UserPublic


class ItemBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    size: str = Field(..., min_length=1, max_length=32)
    condition: str = Field(..., min_length=1, max_length=64)
    point_value: int = Field(..., gt=0)
    tags: list[str] = Field(default_factory=list)
    images: list[str] = Field(..., min_length=1)


class ItemCreate(ItemBase):
    category_id: int


class ItemResponse(ItemBase):
    id: int
    owner_id: int
    category_id: int
    status: ItemStatus
    is_approved: bool
    views: int
    created_at: datetime

    model_config = {"from_attributes": True}


class ItemWithOwnerResponse(ItemResponse):
    owner: UserPublic | None = None  # Populated by service layer
    category: CategoryResponse | None = None


class ItemApprovalUpdate(BaseModel):
    is_approved: bool
