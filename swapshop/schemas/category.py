"""Category schemas."""

from pydantic import BaseModel


class CategoryResponse(BaseModel):
    id: int
    name: str
    description: str | None = None

    model_config = {"from_attributes": True}
