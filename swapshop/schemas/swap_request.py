"""
Swap request schemas.

The offer is decided once, here at the boundary: SwapRequestCreate.to_offer()
turns the two optional wire fields into exactly one SwapOffer variant.
"""

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from swapshop.core.exceptions import InvalidOfferSelection
from swapshop.db.models.swap_request import SwapRequestStatus
from swapshop.schemas.item import ItemResponse, ItemWithOwnerResponse
from swapshop.schemas.user import UserPublic


class ItemOffer(BaseModel):
    kind: Literal["item"] = "item"
    item_id: int

    model_config = {"frozen": True}


class PointsOffer(BaseModel):
    kind: Literal["points"] = "points"
    amount: int = Field(..., gt=0)

    model_config = {"frozen": True}


SwapOffer = Annotated[Union[ItemOffer, PointsOffer], Field(discriminator="kind")]


class SwapRequestCreate(BaseModel):
    item_id: int
    offered_item_id: int | None = None
    points_offered: int | None = None
    message: str | None = Field(default=None, max_length=1000)

    def to_offer(self) -> ItemOffer | PointsOffer:
        has_item = self.offered_item_id is not None
        has_points = self.points_offered is not None
        if has_item and has_points:
            raise InvalidOfferSelection("Offer either an item or points, not both")
        if not has_item and not has_points:
            raise InvalidOfferSelection("Offer an item or points")
        if has_item:
            return ItemOffer(item_id=self.offered_item_id)
        if self.points_offered <= 0:
            raise InvalidOfferSelection(
                "Points offered must be a positive integer", {"points_offered": self.points_offered}
            )
        return PointsOffer(amount=self.points_offered)


class SwapStatusUpdate(BaseModel):
    status: SwapRequestStatus


class SwapRequestResponse(BaseModel):
    id: int
    requester_id: int
    receiver_id: int
    item_id: int
    offered_item_id: int | None = None
    points_offered: int | None = None
    message: str | None = None
    status: SwapRequestStatus
    created_at: datetime
    completed_at: datetime | None = None

    model_config = {"from_attributes": True}


class SwapRequestView(SwapRequestResponse):
    """Request joined with its items and parties for the request lists."""

    item: ItemWithOwnerResponse
    item_owner: UserPublic
    requester: UserPublic
    offered_item: ItemResponse | None = None


class SwapRequestListResponse(BaseModel):
    incoming: list[SwapRequestView]
    outgoing: list[SwapRequestView]
