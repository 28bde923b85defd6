"""
Swap request views - joins requests, items and users for the incoming and
outgoing request lists. Read-only.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from swapshop.db.models.swap_request import SwapRequest, SwapRequestStatus
from swapshop.db.repositories.swap_request_repository import SwapRequestRepository
from swapshop.schemas.item import ItemResponse
from swapshop.schemas.swap_request import SwapRequestListResponse, SwapRequestView
from swapshop.schemas.user import UserPublic
from swapshop.services.item_service import item_to_response


def request_to_view(request: SwapRequest) -> SwapRequestView:
    """Map an eager-loaded request to its list view."""
    return SwapRequestView(
        id=request.id,
        requester_id=request.requester_id,
        receiver_id=request.receiver_id,
        item_id=request.item_id,
        offered_item_id=request.offered_item_id,
        points_offered=request.points_offered,
        message=request.message,
        status=request.status,
        created_at=request.created_at,
        completed_at=request.completed_at,
        item=item_to_response(request.item),
        item_owner=UserPublic.model_validate(request.item.owner),
        requester=UserPublic.model_validate(request.requester),
        offered_item=ItemResponse.model_validate(request.offered_item) if request.offered_item else None,
    )


class SwapQueryService:
    def __init__(self, session: AsyncSession):
        self.repo = SwapRequestRepository(session)

    async def outgoing(
        self, user_id: int, status: SwapRequestStatus | None = None, item_id: int | None = None
    ) -> list[SwapRequestView]:
        """Requests the user made."""
        requests = await self.repo.list_enriched(requester_id=user_id, status=status, item_id=item_id)
        return [request_to_view(r) for r in requests]

    async def incoming(
        self, user_id: int, status: SwapRequestStatus | None = None, item_id: int | None = None
    ) -> list[SwapRequestView]:
        """Requests for items the user owns."""
        requests = await self.repo.list_enriched(receiver_id=user_id, status=status, item_id=item_id)
        return [request_to_view(r) for r in requests]

    async def for_user(
        self, user_id: int, status: SwapRequestStatus | None = None, item_id: int | None = None
    ) -> SwapRequestListResponse:
        return SwapRequestListResponse(
            incoming=await self.incoming(user_id, status=status, item_id=item_id),
            outgoing=await self.outgoing(user_id, status=status, item_id=item_id),
        )

    async def get_view(self, request_id: int) -> SwapRequestView | None:
        request = await self.repo.get_enriched(request_id)
        return request_to_view(request) if request else None
