"""
Swap request endpoints - propose, redeem, decide, complete and cancel.
"""

from fastapi import APIRouter, Query, status

from swapshop.core.dependencies import CurrentUserId
from swapshop.core.exceptions import Forbidden, SwapRequestNotFound
from swapshop.db.models.swap_request import SwapRequestStatus
from swapshop.db.session import DbSession
from swapshop.schemas.swap_request import (
    SwapRequestCreate,
    SwapRequestListResponse,
    SwapRequestResponse,
    SwapRequestView,
    SwapStatusUpdate,
)
from swapshop.services.swap_query_service import SwapQueryService
from swapshop.services.swap_service import SwapService

router = APIRouter()


@router.post("", response_model=SwapRequestResponse, status_code=status.HTTP_201_CREATED)
async def create_swap_request(session: DbSession, data: SwapRequestCreate, user_id: CurrentUserId):
    """Offer one of your items, or pay the item's points price (settled immediately)."""
    request = await SwapService(session).create(user_id, data.item_id, data.to_offer(), data.message)
    return SwapRequestResponse.model_validate(request)


@router.get("", response_model=SwapRequestListResponse)
async def list_swap_requests(
    session: DbSession,
    user_id: CurrentUserId,
    request_status: SwapRequestStatus | None = Query(None, alias="status"),
    item_id: int | None = None,
):
    """Incoming (for my items) and outgoing (made by me) requests."""
    return await SwapQueryService(session).for_user(user_id, status=request_status, item_id=item_id)


@router.get("/{request_id}", response_model=SwapRequestView)
async def get_swap_request(session: DbSession, request_id: int, user_id: CurrentUserId):
    view = await SwapQueryService(session).get_view(request_id)
    if view is None:
        raise SwapRequestNotFound(request_id)
    if user_id not in (view.requester_id, view.receiver_id):
        raise Forbidden("Only the parties of this request can view it", {"request_id": request_id})
    return view


@router.patch("/{request_id}/status", response_model=SwapRequestResponse)
async def update_swap_request_status(
    session: DbSession, request_id: int, data: SwapStatusUpdate, user_id: CurrentUserId
):
    """Item owner accepts or rejects a pending request."""
    request = await SwapService(session).update_status(request_id, user_id, data.status)
    return SwapRequestResponse.model_validate(request)


@router.post("/{request_id}/complete", response_model=SwapRequestResponse)
async def complete_swap_request(session: DbSession, request_id: int, user_id: CurrentUserId):
    request = await SwapService(session).complete(request_id, user_id)
    return SwapRequestResponse.model_validate(request)


@router.delete("/{request_id}", status_code=status.HTTP_204_NO_CONTENT)
async def cancel_swap_request(session: DbSession, request_id: int, user_id: CurrentUserId):
    """Requester cancels; a points redemption is refunded."""
    await SwapService(session).cancel(request_id, user_id)
