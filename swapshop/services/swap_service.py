"""
Swap request lifecycle manager.

Every public operation is one unit of work (atomic): validation, item status
transitions, ledger entries and the request row itself commit together or not
at all. Shared rows are locked before they are read for a decision:
items through ItemStateMachine, users through LedgerService.

Request status table:
    create(points)  -> accepted  (auto-settled redemption)
    create(item)    -> pending
    pending   --accept/reject (receiver)--> accepted / rejected
    accepting a swap rejects the other pending requests on either item
    accepted  --complete (either party)---> completed
    cancel (requester): pending or accepted redemption -> row deleted
"""

import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from swapshop.config import get_settings
from swapshop.core.exceptions import (
    Forbidden,
    InsufficientPoints,
    InvalidOfferSelection,
    InvalidStateTransition,
    ItemNotFound,
    ItemUnavailable,
    SelfRequestForbidden,
    SwapRequestNotFound,
    UserNotFound,
)
from swapshop.core.metrics import SWAP_REQUEST_EVENTS
from swapshop.db.models.item import Item, ItemStatus
from swapshop.db.models.swap_request import SwapRequest, SwapRequestStatus
from swapshop.db.models.transaction import TransactionType
from swapshop.db.repositories.item_repository import ItemRepository
from swapshop.db.repositories.swap_request_repository import SwapRequestRepository
from swapshop.db.repositories.user_repository import UserRepository
from swapshop.db.session import atomic
from swapshop.schemas.swap_request import ItemOffer, PointsOffer, SwapOffer
from swapshop.services.item_service import ItemService
from swapshop.services.item_state import ItemEvent, ItemStateMachine
from swapshop.services.ledger import LedgerService

logger = logging.getLogger(__name__)

# Receiver decisions allowed on a pending request
DECISIONS = {SwapRequestStatus.ACCEPTED, SwapRequestStatus.REJECTED}


def _offer_kind(request: SwapRequest) -> str:
    return "points" if request.is_redemption else "item"


class SwapService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.settings = get_settings()
        self.items = ItemStateMachine(session)
        self.ledger = LedgerService(session)
        self.item_repo = ItemRepository(session)
        self.request_repo = SwapRequestRepository(session)
        self.user_repo = UserRepository(session)

    async def _publish(self, item_ids: list[int]) -> None:
        await ItemService(self.session).publish_changes(item_ids)

    async def create(
        self,
        requester_id: int,
        item_id: int,
        offer: SwapOffer,
        message: str | None = None,
    ) -> SwapRequest:
        """Create a swap proposal, or settle a points redemption immediately."""
        async with atomic(self.session):
            item = await self.item_repo.get_for_update(item_id)
            if item is None:
                raise ItemNotFound(item_id)
            if item.owner_id == requester_id:
                raise SelfRequestForbidden(item_id)
            if item.status != ItemStatus.ACTIVE or not item.is_approved:
                raise ItemUnavailable(item.id, item.status.value)

            if isinstance(offer, PointsOffer):
                request = await self._settle_redemption(requester_id, item, offer, message)
            else:
                request = await self._propose_swap(requester_id, item, offer, message)

        SWAP_REQUEST_EVENTS.labels(event="created", offer_kind=_offer_kind(request)).inc()
        logger.info(
            "swap request %s created: requester=%s item=%s kind=%s status=%s",
            request.id, requester_id, item_id, _offer_kind(request), request.status.value,
        )
        if request.is_redemption:
            await self._publish([item_id])
        return request

    async def _settle_redemption(
        self, requester_id: int, item: Item, offer: PointsOffer, message: str | None
    ) -> SwapRequest:
        item_id, owner_id, point_value = item.id, item.owner_id, item.point_value
        if offer.amount != point_value:
            raise InvalidOfferSelection(
                f"Redemption must pay the listed price of {point_value} points",
                {"points_offered": offer.amount, "point_value": point_value},
            )
        requester = await self.user_repo.get_for_update(requester_id)
        if requester is None:
            raise UserNotFound(requester_id)
        if requester.points_balance < offer.amount:
            raise InsufficientPoints(required=offer.amount, available=requester.points_balance)

        await self.items.apply(item_id, ItemEvent.REDEMPTION_STARTED)
        await self.ledger.apply(
            requester_id,
            -offer.amount,
            TransactionType.SPENT,
            f"Redeemed '{item.title}' with points",
            item_id=item_id,
        )
        request = SwapRequest(
            requester_id=requester_id,
            receiver_id=owner_id,
            item_id=item_id,
            points_offered=offer.amount,
            message=message,
            status=SwapRequestStatus.ACCEPTED,
        )
        return await self.request_repo.add(request)

    async def _propose_swap(
        self, requester_id: int, item: Item, offer: ItemOffer, message: str | None
    ) -> SwapRequest:
        item_id, owner_id = item.id, item.owner_id
        if offer.item_id == item_id:
            raise InvalidOfferSelection("An item cannot be swapped for itself", {"offered_item_id": offer.item_id})
        offered = await self.item_repo.get_by_id(offer.item_id)
        if offered is None or offered.owner_id != requester_id:
            raise InvalidOfferSelection(
                "Offered item must be one of your own listings", {"offered_item_id": offer.item_id}
            )
        if offered.status != ItemStatus.ACTIVE:
            raise InvalidOfferSelection(
                f"Offered item is not available (status: {offered.status.value})",
                {"offered_item_id": offer.item_id, "status": offered.status.value},
            )
        request = SwapRequest(
            requester_id=requester_id,
            receiver_id=owner_id,
            item_id=item_id,
            offered_item_id=offer.item_id,
            message=message,
            status=SwapRequestStatus.PENDING,
        )
        return await self.request_repo.add(request)

    async def update_status(
        self, request_id: int, acting_user_id: int, new_status: SwapRequestStatus
    ) -> SwapRequest:
        """Receiver accepts or rejects a pending request."""
        async with atomic(self.session):
            request = await self.request_repo.get_for_update(request_id)
            if request is None:
                raise SwapRequestNotFound(request_id)
            if request.receiver_id != acting_user_id:
                raise Forbidden("Only the item owner can accept or reject this request", {"request_id": request_id})
            if new_status not in DECISIONS:
                raise InvalidStateTransition(
                    f"Cannot set a request to '{new_status.value}' here",
                    {"request_id": request_id, "status": new_status.value},
                )
            if request.status != SwapRequestStatus.PENDING:
                raise InvalidStateTransition(
                    f"Request is already {request.status.value}",
                    {"request_id": request_id, "status": request.status.value},
                )

            superseded: list[int] = []
            if new_status == SwapRequestStatus.ACCEPTED:
                superseded = await self._accept_swap(request)
            request.status = new_status
            await self.session.flush()

        SWAP_REQUEST_EVENTS.labels(event=new_status.value, offer_kind=_offer_kind(request)).inc()
        logger.info("swap request %s %s by user %s", request_id, new_status.value, acting_user_id)
        if superseded:
            SWAP_REQUEST_EVENTS.labels(event="rejected", offer_kind="item").inc(len(superseded))
            logger.info("swap requests %s rejected: items claimed by request %s", superseded, request_id)
        if new_status == SwapRequestStatus.ACCEPTED:
            await self._publish([request.item_id, request.offered_item_id])
        return request

    async def _accept_swap(self, request: SwapRequest) -> list[int]:
        """Swap both items, pay the bonus and reject the other pending requests
        on either item. Returns the ids of the rejected requests."""
        # Pending requests are always item swaps; redemptions are created accepted.
        item_ids = [request.item_id, request.offered_item_id]
        await self.items.apply_many(item_ids, ItemEvent.SWAP_ACCEPTED)
        if self.settings.award_swap_bonus and self.settings.swap_bonus_points > 0:
            for user_id in (request.requester_id, request.receiver_id):
                await self.ledger.apply(
                    user_id,
                    self.settings.swap_bonus_points,
                    TransactionType.EARNED,
                    "Swap accepted",
                    item_id=request.item_id,
                )
        superseded = await self.request_repo.lock_pending_for_items(item_ids, exclude_id=request.id)
        for other in superseded:
            other.status = SwapRequestStatus.REJECTED
        return [other.id for other in superseded]

    async def complete(self, request_id: int, acting_user_id: int) -> SwapRequest:
        """Mark an accepted request as handed over. Redemptions pay the seller here."""
        async with atomic(self.session):
            request = await self.request_repo.get_for_update(request_id)
            if request is None:
                raise SwapRequestNotFound(request_id)
            if acting_user_id not in (request.requester_id, request.receiver_id):
                raise Forbidden("Only the parties of this request can complete it", {"request_id": request_id})
            if request.status != SwapRequestStatus.ACCEPTED:
                raise InvalidStateTransition(
                    f"Only accepted requests can be completed (status: {request.status.value})",
                    {"request_id": request_id, "status": request.status.value},
                )

            if request.is_redemption:
                await self.items.apply(request.item_id, ItemEvent.REDEMPTION_COMPLETED)
                await self.ledger.apply(
                    request.receiver_id,
                    request.points_offered,
                    TransactionType.EARNED,
                    "Item redeemed with points",
                    item_id=request.item_id,
                )
            request.status = SwapRequestStatus.COMPLETED
            request.completed_at = datetime.now(timezone.utc)
            await self.session.flush()

        SWAP_REQUEST_EVENTS.labels(event="completed", offer_kind=_offer_kind(request)).inc()
        logger.info("swap request %s completed by user %s", request_id, acting_user_id)
        if request.is_redemption:
            await self._publish([request.item_id])
        return request

    async def cancel(self, request_id: int, acting_user_id: int) -> None:
        """Requester withdraws a request; a settled redemption is refunded first."""
        async with atomic(self.session):
            request = await self.request_repo.get_for_update(request_id)
            if request is None:
                raise SwapRequestNotFound(request_id)
            if request.requester_id != acting_user_id:
                raise Forbidden("Only the requester can cancel this request", {"request_id": request_id})
            if request.status in (SwapRequestStatus.REJECTED, SwapRequestStatus.COMPLETED):
                raise InvalidStateTransition(
                    f"Cannot cancel a {request.status.value} request",
                    {"request_id": request_id, "status": request.status.value},
                )

            if request.is_redemption:
                await self.items.apply_if(request.item_id, ItemEvent.REDEMPTION_CANCELLED)
                await self.ledger.apply(
                    acting_user_id,
                    request.points_offered,
                    TransactionType.REFUND,
                    "Refund for cancelled redemption",
                    item_id=request.item_id,
                )
            elif request.status != SwapRequestStatus.PENDING:
                # Both items already changed hands
                raise InvalidStateTransition(
                    "An accepted item swap cannot be cancelled",
                    {"request_id": request_id, "status": request.status.value},
                )
            kind = _offer_kind(request)
            touched = [request.item_id] if request.is_redemption else []
            await self.request_repo.delete(request)

        SWAP_REQUEST_EVENTS.labels(event="cancelled", offer_kind=kind).inc()
        logger.info("swap request %s cancelled by user %s", request_id, acting_user_id)
        if touched:
            await self._publish(touched)
