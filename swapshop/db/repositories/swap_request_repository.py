"""
Swap request repository - request rows plus the eager-loaded views used by
the incoming/outgoing lists.
"""

from sqlalchemy import or_, select
from sqlalchemy.orm import selectinload

from swapshop.db.models.item import Item
from swapshop.db.models.swap_request import SwapRequest, SwapRequestStatus
from swapshop.db.repositories.base_repository import BaseRepository


def _enriched():
    return (
        selectinload(SwapRequest.requester),
        selectinload(SwapRequest.receiver),
        selectinload(SwapRequest.item).selectinload(Item.owner),
        selectinload(SwapRequest.item).selectinload(Item.category),
        selectinload(SwapRequest.offered_item),
    )


class SwapRequestRepository(BaseRepository[SwapRequest]):
    def __init__(self, session):
        super().__init__(session, SwapRequest)

    async def get_enriched(self, id: int) -> SwapRequest | None:
        result = await self.session.execute(
            select(SwapRequest)
            .where(SwapRequest.id == id)
            .options(*_enriched())
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def list_enriched(
        self,
        *,
        requester_id: int | None = None,
        receiver_id: int | None = None,
        status: SwapRequestStatus | None = None,
        item_id: int | None = None,
    ) -> list[SwapRequest]:
        stmt = select(SwapRequest).options(*_enriched())
        if requester_id is not None:
            stmt = stmt.where(SwapRequest.requester_id == requester_id)
        if receiver_id is not None:
            stmt = stmt.where(SwapRequest.receiver_id == receiver_id)
        if status is not None:
            stmt = stmt.where(SwapRequest.status == status)
        if item_id is not None:
            stmt = stmt.where(SwapRequest.item_id == item_id)
        stmt = stmt.order_by(SwapRequest.created_at.desc(), SwapRequest.id.desc())
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def lock_pending_for_items(self, item_ids: list[int], exclude_id: int) -> list[SwapRequest]:
        """Row-lock pending requests that target or offer any of the given items.

        Rows another transaction already holds are skipped: that transaction is
        deciding the same items and fails on the item locks.
        """
        result = await self.session.execute(
            select(SwapRequest)
            .where(
                SwapRequest.id != exclude_id,
                SwapRequest.status == SwapRequestStatus.PENDING,
                or_(SwapRequest.item_id.in_(item_ids), SwapRequest.offered_item_id.in_(item_ids)),
            )
            .order_by(SwapRequest.id)
            .with_for_update(skip_locked=True)
            .execution_options(populate_existing=True)
        )
        return list(result.scalars().all())
