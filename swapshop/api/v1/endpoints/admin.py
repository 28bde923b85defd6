"""
Admin endpoints - moderation and ledger audit. Every route requires is_admin.
"""

from fastapi import APIRouter, Query, status

from swapshop.config import get_settings
from swapshop.core.dependencies import AdminUserId
from swapshop.db.models.item import ItemStatus
from swapshop.db.session import DbSession
from swapshop.schemas.item import ItemApprovalUpdate, ItemWithOwnerResponse
from swapshop.schemas.transaction import LedgerAuditResponse
from swapshop.services.item_service import ItemService
from swapshop.services.ledger import LedgerService

router = APIRouter()
settings = get_settings()


@router.get("/items", response_model=list[ItemWithOwnerResponse])
async def list_items_for_moderation(
    session: DbSession,
    admin_id: AdminUserId,
    is_approved: bool | None = Query(False, description="Default lists items awaiting approval"),
    item_status: ItemStatus | None = Query(None, alias="status"),
    skip: int = Query(0, ge=0),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
):
    return await ItemService(session).list_items(
        status=item_status, is_approved=is_approved, skip=skip, limit=limit
    )


@router.patch("/items/{item_id}/approve", response_model=ItemWithOwnerResponse)
async def approve_item(session: DbSession, item_id: int, data: ItemApprovalUpdate, admin_id: AdminUserId):
    return await ItemService(session).set_approval(item_id, data.is_approved)


@router.delete("/items/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_item(session: DbSession, item_id: int, admin_id: AdminUserId):
    await ItemService(session).remove(item_id, admin_id)


@router.get("/users/{user_id}/ledger-audit", response_model=LedgerAuditResponse)
async def ledger_audit(session: DbSession, user_id: int, admin_id: AdminUserId):
    """Compare the cached balance with the sum of the user's ledger entries."""
    return await LedgerService(session).audit(user_id)
