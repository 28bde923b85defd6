"""Ledger entry schemas."""

from datetime import datetime

from pydantic import BaseModel

from swapshop.db.models.transaction import TransactionType


class TransactionResponse(BaseModel):
    id: int
    user_id: int
    item_id: int | None = None
    type: TransactionType
    points: int
    balance_after: int
    description: str
    created_at: datetime

    model_config = {"from_attributes": True}


class LedgerAuditResponse(BaseModel):
    user_id: int
    balance: int
    ledger_total: int
    entries: int
    consistent: bool
