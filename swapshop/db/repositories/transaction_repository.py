"""
Transaction repository - append and read the points ledger. No update or delete.
"""

from sqlalchemy import func, select

from swapshop.db.models.transaction import Transaction
from swapshop.db.repositories.base_repository import BaseRepository


class TransactionRepository(BaseRepository[Transaction]):
    def __init__(self, session):
        super().__init__(session, Transaction)

    async def append(self, entry: Transaction) -> Transaction:
        self.session.add(entry)
        await self.session.flush()
        return entry

    async def list_for_user(self, user_id: int, skip: int = 0, limit: int = 50) -> list[Transaction]:
        result = await self.session.execute(
            select(Transaction)
            .where(Transaction.user_id == user_id)
            .order_by(Transaction.id.desc())
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars().all())

    async def totals_for_user(self, user_id: int) -> tuple[int, int]:
        """(sum of signed points, entry count) for the ledger audit."""
        result = await self.session.execute(
            select(func.coalesce(func.sum(Transaction.points), 0), func.count(Transaction.id)).where(
                Transaction.user_id == user_id
            )
        )
        total, count = result.one()
        return int(total), int(count)
