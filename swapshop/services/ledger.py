"""
Ledger service - the only writer of User.points_balance.

Every balance change goes through apply(), which adjusts the cached balance and
appends the matching Transaction in the caller's unit of work. The caller owns
the transaction boundary (services wrap operations in db.session.atomic).
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from swapshop.core.exceptions import InvariantViolation, UserNotFound
from swapshop.core.logging import INVARIANT_LOGGER
from swapshop.core.metrics import INVARIANT_VIOLATIONS, LEDGER_ENTRIES
from swapshop.db.models.transaction import Transaction, TransactionType
from swapshop.db.models.user import User
from swapshop.db.repositories.transaction_repository import TransactionRepository
from swapshop.db.repositories.user_repository import UserRepository

logger = logging.getLogger(__name__)
invariant_logger = logging.getLogger(INVARIANT_LOGGER)

# Sign each entry type must carry
_CREDIT_TYPES = {TransactionType.EARNED, TransactionType.BONUS, TransactionType.REFUND}
_DEBIT_TYPES = {TransactionType.SPENT}


def invariant_violation(message: str, **details) -> InvariantViolation:
    """Build, log and count an InvariantViolation. Callers raise the result."""
    INVARIANT_VIOLATIONS.inc()
    invariant_logger.critical("Ledger invariant violated: %s %s", message, details)
    return InvariantViolation(message, details)


class LedgerService:
    """Ledger primitives over one session."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.user_repo = UserRepository(session)
        self.tx_repo = TransactionRepository(session)

    async def adjust_balance(self, user_id: int, delta: int) -> User:
        """Apply delta to the locked user row.

        Trusted mutator: callers validate funds first. A negative result here
        means a validation path was skipped, so it is an invariant violation.
        """
        user = await self.user_repo.get_for_update(user_id)
        if user is None:
            raise UserNotFound(user_id)
        new_balance = user.points_balance + delta
        if new_balance < 0:
            raise invariant_violation(
                "balance would go negative",
                user_id=user_id,
                balance=user.points_balance,
                delta=delta,
            )
        user.points_balance = new_balance
        await self.session.flush()
        return user

    async def record_transaction(
        self,
        user_id: int,
        item_id: int | None,
        type: TransactionType,
        points: int,
        description: str,
        balance_after: int,
    ) -> Transaction:
        """Append an immutable ledger entry. No other side effect."""
        entry = Transaction(
            user_id=user_id,
            item_id=item_id,
            type=type,
            points=points,
            balance_after=balance_after,
            description=description,
        )
        await self.tx_repo.append(entry)
        LEDGER_ENTRIES.labels(type=type.value).inc()
        return entry

    async def apply(
        self,
        user_id: int,
        delta: int,
        type: TransactionType,
        description: str,
        item_id: int | None = None,
    ) -> Transaction:
        """Adjust a balance and record exactly one matching Transaction."""
        if delta == 0:
            raise invariant_violation("zero-point ledger entry", user_id=user_id, type=type.value)
        if (type in _CREDIT_TYPES and delta < 0) or (type in _DEBIT_TYPES and delta > 0):
            raise invariant_violation(
                "entry sign does not match its type", user_id=user_id, type=type.value, delta=delta
            )
        user = await self.adjust_balance(user_id, delta)
        entry = await self.record_transaction(
            user_id=user_id,
            item_id=item_id,
            type=type,
            points=delta,
            description=description,
            balance_after=user.points_balance,
        )
        logger.info(
            "ledger: user=%s %s %+d -> balance=%s (%s)", user_id, type.value, delta, user.points_balance, description
        )
        return entry

    async def audit(self, user_id: int) -> dict:
        """Rebuild the balance from the transaction log and compare it with the cache."""
        user = await self.user_repo.get_by_id(user_id)
        if user is None:
            raise UserNotFound(user_id)
        total, count = await self.tx_repo.totals_for_user(user_id)
        consistent = total == user.points_balance
        if not consistent:
            invariant_logger.critical(
                "Ledger audit mismatch: user=%s balance=%s ledger_total=%s", user_id, user.points_balance, total
            )
        return {
            "user_id": user_id,
            "balance": user.points_balance,
            "ledger_total": total,
            "entries": count,
            "consistent": consistent,
        }
