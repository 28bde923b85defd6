"""
Transaction model - the append-only points ledger.
Rows are never updated or deleted; User.points_balance is a cache of their sum.
"""

import enum
from datetime import datetime

from sqlalchemy import Enum, Index, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column

from swapshop.db.base import Base


class TransactionType(str, enum.Enum):
    EARNED = "earned"
    SPENT = "spent"
    BONUS = "bonus"
    REFUND = "refund"


class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (Index("ix_transactions_user_created", "user_id", "created_at"),)
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    item_id: Mapped[int | None] = mapped_column(ForeignKey("items.id"), nullable=True)
    type: Mapped[TransactionType] = mapped_column(
        Enum(
            TransactionType,
            name="transaction_type",
            native_enum=False,
            length=20,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
    )
    points: Mapped[int] = mapped_column(nullable=False)  # Signed delta
    balance_after: Mapped[int] = mapped_column(nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())

    def __repr__(self) -> str:
        return f"<Transaction(id={self.id}, user_id={self.user_id}, type={self.type.value}, points={self.points})>"
