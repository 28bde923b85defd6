"""
SwapRequest model - a proposal (item for item) or a settled points redemption.
"""

import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, Enum, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from swapshop.db.base import Base

if TYPE_CHECKING:
    from swapshop.db.models.item import Item
    from swapshop.db.models.user import User


class SwapRequestStatus(str, enum.Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    COMPLETED = "completed"


class SwapRequest(Base):
    __tablename__ = "swap_requests"
    __table_args__ = (
        # Exactly one of offered item / points offered
        CheckConstraint(
            "(offered_item_id IS NULL) <> (points_offered IS NULL)",
            name="ck_swap_requests_single_offer",
        ),
        CheckConstraint("requester_id <> receiver_id", name="ck_swap_requests_distinct_parties"),
    )
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    requester_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    receiver_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    item_id: Mapped[int] = mapped_column(ForeignKey("items.id"), nullable=False, index=True)
    offered_item_id: Mapped[int | None] = mapped_column(ForeignKey("items.id"), nullable=True)
    points_offered: Mapped[int | None] = mapped_column(nullable=True)
    message: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[SwapRequestStatus] = mapped_column(
        Enum(
            SwapRequestStatus,
            name="swap_request_status",
            native_enum=False,
            length=20,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=SwapRequestStatus.PENDING,
        index=True,
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    requester: Mapped["User"] = relationship("User", foreign_keys=[requester_id], lazy="raise")
    receiver: Mapped["User"] = relationship("User", foreign_keys=[receiver_id], lazy="raise")
    item: Mapped["Item"] = relationship("Item", foreign_keys=[item_id], lazy="raise")
    offered_item: Mapped["Item | None"] = relationship("Item", foreign_keys=[offered_item_id], lazy="raise")

    @property
    def is_redemption(self) -> bool:
        return self.points_offered is not None

    def __repr__(self) -> str:
        return f"<SwapRequest(id={self.id}, item_id={self.item_id}, status={self.status.value})>"
