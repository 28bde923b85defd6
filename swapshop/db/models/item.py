"""
Item model - a listed garment and its availability status.
"""

import enum
from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import JSON, CheckConstraint, Enum, String, Text, DateTime, ForeignKey, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from swapshop.db.base import Base

if TYPE_CHECKING:
    from swapshop.db.models.category import Category
    from swapshop.db.models.user import User


class ItemStatus(str, enum.Enum):
    ACTIVE = "active"
    PROCESSING = "processing"
    SWAPPED = "swapped"
    REMOVED = "removed"


class Item(Base):
    """Item entity. Status only changes through services.item_state."""

    __tablename__ = "items"
    __table_args__ = (CheckConstraint("point_value > 0", name="ck_items_point_value_positive"),)
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    owner_id: Mapped[int] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)
    category_id: Mapped[int] = mapped_column(ForeignKey("categories.id"), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    size: Mapped[str] = mapped_column(String(32), nullable=False)
    condition: Mapped[str] = mapped_column(String(64), nullable=False)
    point_value: Mapped[int] = mapped_column(nullable=False)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    images: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[ItemStatus] = mapped_column(
        Enum(
            ItemStatus,
            name="item_status",
            native_enum=False,
            length=20,
            values_callable=lambda e: [m.value for m in e],
        ),
        nullable=False,
        default=ItemStatus.ACTIVE,
        index=True,
    )
    is_approved: Mapped[bool] = mapped_column(default=False, nullable=False)
    views: Mapped[int] = mapped_column(default=0, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    owner: Mapped["User"] = relationship("User", back_populates="items", lazy="raise")
    category: Mapped["Category"] = relationship("Category", lazy="raise")

    def __repr__(self) -> str:
        return f"<Item(id={self.id}, title={self.title}, status={self.status.value})>"
