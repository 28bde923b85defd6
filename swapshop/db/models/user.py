"""
User model - identity plus the cached points balance the ledger maintains.
"""

from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import CheckConstraint, String, Text, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from swapshop.db.base import Base

if TYPE_CHECKING:
    from swapshop.db.models.item import Item


class User(Base):
    """User entity. points_balance is only written through the ledger service."""

    __tablename__ = "users"
    __table_args__ = (CheckConstraint("points_balance >= 0", name="ck_users_points_non_negative"),)
    # Load server-side timestamps on INSERT and UPDATE (no lazy loads in async code)
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(64), unique=True, index=True, nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    profile_image: Mapped[str | None] = mapped_column(Text, nullable=True)
    points_balance: Mapped[int] = mapped_column(default=0, nullable=False)
    # Out of 500 (5.0 stars); 0 means no ratings yet
    rating: Mapped[int] = mapped_column(default=0, nullable=False)
    is_admin: Mapped[bool] = mapped_column(default=False, nullable=False)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    items: Mapped[list["Item"]] = relationship("Item", back_populates="owner", lazy="raise")

    def __repr__(self) -> str:
        return f"<User(id={self.id}, username={self.username}, points={self.points_balance})>"
