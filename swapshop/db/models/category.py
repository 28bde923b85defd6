"""
Category model - garment categories seeded at startup.
"""

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from swapshop.db.base import Base

DEFAULT_CATEGORIES = [
    ("Tops", "Shirts, blouses, sweaters, t-shirts"),
    ("Bottoms", "Pants, jeans, skirts, shorts"),
    ("Dresses", "Casual and formal dresses"),
    ("Outerwear", "Jackets, coats, blazers"),
    ("Shoes", "Sneakers, boots, heels, flats"),
    ("Accessories", "Bags, jewelry, scarves, belts"),
]


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)

    def __repr__(self) -> str:
        return f"<Category(id={self.id}, name={self.name})>"
