"""Derived, read-only statistics."""

from pydantic import BaseModel


class UserStats(BaseModel):
    items_listed: int
    successful_swaps: int
    rating: float
    points_balance: int


class PlatformStats(BaseModel):
    total_users: int
    items_listed: int
    successful_swaps: int
