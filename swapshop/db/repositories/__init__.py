# Repository pattern: abstract data access

from swapshop.db.repositories.category_repository import CategoryRepository
from swapshop.db.repositories.favorite_repository import FavoriteRepository
from swapshop.db.repositories.item_repository import ItemRepository
from swapshop.db.repositories.swap_request_repository import SwapRequestRepository
from swapshop.db.repositories.transaction_repository import TransactionRepository
from swapshop.db.repositories.user_repository import UserRepository

__all__ = [
    "CategoryRepository",
    "FavoriteRepository",
    "ItemRepository",
    "SwapRequestRepository",
    "TransactionRepository",
    "UserRepository",
]
