from swapshop.db.models.category import Category
from swapshop.db.models.favorite import Favorite
from swapshop.db.models.item import Item, ItemStatus
from swapshop.db.models.swap_request import SwapRequest, SwapRequestStatus
from swapshop.db.models.transaction import Transaction, TransactionType
from swapshop.db.models.user import User

__all__ = [
    "Category",
    "Favorite",
    "Item",
    "ItemStatus",
    "SwapRequest",
    "SwapRequestStatus",
    "Transaction",
    "TransactionType",
    "User",
]
