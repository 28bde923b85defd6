"""
Domain errors raised by the services and mapped to HTTP by the exception handlers.
The core stays transport-agnostic: only the status_code hint ties it to HTTP.
"""

from typing import Any


class SwapShopError(Exception):
    """Base class for every expected domain failure."""

    status_code: int = 400
    code: str = "SWAPSHOP_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": False,
            "error": {"code": self.code, "message": self.message, "details": self.details},
        }

    def __str__(self) -> str:
        return self.message


class NotFound(SwapShopError):
    status_code = 404
    code = "NOT_FOUND"


class ItemNotFound(NotFound):
    code = "ITEM_NOT_FOUND"

    def __init__(self, item_id: int):
        super().__init__(f"Item {item_id} not found", {"item_id": item_id})


class SwapRequestNotFound(NotFound):
    code = "SWAP_REQUEST_NOT_FOUND"

    def __init__(self, request_id: int):
        super().__init__(f"Swap request {request_id} not found", {"request_id": request_id})


class UserNotFound(NotFound):
    code = "USER_NOT_FOUND"

    def __init__(self, user_id: int):
        super().__init__(f"User {user_id} not found", {"user_id": user_id})


class CategoryNotFound(NotFound):
    code = "CATEGORY_NOT_FOUND"

    def __init__(self, category_id: int):
        super().__init__(f"Category {category_id} not found", {"category_id": category_id})


class Forbidden(SwapShopError):
    status_code = 403
    code = "FORBIDDEN"


class SelfRequestForbidden(Forbidden):
    code = "SELF_REQUEST_FORBIDDEN"

    def __init__(self, item_id: int):
        super().__init__("You cannot request your own item", {"item_id": item_id})


class Conflict(SwapShopError):
    status_code = 409
    code = "CONFLICT"


class InvalidOfferSelection(SwapShopError):
    """Both or neither of offered item / points, or an offered item that cannot be offered."""

    status_code = 400
    code = "INVALID_OFFER_SELECTION"


class InsufficientPoints(SwapShopError):
    status_code = 400
    code = "INSUFFICIENT_POINTS"

    def __init__(self, required: int, available: int):
        self.required = required
        self.available = available
        self.shortfall = required - available
        super().__init__(
            f"Insufficient points. You have {available} but need {required}.",
            {"required": required, "available": available, "shortfall": self.shortfall},
        )


class ItemUnavailable(SwapShopError):
    status_code = 409
    code = "ITEM_UNAVAILABLE"

    def __init__(self, item_id: int, status: str, reason: str | None = None):
        self.item_id = item_id
        self.status = status
        super().__init__(
            reason or f"Item {item_id} is not available (status: {status})",
            {"item_id": item_id, "status": status},
        )


class InvalidStateTransition(SwapShopError):
    status_code = 409
    code = "INVALID_STATE_TRANSITION"


class InvariantViolation(SwapShopError):
    """Internal-consistency fault: the atomic transaction contract was broken."""

    status_code = 500
    code = "INVARIANT_VIOLATION"
