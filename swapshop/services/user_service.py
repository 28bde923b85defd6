"""
User service - registration with the welcome bonus, login and profile.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from swapshop.config import get_settings
from swapshop.core.exceptions import Conflict, UserNotFound
from swapshop.core.security import create_access_token, hash_password, verify_password
from swapshop.db.models.transaction import Transaction, TransactionType
from swapshop.db.models.user import User
from swapshop.db.repositories.transaction_repository import TransactionRepository
from swapshop.db.repositories.user_repository import UserRepository
from swapshop.db.session import atomic
from swapshop.schemas.user import ProfileUpdate, TokenResponse, UserCreate
from swapshop.services.ledger import LedgerService

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.settings = get_settings()
        self.user_repo = UserRepository(session)
        self.tx_repo = TransactionRepository(session)
        self.ledger = LedgerService(session)

    async def register(self, data: UserCreate) -> User:
        """Create the account and credit the welcome bonus in one unit of work."""
        async with atomic(self.session):
            existing = await self.user_repo.get_by_username_or_email(data.username, data.email)
            if existing is not None:
                field = "username" if existing.username == data.username else "email"
                raise Conflict(f"A user with this {field} already exists", {"field": field})
            user = await self.user_repo.add(
                User(
                    username=data.username,
                    email=data.email,
                    hashed_password=hash_password(data.password),
                    first_name=data.first_name,
                    last_name=data.last_name,
                    points_balance=0,
                )
            )
            if self.settings.welcome_bonus_points > 0:
                await self.ledger.apply(
                    user.id,
                    self.settings.welcome_bonus_points,
                    TransactionType.BONUS,
                    "Welcome bonus for joining SwapShop",
                )
        logger.info("user %s registered (%s)", user.id, user.username)
        return user

    async def login(self, email: str, password: str) -> TokenResponse | None:
        """Returns a bearer token, or None when the credentials do not match."""
        user = await self.user_repo.get_by_email(email)
        if not user or not user.is_active or not verify_password(password, user.hashed_password):
            logger.info("failed login for %s", email)
            return None
        return TokenResponse(access_token=create_access_token(user.id), user_id=user.id)

    async def update_profile(self, user_id: int, data: ProfileUpdate) -> User:
        async with atomic(self.session):
            user = await self.user_repo.get_for_update(user_id)
            if user is None:
                raise UserNotFound(user_id)
            for field, value in data.model_dump(exclude_unset=True).items():
                setattr(user, field, value)
            await self.session.flush()
        return user

    async def transactions(self, user_id: int, skip: int = 0, limit: int = 50) -> list[Transaction]:
        """Ledger history, newest first."""
        return await self.tx_repo.list_for_user(user_id, skip=skip, limit=limit)
