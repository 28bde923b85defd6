"""
FastAPI dependencies - bearer auth resolved to the acting user.
"""

from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from swapshop.core.exceptions import Forbidden
from swapshop.core.security import user_id_from_token
from swapshop.db.models.user import User
from swapshop.db.repositories.user_repository import UserRepository
from swapshop.db.session import DbSession

security = HTTPBearer(auto_error=False)


async def get_current_user(
    session: DbSession,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> User:
    """Resolve JWT to an active user. Raises 401 if missing or invalid."""
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    user_id = user_id_from_token(credentials.credentials)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    user = await UserRepository(session).get_by_id(user_id)
    if not user or not user.is_active:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="User not found or inactive")
    return user


async def get_current_user_id(user: Annotated[User, Depends(get_current_user)]) -> int:
    return user.id


async def get_admin_user_id(user: Annotated[User, Depends(get_current_user)]) -> int:
    if not user.is_admin:
        raise Forbidden("Admin access required")
    return user.id


# Optional auth: browse hides the caller's own listings when logged in
async def get_optional_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> int | None:
    """Return user id if a valid token is present, else None."""
    if not credentials:
        return None
    return user_id_from_token(credentials.credentials)


CurrentUser = Annotated[User, Depends(get_current_user)]
CurrentUserId = Annotated[int, Depends(get_current_user_id)]
AdminUserId = Annotated[int, Depends(get_admin_user_id)]
OptionalUserId = Annotated[int | None, Depends(get_optional_user_id)]
