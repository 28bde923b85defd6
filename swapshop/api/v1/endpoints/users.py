"""
User endpoints - registration, login and the caller's own account views.
"""

from fastapi import APIRouter, HTTPException, Query, status

from swapshop.core.dependencies import CurrentUser, CurrentUserId
from swapshop.db.session import DbSession
from swapshop.schemas.item import ItemWithOwnerResponse
from swapshop.schemas.stats import UserStats
from swapshop.schemas.transaction import TransactionResponse
from swapshop.schemas.user import LoginRequest, ProfileUpdate, TokenResponse, UserCreate, UserResponse
from swapshop.services.favorite_service import FavoriteService
from swapshop.services.stats_service import StatsService
from swapshop.services.user_service import UserService

router = APIRouter()


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(session: DbSession, data: UserCreate):
    """Create a user; the welcome bonus is already on the returned balance."""
    user = await UserService(session).register(data)
    return UserResponse.model_validate(user)


@router.post("/login", response_model=TokenResponse)
async def login(session: DbSession, data: LoginRequest):
    """Authenticate and return a JWT."""
    token = await UserService(session).login(data.email, data.password)
    if token is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )
    return token


@router.get("/me", response_model=UserResponse)
async def me(user: CurrentUser):
    return UserResponse.model_validate(user)


@router.patch("/me", response_model=UserResponse)
async def update_me(session: DbSession, data: ProfileUpdate, user_id: CurrentUserId):
    user = await UserService(session).update_profile(user_id, data)
    return UserResponse.model_validate(user)


@router.get("/me/transactions", response_model=list[TransactionResponse])
async def my_transactions(
    session: DbSession,
    user_id: CurrentUserId,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=100),
):
    """Points history, newest first."""
    entries = await UserService(session).transactions(user_id, skip=skip, limit=limit)
    return [TransactionResponse.model_validate(e) for e in entries]


@router.get("/me/stats", response_model=UserStats)
async def my_stats(session: DbSession, user_id: CurrentUserId):
    return await StatsService(session).user_stats(user_id)


@router.get("/me/favorites", response_model=list[ItemWithOwnerResponse])
async def my_favorites(session: DbSession, user_id: CurrentUserId):
    return await FavoriteService(session).list_items(user_id)
