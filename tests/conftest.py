"""
Pytest fixtures - per-test SQLite database, API client, users and items.
Redis and Elasticsearch side effects are switched off through settings.
"""

import os

os.environ.setdefault("CACHE_ENABLED", "false")
os.environ.setdefault("SEARCH_INDEXING_ENABLED", "false")

from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from swapshop.core.security import create_access_token, hash_password
from swapshop.db.base import Base
from swapshop.db.models import Category, Item, ItemStatus, TransactionType, User
from swapshop.db.repositories.item_repository import ItemRepository
from swapshop.db.repositories.user_repository import UserRepository
from swapshop.db.session import atomic, get_db
from swapshop.main import app
from swapshop.services.category_service import CategoryService
from swapshop.services.ledger import LedgerService

# One bcrypt hash for every fixture user keeps the suite fast
PASSWORD = "password123"
PASSWORD_HASH = hash_password(PASSWORD)


@pytest_asyncio.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", echo=False)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_maker(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    async with session_maker() as s:
        yield s


@pytest_asyncio.fixture
async def client(session_maker):
    """API client; every request gets its own session, like production."""

    async def override_get_db():
        async with session_maker() as s:
            yield s

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def category(session: AsyncSession) -> Category:
    service = CategoryService(session)
    await service.seed_defaults()
    return (await service.list_all())[0]


@pytest.fixture
def make_user(session: AsyncSession):
    """Create a user whose starting balance is a recorded bonus entry."""

    async def _make(username: str, points: int = 0, is_admin: bool = False) -> User:
        async with atomic(session):
            user = await UserRepository(session).add(
                User(
                    username=username,
                    email=f"{username}@example.com",
                    hashed_password=PASSWORD_HASH,
                    first_name=username.capitalize(),
                    last_name="Tester",
                    is_admin=is_admin,
                )
            )
            if points:
                await LedgerService(session).apply(user.id, points, TransactionType.BONUS, "Starting balance")
        return user

    return _make


@pytest.fixture
def make_item(session: AsyncSession, category: Category):
    """Create an active, approved listing without paying the listing reward."""

    async def _make(owner: User, point_value: int = 60, title: str = "Denim jacket", **fields) -> Item:
        fields.setdefault("status", ItemStatus.ACTIVE)
        fields.setdefault("is_approved", True)
        async with atomic(session):
            item = await ItemRepository(session).add(
                Item(
                    owner_id=owner.id,
                    category_id=category.id,
                    title=title,
                    description="Barely worn",
                    size="M",
                    condition="good",
                    point_value=point_value,
                    tags=["casual"],
                    images=["https://img.example.com/1.jpg"],
                    **fields,
                )
            )
        return item

    return _make


@pytest_asyncio.fixture
async def test_user(make_user) -> User:
    return await make_user("tester", points=100)


def auth_headers_for(user: User) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    return auth_headers_for(test_user)


@pytest.fixture
def headers_for():
    return auth_headers_for
