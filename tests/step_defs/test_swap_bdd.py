"""
BDD step definitions for the swap ledger feature (pytest-bdd).

pytest-bdd steps are synchronous, so each scenario drives the async services
on its own event loop against a fresh SQLite database.
"""

import asyncio
import os

os.environ.setdefault("CACHE_ENABLED", "false")
os.environ.setdefault("SEARCH_INDEXING_ENABLED", "false")

import pytest
from pytest_bdd import given, parsers, scenarios, then, when
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from swapshop.core.exceptions import SwapShopError
from swapshop.db.base import Base
from swapshop.db.models import Item, ItemStatus, SwapRequest, SwapRequestStatus, TransactionType, User
from swapshop.db.repositories.item_repository import ItemRepository
from swapshop.db.repositories.transaction_repository import TransactionRepository
from swapshop.db.repositories.user_repository import UserRepository
from swapshop.db.session import atomic
from swapshop.schemas.swap_request import ItemOffer, PointsOffer
from swapshop.services.category_service import CategoryService
from swapshop.services.ledger import LedgerService
from swapshop.services.swap_service import SwapService

scenarios("../features/swap.feature")


class World:
    """Scenario state: one loop, one session, names mapped to ids."""

    def __init__(self, db_path):
        self.loop = asyncio.new_event_loop()
        self.engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}")
        self.session: AsyncSession | None = None
        self.users: dict[str, int] = {}
        self.items: dict[str, int] = {}
        self.request_id: int | None = None
        self.error: SwapShopError | None = None

    def run(self, coro):
        return self.loop.run_until_complete(coro)

    async def start(self):
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)
        self.session = async_sessionmaker(self.engine, class_=AsyncSession, expire_on_commit=False)()
        await CategoryService(self.session).seed_defaults()

    async def stop(self):
        await self.session.close()
        await self.engine.dispose()


@pytest.fixture
def world(tmp_path):
    w = World(tmp_path / "bdd.db")
    w.run(w.start())
    yield w
    w.run(w.stop())
    w.loop.close()


# --- Given ---


@given(parsers.parse('user "{name}" with {points:d} points'))
def user_with_points(world, name, points):
    async def create():
        async with atomic(world.session):
            user = await UserRepository(world.session).add(
                User(
                    username=name,
                    email=f"{name}@example.com",
                    hashed_password="not-used",
                    first_name=name.capitalize(),
                    last_name="Tester",
                )
            )
            if points:
                await LedgerService(world.session).apply(user.id, points, TransactionType.BONUS, "Starting balance")
        return user.id

    world.users[name] = world.run(create())


@given(parsers.parse('"{owner}" lists "{title}" worth {points:d} points'))
def lists_item(world, owner, title, points):
    async def create():
        category = (await CategoryService(world.session).list_all())[0]
        async with atomic(world.session):
            item = await ItemRepository(world.session).add(
                Item(
                    owner_id=world.users[owner],
                    category_id=category.id,
                    title=title,
                    description=title,
                    size="M",
                    condition="good",
                    point_value=points,
                    tags=[],
                    images=["https://img.example.com/item.jpg"],
                    status=ItemStatus.ACTIVE,
                    is_approved=True,
                )
            )
        return item.id

    world.items[title] = world.run(create())


def _attempt(world, coro):
    try:
        request = world.run(coro)
    except SwapShopError as e:
        world.error = e
        return
    world.request_id = request.id


@given(parsers.parse('"{name}" redeemed "{title}" for {points:d} points'))
@when(parsers.parse('"{name}" redeems "{title}" for {points:d} points'))
def redeem(world, name, title, points):
    service = SwapService(world.session)
    _attempt(world, service.create(world.users[name], world.items[title], PointsOffer(amount=points)))


@given(parsers.parse('"{name}" offers "{offered}" for "{title}"'))
def offer_item(world, name, offered, title):
    service = SwapService(world.session)
    _attempt(world, service.create(world.users[name], world.items[title], ItemOffer(item_id=world.items[offered])))


# --- When ---


@when(parsers.parse('"{name}" cancels the last request'))
def cancel(world, name):
    world.run(SwapService(world.session).cancel(world.request_id, world.users[name]))


@when(parsers.parse('"{name}" accepts the last request'))
def accept(world, name):
    world.run(SwapService(world.session).update_status(world.request_id, world.users[name], SwapRequestStatus.ACCEPTED))


@when(parsers.parse('"{name}" rejects the last request'))
def reject(world, name):
    world.run(SwapService(world.session).update_status(world.request_id, world.users[name], SwapRequestStatus.REJECTED))


# --- Then ---


@then(parsers.parse('"{name}" has {points:d} points'))
def has_points(world, name, points):
    user = world.run(world.session.get(User, world.users[name], populate_existing=True))
    assert user.points_balance == points
    assert world.run(LedgerService(world.session).audit(user.id))["consistent"]


@then(parsers.parse('"{title}" is {status}'))
def item_has_status(world, title, status):
    item = world.run(world.session.get(Item, world.items[title], populate_existing=True))
    assert item.status == ItemStatus(status)


@then(parsers.parse("the last request is {status}"))
def request_has_status(world, status):
    request = world.run(world.session.get(SwapRequest, world.request_id, populate_existing=True))
    assert request.status == SwapRequestStatus(status)


@then("the last request no longer exists")
def request_gone(world):
    assert world.run(world.session.get(SwapRequest, world.request_id)) is None


@then(parsers.parse('the latest entry for "{name}" is {entry_type} {points:d}'))
def latest_entry(world, name, entry_type, points):
    entries = world.run(TransactionRepository(world.session).list_for_user(world.users[name], limit=1))
    assert (entries[0].type, entries[0].points) == (TransactionType(entry_type), points)


@then(parsers.parse('"{name}" has no ledger entries'))
def no_entries(world, name):
    assert world.run(TransactionRepository(world.session).list_for_user(world.users[name])) == []


@then(parsers.parse("the request fails with {code} short by {shortfall:d}"))
def request_failed(world, code, shortfall):
    assert world.error is not None
    assert world.error.code == code
    assert world.error.details["shortfall"] == shortfall
    assert world.request_id is None
