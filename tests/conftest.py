"""Shared fixtures: in-memory SQLite database, seeded group, API client."""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret")

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.security import create_access_token
from app.db.session import Base, get_db
from app.main import app
from app.models.expense import Expense, ExpenseShare
from app.models.group import Group
from app.models.group_member import GroupMember
from app.models.settlement import Settlement  # noqa: F401
from app.models.user import User
from app.services.settlement_service import balance_cache

ALICE, BOB, CAROL, DAVE = 1, 2, 3, 4
GROUP_ID = 1


@pytest.fixture(autouse=True)
def clear_balance_cache():
    balance_cache.clear()
    yield
    balance_cache.clear()


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def seeded(session_factory):
    """Alice (admin), Bob and Carol share group 1. Dave is an outsider."""
    async with session_factory() as session:
        session.add_all(
            [
                User(id=ALICE, name="Alice", email="alice@example.com"),
                User(id=BOB, name="Bob", email="bob@example.com"),
                User(id=CAROL, name="Carol", email="carol@example.com"),
                User(id=DAVE, name="Dave", email="dave@example.com"),
            ]
        )
        await session.flush()
        session.add(Group(id=GROUP_ID, name="Trip", created_by=ALICE))
        await session.flush()
        session.add_all(
            [
                GroupMember(group_id=GROUP_ID, user_id=uid)
                for uid in (ALICE, BOB, CAROL)
            ]
        )
        await session.commit()
    return GROUP_ID


def add_expense(session, paid_by, amount, shares, is_settled=False):
    """Stage an expense; shares is a list of (user_id, amount_owed[, is_paid])."""
    expense = Expense(
        group_id=GROUP_ID,
        paid_by=paid_by,
        amount=amount,
        description="test expense",
        is_settled=is_settled,
        shares=[
            ExpenseShare(
                user_id=s[0],
                amount_owed=s[1],
                is_paid=s[2] if len(s) > 2 else False,
            )
            for s in shares
        ],
    )
    session.add(expense)
    return expense


@pytest.fixture
async def client(session_factory, seeded):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.clear()


def auth(user_id: int) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': str(user_id)})}"}
