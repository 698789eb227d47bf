"""
Pytest fixtures for the budgeting ledger test suite.

Provides:
- an in-memory SQLite database per test (aiosqlite, StaticPool)
- an AsyncSession bound to it
- an httpx client talking to the FastAPI app with get_db overridden
- a registered user and its bearer token
"""

import os

os.environ.setdefault("DB_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("CREATE_DEFAULT_CATEGORIES", "false")
os.environ.setdefault("SECRET_KEY", "test-secret")

from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from components.core.database import Base, DatabaseManager
from components.core.init_db import get_db
from components.account.repository import AccountRepository
from components.account.schemas import AccountCreate
from components.category.models import RolloverStrategy
from components.category.repository import CategoryRepository
from components.category.schemas import CategoryCreate
from components.transaction.repository import TransactionRepository
from components.transaction.schemas import TransactionCreate
from components.user.repository import UserRepository
from components.user.schemas import UserCreate
from restapi.router import create_app


@pytest.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
async def session(engine):
    async with DatabaseManager(engine).get_db() as session:
        yield session


@pytest.fixture
async def user(session):
    return await UserRepository(session).create(UserCreate(login="alice", password="secret123"))


@pytest.fixture
async def account(session, user):
    return await AccountRepository(session).create(user.id, AccountCreate(name="Checking"))


@pytest.fixture
def make_category(session, user):
    async def _make(name, strategy=RolloverStrategy.NONE, sweep_target_id=None, goal_amount=None, user_id=None):
        return await CategoryRepository(session).create_category(
            user_id or user.id,
            CategoryCreate(
                name=name,
                rollover_strategy=strategy,
                sweep_target_id=sweep_target_id,
                goal_amount=goal_amount,
            ),
        )
    return _make


@pytest.fixture
def make_transaction(session, user, account):
    async def _make(day, amount, category_id=None, transfer_account_id=None):
        return await TransactionRepository(session).create(
            user.id,
            TransactionCreate(
                account_id=account.id,
                category_id=category_id,
                date=day,
                amount=Decimal(str(amount)),
                transfer_account_id=transfer_account_id,
            ),
        )
    return _make


@pytest.fixture
async def app(session):
    app = create_app()

    async def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db
    return app


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
async def auth_headers(client):
    response = await client.post("/auth/register", json={"login": "bob", "password": "secret123"})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['access_token']}"}
