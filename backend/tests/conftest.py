"""Pytest configuration and fixtures for catalog tests.

The product store is an in-memory SQLite database (aiosqlite), created
fresh for every test and wired into the app through `get_db` overrides.
"""

import os

# Must be set before catalog.config is imported anywhere.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from typing import AsyncGenerator, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from catalog.database import Base, get_db
from catalog.main import app
from catalog.models.product import Product
from catalog.services.seed import build_products

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


# ── Test Database Setup ──────────────────────────────────────────

def _memory_engine():
    return create_async_engine(
        TEST_DB_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


@pytest_asyncio.fixture
async def test_engine():
    """In-memory engine with the products table created."""
    engine = _memory_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture
async def db_session(test_engine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with session_factory() as session:
        yield session


async def _client_for(session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db():
        yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(db_session) -> AsyncGenerator[AsyncClient, None]:
    """Test client with the store dependency pointed at the test database."""
    async for c in _client_for(db_session):
        yield c


@pytest_asyncio.fixture
async def broken_client() -> AsyncGenerator[AsyncClient, None]:
    """Test client whose store has no products table, so every query fails."""
    engine = _memory_engine()
    async with AsyncSession(engine, expire_on_commit=False) as session:
        async for c in _client_for(session):
            yield c
    await engine.dispose()


# ── Test Data Fixtures ───────────────────────────────────────────

@pytest.fixture
def add_products(db_session: AsyncSession) -> Callable:
    """Return a coroutine function that inserts `count` dummy products."""

    async def _add(count: int) -> list[Product]:
        products = build_products(count)
        for product in products:
            db_session.add(product)
            await db_session.flush()
        await db_session.commit()
        return products

    return _add


# ── Test Markers ─────────────────────────────────────────────────

def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "api: Endpoint tests")
    config.addinivalue_line("markers", "integration: Integration tests")
