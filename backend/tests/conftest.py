"""Shared pytest fixtures for all tests."""

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from product_mgmt import models  # noqa: F401
from product_mgmt.database import Base, get_db
from product_mgmt.services.categories import CategoryHierarchyManager
from product_mgmt.services.category_store import CategoryStore


@pytest_asyncio.fixture
async def engine():
    """In-memory SQLite engine with the schema created.

    StaticPool keeps a single connection so every session sees the same
    database.
    """
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def store(db):
    return CategoryStore(db)


@pytest.fixture
def manager(store):
    return CategoryHierarchyManager(store, max_depth=64)


@pytest_asyncio.fixture
async def client(session_factory):
    """HTTP client against the app, with get_db bound to the test engine.

    The lifespan is not run, so the cache stays disconnected and no
    on-disk database is created.
    """
    from product_mgmt.main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()
