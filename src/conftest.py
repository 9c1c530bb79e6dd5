import contextlib

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from src.guestlist.repository.store import get_event_store
from src.guestlist.tests.inmemory_models import InMemoryEventStore
from src.main import app
from src.models import BaseModel

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def store():
    """A fresh in-memory event store for each test."""
    return InMemoryEventStore()


@pytest.fixture
def client_factory():
    """Build an HTTP client against the app with the given dependency overrides."""

    @contextlib.asynccontextmanager
    async def factory(overrides: dict):
        app.dependency_overrides.update(overrides)
        transport = ASGITransport(app=app)
        try:
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                yield ac
        finally:
            app.dependency_overrides.clear()

    return factory


@pytest_asyncio.fixture
async def client(client_factory, store):
    """HTTP client whose endpoints all share the in-memory ``store``."""
    async with client_factory({get_event_store: lambda: store}) as ac:
        yield ac


@pytest_asyncio.fixture
async def db_session():
    """A session on a throwaway in-memory sqlite database with all tables created."""
    engine = create_async_engine(TEST_DATABASE_URL)
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session

    await engine.dispose()
