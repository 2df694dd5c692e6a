import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker, AsyncSession

from storefront.core.config import settings
from storefront.db.database import Base, build_engine
from storefront.db.init_db import init_db
from storefront.services.catalog_service import CatalogService
from storefront.services.events import EventBus

ADMIN_ID = "admin-0001"
CUSTOMER_ID = "customer-0001"


@pytest.fixture
async def test_engine():
    """Fresh in-memory database per test, seeded with one admin."""
    engine = build_engine(settings.TEST_DATABASE_URL)
    await init_db(engine, admin_user_ids=[ADMIN_ID])

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_maker(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_maker):
    """Create test database session."""
    async with session_maker() as session:
        yield session


@pytest.fixture
def published():
    """Events delivered to a subscriber of the test event bus."""
    return []


@pytest.fixture
def events(published):
    bus = EventBus()
    bus.subscribe(published.append)
    return bus


@pytest.fixture
def service(db_session, events):
    return CatalogService(db_session, events=events)


@pytest.fixture
async def file_engine(tmp_path):
    """File-backed database so separate sessions use separate connections."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'catalog.db'}")
    await init_db(engine, admin_user_ids=[ADMIN_ID])

    yield engine

    await engine.dispose()
