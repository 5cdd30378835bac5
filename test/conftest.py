"""
Pytest configuration and fixtures for Minerva tests
"""

import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))  # noqa: PTH100, PTH118, PTH119, PTH120

# Settings are read at import time; point them at throwaway resources first
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("LOG_JSON", "false")
os.environ.setdefault("LIBRARIES_CONFIG_FILE", "test-data/libraries_config.json")

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from minerva.auth import get_current_user  # noqa: E402
from minerva.bridge.registry import ModelRegistry, model_registry  # noqa: E402
from minerva.database import Base, get_db  # noqa: E402
from minerva.libraries.gallery.models import GalleryBlockModel  # noqa: E402
from minerva.libraries.loader import initialize_libraries  # noqa: E402
from minerva.libraries.registry import LibraryRegistry  # noqa: E402
from minerva.main import app as application  # noqa: E402
from minerva.models import register_core_models  # noqa: E402
from minerva.services.record_store import RecordStore  # noqa: E402


@pytest.fixture(scope="function")
async def engine():
    """Fresh in-memory database per test."""
    test_engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def store(db) -> RecordStore:
    return RecordStore(db)


@pytest.fixture
def registry() -> ModelRegistry:
    """Registry with the core models and the gallery block override."""
    reg = ModelRegistry()
    register_core_models(reg)
    reg.register_override("gallery", GalleryBlockModel)
    return reg


@pytest.fixture
async def app(session_factory):
    """Application wired to the per-test database with libraries loaded."""

    async def override_get_db():
        async with session_factory() as session:
            yield session

    application.dependency_overrides[get_db] = override_get_db
    model_registry.clear()
    register_core_models(model_registry)
    await initialize_libraries(model_registry, LibraryRegistry(), config={})

    yield application

    application.dependency_overrides.clear()
    model_registry.clear()


@pytest.fixture
async def client(app):
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as http_client:
        yield http_client


@pytest.fixture
def login(app):
    """Sign a user with the given role in for subsequent requests."""

    def _login(role: str = "manager", username: str | None = None) -> dict:
        user = {"username": username or f"test-{role}", "role": role}
        app.dependency_overrides[get_current_user] = lambda: user
        return user

    return _login
