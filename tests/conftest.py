"""Shared test fixtures — in-memory service, async SQLite DB + test client."""

from collections.abc import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

# Import the tables so metadata is populated
import app.models.tables  # noqa: F401
from app.core.config import get_settings
from app.core.database import get_session
from app.main import app
from app.models import Role
from app.repositories import (
    InMemoryAshramRepository,
    InMemoryAssetRepository,
    InMemoryAssignmentRepository,
    InMemoryInviteRepository,
    InMemoryUserRepository,
)
from app.services.asset_management import AssetManagementService
from app.services.asset_tags import AssetTagCounter
from app.services.sessions import SessionStore

PASSWORD = "correct-horse-1"
SUPER_ADMIN_EMAIL = "admin@ashram.org"


# ── Service over in-memory repositories ──────────────────────

@pytest.fixture
def service() -> AssetManagementService:
    return AssetManagementService(
        ashrams=InMemoryAshramRepository(),
        users=InMemoryUserRepository(),
        assignments=InMemoryAssignmentRepository(),
        assets=InMemoryAssetRepository(),
        invites=InMemoryInviteRepository(),
    )


@pytest.fixture
async def admin(service):
    return await service.register_user(
        email="admin@ashram.org",
        password=PASSWORD,
        display_name="Admin",
        roles=[Role.ADMIN],
    )


@pytest.fixture
async def head_office(service):
    return await service.register_user(
        email="ho@ashram.org",
        password=PASSWORD,
        display_name="Head Office",
        roles=[Role.HEAD_OFFICE],
    )


@pytest.fixture
async def site_user(service):
    return await service.register_user(
        email="seva@ashram.org",
        password=PASSWORD,
        display_name="Seva",
        roles=[Role.ASHRAM_USER],
    )


@pytest.fixture
async def ashram(service, admin, site_user):
    """Yamunotri ashram with ``site_user`` assigned to it."""
    created = await service.create_ashram(
        name="Yamunotri", location="Uttarakhand", created_by=admin.id
    )
    await service.assign_user_to_ashram(
        user_id=site_user.id,
        ashram_id=created.id,
        roles=[Role.ASHRAM_USER],
        requested_by=admin.id,
    )
    return created


# ── SQL + HTTP ───────────────────────────────────────────────

@pytest.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with eng.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def test_session_factory(engine):
    """Session factory bound to the test SQLite engine."""
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(test_session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with test_session_factory() as sess:
        yield sess
        await sess.rollback()


@pytest.fixture
async def client(session, monkeypatch) -> AsyncGenerator[AsyncClient, None]:
    """HTTPX async test client with DB session override and fresh stores.

    ``admin@ashram.org`` signs up as ADMIN + HEAD_OFFICE.
    """

    async def _override_session():
        yield session

    monkeypatch.setattr(get_settings(), "super_admin_emails", SUPER_ADMIN_EMAIL)
    app.dependency_overrides[get_session] = _override_session
    app.state.sessions = SessionStore()
    app.state.tag_counter = AssetTagCounter()

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
