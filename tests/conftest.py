"""
Pytest fixtures for test database, clients, users and resources.

Each test gets a fresh schema; by default an in-memory SQLite database
(set TEST_DATABASE_URL to run against PostgreSQL instead).
"""

import os

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("BCRYPT_ROUNDS", "4")
os.environ.setdefault("ENVIRONMENT", "test")

from typing import AsyncGenerator

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.pool import StaticPool

from app.main import app
from app.db.base import Base
from app.db.session import get_db
from app.core.security import hash_password
from app.models.user import AdminUser
from app.models.resource import Resource

TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite://")

PASSWORD = "testpassword123"


def _engine_kwargs(url: str) -> dict:
    if url.startswith("sqlite"):
        # One shared connection so every session sees the same in-memory DB
        return {"poolclass": StaticPool, "connect_args": {"check_same_thread": False}}
    return {}


@pytest_asyncio.fixture(scope="function")
async def db_engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create tables, yield the engine, then drop tables for isolation."""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, **_engine_kwargs(TEST_DATABASE_URL))
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    session_factory = async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Anonymous HTTP client that overrides the DB dependency with the test session."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


async def _make_user(db: AsyncSession, username: str, role: str) -> AdminUser:
    user = AdminUser(username=username, password_hash=hash_password(PASSWORD), role=role)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def admin_user(db_session: AsyncSession) -> AdminUser:
    return await _make_user(db_session, "admin", "ADMIN")


@pytest_asyncio.fixture
async def staff_user(db_session: AsyncSession) -> AdminUser:
    return await _make_user(db_session, "frontdesk", "STAFF")


@pytest_asyncio.fixture
async def viewer_user(db_session: AsyncSession) -> AdminUser:
    return await _make_user(db_session, "auditor", "VIEWER")


async def _logged_in_client(user: AdminUser) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.post(
            "/api/auth/login", json={"username": user.username, "password": PASSWORD}
        )
        assert response.status_code == 200, response.text
        yield ac


@pytest_asyncio.fixture
async def admin_client(client: AsyncClient, admin_user: AdminUser) -> AsyncGenerator[AsyncClient, None]:
    """Separate client holding an ADMIN session cookie. Depends on `client` for the DB override."""
    async for ac in _logged_in_client(admin_user):
        yield ac


@pytest_asyncio.fixture
async def staff_client(client: AsyncClient, staff_user: AdminUser) -> AsyncGenerator[AsyncClient, None]:
    async for ac in _logged_in_client(staff_user):
        yield ac


@pytest_asyncio.fixture
async def viewer_client(client: AsyncClient, viewer_user: AdminUser) -> AsyncGenerator[AsyncClient, None]:
    async for ac in _logged_in_client(viewer_user):
        yield ac


@pytest_asyncio.fixture
async def room(db_session: AsyncSession) -> Resource:
    """An available room resource."""
    resource = Resource(kind="ROOM", name="Room A", subcategory="Meeting", quantity=1, status="Available")
    db_session.add(resource)
    await db_session.commit()
    await db_session.refresh(resource)
    return resource


@pytest_asyncio.fixture
async def projector(db_session: AsyncSession) -> Resource:
    resource = Resource(kind="EQUIPMENT", name="Projector 1", type="Epson", quantity=3, status="Available")
    db_session.add(resource)
    await db_session.commit()
    await db_session.refresh(resource)
    return resource


def booking_payload(resource: Resource, start: str, end: str, **extra) -> dict:
    payload = {
        "kind": resource.kind,
        "resource_id": resource.id,
        "resource_name": resource.name,
        "start_dt": start,
        "end_dt": end,
    }
    payload.update(extra)
    return payload
