"""
Pytest fixtures.

Each test gets its own SQLite file database, an AuditTrail bound to it and
two users (a content manager and a viewer). The app reads its settings at
import time, so the environment is prepared before anything from `app`
is imported.
"""

import os
import tempfile

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "learnhub-test-logs"))

import uuid
from datetime import datetime, timezone

import httpx
import pytest
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from app.core.auth import create_access_token
from app.core.database import Base, get_db
from app.crud.user import create_user
from app.models import Activity, ActionTypeEnum, UserRoleEnum
from app.schemas.user import UserCreate
from app.services.audit import AuditTrail, RequestContext


@pytest.fixture
async def engine(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", poolclass=NullPool)

    # SQLite leaves foreign keys off unless asked, per connection
    @event.listens_for(engine.sync_engine, "connect")
    def enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, expire_on_commit=False, class_=AsyncSession)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def audit_trail(session_factory):
    trail = AuditTrail(session_factory)
    yield trail
    await trail.drain()


@pytest.fixture
async def manager(db):
    return await create_user(
        db, UserCreate(name="Maya Manager", email="maya@example.com", role=UserRoleEnum.CONTENT_MANAGER)
    )


@pytest.fixture
async def viewer(db):
    return await create_user(
        db, UserCreate(name="Victor Viewer", email="victor@example.com", role=UserRoleEnum.VIEWER)
    )


@pytest.fixture
def ctx(manager):
    return RequestContext(user_id=manager.id, ip_address="10.0.0.7", user_agent="pytest-agent/1.0")


@pytest.fixture
def add_activity(db):
    """Insert an activity row directly, with full control over created_at."""

    async def _add(user_id, resource_id=None, action_type=ActionTypeEnum.VIEW, created_at=None, details=None):
        activity = Activity(
            id=uuid.uuid4(),
            user_id=user_id,
            resource_id=resource_id,
            action_type=action_type,
            details=details,
            created_at=created_at or datetime.now(timezone.utc),
        )
        db.add(activity)
        await db.commit()
        return activity

    return _add


@pytest.fixture
async def client(session_factory, audit_trail):
    from app.main import app

    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.state.audit = audit_trail

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(user)}", "User-Agent": "pytest-agent/1.0"}

    return _headers
