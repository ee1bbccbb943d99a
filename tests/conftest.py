# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# Environment variables are set before any cafe_api import, because
# cafe_api.config loads settings at import time.
# Every test gets its own SQLite file; the app's get_db dependency is
# overridden to hand out sessions bound to it.
# =============================================================================

import os
import tempfile

_TMP = tempfile.mkdtemp(prefix="cafe-api-tests-")

os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{_TMP}/unused.db")
os.environ.setdefault("UPLOAD_DIR", os.path.join(_TMP, "uploads"))
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("LOG_LEVEL", "WARNING")
os.environ.setdefault("MAX_UPLOAD_BYTES", "1024")

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from cafe_api.database import get_db
from cafe_api.main import app
from cafe_api.models import Base, Cafe, User
from cafe_api.services import review_service
from cafe_api.services.passwords import hash_password


# =============================================================================
# Database
# =============================================================================

@pytest.fixture
async def engine(tmp_path):
    """Fresh SQLite database file per test."""
    test_engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield test_engine
    await test_engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def fresh_cafe_locks():
    """asyncio locks bind to the loop that first waits on them; each test has its own loop."""
    review_service._cafe_locks.clear()
    yield
    review_service._cafe_locks.clear()


# =============================================================================
# Seed rows
# =============================================================================

@pytest.fixture
async def user(db):
    row = User(email="owner@example.com", password_hash=hash_password("secret123"))
    db.add(row)
    await db.commit()
    return row


@pytest.fixture
async def cafe(db, user):
    row = Cafe(
        name="The Cozy Corner",
        address="123 Main St, Anytown",
        description="A warm and inviting cafe.",
        amenities=["wifi"],
        average_rating=0.0,
        user_id=user.id,
    )
    db.add(row)
    await db.commit()
    return row


# =============================================================================
# HTTP
# =============================================================================

@pytest.fixture
async def client(session_factory):
    """httpx client against the app, with get_db bound to the test database."""

    async def _get_test_db():
        async with session_factory() as session:
            try:
                yield session
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = _get_test_db
    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as c:
        yield c
    app.dependency_overrides.clear()


async def login_as(client, email="reviewer@example.com", password="secret123"):
    """Register (if needed) and log in; the session cookie stays on client."""
    await client.post("/auth/register", json={"email": email, "password": password})
    response = await client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


@pytest.fixture
async def logged_in(client):
    return await login_as(client)


def photo_file(name="cafe.jpg", data=b"\xff\xd8\xff\xe0fake-jpeg", content_type="image/jpeg"):
    return {"photo": (name, data, content_type)}
