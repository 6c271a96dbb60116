"""Test configuration and fixtures"""

import os

# Must be set before the application settings are first loaded
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

from datetime import date

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool
from uuid import uuid4

from sucurries.main import app
from sucurries.database import Base, get_db
from sucurries.models.user import User, UserRole
from sucurries.api.auth import get_password_hash, create_access_token
from sucurries.api.reservations import get_today


# Test database URL (use in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Reservation-window clock used by API tests
TODAY = date(2024, 5, 20)


@pytest.fixture
def today():
    """Fixed "today" for the booking window"""
    return TODAY


@pytest.fixture
async def test_db():
    """Create test database"""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)
    
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    
    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    
    async with session_factory() as session:
        yield session
    
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    
    await engine.dispose()


@pytest.fixture
async def test_user(test_db):
    """Create a customer"""
    user = User(
        id=uuid4(),
        email="jane@example.com",
        hashed_password=get_password_hash("testpass123"),
        first_name="Jane",
        last_name="Doe",
        phone="+15551234567",
        role=UserRole.CUSTOMER,
        is_active=True,
    )
    test_db.add(user)
    await test_db.commit()
    
    return user


@pytest.fixture
async def other_user(test_db):
    """Create a second customer"""
    user = User(
        id=uuid4(),
        email="john@example.com",
        hashed_password=get_password_hash("otherpass123"),
        first_name="John",
        last_name="Smith",
        role=UserRole.CUSTOMER,
        is_active=True,
    )
    test_db.add(user)
    await test_db.commit()
    
    return user


@pytest.fixture
async def test_admin_user(test_db):
    """Create an admin user"""
    user = User(
        id=uuid4(),
        email="admin@example.com",
        hashed_password=get_password_hash("adminpass123"),
        first_name="Admin",
        last_name="User",
        role=UserRole.ADMIN,
        is_active=True,
    )
    test_db.add(user)
    await test_db.commit()
    
    return user


@pytest.fixture
async def anonymous_client(test_db):
    """Client with overridden database and clock, without a CSRF token"""
    async def override_get_db():
        yield test_db
    
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: (lambda: TODAY)
    
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        yield client
    
    app.dependency_overrides.clear()


@pytest.fixture
async def client(anonymous_client):
    """Guest client holding a CSRF cookie and header"""
    response = await anonymous_client.get("/auth/csrf-token")
    assert response.status_code == 200
    anonymous_client.headers["X-CSRF-Token"] = response.json()["csrf_token"]
    
    return anonymous_client


@pytest.fixture
async def authenticated_client(client, test_user):
    """Create authenticated test client"""
    token = create_access_token(test_user)
    client.headers["Authorization"] = f"Bearer {token}"
    
    return client


@pytest.fixture
async def admin_client(client, test_admin_user):
    """Create admin authenticated test client"""
    token = create_access_token(test_admin_user)
    client.headers["Authorization"] = f"Bearer {token}"
    
    return client
