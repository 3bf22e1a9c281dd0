"""
Pytest configuration and fixtures
"""
import os

# Настройки должны быть заданы до импорта приложения
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///./portfolio-test.db"
os.environ["JWT_SECRET"] = "test-access-secret"
os.environ["JWT_REFRESH_SECRET"] = "test-refresh-secret"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ENVIRONMENT"] = "test"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["CREATE_TABLES_ON_STARTUP"] = "false"

from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from portfolio.core.config import get_settings
from portfolio.core.db import Database
from portfolio.core.rate_limit import limiter
from portfolio.main import create_app

API = "/api/v1"

ADMIN = {
    "username": "admin",
    "email": "admin@example.com",
    "password": "secret123",
}


@pytest.fixture
def settings(tmp_path, monkeypatch):
    """Settings pointing at a fresh SQLite file per test"""
    monkeypatch.setenv("DATABASE_URL", f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
async def database(settings) -> AsyncGenerator[Database, None]:
    """Create test database with all tables"""
    database = Database(settings.database_url)
    await database.create_all()
    yield database
    await database.dispose()


@pytest.fixture
def app(settings, database):
    """Application wired to the test database"""
    application = create_app(settings)
    # ASGITransport не запускает lifespan, поэтому БД подключается вручную
    application.state.db = database
    limiter.reset()
    yield application
    limiter.enabled = False


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db(database) -> AsyncGenerator[AsyncSession, None]:
    """Separate session for direct store access in tests"""
    async with database.session_factory() as session:
        yield session


@pytest.fixture
async def admin_user(client):
    """Register the admin and return the response data (user + accessToken)"""
    response = await client.post(f"{API}/auth/register", json=ADMIN)
    assert response.status_code == 201
    return response.json()["data"]


@pytest.fixture
def admin_token(admin_user) -> str:
    return admin_user["accessToken"]


@pytest.fixture
def auth_headers(admin_token) -> dict:
    return {"Authorization": f"Bearer {admin_token}"}
