"""
Pytest Configuration and Fixtures

Provides reusable fixtures for testing the Auth API.
"""

import os
import time
import uuid
from datetime import date
from typing import Callable
from unittest.mock import AsyncMock, MagicMock

# Must be set before the app settings are loaded
os.environ.setdefault("JWT_SECRET", "super-secret-jwt-token-for-testing-only")

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_db
from app.core.security import hash_password
from app.main import app
from app.models.user import User


SECRET = os.environ["JWT_SECRET"]


@pytest.fixture(autouse=True)
def jwt_secret(monkeypatch) -> str:
    """Pin the signing secret for every test."""
    monkeypatch.setattr(settings, "JWT_SECRET", SECRET)
    return SECRET


# ==================== Token Fixtures ====================

@pytest.fixture
def make_token() -> Callable[..., str]:
    """
    Factory fixture to build signed tokens with arbitrary claims.

    Usage:
        token = make_token(email="", exp=0)
    """
    def _make_token(secret: str = SECRET, algorithm: str = "HS256", **overrides) -> str:
        payload = {
            "id": str(uuid.uuid4()),
            "public_id": 1234567,
            "user_type": "customer",
            "email": "test@example.com",
            "exp": int(time.time()) + 3600,
        }
        payload.update(overrides)
        return jwt.encode(payload, secret, algorithm=algorithm)
    return _make_token


# ==================== Database Fixtures ====================

@pytest.fixture
def mock_async_session() -> AsyncMock:
    """
    Create a mock async database session.

    Returns:
        AsyncMock configured to behave like AsyncSession.
    """
    session = AsyncMock(spec=AsyncSession)
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    return session


@pytest.fixture
def query_returns(mock_async_session: AsyncMock) -> Callable[..., None]:
    """
    Factory fixture to queue results for `session.execute(...)`.

    Each argument is what `scalar_one_or_none()` returns for one query, in order.
    """
    def _query_returns(*rows) -> None:
        results = []
        for row in rows:
            result = MagicMock()
            result.scalar_one_or_none.return_value = row
            results.append(result)
        mock_async_session.execute.side_effect = results
    return _query_returns


@pytest.fixture
def sample_user() -> User:
    """An active user whose password is 'correct-horse'."""
    return User(
        id=uuid.UUID("6f1c2d3e-4b5a-4c6d-8e7f-9a0b1c2d3e4f"),
        public_id=4821937,
        name="Maria Souza",
        email="maria@example.com",
        document="529.982.247-25",
        password=hash_password("correct-horse"),
        birthdate=date(1990, 5, 17),
        login_type="email",
        user_type="customer",
        is_active=True,
        deletion_date=None,
    )


# ==================== HTTP Client Fixtures ====================

@pytest.fixture
def client(mock_async_session: AsyncMock):
    """TestClient whose database dependency yields the mock session."""
    app.dependency_overrides[get_db] = lambda: mock_async_session
    yield TestClient(app)
    app.dependency_overrides.clear()
