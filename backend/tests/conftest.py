"""Pytest configuration and fixtures for backend tests."""

from collections.abc import AsyncGenerator
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.database import get_db
from app.main import app
from app.services.reference_ranges import reset_reference_range_service
from app.services.risk_scorer import reset_risk_scorer_service


@pytest.fixture(autouse=True)
def reset_singletons() -> None:
    """Give every test fresh service singletons."""
    reset_risk_scorer_service()
    reset_reference_range_service()


@pytest.fixture
def mock_db_session() -> MagicMock:
    """Create a mock database session.

    Returns a mock AsyncSession that can be used in place of a real database.
    Objects passed to ``add`` get a UUID string ``id`` as a flush would assign.
    """
    session = MagicMock()
    session.add = MagicMock(side_effect=lambda obj: setattr(obj, "id", str(uuid4())))
    session.execute = AsyncMock()
    session.flush = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.close = AsyncMock()
    return session


def _make_result(scalar=None, rows=None) -> MagicMock:
    result = MagicMock()
    result.scalar_one_or_none.return_value = scalar
    result.scalars.return_value.all.return_value = rows or []
    return result


@pytest.fixture
def make_result():
    """Factory for mock query results.

    ``make_result(scalar=x)`` answers ``scalar_one_or_none()`` with x;
    ``make_result(rows=[...])`` answers ``scalars().all()``.
    """
    return _make_result


@pytest.fixture
async def client_with_mock_db(
    mock_db_session: MagicMock,
) -> AsyncGenerator[AsyncClient, None]:
    """Create async test client with a mocked database.

    This allows testing API endpoints without a real database.
    """

    async def override_get_db():
        yield mock_db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    # Clean up overrides
    app.dependency_overrides.clear()


@pytest.fixture
async def client() -> AsyncGenerator[AsyncClient, None]:
    """Create async test client without database mocking.

    Use this for endpoints that don't require database access.
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
