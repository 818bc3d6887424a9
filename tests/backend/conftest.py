"""
Backend-specific test fixtures and configuration.

These fixtures wire the real services onto mock MongoDB, fake Redis and a
mocked Clerk client, and expose a FastAPI TestClient over them.
"""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "backend"))


# =============================================================================
# Clerk Client Fixtures
# =============================================================================

@pytest.fixture
def mock_clerk(clerk_user):
    """
    Create a fully mocked ClerkClient.

    All methods are AsyncMock with happy-path return values; override per test:

        mock_clerk.create_user.side_effect = IdentityProviderError(...)
    """
    clerk = MagicMock()
    clerk.create_user = AsyncMock(return_value=clerk_user)
    clerk.get_user = AsyncMock(return_value=clerk_user)
    clerk.find_user_by_email = AsyncMock(return_value=clerk_user)
    clerk.verify_password = AsyncMock(return_value=True)
    clerk.create_session = AsyncMock(return_value={"id": "sess_new", "user_id": clerk_user["id"]})
    clerk.create_session_token = AsyncMock(return_value="jwt.session.token")
    clerk.revoke_session = AsyncMock(return_value={"id": "sess_new", "status": "revoked"})
    clerk.get_jwks = AsyncMock(return_value={"keys": []})
    clerk.close = AsyncMock()
    return clerk


# =============================================================================
# Container / App Fixtures
# =============================================================================

@pytest.fixture
def container(test_settings, mock_users_db, mock_redis, mock_clerk):
    """Service container over the mocks."""
    from nurture.container import ServiceContainer

    return ServiceContainer.build(
        test_settings,
        db=mock_users_db,
        redis=mock_redis,
        clerk=mock_clerk,
    )


@pytest.fixture
def app(container):
    """
    Create the FastAPI app for testing.

    The injected container keeps the lifespan from opening real connections.
    """
    from nurture.main import create_app
    return create_app(container=container)


@pytest.fixture
def client(app):
    """
    Create a TestClient for the FastAPI app.

    Use this for synchronous endpoint testing.
    """
    from fastapi.testclient import TestClient

    with TestClient(app) as c:
        yield c


# =============================================================================
# Response Assertion Helpers
# =============================================================================

@pytest.fixture
def assert_error_response():
    """Helper to assert error response structure."""
    def _assert(response, status_code: int, code: str):
        assert response.status_code == status_code
        data = response.json()
        assert data["code"] == code
        assert isinstance(data["error"], str) and data["error"]
    return _assert
