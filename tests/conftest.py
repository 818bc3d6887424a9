"""
Global test fixtures for the Nurture backend.

This module provides shared fixtures for all tests including:
- Mock MongoDB (mongomock-motor)
- Mock Redis (fakeredis)
- Test settings with a known webhook secret and session key
- Session tokens for authenticated requests
"""

import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest
import pytest_asyncio

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "backend"))
sys.path.insert(0, str(Path(__file__).parent))

from nurture.config import Settings  # noqa: E402
from helpers import (  # noqa: E402
    SESSION_KEY,
    WEBHOOK_SECRET,
    TEST_USER_ID,
    make_session_token,
)


# =============================================================================
# Settings Fixtures
# =============================================================================

@pytest.fixture
def test_settings() -> Settings:
    """Settings isolated from the environment and any .env file."""
    return Settings(
        _env_file=None,
        environment="test",
        mongo_db_name="nurture_test",
        clerk_secret_key="sk_test_nurture",
        clerk_api_url="https://api.clerk.test/v1",
        clerk_webhook_secret=WEBHOOK_SECRET,
        clerk_jwt_key=SESSION_KEY,
        session_token_algorithms=["HS256"],
        webhook_tolerance_seconds=300,
        signin_rate_limit_attempts=5,
        signup_rate_limit_attempts=10,
    )


# =============================================================================
# MongoDB Fixtures (mongomock-motor)
# =============================================================================

@pytest.fixture
def mock_async_mongo_client():
    """
    Create an async mock MongoDB client using mongomock-motor.

    Its coroutines are not bound to an event loop, so the same client works
    in async tests and behind the FastAPI TestClient.
    """
    try:
        from mongomock_motor import AsyncMongoMockClient
        client = AsyncMongoMockClient()
        yield client
        client.close()
    except ImportError:
        pytest.skip("mongomock-motor not installed")


@pytest.fixture
def mock_users_db(mock_async_mongo_client):
    """Provide mock users database."""
    return mock_async_mongo_client["nurture_test"]


# =============================================================================
# Redis Fixtures (fakeredis)
# =============================================================================

@pytest.fixture
def mock_redis():
    """
    Create an async fake Redis client.

    Not awaited here: connections open lazily on first use, inside
    whichever loop the test runs.
    """
    try:
        import fakeredis
        import fakeredis.aioredis
        return fakeredis.aioredis.FakeRedis(server=fakeredis.FakeServer(), decode_responses=True)
    except ImportError:
        pytest.skip("fakeredis not installed")


@pytest_asyncio.fixture
async def mock_async_redis(mock_redis):
    """Fake Redis flushed after an async test."""
    yield mock_redis
    await mock_redis.flushall()
    await mock_redis.aclose()


# =============================================================================
# User Fixtures
# =============================================================================

@pytest.fixture
def clerk_user() -> dict:
    """A Clerk user object as returned by the backend API."""
    return {
        "id": TEST_USER_ID,
        "object": "user",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "primary_email_address_id": "idn_primary",
        "email_addresses": [
            {"id": "idn_other", "email_address": "old@example.com"},
            {"id": "idn_primary", "email_address": "ada@example.com"},
        ],
        "public_metadata": {},
        "created_at": 1735468800000,
        "updated_at": 1735468800000,
    }


@pytest.fixture
def user_document() -> dict:
    """A complete user document as stored in MongoDB."""
    now = datetime.now(timezone.utc)
    return {
        "_id": TEST_USER_ID,
        "email": "ada@example.com",
        "first_name": "Ada",
        "last_name": "Lovelace",
        "relationship_id": None,
        "partner_id": None,
        "profile_data": {"a": 1, "b": 2},
        "provider_updated_at": 1735468800000,
        "created_at": now,
        "updated_at": now,
    }


# =============================================================================
# Session Token Helpers
# =============================================================================

@pytest.fixture
def session_token() -> str:
    """A valid session token for TEST_USER_ID."""
    return make_session_token()


@pytest.fixture
def auth_headers(session_token) -> dict[str, str]:
    """Authorization header carrying a valid session token."""
    return {"Authorization": f"Bearer {session_token}"}
