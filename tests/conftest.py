"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Generator

import fakeredis.aioredis
import pytest
from httpx import ASGITransport, AsyncClient

from bearer_auth.core.token_config import init, reset
from bearer_auth.repositories.refresh_token_repo import MemoryRefreshTokenStore
from bearer_auth.services.token_service import sign

TEST_KEY = "test-secret-key-for-bearer-auth-suite"
WRONG_KEY = "wrong-secret-key-for-bearer-auth-suite"
IDENTITY_KEY = "user_id"
IDENTITY = "test-user-123"


# --- Token configuration ---


@pytest.fixture(autouse=True)
def reset_token_config() -> Generator[None, None, None]:
    """Start and finish every test from the built-in configuration."""
    reset()
    yield
    reset()


@pytest.fixture
def configured() -> None:
    """Configure the test key with a required identity claim."""
    init(TEST_KEY, identity_key=IDENTITY_KEY)


# --- Test Redis (fakeredis) ---


@pytest.fixture
def fake_redis() -> fakeredis.aioredis.FakeRedis:
    """Create a fresh fake Redis client."""
    return fakeredis.aioredis.FakeRedis(decode_responses=True)


# --- Token helpers ---


def make_auth_headers(identity: str = IDENTITY) -> dict[str, str]:
    """Generate Authorization headers with a valid access token."""
    token, _ = sign(identity)
    return {"Authorization": f"Bearer {token}"}


# --- App & client fixtures ---


@pytest.fixture
def memory_store(monkeypatch: pytest.MonkeyPatch) -> MemoryRefreshTokenStore:
    """Enable single-use rotation in the app with an in-memory store."""
    store = MemoryRefreshTokenStore()
    monkeypatch.setattr("bearer_auth.core.token_store.token_store", store)
    return store


@pytest.fixture
async def async_client() -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client against a configured app.

    ASGITransport does not run the lifespan, so the configuration the
    lifespan would publish is set up here.
    """
    from bearer_auth.main import PUBLIC_PATHS, create_app

    init(
        TEST_KEY,
        identity_key=IDENTITY_KEY,
        skip_paths=PUBLIC_PATHS,
        common_skip_paths=True,
    )
    transport = ASGITransport(app=create_app())
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
