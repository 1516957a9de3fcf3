"""Tests for the token issuing script."""

import fakeredis
import fakeredis.aioredis
import pytest
from pydantic import SecretStr

from bearer_auth.core import token_store
from bearer_auth.core.config import Settings
from bearer_auth.core.exceptions import RefreshTokenRevokedError
from bearer_auth.repositories.redis_refresh_token_repo import RedisRefreshTokenStore
from bearer_auth.services.token_pair_service import TokenPairService
from bearer_auth.services.token_service import get_claims, parse_identity
from scripts.issue_token import issue
from tests.conftest import IDENTITY, TEST_KEY


def _use_settings(monkeypatch: pytest.MonkeyPatch, **overrides: object) -> None:
    settings = Settings(
        _env_file=None,
        jwt_secret_key=SecretStr(TEST_KEY),
        jwt_identity_key="sub",
        **overrides,
    )
    monkeypatch.setattr("scripts.issue_token.settings", settings)


class TestIssueToken:
    """Tokens minted from the environment settings."""

    async def test_issue_pair(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _use_settings(monkeypatch)
        result = await issue(IDENTITY, access_only=False)
        assert set(result) >= {"access_token", "refresh_token", "refresh_expire_at"}
        assert parse_identity(result["access_token"], TEST_KEY) == IDENTITY
        assert get_claims(result["refresh_token"])["type"] == "refresh"

    async def test_issue_access_only(self, monkeypatch: pytest.MonkeyPatch) -> None:
        _use_settings(monkeypatch)
        result = await issue(IDENTITY, access_only=True)
        assert set(result) == {"access_token", "access_expire_at"}
        assert get_claims(result["access_token"])["sub"] == IDENTITY


class TestIssueTokenWithRedisStore:
    """Refresh tokens from the script are recorded for single-use rotation."""

    @pytest.fixture
    def server(self, monkeypatch: pytest.MonkeyPatch) -> fakeredis.FakeServer:
        server = fakeredis.FakeServer()
        monkeypatch.setattr(
            "bearer_auth.core.token_store.redis.from_url",
            lambda url, **kwargs: fakeredis.aioredis.FakeRedis(
                server=server, **kwargs
            ),
        )
        _use_settings(monkeypatch, refresh_token_store="redis")
        return server

    async def test_issued_token_rotates_once(
        self, server: fakeredis.FakeServer
    ) -> None:
        result = await issue(IDENTITY, access_only=False)
        assert token_store.get_token_store() is None

        client = fakeredis.aioredis.FakeRedis(server=server, decode_responses=True)
        service = TokenPairService(RedisRefreshTokenStore(client))
        new_pair = await service.rotate(result["refresh_token"])
        assert parse_identity(new_pair.access_token, TEST_KEY) == IDENTITY
        with pytest.raises(RefreshTokenRevokedError):
            await service.rotate(result["refresh_token"])

    async def test_access_only_leaves_store_untouched(
        self, server: fakeredis.FakeServer
    ) -> None:
        await issue(IDENTITY, access_only=True)
        client = fakeredis.aioredis.FakeRedis(server=server, decode_responses=True)
        assert await client.keys("*") == []
