"""Redis-backed refresh token store."""

from datetime import UTC, datetime, timedelta

import redis.asyncio as redis
import structlog

from bearer_auth.core.exceptions import (
    RefreshTokenExpiredError,
    RefreshTokenNotFoundError,
)
from bearer_auth.repositories.refresh_token_repo import RefreshTokenStore
from bearer_auth.schemas.token_schema import RefreshTokenData

logger = structlog.get_logger()

TOKEN_PREFIX = "refresh_token:"
REVOKED_PREFIX = "refresh_token_revoked:"

DEFAULT_RETENTION = timedelta(days=1)


class RedisRefreshTokenStore(RefreshTokenStore):
    """Durable store on Redis.

    Entries live for their remaining lifetime plus ``retention`` so a token
    that expired recently is reported as expired rather than unknown.
    Revocation is a ``SET NX`` on a separate key, which makes it atomic
    across processes.
    """

    def __init__(
        self,
        redis_client: redis.Redis,  # type: ignore[type-arg]
        retention: timedelta = DEFAULT_RETENTION,
        key_prefix: str = "",
    ) -> None:
        self._redis = redis_client
        self._retention = retention
        self._prefix = key_prefix

    def _token_key(self, token_id: str) -> str:
        return f"{self._prefix}{TOKEN_PREFIX}{token_id}"

    def _revoked_key(self, token_id: str) -> str:
        return f"{self._prefix}{REVOKED_PREFIX}{token_id}"

    def _ttl(self, data: RefreshTokenData) -> int:
        remaining = data.expires_at - datetime.now(UTC) + self._retention
        return max(int(remaining.total_seconds()), 1)

    async def save(self, data: RefreshTokenData) -> None:
        await self._redis.setex(
            self._token_key(data.token_id), self._ttl(data), data.model_dump_json()
        )
        if data.revoked:
            await self._redis.setex(
                self._revoked_key(data.token_id), self._ttl(data), "1"
            )

    async def get(self, token_id: str) -> RefreshTokenData:
        raw = await self._redis.get(self._token_key(token_id))
        if raw is None:
            raise RefreshTokenNotFoundError(token_id)
        data = RefreshTokenData.model_validate_json(raw)
        if data.is_expired():
            raise RefreshTokenExpiredError(token_id)
        if await self._redis.exists(self._revoked_key(token_id)):
            data = data.model_copy(update={"revoked": True})
        return data

    async def invalidate(self, token_id: str) -> bool:
        raw = await self._redis.get(self._token_key(token_id))
        if raw is None:
            return False
        data = RefreshTokenData.model_validate_json(raw)
        revoked = bool(
            await self._redis.set(
                self._revoked_key(token_id), "1", ex=self._ttl(data), nx=True
            )
        )
        if revoked:
            logger.info("Refresh token revoked", token_id=token_id)
        return revoked

    async def purge_expired(self) -> int:
        now = datetime.now(UTC)
        purged = 0
        pattern = f"{self._prefix}{TOKEN_PREFIX}*"
        async for key in self._redis.scan_iter(match=pattern):
            raw = await self._redis.get(key)
            if raw is None:
                continue
            data = RefreshTokenData.model_validate_json(raw)
            if data.is_expired(now):
                await self._redis.delete(key, self._revoked_key(data.token_id))
                purged += 1
        if purged:
            logger.info("Purged expired refresh tokens", count=purged)
        return purged
