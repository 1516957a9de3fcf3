"""Refresh token store lifecycle."""

import redis.asyncio as redis
import structlog

from bearer_auth.core.settings import AuthConfig, RedisConfig
from bearer_auth.repositories.redis_refresh_token_repo import RedisRefreshTokenStore
from bearer_auth.repositories.refresh_token_repo import (
    RefreshTokenStore,
    default_store,
)

logger = structlog.get_logger()

redis_client: redis.Redis | None = None  # type: ignore[type-arg]
token_store: RefreshTokenStore | None = None


async def init_token_store(
    auth: AuthConfig, redis_config: RedisConfig
) -> RefreshTokenStore | None:
    """Create the configured store; ``None`` keeps rotation stateless."""
    global redis_client, token_store  # noqa: PLW0603
    match auth.refresh_token_store:
        case "none":
            token_store = None
        case "memory":
            token_store = default_store()
        case "redis":
            redis_client = redis.from_url(redis_config.url, decode_responses=True)
            await redis_client.ping()
            token_store = RedisRefreshTokenStore(
                redis_client, key_prefix=redis_config.key_prefix
            )
    logger.info("Refresh token store ready", backend=auth.refresh_token_store)
    return token_store


async def close_token_store() -> None:
    """Drop the store and close the Redis connection if one is open."""
    global redis_client, token_store  # noqa: PLW0603
    token_store = None
    if redis_client:
        await redis_client.aclose()
        redis_client = None


def get_token_store() -> RefreshTokenStore | None:
    """Get the active store, or ``None`` for stateless rotation."""
    return token_store
