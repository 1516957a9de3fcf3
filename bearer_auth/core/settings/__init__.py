"""Domain-specific configuration models."""

from bearer_auth.core.settings.app_config import AppConfig
from bearer_auth.core.settings.auth_config import AuthConfig
from bearer_auth.core.settings.redis_config import RedisConfig
from bearer_auth.core.settings.token_config import TokenConfig

__all__ = [
    "AppConfig",
    "AuthConfig",
    "RedisConfig",
    "TokenConfig",
]
