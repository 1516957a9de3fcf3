"""Application configuration using Pydantic Settings V2."""

from functools import cached_property
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from bearer_auth.core.settings import AppConfig, AuthConfig, RedisConfig


class Settings(BaseSettings):
    """Settings loaded from environment variables.

    Flat fields are loaded directly from environment variables.
    Domain properties provide grouped access (e.g. settings.auth.algorithm).
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = Field(
        default="bearer-auth",
        description="Application name",
    )
    app_env: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )
    debug: bool = Field(
        default=False,
        description="Debug mode",
    )

    # JWT Auth
    jwt_secret_key: SecretStr = Field(
        default=SecretStr(""),
        description="JWT secret key for token signing (built-in key when empty)",
    )
    jwt_algorithm: Literal["HS256", "HS384", "HS512"] = Field(
        default="HS256",
        description="JWT HMAC signing algorithm",
    )
    jwt_identity_key: str = Field(
        default="user_id",
        description="Claim holding the identity; empty disables identity",
    )
    jwt_access_token_expire_minutes: int = Field(
        default=120,
        ge=1,
        le=1440,
        description="Access token expiration in minutes",
    )
    jwt_refresh_token_expire_days: int = Field(
        default=7,
        ge=1,
        le=90,
        description="Refresh token expiration in days",
    )
    jwt_skip_paths: str = Field(
        default="",
        description="Comma-separated path patterns that bypass authentication",
    )
    jwt_common_skip_paths: bool = Field(
        default=True,
        description="Also skip the common health and metrics endpoints",
    )
    refresh_token_store: Literal["none", "memory", "redis"] = Field(
        default="none",
        description="Refresh token store backend; 'none' keeps rotation stateless",
    )

    # Redis
    redis_url: str = Field(
        default="redis://localhost:6379/0",
        description="Redis connection URL",
    )
    redis_key_prefix: str = Field(
        default="",
        description="Prefix for refresh token keys in Redis",
    )

    # --- Domain properties ---

    @cached_property
    def app(self) -> AppConfig:
        """Application environment configuration."""
        return AppConfig(
            name=self.app_name,
            env=self.app_env,
            debug=self.debug,
        )

    @cached_property
    def auth(self) -> AuthConfig:
        """JWT authentication configuration."""
        return AuthConfig(
            secret_key=self.jwt_secret_key,
            algorithm=self.jwt_algorithm,
            identity_key=self.jwt_identity_key,
            access_token_expire_minutes=self.jwt_access_token_expire_minutes,
            refresh_token_expire_days=self.jwt_refresh_token_expire_days,
            skip_paths=self.jwt_skip_paths,
            common_skip_paths=self.jwt_common_skip_paths,
            refresh_token_store=self.refresh_token_store,
        )

    @cached_property
    def redis(self) -> RedisConfig:
        """Redis connection configuration."""
        return RedisConfig(url=self.redis_url, key_prefix=self.redis_key_prefix)


# Global settings instance
settings = Settings()
