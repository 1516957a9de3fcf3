"""JWT authentication configuration loaded from the environment."""

from typing import Literal

from pydantic import BaseModel, SecretStr


class AuthConfig(BaseModel, frozen=True):
    """JWT authentication settings."""

    secret_key: SecretStr
    algorithm: str
    identity_key: str
    access_token_expire_minutes: int
    refresh_token_expire_days: int
    skip_paths: str
    common_skip_paths: bool
    refresh_token_store: Literal["none", "memory", "redis"]

    @property
    def skip_paths_list(self) -> list[str]:
        """Get skip path patterns as a list."""
        return [p.strip() for p in self.skip_paths.split(",") if p.strip()]
