"""Immutable token configuration snapshot."""

from datetime import timedelta
from typing import Literal

from pydantic import BaseModel, SecretBytes, SecretStr, field_validator, model_validator

DEFAULT_KEY = "Rtg8BPKNEf2mB4mgvKONGPZZQSaJWNLijxR42qRgq0iBb5"
DEFAULT_EXPIRATION = timedelta(hours=2)
DEFAULT_REFRESH_EXPIRATION = timedelta(days=7)

# Claims written by the signer itself.
RESERVED_CLAIMS = frozenset({"iat", "nbf", "exp", "type", "jti"})


class TokenConfig(BaseModel, frozen=True):
    """Settings read by every sign and verify call.

    Instances are never edited. ``init`` and ``reset`` publish a new one,
    so a reader holding a reference always sees a consistent set of fields.
    """

    key: SecretStr | SecretBytes = SecretStr(DEFAULT_KEY)
    algorithm: Literal["HS256", "HS384", "HS512"] = "HS256"
    identity_key: str = ""
    expiration: timedelta = DEFAULT_EXPIRATION
    refresh_expiration: timedelta = DEFAULT_REFRESH_EXPIRATION
    skip_paths: tuple[str, ...] = ()

    @field_validator("key")
    @classmethod
    def validate_key(cls, v: SecretStr | SecretBytes) -> SecretStr | SecretBytes:
        if not v.get_secret_value():
            raise ValueError("Signing key must not be empty")
        return v

    @field_validator("identity_key")
    @classmethod
    def validate_identity_key(cls, v: str) -> str:
        if v in RESERVED_CLAIMS:
            raise ValueError(f"Identity key '{v}' is a reserved claim name")
        return v

    @field_validator("expiration")
    @classmethod
    def validate_expiration(cls, v: timedelta) -> timedelta:
        if v <= timedelta(0):
            raise ValueError("Access token expiration must be positive")
        return v

    @model_validator(mode="after")
    def validate_refresh_outlives_access(self) -> "TokenConfig":
        if self.refresh_expiration <= self.expiration:
            raise ValueError(
                "Refresh token expiration must be longer than access token expiration"
            )
        return self

    @property
    def signing_key(self) -> str | bytes:
        """Raw key material handed to the JWT library."""
        return self.key.get_secret_value()

    @property
    def is_identity_required(self) -> bool:
        """Tokens carry an identity claim only when a claim name is set."""
        return self.identity_key != ""
