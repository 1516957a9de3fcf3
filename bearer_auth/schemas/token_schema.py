"""Token pair and refresh token schemas."""

from datetime import UTC, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

TokenType = Literal["access", "refresh"]


class TokenPair(BaseModel):
    """Access token and refresh token issued together."""

    model_config = ConfigDict(frozen=True)

    access_token: str
    access_expire_at: datetime
    refresh_token: str
    refresh_expire_at: datetime
    token_type: str = "bearer"

    @property
    def expires_in(self) -> int:
        """Seconds until the access token expires."""
        remaining = self.access_expire_at - datetime.now(UTC)
        return max(int(remaining.total_seconds()), 0)


class RefreshTokenData(BaseModel):
    """Bookkeeping entry for an issued refresh token."""

    model_config = ConfigDict(frozen=True)

    token_id: str = Field(description="The refresh token's jti claim")
    identity: str
    issued_at: datetime
    expires_at: datetime
    revoked: bool = False

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check whether the entry is past its expiry."""
        return (now or datetime.now(UTC)) >= self.expires_at


class RefreshRequest(BaseModel):
    """Token refresh request."""

    refresh_token: str = Field(description="Refresh token")


class RevokeRequest(BaseModel):
    """Refresh token revocation request."""

    refresh_token: str = Field(description="Refresh token to revoke")


class TokenPairResponse(BaseModel):
    """Token pair as returned over HTTP."""

    model_config = ConfigDict(frozen=True)

    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int = Field(description="Access token TTL in seconds")
    refresh_expires_at: datetime

    @classmethod
    def from_pair(cls, pair: TokenPair) -> "TokenPairResponse":
        return cls(
            access_token=pair.access_token,
            refresh_token=pair.refresh_token,
            token_type=pair.token_type,
            expires_in=pair.expires_in,
            refresh_expires_at=pair.refresh_expire_at,
        )


class RevokeResponse(BaseModel):
    """Revocation result."""

    model_config = ConfigDict(frozen=True)

    revoked: bool
