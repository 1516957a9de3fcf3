"""Access/refresh token pair issuance and rotation."""

import uuid
from datetime import datetime, timedelta
from typing import Any

from bearer_auth.core.exceptions import (
    EmptyTokenError,
    InvalidRefreshTokenError,
    InvalidTokenError,
    InvalidTokenTypeError,
    RefreshTokenExpiredError,
    RefreshTokenNotFoundError,
    RefreshTokenRevokedError,
)
from bearer_auth.core.settings import TokenConfig
from bearer_auth.core.token_config import get_config
from bearer_auth.repositories.refresh_token_repo import RefreshTokenStore
from bearer_auth.schemas.token_schema import RefreshTokenData, TokenPair, TokenType
from bearer_auth.services.token_service import TokenService


def _sign_typed(
    identity: str,
    token_type: TokenType,
    expiration: timedelta,
    config: TokenConfig,
) -> tuple[str, datetime, str]:
    token_id = uuid.uuid4().hex
    claims: dict[str, Any] = {"type": token_type, "jti": token_id}
    if config.is_identity_required:
        claims[config.identity_key] = identity
    token, expire_at = TokenService.encode(claims, config, expiration)
    return token, expire_at, token_id


def _build_pair(identity: str, config: TokenConfig) -> tuple[TokenPair, str]:
    access_token, access_expire_at, _ = _sign_typed(
        identity, "access", config.expiration, config
    )
    refresh_token, refresh_expire_at, refresh_id = _sign_typed(
        identity, "refresh", config.refresh_expiration, config
    )
    pair = TokenPair(
        access_token=access_token,
        access_expire_at=access_expire_at,
        refresh_token=refresh_token,
        refresh_expire_at=refresh_expire_at,
    )
    return pair, refresh_id


def sign_tokens(identity: str) -> TokenPair:
    """Issue an access token and a refresh token for ``identity``."""
    pair, _ = _build_pair(identity, get_config())
    return pair


def _verify(refresh_token: str, config: TokenConfig) -> dict[str, Any]:
    if not refresh_token:
        raise EmptyTokenError
    try:
        claims = TokenService.decode(refresh_token, config.signing_key, config)
    except InvalidTokenError as e:
        raise InvalidRefreshTokenError(
            message=f"Invalid refresh token: {e.message}"
        ) from e
    if claims.get("type") != "refresh":
        raise InvalidTokenTypeError(expected="refresh")
    return claims


def _identity(claims: dict[str, Any], config: TokenConfig) -> str:
    try:
        return TokenService.identity_from_claims(claims, config)
    except InvalidTokenError as e:
        raise InvalidRefreshTokenError(message=e.message) from e


def verify_refresh_token(refresh_token: str) -> dict[str, Any]:
    """Verify a refresh token and return its claims.

    Raises:
        EmptyTokenError: ``refresh_token`` is empty.
        InvalidTokenTypeError: The token is not of type ``refresh``.
        InvalidRefreshTokenError: Any other verification failure.
    """
    return _verify(refresh_token, get_config())


def refresh_tokens(refresh_token: str) -> TokenPair:
    """Exchange a valid refresh token for a brand-new pair.

    Stateless: the presented token stays valid until it expires.
    """
    config = get_config()
    claims = _verify(refresh_token, config)
    pair, _ = _build_pair(_identity(claims, config), config)
    return pair


class TokenPairService:
    """Token pair issuance with optional single-use refresh tokens.

    With a ``store`` every issued refresh token is recorded and may be
    rotated exactly once; revoked or unknown tokens are rejected. Without
    one, rotation is stateless.
    """

    def __init__(self, store: RefreshTokenStore | None = None) -> None:
        self._store = store

    @property
    def enforces_single_use(self) -> bool:
        return self._store is not None

    async def issue(self, identity: str) -> TokenPair:
        """Issue a pair and record its refresh token."""
        config = get_config()
        pair, refresh_id = _build_pair(identity, config)
        if self._store is not None:
            await self._store.save(
                RefreshTokenData(
                    token_id=refresh_id,
                    identity=identity,
                    issued_at=pair.refresh_expire_at - config.refresh_expiration,
                    expires_at=pair.refresh_expire_at,
                )
            )
        return pair

    async def rotate(self, refresh_token: str) -> TokenPair:
        """Exchange a refresh token for a new pair, consuming it."""
        config = get_config()
        claims = _verify(refresh_token, config)
        identity = _identity(claims, config)
        if self._store is None:
            pair, _ = _build_pair(identity, config)
            return pair

        token_id = self._token_id(claims)
        try:
            data = await self._store.get(token_id)
        except RefreshTokenNotFoundError as e:
            raise RefreshTokenRevokedError from e
        except RefreshTokenExpiredError as e:
            raise InvalidRefreshTokenError(message=e.message) from e
        if data.revoked or not await self._store.invalidate(token_id):
            raise RefreshTokenRevokedError
        return await self.issue(identity)

    async def revoke(self, refresh_token: str) -> bool:
        """Revoke a refresh token; returns whether a live entry was revoked."""
        claims = verify_refresh_token(refresh_token)
        if self._store is None:
            return False
        return await self._store.invalidate(self._token_id(claims))

    async def purge_expired(self) -> int:
        if self._store is None:
            return 0
        return await self._store.purge_expired()

    @staticmethod
    def _token_id(claims: dict[str, Any]) -> str:
        token_id = claims.get("jti")
        if not isinstance(token_id, str) or not token_id:
            raise InvalidRefreshTokenError(message="Refresh token has no identifier")
        return token_id
