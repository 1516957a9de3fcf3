"""JWT signing and verification against the configured key."""

from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt

from bearer_auth.core.exceptions import (
    EmptyTokenError,
    InvalidTokenError,
    MalformedTokenError,
    SignatureMismatchError,
    TokenExpiredError,
    TokenNotYetValidError,
    TokenSigningError,
)
from bearer_auth.core.settings import TokenConfig
from bearer_auth.core.token_config import get_config

TIME_CLAIMS = ("iat", "nbf", "exp")


class TokenService:
    """Sign and verify identity tokens.

    Without a pinned ``config`` every call reads the current process-wide
    snapshot once and uses it throughout.
    """

    def __init__(self, config: TokenConfig | None = None) -> None:
        self._config = config

    @property
    def config(self) -> TokenConfig:
        return self._config if self._config is not None else get_config()

    # --- Signing ---

    def sign(self, identity: str) -> tuple[str, datetime]:
        """Sign a token for ``identity`` with the access token lifetime."""
        config = self.config
        claims: dict[str, Any] = {}
        if config.is_identity_required:
            claims[config.identity_key] = identity
        return self.encode(claims, config, config.expiration)

    def sign_with_claims(
        self,
        claims: Mapping[str, Any],
        expiration: timedelta | None = None,
    ) -> tuple[str, datetime]:
        """Sign caller claims plus the time claims.

        Time claims are always set by the signer; caller values for
        ``iat``/``nbf``/``exp`` are overwritten.
        """
        config = self.config
        if expiration is None:
            expiration = config.expiration
        return self.encode(claims, config, expiration)

    @staticmethod
    def encode(
        claims: Mapping[str, Any],
        config: TokenConfig,
        expiration: timedelta,
    ) -> tuple[str, datetime]:
        """Encode ``claims`` with fresh time claims under ``config``."""
        now = datetime.now(UTC).replace(microsecond=0)
        expire_at = now + expiration
        payload = dict(claims)
        payload.update({"iat": now, "nbf": now, "exp": expire_at})
        try:
            token = jwt.encode(payload, config.signing_key, algorithm=config.algorithm)
        except (jwt.PyJWTError, TypeError, ValueError) as e:
            raise TokenSigningError(f"Failed to sign token: {e}") from e
        return token, expire_at

    # --- Verification ---

    def parse_with_key(self, token: str, key: str | bytes) -> dict[str, Any]:
        """Verify ``token`` against ``key`` and return all claims.

        Raises:
            EmptyTokenError: ``token`` is empty.
            MalformedTokenError: Not a decodable compact JWS.
            SignatureMismatchError: Signed with a different key.
            TokenExpiredError: Past ``exp``.
            TokenNotYetValidError: Before ``nbf``.
            InvalidTokenError: Any other verification failure.
        """
        return self.decode(token, key, self.config)

    @staticmethod
    def decode(token: str, key: str | bytes, config: TokenConfig) -> dict[str, Any]:
        """Verify ``token`` with ``key`` under ``config``; see ``parse_with_key``."""
        if not token:
            raise EmptyTokenError
        try:
            return jwt.decode(
                token,
                key,
                algorithms=[config.algorithm],
                options={"require": ["exp"]},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpiredError from e
        except jwt.ImmatureSignatureError as e:
            raise TokenNotYetValidError from e
        except jwt.InvalidSignatureError as e:
            raise SignatureMismatchError from e
        except jwt.DecodeError as e:
            raise MalformedTokenError from e
        except jwt.InvalidTokenError as e:
            raise InvalidTokenError(message=f"Invalid token: {e}") from e

    def get_claims(self, token: str) -> dict[str, Any]:
        """Verify against the configured key and return all claims."""
        config = self.config
        return self.decode(token, config.signing_key, config)

    def parse_identity(self, token: str, key: str | bytes) -> str:
        """Verify ``token`` and return its identity claim.

        Returns an empty identity when no identity claim is configured.
        """
        config = self.config
        claims = self.decode(token, key, config)
        return self.identity_from_claims(claims, config)

    @staticmethod
    def identity_from_claims(claims: Mapping[str, Any], config: TokenConfig) -> str:
        if not config.is_identity_required:
            return ""
        identity = claims.get(config.identity_key)
        if not isinstance(identity, str):
            raise InvalidTokenError(
                message=f"Token is missing the '{config.identity_key}' claim"
            )
        return identity


_default_service = TokenService()

sign = _default_service.sign
sign_with_claims = _default_service.sign_with_claims
parse_with_key = _default_service.parse_with_key
get_claims = _default_service.get_claims
parse_identity = _default_service.parse_identity
