"""Stateless bearer-token authentication: sign, verify, rotate, skip."""

from bearer_auth.core.path_matcher import is_skipped, match_wildcard
from bearer_auth.core.request_parser import (
    parse_header,
    parse_request,
    parse_request_without_skip,
)
from bearer_auth.core.settings import TokenConfig
from bearer_auth.core.token_config import (
    COMMON_SKIP_PATHS,
    get_config,
    get_expiration,
    get_identity_key,
    get_key,
    get_refresh_expiration,
    get_skip_paths,
    init,
    init_from_settings,
    is_identity_required,
    reset,
)
from bearer_auth.repositories.refresh_token_repo import (
    MemoryRefreshTokenStore,
    RefreshTokenStore,
    default_store,
)
from bearer_auth.schemas.token_schema import RefreshTokenData, TokenPair
from bearer_auth.services.token_pair_service import (
    TokenPairService,
    refresh_tokens,
    sign_tokens,
)
from bearer_auth.services.token_service import (
    TokenService,
    get_claims,
    parse_identity,
    parse_with_key,
    sign,
    sign_with_claims,
)

__all__ = [
    "COMMON_SKIP_PATHS",
    "MemoryRefreshTokenStore",
    "RefreshTokenData",
    "RefreshTokenStore",
    "TokenConfig",
    "TokenPair",
    "TokenPairService",
    "TokenService",
    "default_store",
    "get_claims",
    "get_config",
    "get_expiration",
    "get_identity_key",
    "get_key",
    "get_refresh_expiration",
    "get_skip_paths",
    "init",
    "init_from_settings",
    "is_identity_required",
    "is_skipped",
    "match_wildcard",
    "parse_header",
    "parse_identity",
    "parse_request",
    "parse_request_without_skip",
    "parse_with_key",
    "refresh_tokens",
    "reset",
    "sign",
    "sign_tokens",
    "sign_with_claims",
]
