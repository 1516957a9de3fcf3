"""Process-wide token configuration with init/reset lifecycle.

The active configuration is a frozen ``TokenConfig``. Writers build a complete
new snapshot and publish it with one reference assignment while holding
``_write_lock``; readers grab the current reference once and use it for the
whole operation, so no reader ever sees a mix of old and new fields.
"""

import threading
from collections.abc import Iterable
from datetime import timedelta

import structlog
from pydantic import SecretBytes, SecretStr, ValidationError

from bearer_auth.core.exceptions import ConfigurationError
from bearer_auth.core.settings import TokenConfig
from bearer_auth.core.settings.token_config import DEFAULT_KEY

logger = structlog.get_logger()

COMMON_SKIP_PATHS: tuple[str, ...] = (
    "/health",
    "/healthz",
    "/livez",
    "/readyz",
    "/metrics",
)

_write_lock = threading.Lock()
_config: TokenConfig = TokenConfig()


def _publish(config: TokenConfig) -> TokenConfig:
    global _config  # noqa: PLW0603
    with _write_lock:
        _config = config
    return config


def _dedupe(paths: Iterable[str]) -> tuple[str, ...]:
    return tuple(dict.fromkeys(paths))


def init(
    key: str | bytes,
    *,
    identity_key: str | None = None,
    expiration: timedelta | None = None,
    refresh_expiration: timedelta | None = None,
    skip_paths: Iterable[str] | None = None,
    common_skip_paths: bool = False,
    algorithm: str | None = None,
) -> TokenConfig:
    """Publish a new configuration built from the defaults plus the given options.

    Raises:
        ConfigurationError: The key is empty or the options contradict each
            other (e.g. refresh lifetime not longer than access lifetime).
    """
    paths = list(skip_paths or ())
    if common_skip_paths:
        paths.extend(COMMON_SKIP_PATHS)

    fields: dict[str, object] = {
        "key": SecretBytes(key) if isinstance(key, bytes) else SecretStr(key),
        "skip_paths": _dedupe(paths),
    }
    if identity_key is not None:
        fields["identity_key"] = identity_key
    if expiration is not None:
        fields["expiration"] = expiration
    if refresh_expiration is not None:
        fields["refresh_expiration"] = refresh_expiration
    if algorithm is not None:
        fields["algorithm"] = algorithm

    try:
        config = TokenConfig(**fields)
    except ValidationError as e:
        raise ConfigurationError(str(e)) from e

    logger.info(
        "Token configuration initialized",
        identity_key=config.identity_key,
        expiration=config.expiration.total_seconds(),
        refresh_expiration=config.refresh_expiration.total_seconds(),
        skip_paths=len(config.skip_paths),
    )
    return _publish(config)


def reset() -> TokenConfig:
    """Restore the built-in default configuration."""
    logger.debug("Token configuration reset")
    return _publish(TokenConfig())


def init_from_settings(  # type: ignore[no-untyped-def]
    settings, extra_skip_paths: Iterable[str] = ()
) -> TokenConfig:
    """Initialize from environment ``Settings`` (see ``core.config``).

    ``extra_skip_paths`` are appended to the configured ones, for routes an
    application always serves without a token.
    """
    auth = settings.auth
    key = auth.secret_key.get_secret_value()
    if not key:
        logger.warning("JWT_SECRET_KEY not set, using the built-in signing key")
        key = DEFAULT_KEY
    return init(
        key,
        identity_key=auth.identity_key,
        expiration=timedelta(minutes=auth.access_token_expire_minutes),
        refresh_expiration=timedelta(days=auth.refresh_token_expire_days),
        skip_paths=[*auth.skip_paths_list, *extra_skip_paths],
        common_skip_paths=auth.common_skip_paths,
        algorithm=auth.algorithm,
    )


def get_config() -> TokenConfig:
    """Get the current configuration snapshot."""
    return _config


# --- Accessors ---


def get_key() -> str | bytes:
    return _config.signing_key


def get_identity_key() -> str:
    return _config.identity_key


def is_identity_required() -> bool:
    return _config.is_identity_required


def get_expiration() -> timedelta:
    return _config.expiration


def get_refresh_expiration() -> timedelta:
    return _config.refresh_expiration


def get_skip_paths() -> list[str]:
    """Get a copy of the skip path patterns."""
    return list(_config.skip_paths)
