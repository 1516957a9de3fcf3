"""Tests for environment settings and their application to the token config."""

from datetime import timedelta

import pytest
from pydantic import SecretStr, ValidationError

from bearer_auth.core.config import Settings
from bearer_auth.core.settings.token_config import DEFAULT_KEY
from bearer_auth.core.token_config import (
    COMMON_SKIP_PATHS,
    get_config,
    init_from_settings,
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in (
        "JWT_SECRET_KEY",
        "JWT_IDENTITY_KEY",
        "JWT_SKIP_PATHS",
        "JWT_ACCESS_TOKEN_EXPIRE_MINUTES",
        "JWT_COMMON_SKIP_PATHS",
        "REFRESH_TOKEN_STORE",
    ):
        monkeypatch.delenv(name, raising=False)


class TestSettings:
    """Environment loading."""

    def test_defaults(self) -> None:
        settings = Settings(_env_file=None)
        assert settings.auth.algorithm == "HS256"
        assert settings.auth.identity_key == "user_id"
        assert settings.auth.access_token_expire_minutes == 120
        assert settings.auth.refresh_token_expire_days == 7
        assert settings.auth.refresh_token_store == "none"
        assert settings.auth.skip_paths_list == []
        assert settings.app.is_development is True

    def test_environment_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("JWT_SECRET_KEY", "env-secret-key-for-settings-tests")
        monkeypatch.setenv("JWT_SKIP_PATHS", " /public/* , /docs,, ")
        monkeypatch.setenv("JWT_ACCESS_TOKEN_EXPIRE_MINUTES", "30")
        monkeypatch.setenv("REFRESH_TOKEN_STORE", "redis")
        settings = Settings(_env_file=None)
        assert (
            settings.auth.secret_key.get_secret_value()
            == "env-secret-key-for-settings-tests"
        )
        assert settings.auth.skip_paths_list == ["/public/*", "/docs"]
        assert settings.auth.access_token_expire_minutes == 30
        assert settings.auth.refresh_token_store == "redis"

    def test_out_of_range_expiration(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("JWT_ACCESS_TOKEN_EXPIRE_MINUTES", "0")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)


class TestInitFromSettings:
    """Publishing settings as the token configuration."""

    def test_applies_settings(self) -> None:
        settings = Settings(
            _env_file=None,
            jwt_secret_key=SecretStr("settings-secret-key-for-tests"),
            jwt_identity_key="sub",
            jwt_access_token_expire_minutes=15,
            jwt_refresh_token_expire_days=1,
            jwt_skip_paths="/public/*",
            jwt_common_skip_paths=False,
        )
        config = init_from_settings(settings)
        assert config is get_config()
        assert config.signing_key == "settings-secret-key-for-tests"
        assert config.identity_key == "sub"
        assert config.expiration == timedelta(minutes=15)
        assert config.refresh_expiration == timedelta(days=1)
        assert config.skip_paths == ("/public/*",)

    def test_missing_secret_uses_built_in_key(self) -> None:
        config = init_from_settings(Settings(_env_file=None))
        assert config.signing_key == DEFAULT_KEY

    def test_extra_skip_paths_and_common_paths(self) -> None:
        settings = Settings(_env_file=None, jwt_skip_paths="/a")
        config = init_from_settings(settings, extra_skip_paths=("/b", "/a"))
        assert config.skip_paths == ("/a", "/b", *COMMON_SKIP_PATHS)
