"""Unit tests for Settings loading."""

import pytest
from pydantic import SecretStr
from pydantic import ValidationError as PydanticValidationError

from pazireshino_config import Settings, clear_settings_cache, get_settings


@pytest.fixture
def required_env(monkeypatch):
    monkeypatch.setenv("JWT_SECRET_KEY", "env-secret")
    monkeypatch.setenv("POSTGRES_PASSWORD", "env-pw")


class TestSettings:
    def test_defaults(self, required_env):
        settings = Settings()

        assert settings.jwt_secret_key.get_secret_value() == "env-secret"
        assert settings.jwt_expires_in_days == 90
        assert settings.password_reset_expire_minutes == 10
        assert settings.environment == "production"
        assert settings.is_development is False
        assert settings.smtp_enabled is False

    def test_database_url(self, required_env, monkeypatch):
        monkeypatch.setenv("POSTGRES_HOST", "db")
        monkeypatch.setenv("POSTGRES_DB", "referrals")

        assert Settings().database_url == (
            "postgresql+asyncpg://postgres:env-pw@db:5432/referrals"
        )

    def test_cors_origins_parsing(self, required_env):
        settings = Settings(api_cors_origins="http://a.com, http://b.com,")

        assert settings.cors_origins == ["http://a.com", "http://b.com"]

    def test_cors_origins_from_list(self, required_env):
        settings = Settings(api_cors_origins=["http://a.com", "http://b.com"])

        assert settings.api_cors_origins == "http://a.com,http://b.com"

    def test_secret_not_in_repr(self, required_env):
        assert "env-secret" not in repr(Settings())

    def test_missing_jwt_secret_fails(self, monkeypatch):
        monkeypatch.delenv("JWT_SECRET_KEY", raising=False)
        monkeypatch.setenv("POSTGRES_PASSWORD", "env-pw")

        with pytest.raises(PydanticValidationError):
            Settings(_env_file=None)

    def test_environment_is_restricted(self, required_env):
        with pytest.raises(PydanticValidationError):
            Settings(environment="staging")

    def test_init_values_override_env(self, required_env):
        settings = Settings(jwt_secret_key=SecretStr("explicit"))

        assert settings.jwt_secret_key.get_secret_value() == "explicit"


class TestGetSettings:
    def test_cached_until_cleared(self, required_env, monkeypatch):
        first = get_settings()
        assert get_settings() is first

        monkeypatch.setenv("JWT_EXPIRES_IN_DAYS", "7")
        assert get_settings().jwt_expires_in_days == 90

        clear_settings_cache()
        assert get_settings().jwt_expires_in_days == 7
