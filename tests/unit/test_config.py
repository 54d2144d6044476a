"""Unit tests for configuration and settings."""
import pytest

from campusbook.config import Settings, get_settings, reset_settings_cache
from campusbook.database import ensure_supported_backend


class TestSettings:
    """Test configuration management."""

    def test_get_settings_returns_same_instance(self):
        assert get_settings() is get_settings()

    def test_reset_settings_cache(self):
        settings1 = get_settings()
        reset_settings_cache()
        settings2 = get_settings()

        assert settings1 is not settings2

    def test_test_environment_is_applied(self):
        settings = get_settings()

        assert settings.database_url.startswith("sqlite:///")
        assert settings.rate_limiting_enabled is False

    def test_environment_overrides_defaults(self, monkeypatch):
        monkeypatch.setenv("SEED_ADMIN_USERNAME", "dean")
        monkeypatch.setenv("ACCESS_TOKEN_EXPIRE_MINUTES", "15")

        settings = Settings()

        assert settings.seed_admin_username == "dean"
        assert settings.access_token_expire_minutes == 15

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DATABASE_URL", raising=False)
        settings = Settings(_env_file=None)

        assert settings.jwt_algorithm == "HS256"
        assert settings.cors_origins == ["*"]
        assert settings.run_db_migrations is True


class TestDatabaseBackend:
    @pytest.mark.parametrize("url", ["sqlite:///./campusbook.db", "postgresql+psycopg2://app:secret@db/campusbook"])
    def test_partial_index_backends_are_accepted(self, url):
        ensure_supported_backend(url)

    def test_other_backends_are_refused(self):
        with pytest.raises(RuntimeError, match="mysql"):
            ensure_supported_backend("mysql+pymysql://app:secret@db/campusbook")
