"""Unit tests for server configuration settings model.

Tests verify that the Settings model binds environment variables using the
keys documented in .env.example, validates the signing secrets and exposes
the grouped configuration models.
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from herit.server.core.config import (
    MIN_SECRET_LENGTH,
    AuthConfig,
    CORSConfig,
    DatabaseConfig,
    GoogleOAuthConfig,
    Settings,
)

SECRET = "s" * MIN_SECRET_LENGTH

ENV_KEYS = (
    "HERIT_SERVER_HOST",
    "HERIT_SERVER_PORT",
    "HERIT_LOG_LEVEL",
    "HERIT_ENVIRONMENT",
    "APP_BASE_URL",
    "DATABASE_URL",
    "DATABASE_AUTO_CREATE",
    "SESSION_SECRET",
    "REFRESH_SECRET",
    "GOOGLE_CLIENT_ID",
    "GOOGLE_CLIENT_SECRET",
    "GOOGLE_REDIRECT_URI",
    "CORS_ORIGINS",
    "CORS_ALLOW_CREDENTIALS",
    "CORS_ALLOW_METHODS",
    "CORS_ALLOW_HEADERS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def env_example_path() -> Path:
    """Get path to .env.example file."""
    return Path(__file__).resolve().parents[4] / ".env.example"


@pytest.fixture
def env_example_vars(env_example_path: Path) -> dict[str, str]:
    """Parse .env.example file and return environment variables."""
    env_vars = {}
    with open(env_example_path) as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith("#"):
                continue
            if "=" in line:
                key, value = line.split("=", 1)
                env_vars[key.strip()] = value.strip()
    return env_vars


def _settings(**values) -> Settings:
    return Settings(_env_file=None, **values)


class TestSettingsBinding:
    """Test Settings model environment variable binding."""

    def test_env_example_binding(self, env_example_vars: dict[str, str], monkeypatch):
        for key in ENV_KEYS:
            if env_example_vars.get(key):
                monkeypatch.setenv(key, env_example_vars[key])

        settings = _settings()

        assert settings.server_host == env_example_vars["HERIT_SERVER_HOST"]
        assert settings.server_port == int(env_example_vars["HERIT_SERVER_PORT"])
        assert settings.session_secret == env_example_vars["SESSION_SECRET"]
        assert settings.refresh_secret == env_example_vars["REFRESH_SECRET"]
        assert settings.database_auto_create is True
        assert settings.cors_origins == ["http://localhost:3000"]

    def test_environment_binding(self, monkeypatch):
        monkeypatch.setenv("HERIT_ENVIRONMENT", "production")
        monkeypatch.setenv("APP_BASE_URL", "https://herit.ie")

        settings = _settings()

        assert settings.environment == "production"
        assert settings.app_base_url == "https://herit.ie"

    def test_google_binding(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_CLIENT_ID", "client-id")
        monkeypatch.setenv("GOOGLE_CLIENT_SECRET", "client-secret")
        monkeypatch.setenv("GOOGLE_REDIRECT_URI", "http://localhost:8000/api/auth/google/callback")

        settings = _settings()

        assert settings.google_client_id == "client-id"
        assert settings.google.is_configured is True


class TestSettingsDefaults:
    def test_server_defaults(self):
        settings = _settings()

        assert settings.server_host == "0.0.0.0"
        assert settings.server_port == 8000
        assert settings.log_level == "INFO"
        assert settings.environment == "development"
        assert settings.database_url == "sqlite+aiosqlite:///./herit.db"
        assert settings.database_auto_create is False
        assert settings.refresh_secret is None

    def test_google_not_configured_by_default(self):
        assert _settings().google.is_configured is False


class TestSecretValidation:
    def test_short_session_secret_rejected(self):
        with pytest.raises(ValidationError, match="SESSION_SECRET must be at least"):
            _settings(SESSION_SECRET="too-short")

    def test_short_refresh_secret_rejected(self):
        with pytest.raises(ValidationError, match="REFRESH_SECRET must be at least"):
            _settings(REFRESH_SECRET="too-short")

    def test_secret_of_minimum_length_accepted(self):
        assert _settings(SESSION_SECRET=SECRET).session_secret == SECRET


class TestGroupedConfigs:
    def test_database_config(self):
        database = _settings(DATABASE_URL="sqlite+aiosqlite:///:memory:", DATABASE_AUTO_CREATE=True).database

        assert isinstance(database, DatabaseConfig)
        assert database.url == "sqlite+aiosqlite:///:memory:"
        assert database.auto_create is True

    def test_auth_config_refresh_fallback(self):
        auth = _settings(SESSION_SECRET=SECRET).auth

        assert isinstance(auth, AuthConfig)
        assert auth.refresh_secret is None
        assert auth.refresh_signing_secret == SECRET

    def test_auth_config_dedicated_refresh_secret(self):
        refresh = "r" * MIN_SECRET_LENGTH

        auth = _settings(SESSION_SECRET=SECRET, REFRESH_SECRET=refresh).auth

        assert auth.refresh_signing_secret == refresh

    @pytest.mark.parametrize(
        "environment, secure", [("production", True), ("Production", True), ("development", False)]
    )
    def test_secure_cookies_follow_environment(self, environment, secure):
        settings = _settings(HERIT_ENVIRONMENT=environment)

        assert settings.is_production is secure
        assert settings.auth.secure_cookies is secure

    def test_google_config(self):
        google = _settings(GOOGLE_CLIENT_ID="id", GOOGLE_CLIENT_SECRET="secret").google

        assert isinstance(google, GoogleOAuthConfig)
        assert google.client_id == "id"
        assert google.is_configured is False

    def test_cors_config(self):
        cors = _settings(CORS_ORIGINS=["https://herit.ie"], CORS_ALLOW_CREDENTIALS=False).cors

        assert isinstance(cors, CORSConfig)
        assert cors.origins == ["https://herit.ie"]
        assert cors.allow_credentials is False
        assert cors.allow_methods == ["*"]
