"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.
"""

from typing import Optional

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Minimum length for the JWT signing secrets.
MIN_SECRET_LENGTH = 32

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class DatabaseConfig(BaseModel):
    """Relational database configuration."""

    url: str = Field(
        default="sqlite+aiosqlite:///./herit.db",
        alias="DATABASE_URL",
        description="Database connection URL (postgres URLs are rewritten to asyncpg)",
    )
    auto_create: bool = Field(
        default=False,
        alias="DATABASE_AUTO_CREATE",
        description="Create missing tables on startup instead of relying on Alembic",
    )

    model_config = {"populate_by_name": True}


class AuthConfig(BaseModel):
    """Session token signing configuration."""

    session_secret: str = Field(alias="SESSION_SECRET", description="Secret used to sign access tokens")
    refresh_secret: Optional[str] = Field(
        default=None, alias="REFRESH_SECRET", description="Secret used to sign refresh tokens"
    )
    secure_cookies: bool = Field(default=False, description="Whether auth cookies carry the Secure flag")

    model_config = {"populate_by_name": True}

    @property
    def refresh_signing_secret(self) -> str:
        """Refresh tokens fall back to the session secret when no dedicated secret is set."""
        return self.refresh_secret or self.session_secret


class GoogleOAuthConfig(BaseModel):
    """Google OAuth 2.0 client configuration."""

    client_id: Optional[str] = Field(default=None, alias="GOOGLE_CLIENT_ID", description="Google OAuth client id")
    client_secret: Optional[str] = Field(
        default=None, alias="GOOGLE_CLIENT_SECRET", description="Google OAuth client secret"
    )
    redirect_uri: Optional[str] = Field(
        default=None, alias="GOOGLE_REDIRECT_URI", description="OAuth callback URL registered with Google"
    )

    model_config = {"populate_by_name": True}

    @property
    def is_configured(self) -> bool:
        return bool(self.client_id and self.client_secret and self.redirect_uri)


class CORSConfig(BaseModel):
    """CORS configuration."""

    origins: list[str] = Field(
        default=["http://localhost:3000"], alias="CORS_ORIGINS", description="Allowed CORS origins"
    )
    allow_credentials: bool = Field(
        default=True, alias="CORS_ALLOW_CREDENTIALS", description="Allow credentials in CORS requests"
    )
    allow_methods: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_METHODS", description="Allowed HTTP methods (use * for all)"
    )
    allow_headers: list[str] = Field(
        default=["*"], alias="CORS_ALLOW_HEADERS", description="Allowed HTTP headers (use * for all)"
    )

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # Herit Server Configuration
    # =====================================================================
    server_host: str = Field(
        default="0.0.0.0",
        description="Herit server host address to bind to",
        alias="HERIT_SERVER_HOST",
    )
    server_port: int = Field(
        default=8000,
        description="Herit server port number",
        alias="HERIT_SERVER_PORT",
    )
    log_level: str = Field(
        default="INFO",
        description="Herit server logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="HERIT_LOG_LEVEL",
    )
    environment: str = Field(
        default="development",
        description="Deployment environment (development, test, production)",
        alias="HERIT_ENVIRONMENT",
    )
    app_base_url: str = Field(
        default="http://localhost:3000",
        description="Public base URL of the web client, used for OAuth redirects",
        alias="APP_BASE_URL",
    )

    # =====================================================================
    # Database Configuration
    # =====================================================================
    database_url: str = Field(
        default="sqlite+aiosqlite:///./herit.db",
        description="Database connection URL",
        alias="DATABASE_URL",
    )
    database_auto_create: bool = Field(
        default=False,
        description="Create missing tables on startup",
        alias="DATABASE_AUTO_CREATE",
    )

    # =====================================================================
    # Authentication Configuration
    # =====================================================================
    session_secret: str = Field(
        default="change-me-in-production-at-least-32-characters",
        description="Secret used to sign access tokens (min 32 characters)",
        alias="SESSION_SECRET",
    )
    refresh_secret: Optional[str] = Field(
        default=None,
        description="Secret used to sign refresh tokens (min 32 characters)",
        alias="REFRESH_SECRET",
    )
    google_client_id: Optional[str] = Field(default=None, alias="GOOGLE_CLIENT_ID")
    google_client_secret: Optional[str] = Field(default=None, alias="GOOGLE_CLIENT_SECRET")
    google_redirect_uri: Optional[str] = Field(default=None, alias="GOOGLE_REDIRECT_URI")

    # =====================================================================
    # CORS Configuration
    # =====================================================================
    cors_origins: list[str] = Field(default=["http://localhost:3000"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(default=["*"], alias="CORS_ALLOW_METHODS")
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    @field_validator("session_secret")
    @classmethod
    def _check_session_secret(cls, value: str) -> str:
        if len(value) < MIN_SECRET_LENGTH:
            raise ValueError(f"SESSION_SECRET must be at least {MIN_SECRET_LENGTH} characters")
        return value

    @field_validator("refresh_secret")
    @classmethod
    def _check_refresh_secret(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and len(value) < MIN_SECRET_LENGTH:
            raise ValueError(f"REFRESH_SECRET must be at least {MIN_SECRET_LENGTH} characters")
        return value

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def database(self) -> DatabaseConfig:
        """Get database configuration from environment variables."""
        return DatabaseConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def auth(self) -> AuthConfig:
        """Get token signing configuration from environment variables."""
        return AuthConfig.model_validate({**self.model_dump(by_alias=True), "secure_cookies": self.is_production})

    @property
    def google(self) -> GoogleOAuthConfig:
        """Get Google OAuth configuration from environment variables."""
        return GoogleOAuthConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def cors(self) -> CORSConfig:
        """Get CORS configuration from environment variables."""
        return CORSConfig.model_validate(self.model_dump(by_alias=True))


settings = Settings()
