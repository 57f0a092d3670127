"""Application configuration using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_JWT_SECRET = "CHANGE-ME-IN-PRODUCTION"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Application
    app_name: str = Field(default="Accounts API")
    app_env: str = Field(default="development")
    debug: bool = Field(default=False)
    log_level: str = Field(default="INFO")

    # Server
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Database
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/accounts",
        description="PostgreSQL connection URL with asyncpg driver",
    )

    # AWS Cognito
    aws_region: str = Field(default="us-east-1")
    cognito_user_pool_id: str = Field(
        default="",
        description="Cognito user pool ID (e.g. us-east-1_AbCdEfGhI)",
    )
    cognito_client_id: str = Field(
        default="",
        description="Cognito app client ID",
    )
    cognito_client_secret: str = Field(
        default="",
        description="Cognito app client secret (only for clients created with one)",
    )
    cognito_max_attempts: int = Field(
        default=3,
        description="Total attempts per Cognito call, including transport retries",
    )
    cognito_timeout_seconds: int = Field(
        default=10,
        description="Connect and read timeout for Cognito calls",
    )

    # Local JWT (HS256 tokens for development and tests)
    jwt_secret_key: str = Field(
        default=DEFAULT_JWT_SECRET,
        description="Secret key for HS256 tokens issued locally",
    )
    jwt_allow_local_tokens: bool = Field(
        default=False,
        description="Accept HS256 tokens (never in production, never with the default secret)",
    )
    jwt_algorithm: str = Field(default="HS256")
    jwt_expire_minutes: int = Field(default=60)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cognito_issuer(self) -> str:
        """Issuer claim of tokens minted by the configured user pool."""
        if self.cognito_user_pool_id:
            return (
                f"https://cognito-idp.{self.aws_region}.amazonaws.com/"
                f"{self.cognito_user_pool_id}"
            )
        return ""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cognito_jwks_url(self) -> str:
        """JWKS endpoint for RS256 token verification."""
        if self.cognito_issuer:
            return f"{self.cognito_issuer}/.well-known/jwks.json"
        return ""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def async_database_url(self) -> str:
        """Ensure the database URL uses the asyncpg driver scheme.

        Hosting providers usually hand out a plain ``postgresql://`` URL.
        SQLAlchemy's async engine requires ``postgresql+asyncpg://``.
        """
        url = self.database_url
        if url.startswith("postgresql://"):
            url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
        return url

    # Rate Limiting
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable/disable rate limiting (disable for tests)",
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:3000,http://localhost:5173",
        description="Comma-separated list of allowed origins",
    )

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.app_env == "production"

    @computed_field  # type: ignore[prop-decorator]
    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins into a list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


settings = get_settings()
