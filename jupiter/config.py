"""
Application configuration.

Loads settings from environment variables with sensible defaults.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


DEV_ACCESS_SECRET = "dev-access-secret-change-in-production"
DEV_REFRESH_SECRET = "dev-refresh-secret-change-in-production"


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # ==========================================================================
    # Environment
    # ==========================================================================

    environment: str = "development"
    debug: bool = True
    log_level: str = "INFO"

    # ==========================================================================
    # API Server
    # ==========================================================================

    api_host: str = "0.0.0.0"
    api_port: int = 8080
    cors_origins: str = "http://localhost:3000,http://localhost:5173"

    # ==========================================================================
    # Authentication
    # ==========================================================================

    # Access and refresh tokens are signed with different secrets
    jwt_access_secret: str = DEV_ACCESS_SECRET
    jwt_refresh_secret: str = DEV_REFRESH_SECRET
    jwt_algorithm: str = "HS256"
    jwt_access_token_expire_minutes: int = 15
    jwt_refresh_token_expire_days: int = 7

    password_hash_iterations: int = 100_000

    # Cookie checked when no Authorization header is sent
    access_token_cookie: str = "accessToken"

    # ==========================================================================
    # Helpers
    # ==========================================================================

    @property
    def cors_origins_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def validate_secrets(self) -> None:
        """
        Refuse to run production with the development JWT secrets.

        Raises:
            RuntimeError: a secret is missing, left at its default, or both
                token kinds share one secret
        """
        if not self.is_production:
            return

        problems = []
        if self.jwt_access_secret in ("", DEV_ACCESS_SECRET):
            problems.append("JWT_ACCESS_SECRET")
        if self.jwt_refresh_secret in ("", DEV_REFRESH_SECRET):
            problems.append("JWT_REFRESH_SECRET")
        if problems:
            raise RuntimeError(
                f"Missing required environment variables: {', '.join(problems)}"
            )
        if self.jwt_access_secret == self.jwt_refresh_secret:
            raise RuntimeError("JWT_ACCESS_SECRET and JWT_REFRESH_SECRET must differ")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
