"""
Central configuration management for DUECh.

Loads settings from environment variables and provides typed access.
"""
import os
from pathlib import Path
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class DatabaseSettings(BaseSettings):
    """SQLite database configuration."""
    path: Path = Field(default=Path("data/duech.db"), alias="DUECH_DB_PATH")


class AuthSettings(BaseSettings):
    """Session cookie and token signing configuration.

    The secret signs session tokens; changing it logs every user out.
    """
    secret: str = Field(default="dev-secret-change-me", alias="AUTH_SECRET")
    cookie_name: str = Field(default="duech_session", alias="SESSION_COOKIE_NAME")
    max_age: int = Field(
        default=60 * 60 * 24 * 7,
        alias="SESSION_MAX_AGE",
        description="Session lifetime in seconds (7 days)"
    )
    cookie_secure: bool | None = Field(
        default=None,
        alias="SESSION_COOKIE_SECURE",
        description="Force the Secure flag; defaults to on in production"
    )


class RateLimitSettings(BaseSettings):
    """Per-client request limits for the public API."""
    default: str = Field(default="100 per minute", alias="RATE_LIMIT_DEFAULT")
    metadata: str = Field(default="200 per minute", alias="RATE_LIMIT_METADATA")
    storage_uri: str = Field(default="memory://", alias="RATE_LIMIT_STORAGE_URI")
    enabled: bool = Field(default=True, alias="RATE_LIMIT_ENABLED")


class SearchSettings(BaseSettings):
    """Search request defaults and bounds."""
    default_limit: int = Field(default=20, alias="SEARCH_DEFAULT_LIMIT")
    max_limit: int = Field(default=1000, alias="SEARCH_MAX_LIMIT")
    max_query_length: int = Field(default=100, alias="SEARCH_MAX_QUERY_LENGTH")


class AppSettings(BaseSettings):
    """Deployment configuration."""
    env: str = Field(default="development", alias="APP_ENV")
    host_url: str = Field(default="editor.localhost:3000", alias="HOST_URL")

    @property
    def is_production(self) -> bool:
        return self.env == "production"


class Settings(BaseSettings):
    """Main settings aggregator."""
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    auth: AuthSettings = Field(default_factory=AuthSettings)
    rate_limits: RateLimitSettings = Field(default_factory=RateLimitSettings)
    search: SearchSettings = Field(default_factory=SearchSettings)
    app: AppSettings = Field(default_factory=AppSettings)

    # Project root
    project_root: Path = Field(default_factory=lambda: Path(__file__).parent.parent.parent)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"

    @property
    def session_cookie_secure(self) -> bool:
        if self.auth.cookie_secure is not None:
            return self.auth.cookie_secure
        return self.app.is_production

    def resolve_db_path(self) -> Path:
        """Resolve a relative database path against the project root."""
        path = self.database.path
        if path.is_absolute():
            return path
        return self.project_root / path


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    load_dotenv_if_exists()
    return Settings()


def load_dotenv_if_exists():
    """Load .env file from the project root if it exists."""
    from dotenv import load_dotenv
    env_path = Path(__file__).parent.parent.parent / ".env"
    if env_path.exists() and not os.environ.get("DUECH_SKIP_DOTENV"):
        load_dotenv(env_path)
