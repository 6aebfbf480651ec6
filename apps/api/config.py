"""
Application configuration using Pydantic Settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    ENVIRONMENT: str = "development"

    # Database
    DATABASE_URL: str = "sqlite+aiosqlite:///./friendly.db"
    AUTO_CREATE_DB_SCHEMA: bool = True
    SEED_DEMO_DATA: bool = True

    # API
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 5062

    # CORS
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]

    # Uploads
    UPLOAD_DIR: str = "wwwroot/uploads"
    UPLOAD_URL_PREFIX: str = "/uploads"
    MAX_IMAGE_UPLOAD_BYTES: int = 10 * 1024 * 1024

    # Content policy
    API_OWNERSHIP_ENFORCED: bool = False
    CASCADE_POST_DELETE: bool = True

    # Security
    JWT_SECRET: str = "change_me_in_production"
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRATION_HOURS: int = 24
    SESSION_COOKIE_NAME: str = "friendly_session"
    DEV_SESSION_LOGIN_ENABLED: bool = False

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=True)

    @property
    def is_development(self) -> bool:
        return self.ENVIRONMENT.strip().lower() in {"development", "dev", "local", "test"}


settings = Settings()


def validate_security_settings() -> None:
    """Fail fast when insecure default secrets are still configured outside development."""
    if settings.is_development:
        return

    insecure_values = {
        "",
        "change_me_in_production",
        "your_jwt_secret_change_in_production",
    }
    jwt_secret = (settings.JWT_SECRET or "").strip()
    if jwt_secret in insecure_values or len(jwt_secret) < 24:
        raise ValueError("JWT_SECRET is insecure. Configure a strong non-default secret (>=24 chars).")
    if settings.DEV_SESSION_LOGIN_ENABLED:
        raise ValueError("DEV_SESSION_LOGIN_ENABLED must be false outside development.")
