"""Application configuration loaded from environment variables."""

from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache


class Settings(BaseSettings):
    """Centralised settings — no hardcoded values anywhere else."""

    # Database
    database_url: str = Field("sqlite+aiosqlite:///./cafes.db", env="DATABASE_URL")

    # Sessions
    secret_key: str = Field("change-me-in-production", env="SECRET_KEY")
    session_cookie_name: str = Field("my-cafe-session", env="SESSION_COOKIE_NAME")
    session_max_age_seconds: int = Field(7 * 24 * 3600, env="SESSION_MAX_AGE_SECONDS")

    # Photo uploads
    upload_dir: str = Field("./uploads", env="UPLOAD_DIR")
    max_upload_bytes: int = Field(5 * 1024 * 1024, env="MAX_UPLOAD_BYTES")

    # Security
    allowed_origins: str = Field(
        "http://localhost:3000",
        env="ALLOWED_ORIGINS",
    )

    # App
    app_env: str = Field("development", env="APP_ENV")
    log_level: str = Field("INFO", env="LOG_LEVEL")

    # Derived
    @property
    def allowed_origins_list(self) -> list[str]:
        """Return ALLOWED_ORIGINS as a list."""
        return [o.strip() for o in self.allowed_origins.split(",")]

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached Settings instance."""
    return Settings()


settings = get_settings()
