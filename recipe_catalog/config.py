"""Configuration management with pydantic-settings."""

from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings

# Names both the logging module and uvicorn accept
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database Configuration
    # DATABASE_URL wins; otherwise the URL is built from the DB_* parts
    database_url: str = ""
    db_user: str = "postgres"
    db_password: str = "password"
    db_host: str = "localhost"
    db_port: int = 5432
    db_name: str = "recipes_db"

    # Connection pool
    pool_size: int = 5
    max_overflow: int = 10

    # Source dataset loaded once at startup
    data_file: str = "US_recipes.json"

    # HTTP server
    host: str = "0.0.0.0"
    port: int = 3001
    cors_origins: List[str] = ["*"]
    log_level: str = "INFO"

    # Pagination
    default_limit: int = 10
    max_limit: int = 50

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @field_validator("database_url", mode="before")
    @classmethod
    def fix_database_url(cls, v):
        """Heroku-style postgres:// URLs are rejected by SQLAlchemy."""
        if isinstance(v, str) and v.startswith("postgres://"):
            return v.replace("postgres://", "postgresql://", 1)
        return v

    @field_validator("log_level")
    @classmethod
    def check_log_level(cls, v):
        level = v.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("default_limit", "max_limit")
    @classmethod
    def check_positive(cls, v):
        if v < 1:
            raise ValueError("Page size limits must be positive")
        return v

    @property
    def sqlalchemy_url(self) -> str:
        """Return the URL the engine should connect to."""
        if self.database_url:
            return self.database_url
        return (
            f"postgresql://{self.db_user}:{self.db_password}"
            f"@{self.db_host}:{self.db_port}/{self.db_name}"
        )


def get_settings() -> Settings:
    """Load and validate settings from environment.

    Raises:
        ValidationError: If environment variables are present but invalid.
    """
    return Settings()
