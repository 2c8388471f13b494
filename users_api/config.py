"""Configuration class to handle env variables and settings
shared by the users, v2 and legacy services"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configuration class for managing environment variables and settings.
    Values are read once when the application is built and never mutated while
    handling requests. ".env" automatically loaded, empty values fall back to
    the defaults below.
    """

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", env_ignore_empty=True, extra="ignore"
    )
    HOST: str = "0.0.0.0"
    PORT: int = 8080
    DATABASE_URL: str = "data/users.duckdb"  # DuckDB file path or ":memory:"
    JWT_SECRET: str = "shared-secret-between-legacy-and-v2"
    REDIS_URL: str = "redis://redis:6379"

    # Connection pool limits
    DB_MAX_OPEN_CONNS: int = 25
    DB_MAX_IDLE_CONNS: int = 5
    DB_CONN_MAX_LIFETIME: float = 300.0  # seconds
    DB_ACQUIRE_TIMEOUT: float = 5.0  # seconds

    HEALTH_CHECK_TIMEOUT: float = 2.0  # seconds
    USERS_LIST_LIMIT: int = 100
    MIGRATION_PHASE: int = 2

    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "default"  # "default" or "json"
