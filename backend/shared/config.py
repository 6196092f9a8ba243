"""
Centralized configuration for the SparkTasks backend.

All settings are loaded from environment variables with sensible defaults.
Backend-specific settings are namespaced (e.g., SUPABASE_*, STOPWATCH_*).
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "SparkTasks API"
    app_version: str = "0.1.0"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # CORS settings
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:3000"]
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = ["*"]
    cors_allow_headers: list[str] = ["*"]

    # Supabase
    supabase_url: str = ""
    supabase_anon_key: str = ""
    supabase_service_role_key: str = ""
    supabase_jwt_secret: str = ""
    supabase_db_url: str = ""  # Direct Postgres URL, only needed for migrations

    # Tasks
    default_section: str = "Inbox"

    # Timers
    untitled_timer_description: str = "Untitled Action"
    stopwatch_tick_interval: float = 0.01  # seconds

    # Network reachability
    connectivity_check_interval: float = 15.0  # seconds
    connectivity_timeout: float = 5.0  # seconds

    # Per-user sessions are closed after this long without a request
    session_idle_timeout: float = 8 * 60 * 60  # seconds


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return Settings()
