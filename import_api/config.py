# =============================================================================
# Import API - Configuration
# =============================================================================
"""
Application configuration using Pydantic Settings.

Loads configuration from environment variables with sensible defaults
for local development.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Attributes:
        http_max_import_body_size: Largest accepted /import body, in bytes
        allow_http_routes: Routes enabled by capabilities ("all", "none" or a
            comma-separated list of route names)
        deny_http_routes: Routes disabled by capabilities, same syntax
        auth_enabled: Whether anonymous sessions are refused by the engine
        engine_factory: "module:callable" path that builds the engine handle
        environment: Current environment (development/staging/production)
        log_level: Logging verbosity level
        service_name: Name of this service for logging/tracing
    """

    # HTTP Configuration
    http_max_import_body_size: int = 4 << 30

    # Capabilities Configuration
    allow_http_routes: str = "all"
    deny_http_routes: str = "none"

    # Engine Configuration
    auth_enabled: bool = True
    engine_factory: Optional[str] = None

    # Application Configuration
    environment: str = "development"
    log_level: str = "INFO"
    service_name: str = "import-api"

    # Pydantic Settings Configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to avoid re-reading environment variables
    on every request.

    Returns:
        Settings: Application configuration instance
    """
    return Settings()
