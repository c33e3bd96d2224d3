"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides dependency injection factory for FastAPI.

Dependencies: All config modules
System role: Central configuration aggregator for the application
"""

from functools import lru_cache

from specwright.configs.base import BaseSettings
from specwright.configs.database import DatabaseSettings
from specwright.configs.llm import LLMSettings
from specwright.configs.observability import ObservabilitySettings
from specwright.configs.rate_limit import RateLimitSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    database: DatabaseSettings = DatabaseSettings()
    llm: LLMSettings = LLMSettings()
    observability: ObservabilitySettings = ObservabilitySettings()
    rate_limit: RateLimitSettings = RateLimitSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for dependency injection.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from specwright.configs import get_settings
        settings = get_settings()
    """
    return Settings()
