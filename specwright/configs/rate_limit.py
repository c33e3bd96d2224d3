"""
Rate limit configuration.

Per-bucket request budgets for the sliding-window limiter.

Dependencies: pydantic_settings
System role: Abuse protection configuration for LLM-backed routes
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from specwright.configs.base import BaseSettings


class RateLimitSettings(BaseSettings):
    """Redis connection and per-minute limits."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="RATE_LIMIT_",
        case_sensitive=False,
        extra="ignore",
    )

    redis_url: str | None = Field(
        default=None,
        description="Redis URL; limiter is a no-op when unset",
    )
    window_seconds: int = Field(default=60)
    suggest_limit: int = Field(default=30)
    summarize_limit: int = Field(default=10)
    generate_limit: int = Field(default=5)
    key_prefix: str = Field(default="specwright:ratelimit")

    def limit_for(self, bucket: str) -> int:
        """Requests allowed per window for a bucket (refine shares generate)."""
        return {
            "suggest": self.suggest_limit,
            "summarize": self.summarize_limit,
            "generate": self.generate_limit,
        }.get(bucket, self.generate_limit)
