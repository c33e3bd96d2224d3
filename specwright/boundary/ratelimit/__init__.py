"""Request budget enforcement for model-backed routes."""

from specwright.boundary.ratelimit.limiter import RateLimiter, RateLimitResult, RateLimitBucket

__all__ = ["RateLimiter", "RateLimitResult", "RateLimitBucket"]
