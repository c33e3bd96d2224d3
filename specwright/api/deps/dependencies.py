"""
Dependency injection container.

Factory functions for FastAPI dependencies.

Dependencies: specwright.configs, specwright.application, specwright.boundary
System role: DI container for service injection
"""

import logging
from functools import lru_cache

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from specwright.application.services import (
    GenerationService,
    SectionService,
    SessionService,
    WalkthroughService,
)
from specwright.boundary.db import get_async_db
from specwright.boundary.ratelimit import RateLimitBucket, RateLimiter
from specwright.configs import Settings, get_settings
from specwright.core.exceptions import RateLimitedError
from specwright.core.llm import CompletionClient

logger = logging.getLogger(__name__)


class ServiceCache:
    """Container for cached process-wide instances."""

    def __init__(self):
        self._completion_client = None
        self._rate_limiter = None

    @property
    def completion_client(self) -> CompletionClient:
        """Get cached completion client."""
        if self._completion_client is None:
            self._completion_client = CompletionClient(get_settings().llm)
        return self._completion_client

    @property
    def rate_limiter(self) -> RateLimiter:
        """Get cached rate limiter."""
        if self._rate_limiter is None:
            self._rate_limiter = RateLimiter(get_settings().rate_limit)
        return self._rate_limiter

    async def aclose(self) -> None:
        """Release network resources held by cached instances."""
        if self._rate_limiter is not None:
            await self._rate_limiter.close()

    def clear(self) -> None:
        """Clear all cached instances."""
        self._completion_client = None
        self._rate_limiter = None


# Global service cache
_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_completion_client() -> CompletionClient:
    return get_service_cache().completion_client


def get_rate_limiter() -> RateLimiter:
    return get_service_cache().rate_limiter


def client_identifier(request: Request) -> str:
    """First X-Forwarded-For hop, else the socket peer."""
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    if request.client is not None:
        return request.client.host
    return "anonymous"


def rate_limited(bucket: RateLimitBucket):
    """
    Build a dependency enforcing one rate limit bucket.

    Args:
        bucket: Budget the route draws from

    Returns:
        Async dependency raising RateLimitedError when the budget is spent
    """

    async def check_rate_limit(
        request: Request,
        limiter: RateLimiter = Depends(get_rate_limiter),
    ) -> None:
        result = await limiter.check(bucket, client_identifier(request))
        if not result.success:
            raise RateLimitedError(bucket.value)

    return check_rate_limit


def get_session_service(db: AsyncSession = Depends(get_async_db)) -> SessionService:
    """
    Get session service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        SessionService: Session service instance
    """
    return SessionService(db=db)


def get_section_service(
    db: AsyncSession = Depends(get_async_db),
    client: CompletionClient = Depends(get_completion_client),
) -> SectionService:
    return SectionService(db=db, client=client)


def get_generation_service(
    db: AsyncSession = Depends(get_async_db),
    client: CompletionClient = Depends(get_completion_client),
) -> GenerationService:
    """
    Get generation service instance.

    Streamed stages persist through sessions from the default session
    factory once their stream completes.
    """
    return GenerationService(db=db, client=client)


def get_walkthrough_service(
    db: AsyncSession = Depends(get_async_db),
    client: CompletionClient = Depends(get_completion_client),
) -> WalkthroughService:
    return WalkthroughService(db=db, client=client)
