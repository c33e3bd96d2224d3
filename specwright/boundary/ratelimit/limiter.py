"""
Sliding-window rate limiter backed by a Redis sorted set.

Each bucket/identifier pair owns one sorted set whose members are request
timestamps. Entries older than the window are trimmed before counting.
Without a configured Redis URL every check succeeds with remaining=-1.

Dependencies: redis (asyncio client), specwright.configs
System role: Abuse protection for model-backed routes
"""

import enum
import logging
import time
import uuid
from dataclasses import dataclass

from redis.asyncio import Redis

from specwright.configs.rate_limit import RateLimitSettings

logger = logging.getLogger(__name__)


class RateLimitBucket(str, enum.Enum):
    SUGGEST = "suggest"
    SUMMARIZE = "summarize"
    GENERATE = "generate"
    REFINE = "refine"


@dataclass(frozen=True)
class RateLimitResult:
    success: bool
    remaining: int


class RateLimiter:
    """
    Per-bucket sliding window limiter.

    The Redis client is created on first use and reused for the life of
    the process.
    """

    def __init__(self, settings: RateLimitSettings, client: Redis | None = None) -> None:
        self.settings = settings
        self._client = client

    @property
    def enabled(self) -> bool:
        return self._client is not None or bool(self.settings.redis_url)

    @property
    def client(self) -> Redis:
        if self._client is None:
            self._client = Redis.from_url(self.settings.redis_url, decode_responses=True)
        return self._client

    def _key(self, bucket: str, identifier: str) -> str:
        return f"{self.settings.key_prefix}:{bucket}:{identifier}"

    async def check(self, bucket: RateLimitBucket | str, identifier: str) -> RateLimitResult:
        """
        Record one request and report whether it fits the bucket's budget.

        Args:
            bucket: suggest, summarize, generate or refine
            identifier: Caller identity, usually the client IP

        Returns:
            RateLimitResult: success flag and requests left in the window
        """
        if not self.enabled:
            return RateLimitResult(success=True, remaining=-1)

        bucket_name = bucket.value if isinstance(bucket, RateLimitBucket) else bucket
        limit = self.settings.limit_for(bucket_name)
        window_ms = self.settings.window_seconds * 1000
        now_ms = int(time.time() * 1000)
        key = self._key(bucket_name, identifier)
        member = f"{now_ms}-{uuid.uuid4().hex[:8]}"

        async with self.client.pipeline(transaction=True) as pipe:
            pipe.zremrangebyscore(key, 0, now_ms - window_ms)
            pipe.zadd(key, {member: now_ms})
            pipe.zcard(key)
            pipe.pexpire(key, window_ms)
            _, _, count, _ = await pipe.execute()

        if count > limit:
            # Rejected requests do not consume budget.
            await self.client.zrem(key, member)
            logger.warning(
                "Rate limit exceeded",
                extra={"bucket": bucket_name, "identifier": identifier, "limit": limit},
            )
            return RateLimitResult(success=False, remaining=0)

        return RateLimitResult(success=True, remaining=max(limit - count, 0))

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None
