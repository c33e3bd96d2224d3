"""
Test suite for the sliding-window rate limiter.

Redis is replaced by a small in-process stand-in implementing the sorted
set calls the limiter issues.

System role: Verification of abuse protection
"""

import pytest

from specwright.boundary.ratelimit import RateLimitBucket, RateLimiter
from specwright.configs.rate_limit import RateLimitSettings


class FakePipeline:
    def __init__(self, redis: "FakeRedis") -> None:
        self.redis = redis
        self.ops: list[tuple] = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        return False

    def zremrangebyscore(self, key, low, high):
        self.ops.append(("zremrangebyscore", key, low, high))

    def zadd(self, key, mapping):
        self.ops.append(("zadd", key, mapping))

    def zcard(self, key):
        self.ops.append(("zcard", key))

    def pexpire(self, key, ms):
        self.ops.append(("pexpire", key, ms))

    async def execute(self):
        results = []
        for op, key, *args in self.ops:
            members = self.redis.sets.setdefault(key, {})
            if op == "zremrangebyscore":
                low, high = args
                stale = [m for m, score in members.items() if low <= score <= high]
                for member in stale:
                    del members[member]
                results.append(len(stale))
            elif op == "zadd":
                members.update(args[0])
                results.append(len(args[0]))
            elif op == "zcard":
                results.append(len(members))
            else:
                results.append(True)
        self.ops = []
        return results


class FakeRedis:
    def __init__(self) -> None:
        self.sets: dict[str, dict[str, int]] = {}
        self.closed = False

    def pipeline(self, transaction: bool = True) -> FakePipeline:
        return FakePipeline(self)

    async def zrem(self, key, member):
        self.sets.get(key, {}).pop(member, None)

    async def aclose(self):
        self.closed = True


@pytest.fixture
def settings() -> RateLimitSettings:
    return RateLimitSettings(redis_url="redis://unused", suggest_limit=3, summarize_limit=2, generate_limit=1)


class TestRateLimiter:
    """Test suite for RateLimiter."""

    @pytest.mark.asyncio
    async def test_without_redis_every_check_passes(self) -> None:
        limiter = RateLimiter(RateLimitSettings(redis_url=None))

        results = [await limiter.check(RateLimitBucket.GENERATE, "1.2.3.4") for _ in range(20)]

        assert all(r.success for r in results)
        assert results[0].remaining == -1
        assert limiter.enabled is False

    @pytest.mark.asyncio
    async def test_budget_is_enforced_per_bucket(self, settings) -> None:
        # Arrange
        limiter = RateLimiter(settings, client=FakeRedis())

        # Act
        summarize = [await limiter.check(RateLimitBucket.SUMMARIZE, "ip") for _ in range(3)]
        suggest = await limiter.check(RateLimitBucket.SUGGEST, "ip")

        # Assert
        assert [r.success for r in summarize] == [True, True, False]
        assert summarize[0].remaining == 1
        assert suggest.success is True

    @pytest.mark.asyncio
    async def test_identifiers_have_separate_budgets(self, settings) -> None:
        limiter = RateLimiter(settings, client=FakeRedis())

        first = await limiter.check(RateLimitBucket.GENERATE, "a")
        second = await limiter.check(RateLimitBucket.GENERATE, "b")

        assert first.success and second.success

    @pytest.mark.asyncio
    async def test_refine_shares_generate_limit(self, settings) -> None:
        limiter = RateLimiter(settings, client=FakeRedis())

        assert (await limiter.check(RateLimitBucket.REFINE, "ip")).success is True
        assert (await limiter.check(RateLimitBucket.REFINE, "ip")).success is False

    @pytest.mark.asyncio
    async def test_rejected_requests_do_not_consume_budget(self, settings) -> None:
        redis = FakeRedis()
        limiter = RateLimiter(settings, client=redis)

        for _ in range(5):
            await limiter.check(RateLimitBucket.GENERATE, "ip")

        assert len(redis.sets["specwright:ratelimit:generate:ip"]) == 1

    @pytest.mark.asyncio
    async def test_close_releases_client(self, settings) -> None:
        redis = FakeRedis()
        limiter = RateLimiter(settings, client=redis)

        await limiter.close()

        assert redis.closed is True
