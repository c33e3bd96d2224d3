"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory and file-backed async databases, a deterministic fake
completion client and test LLM settings
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

from collections.abc import AsyncIterator, Sequence
from dataclasses import dataclass, field
from typing import Any

import pytest


@dataclass
class RecordedCall:
    mode: str
    model: str
    max_tokens: int
    system_prompt: str = ""
    user_prompt: str = ""
    messages: Sequence[Any] = ()


@dataclass
class FakeCompletionClient:
    """
    Deterministic stand-in for CompletionClient.

    Returns ``responses`` in order (the last one repeats). Streams split the
    same text into fixed-size chunks, so a streamed call concatenates to
    exactly what a buffered call returns. ``stream_error`` is raised after
    the first chunk.
    """

    responses: list[str] = field(default_factory=lambda: [""])
    chunk_size: int = 7
    calls: list[RecordedCall] = field(default_factory=list)
    fail_with: BaseException | None = None
    stream_error: BaseException | None = None

    def _next(self) -> str:
        if self.fail_with is not None:
            raise self.fail_with
        index = min(len(self.calls) - 1, len(self.responses) - 1)
        return self.responses[index]

    async def complete(self, model, system_prompt, user_prompt, max_tokens, context=None) -> str:
        self.calls.append(RecordedCall("complete", model, max_tokens, system_prompt, user_prompt))
        return self._next()

    def complete_stream(self, model, system_prompt, user_prompt, max_tokens, context=None) -> AsyncIterator[str]:
        self.calls.append(RecordedCall("stream", model, max_tokens, system_prompt, user_prompt))
        return self._chunks(self._next())

    def complete_chat_stream(self, model, messages, max_tokens, context=None) -> AsyncIterator[str]:
        self.calls.append(RecordedCall("chat_stream", model, max_tokens, messages=list(messages)))
        return self._chunks(self._next())

    async def _chunks(self, text: str) -> AsyncIterator[str]:
        for start in range(0, len(text), self.chunk_size):
            yield text[start : start + self.chunk_size]
            if self.stream_error is not None:
                raise self.stream_error


@pytest.fixture
def fake_client() -> FakeCompletionClient:
    return FakeCompletionClient()


@pytest.fixture
def llm_settings():
    from specwright.configs.llm import LLMSettings

    return LLMSettings(
        api_key="test-key",
        model_suggest="test/suggest",
        model_summary="test/summary",
        model_generate="test/generate",
        model_reflect="test/reflect",
        prefill_timeout_seconds=5,
    )


@pytest.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup (lazy imported to avoid settings issues)
    """
    from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
    from sqlalchemy.pool import StaticPool
    from specwright.boundary.db.base import Base

    # Use SQLite in-memory database for tests
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # Create all tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    # Create session factory
    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    # Create session for test
    async with async_session() as session:
        yield session
        await session.rollback()

    # Cleanup
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def test_session_factory(tmp_path):
    """
    File-backed SQLite session factory.

    Used where several sessions must see each other's commits, e.g. stream
    persistence through a fresh session.
    """
    from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
    from specwright.boundary.db.base import Base

    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'specwright.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    await engine.dispose()
