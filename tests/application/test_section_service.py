"""
Test suite for SectionService.

Uses in-memory SQLite and the fake completion client.

System role: Verification of section use cases
"""

import asyncio
import json
import uuid
from datetime import timedelta

import pytest

from specwright.application.services.section_service import (
    PREFILL_MAX_TOKENS,
    SUGGEST_MAX_TOKENS,
    SUMMARIZE_MAX_TOKENS,
    SectionService,
)
from specwright.application.services.session_service import SessionService
from specwright.boundary.db.base import utcnow
from specwright.boundary.db.CRUD.section_crud import section_crud
from specwright.boundary.db.CRUD.session_crud import session_crud
from specwright.core.content import SectionKey
from specwright.core.exceptions import (
    ParseError,
    SectionNotFoundError,
    SessionExpiredError,
    SessionNotFoundError,
    UpstreamTimeoutError,
    ValidationError,
)

QA = [{"question_id": "q1", "question": "Who is it for?", "answer": "Freelance designers"}]


@pytest.fixture
def service(test_async_db, fake_client, llm_settings) -> SectionService:
    return SectionService(test_async_db, fake_client, llm_settings)


@pytest.fixture
async def session(test_async_db):
    return await SessionService(test_async_db, ttl_days=7).create_session(title="Invoicer")


class TestSaveSection:
    """Test suite for save_section."""

    @pytest.mark.asyncio
    async def test_save_then_resave_overwrites(self, service, session, test_async_db) -> None:
        # Act
        await service.save_section(session.id, SectionKey.CONTEXT, QA)
        await service.save_section(session.id, SectionKey.CONTEXT, [{**QA[0], "answer": "Agencies"}], "n")

        # Assert
        row = await section_crud.get_answer(test_async_db, session.id, "CONTEXT")
        assert row.qa[0]["answer"] == "Agencies"
        assert row.notes == "n"

    @pytest.mark.asyncio
    async def test_unknown_session_raises_not_found(self, service) -> None:
        with pytest.raises(SessionNotFoundError):
            await service.save_section(uuid.uuid4(), SectionKey.CONTEXT, QA)

    @pytest.mark.asyncio
    async def test_expired_session_raises(self, service, session, test_async_db) -> None:
        # Arrange
        await session_crud.extend_expiry(test_async_db, session.id, utcnow() - timedelta(days=1))
        await test_async_db.commit()

        # Act / Assert
        with pytest.raises(SessionExpiredError):
            await service.save_section(session.id, SectionKey.CONTEXT, QA)


class TestSuggest:
    """Test suite for suggest."""

    @pytest.mark.asyncio
    async def test_suggest_parses_and_passes_prior_summaries(
        self, service, session, fake_client, test_async_db
    ) -> None:
        # Arrange
        await section_crud.upsert_summary(test_async_db, session.id, "CONTEXT", "Designers need invoices")
        await test_async_db.commit()
        fake_client.responses = ['[{"type": "risk", "text": "Late payments"}]']

        # Act
        suggestions = await service.suggest(session.id, SectionKey.OUTCOME, "Get paid faster")

        # Assert
        assert suggestions[0]["type"] == "risk"
        call = fake_client.calls[0]
        assert call.model == "test/suggest"
        assert call.max_tokens == SUGGEST_MAX_TOKENS
        assert "Designers need invoices" in call.user_prompt

    @pytest.mark.asyncio
    async def test_suggest_unknown_session_makes_no_model_call(self, service, fake_client) -> None:
        with pytest.raises(SessionNotFoundError):
            await service.suggest(uuid.uuid4(), SectionKey.CONTEXT, "text")
        assert fake_client.calls == []


class TestSummarize:
    """Test suite for summarize."""

    @pytest.mark.asyncio
    async def test_summary_is_stored_trimmed(self, service, session, fake_client, test_async_db) -> None:
        # Arrange
        await service.save_section(session.id, SectionKey.CONTEXT, QA)
        fake_client.responses = ["  Built for freelance designers.  "]

        # Act
        summary = await service.summarize(session.id, SectionKey.CONTEXT)

        # Assert
        assert summary == "Built for freelance designers."
        assert await section_crud.summaries_by_key(test_async_db, session.id) == {"CONTEXT": summary}
        assert fake_client.calls[0].model == "test/summary"
        assert fake_client.calls[0].max_tokens == SUMMARIZE_MAX_TOKENS

    @pytest.mark.asyncio
    async def test_summarize_without_answers_raises_not_found(self, service, session, fake_client) -> None:
        # Act
        with pytest.raises(SectionNotFoundError) as exc_info:
            await service.summarize(session.id, SectionKey.RISKS)

        # Assert
        assert exc_info.value.code == "NOT_FOUND"
        assert fake_client.calls == []


class TestPrefill:
    """Test suite for prefill."""

    @pytest.mark.asyncio
    async def test_short_description_fails_without_model_call(self, service, fake_client) -> None:
        # Act
        with pytest.raises(ValidationError) as exc_info:
            await service.prefill("short")

        # Assert
        assert exc_info.value.code == "VALIDATION_ERROR"
        assert exc_info.value.details["field"] == "description"
        assert fake_client.calls == []

    @pytest.mark.asyncio
    async def test_prefill_returns_answers(self, service, fake_client) -> None:
        # Arrange
        fake_client.responses = [json.dumps({"answers": {"CONTEXT": {"qa": QA}}})]

        # Act
        answers = await service.prefill("An invoicing tool for freelancers")

        # Assert
        assert answers == {"CONTEXT": {"qa": QA}}
        assert fake_client.calls[0].model == "test/generate"
        assert fake_client.calls[0].max_tokens == PREFILL_MAX_TOKENS

    @pytest.mark.asyncio
    async def test_prefill_with_session_persists_known_sections(
        self, service, session, fake_client, test_async_db
    ) -> None:
        # Arrange
        fake_client.responses = [json.dumps({"answers": {"CONTEXT": {"qa": QA}, "BOGUS": {"qa": QA}}})]

        # Act
        await service.prefill("An invoicing tool for freelancers", session_id=session.id)

        # Assert
        rows = await section_crud.list_answers(test_async_db, session.id)
        assert [row.key for row in rows] == ["CONTEXT"]
        stored = await session_crud.get_by_id(test_async_db, session.id)
        await test_async_db.refresh(stored)
        assert stored.product_description == "An invoicing tool for freelancers"

    @pytest.mark.asyncio
    async def test_prefill_unparseable_output_raises(self, service, fake_client) -> None:
        fake_client.responses = ["Sorry, I cannot help with that."]
        with pytest.raises(ParseError):
            await service.prefill("An invoicing tool for freelancers")

    @pytest.mark.asyncio
    async def test_prefill_timeout_maps_to_gateway_timeout(self, test_async_db, llm_settings) -> None:
        # Arrange
        class SlowClient:
            async def complete(self, *args, **kwargs):
                await asyncio.sleep(1)
                return "{}"

        settings = llm_settings.model_copy(update={"prefill_timeout_seconds": 0.01})
        service = SectionService(test_async_db, SlowClient(), settings)

        # Act
        with pytest.raises(UpstreamTimeoutError) as exc_info:
            await service.prefill("An invoicing tool for freelancers")

        # Assert
        assert exc_info.value.code == "GATEWAY_TIMEOUT"
        assert exc_info.value.status_code == 504
