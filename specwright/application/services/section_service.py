"""
Section service orchestrator.

Saves section answers and runs the section-level model stages: suggest,
summarize and prefill. Validation and lookups happen before any model
call.

Dependencies: specwright.boundary.db.CRUD, specwright.core.llm, specwright.core.prompts
System role: Guided section use cases
"""

import asyncio
import logging
from collections.abc import Sequence
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from specwright.application.services.session_service import load_session
from specwright.boundary.db.CRUD.section_crud import section_crud
from specwright.boundary.db.CRUD.session_crud import session_crud
from specwright.configs import get_settings
from specwright.configs.llm import LLMSettings
from specwright.core.content import SectionKey
from specwright.core.exceptions import (
    SectionNotFoundError,
    UpstreamTimeoutError,
    ValidationError,
)
from specwright.core.llm import CallContext, CompletionClient
from specwright.core.llm.structured import parse_prefill, parse_suggestions
from specwright.core.prompts import (
    QAEntry,
    build_prefill_prompt,
    build_suggest_prompt,
    build_summarize_prompt,
)
from specwright.observability.log_utils import log_stage

logger = logging.getLogger(__name__)

SUGGEST_MAX_TOKENS = 1000
SUMMARIZE_MAX_TOKENS = 500
PREFILL_MAX_TOKENS = 8000
PREFILL_MIN_DESCRIPTION = 10


def qa_entries(qa: Sequence[dict[str, Any]]) -> list[QAEntry]:
    """Stored qa dicts to prompt entries."""
    return [
        QAEntry(
            question_id=item.get("question_id", ""),
            question=item.get("question", ""),
            answer=item.get("answer", ""),
        )
        for item in qa
    ]


class SectionService:
    """Section service orchestrator."""

    def __init__(
        self,
        db: AsyncSession,
        client: CompletionClient | None = None,
        llm_settings: LLMSettings | None = None,
    ) -> None:
        """
        Initialize section service.

        Args:
            db: Async SQLAlchemy session
            client: Completion client; only needed by model-backed stages
            llm_settings: Model names and timeouts (defaults to settings)
        """
        self.db = db
        self.client = client
        self.llm = llm_settings or get_settings().llm

    async def save_section(
        self,
        session_id: UUID,
        key: SectionKey,
        qa: Sequence[dict[str, Any]],
        notes: str | None = None,
    ) -> None:
        """
        Upsert one section's answers.

        Raises:
            SessionNotFoundError: If session not found
            SessionExpiredError: If the session has expired
        """
        await load_session(self.db, session_id, check_expiry=True)
        await section_crud.upsert_answer(self.db, session_id, key.value, list(qa), notes)
        await self.db.commit()
        logger.info(
            "Section saved",
            extra={"session_id": str(session_id), "key": key.value, "qa_count": len(qa)},
        )

    async def suggest(
        self,
        session_id: UUID,
        key: SectionKey,
        current_text: str,
    ) -> list[dict[str, str]]:
        """
        Suggest risks, tradeoffs, questions and examples for the text being edited.

        Prior summaries of the session are given to the model as context.
        Unstructured output becomes a single "example" suggestion.

        Raises:
            SessionNotFoundError: If session not found
        """
        await load_session(self.db, session_id)
        summaries = await section_crud.summaries_by_key(self.db, session_id)
        prompt = build_suggest_prompt(key.value, current_text, summaries)
        context = CallContext(route="suggest", session_id=str(session_id))

        with log_stage(logger, "section.suggest", session_id=str(session_id), key=key.value) as result:
            raw = await self.client.complete(
                self.llm.model_suggest, prompt.system, prompt.user, SUGGEST_MAX_TOKENS, context
            )
            suggestions = parse_suggestions(raw)
            result["suggestion_count"] = len(suggestions)
        return suggestions

    async def summarize(self, session_id: UUID, key: SectionKey) -> str:
        """
        Summarize one section's saved answers and store the summary.

        A stored summary marks the section complete.

        Raises:
            SectionNotFoundError: If the section has no saved answers
        """
        answer = await section_crud.get_answer(self.db, session_id, key.value)
        if answer is None:
            raise SectionNotFoundError(str(session_id), key.value)

        prompt = build_summarize_prompt(key.value, qa_entries(answer.qa), answer.notes)
        context = CallContext(route="summarize", session_id=str(session_id))

        with log_stage(logger, "section.summarize", session_id=str(session_id), key=key.value) as result:
            raw = await self.client.complete(
                self.llm.model_summary, prompt.system, prompt.user, SUMMARIZE_MAX_TOKENS, context
            )
            summary = raw.strip()
            await section_crud.upsert_summary(self.db, session_id, key.value, summary)
            await self.db.commit()
            result["output_length"] = len(summary)
        return summary

    async def prefill(
        self,
        description: str,
        session_id: UUID | None = None,
        project_scope: str | None = None,
    ) -> dict[str, dict[str, list[dict[str, str]]]]:
        """
        Draft answers for every section from a free-text product description.

        The model call runs inside the configured abort window. When a
        session id is given the drafted answers are saved to it, along with
        the description if the session has none yet.

        Args:
            description: Product description, at least 10 characters
            session_id: Optional session to persist drafts into
            project_scope: Optional scope hint for the prompt

        Returns:
            dict: {section_key: {"qa": [{question_id, question, answer}, ...]}}

        Raises:
            ValidationError: If the description is too short
            SessionNotFoundError: If session_id is given but unknown
            UpstreamTimeoutError: If the model does not answer in time
            ParseError: If the output is not a valid answers payload
        """
        if len(description.strip()) < PREFILL_MIN_DESCRIPTION:
            raise ValidationError(
                f"Description must be at least {PREFILL_MIN_DESCRIPTION} characters",
                field="description",
            )
        session = None
        if session_id is not None:
            session = await load_session(self.db, session_id, check_expiry=True)
            project_scope = project_scope or (session.project_scope.value if session.project_scope else None)

        prompt = build_prefill_prompt(description, project_scope)
        context = CallContext(route="generate/prefill", session_id=str(session_id) if session_id else None)
        timeout = self.llm.prefill_timeout_seconds

        with log_stage(logger, "generate.prefill", session_id=context.session_id) as result:
            try:
                raw = await asyncio.wait_for(
                    self.client.complete(
                        self.llm.model_generate, prompt.system, prompt.user, PREFILL_MAX_TOKENS, context
                    ),
                    timeout=timeout,
                )
            except asyncio.TimeoutError as e:
                raise UpstreamTimeoutError(
                    f"Prefill did not complete within {timeout:g} seconds",
                    {"timeout_seconds": timeout},
                ) from e

            payload = parse_prefill(raw)
            answers = {
                key: {"qa": [item.model_dump() for item in section.qa]}
                for key, section in payload.answers.items()
            }
            result["section_count"] = len(answers)

        if session is not None:
            await self._persist_prefill(session_id, answers, description, session.product_description)
        return answers

    async def _persist_prefill(
        self,
        session_id: UUID,
        answers: dict[str, dict[str, list[dict[str, str]]]],
        description: str,
        existing_description: str | None,
    ) -> None:
        known = {key.value for key in SectionKey}
        for key, section in answers.items():
            if key not in known:
                logger.warning("Ignoring prefill answers for unknown section", extra={"key": key})
                continue
            await section_crud.upsert_answer(self.db, session_id, key, section["qa"])
            await self.db.commit()
        if not existing_description:
            await session_crud.update_by_id(self.db, session_id, product_description=description)
            await self.db.commit()
