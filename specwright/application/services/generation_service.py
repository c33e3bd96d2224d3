"""
Generation service orchestrator.

Runs the document stages of the main flow: PRD and tech spec (buffered or
streamed), reflection, refinement chat and the idea explorer.

Streamed stages validate and build their prompt eagerly, then hand back an
async generator. The generator forwards every delta as it arrives and
persists the concatenated text only after the upstream stream finished
normally; cancellation or an upstream error leaves the stored artifact
untouched. Persistence after streaming goes through a fresh database
session because the request-scoped one may already be closed by then.

Dependencies: specwright.boundary.db, specwright.core.llm, specwright.core.prompts, specwright.core.pipeline
System role: Document generation use cases
"""

import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Sequence
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from specwright.application.services.section_service import qa_entries
from specwright.application.services.session_service import load_session
from specwright.boundary.db.connection import get_async_session_factory
from specwright.boundary.db.CRUD.artifact_crud import artifact_crud
from specwright.boundary.db.models import ArtifactModel, SessionModel
from specwright.configs import get_settings
from specwright.configs.llm import LLMSettings
from specwright.core.exceptions import ArtifactNotFoundError
from specwright.core.llm import CallContext, ChatMessage, CompletionClient
from specwright.core.llm.schemas import IdeaSuggestion
from specwright.core.llm.structured import parse_ideas
from specwright.core.pipeline import (
    ArtifactType,
    artifact_title,
    require_prd,
    require_reflection_inputs,
)
from specwright.core.prompts import (
    IdeaQuestion,
    PromptPair,
    SectionInput,
    build_idea_explorer_prompt,
    build_prd_prompt,
    build_reflection_prompt,
    build_refine_system_prompt,
    build_tech_spec_prompt,
    split_artifact_update,
)
from specwright.observability.log_utils import log_stage, log_with_context

logger = logging.getLogger(__name__)

PRD_MAX_TOKENS = 8000
TECH_SPEC_MAX_TOKENS = 8000
REFLECTION_MAX_TOKENS = 6000
REFINE_MAX_TOKENS = 4000
IDEA_MAX_TOKENS = 2000


def _artifact_content(session: SessionModel, artifact_type: ArtifactType) -> str | None:
    for artifact in session.artifacts:
        if artifact.type == artifact_type:
            return artifact.content_md
    return None


def _section_inputs(session: SessionModel) -> list[SectionInput]:
    return [
        SectionInput(key=row.key, qa=qa_entries(row.qa), notes=row.notes)
        for row in session.answers
    ]


def _summaries(session: SessionModel) -> dict[str, str]:
    return {row.key: row.summary for row in session.summaries}


def _scope(session: SessionModel) -> str | None:
    return session.project_scope.value if session.project_scope else None


class GenerationService:
    """Generation service orchestrator."""

    def __init__(
        self,
        db: AsyncSession,
        client: CompletionClient,
        llm_settings: LLMSettings | None = None,
        session_factory: async_sessionmaker[AsyncSession] | None = None,
    ) -> None:
        """
        Initialize generation service.

        Args:
            db: Request-scoped async session
            client: Completion client
            llm_settings: Model names (defaults to settings)
            session_factory: Factory for sessions used after a stream completes
        """
        self.db = db
        self.client = client
        self.llm = llm_settings or get_settings().llm
        self._session_factory = session_factory

    @property
    def session_factory(self) -> async_sessionmaker[AsyncSession]:
        if self._session_factory is None:
            self._session_factory = get_async_session_factory()
        return self._session_factory

    # -- prompt assembly -------------------------------------------------

    def _prd_prompt(self, session: SessionModel) -> PromptPair:
        return build_prd_prompt(
            session.title,
            _section_inputs(session),
            _summaries(session),
            session.product_description,
            _scope(session),
        )

    def _tech_spec_prompt(self, session: SessionModel) -> PromptPair:
        prd = require_prd(_artifact_content(session, ArtifactType.PRD), str(session.id))
        return build_tech_spec_prompt(session.title, prd, _summaries(session), _scope(session))

    # -- persistence -----------------------------------------------------

    async def _save(
        self,
        db: AsyncSession,
        session: SessionModel,
        artifact_type: ArtifactType,
        content: str,
        title: str | None = None,
    ) -> ArtifactModel:
        artifact = await artifact_crud.upsert(
            db,
            session.id,
            artifact_type,
            title or artifact_title(artifact_type, session.title),
            content.strip(),
        )
        await db.commit()
        return artifact

    async def _save_fresh(
        self,
        session: SessionModel,
        artifact_type: ArtifactType,
        content: str,
        title: str | None = None,
    ) -> None:
        async with self.session_factory() as db:
            await self._save(db, session, artifact_type, content, title)

    async def _relay(
        self,
        chunks: AsyncIterator[str],
        on_complete: Callable[[str], Awaitable[None]],
        event: str,
        session_id: UUID,
    ) -> AsyncIterator[str]:
        """Forward deltas, then hand the full text to ``on_complete``."""
        parts: list[str] = []
        try:
            async for delta in chunks:
                parts.append(delta)
                yield delta
        finally:
            await chunks.aclose()

        full_text = "".join(parts)
        await on_complete(full_text)
        log_with_context(
            logger, logging.INFO, f"{event}.persisted",
            event=f"{event}.persisted", session_id=str(session_id), output_length=len(full_text),
        )

    # -- PRD -------------------------------------------------------------

    async def generate_prd(self, session_id: UUID) -> ArtifactModel:
        """
        Generate and store the PRD from every saved answer and summary.

        Raises:
            SessionNotFoundError: If session not found
        """
        session = await load_session(self.db, session_id, with_children=True)
        prompt = self._prd_prompt(session)
        context = CallContext(route="generate/prd", session_id=str(session_id))

        with log_stage(logger, "generate.prd", session_id=str(session_id)) as result:
            content = await self.client.complete(
                self.llm.model_generate, prompt.system, prompt.user, PRD_MAX_TOKENS, context
            )
            artifact = await self._save(self.db, session, ArtifactType.PRD, content)
            result["output_length"] = len(artifact.content_md)
        return artifact

    async def stream_prd(self, session_id: UUID) -> AsyncIterator[str]:
        """
        Stream the PRD; it is stored once the stream completes.

        Raises:
            SessionNotFoundError: Before streaming starts, if session not found
        """
        session = await load_session(self.db, session_id, with_children=True)
        prompt = self._prd_prompt(session)
        context = CallContext(route="generate/prd/stream", session_id=str(session_id))
        chunks = self.client.complete_stream(
            self.llm.model_generate, prompt.system, prompt.user, PRD_MAX_TOKENS, context
        )

        async def persist(text: str) -> None:
            await self._save_fresh(session, ArtifactType.PRD, text)

        return self._relay(chunks, persist, "generate.prd.stream", session_id)

    # -- tech spec -------------------------------------------------------

    async def generate_tech_spec(self, session_id: UUID) -> ArtifactModel:
        """
        Generate and store the tech spec from the stored PRD.

        Raises:
            SessionNotFoundError: If session not found
            PrerequisiteMissingError: If no PRD has been generated
        """
        session = await load_session(self.db, session_id, with_children=True)
        prompt = self._tech_spec_prompt(session)
        context = CallContext(route="generate/tech-spec", session_id=str(session_id))

        with log_stage(logger, "generate.tech_spec", session_id=str(session_id)) as result:
            content = await self.client.complete(
                self.llm.model_generate, prompt.system, prompt.user, TECH_SPEC_MAX_TOKENS, context
            )
            artifact = await self._save(self.db, session, ArtifactType.TECH_SPEC, content)
            result["output_length"] = len(artifact.content_md)
        return artifact

    async def stream_tech_spec(self, session_id: UUID) -> AsyncIterator[str]:
        """
        Stream the tech spec; it is stored once the stream completes.

        Raises:
            SessionNotFoundError: Before streaming starts, if session not found
            PrerequisiteMissingError: Before streaming starts, if no PRD exists
        """
        session = await load_session(self.db, session_id, with_children=True)
        prompt = self._tech_spec_prompt(session)
        context = CallContext(route="generate/tech-spec/stream", session_id=str(session_id))
        chunks = self.client.complete_stream(
            self.llm.model_generate, prompt.system, prompt.user, TECH_SPEC_MAX_TOKENS, context
        )

        async def persist(text: str) -> None:
            await self._save_fresh(session, ArtifactType.TECH_SPEC, text)

        return self._relay(chunks, persist, "generate.tech_spec.stream", session_id)

    # -- reflection ------------------------------------------------------

    async def generate_reflection(self, session_id: UUID) -> str:
        """
        Pressure-test the plan given both documents. Nothing is stored.

        Raises:
            SessionNotFoundError: If session not found
            MissingArtifactsError: Unless both PRD and tech spec exist
        """
        session = await load_session(self.db, session_id, with_children=True)
        prd, tech_spec = require_reflection_inputs(
            _artifact_content(session, ArtifactType.PRD),
            _artifact_content(session, ArtifactType.TECH_SPEC),
            str(session_id),
        )
        prompt = build_reflection_prompt(session.title, session.product_description, prd, tech_spec)
        context = CallContext(route="generate/reflection", session_id=str(session_id))

        with log_stage(logger, "generate.reflection", session_id=str(session_id)) as result:
            content = await self.client.complete(
                self.llm.model_reflect, prompt.system, prompt.user, REFLECTION_MAX_TOKENS, context
            )
            result["output_length"] = len(content)
        return content.strip()

    # -- refinement ------------------------------------------------------

    async def refine(
        self,
        session_id: UUID,
        message: str,
        artifact_type: ArtifactType,
    ) -> AsyncIterator[str]:
        """
        Stream one refinement chat turn about a stored document.

        When the reply carries the artifact update marker, the text after
        it replaces the stored document once the stream completes.

        Raises:
            SessionNotFoundError: Before streaming starts, if session not found
            ArtifactNotFoundError: Before streaming starts, if the document is missing
        """
        session = await load_session(self.db, session_id, with_children=True)
        artifact = next((a for a in session.artifacts if a.type == artifact_type), None)
        if artifact is None:
            raise ArtifactNotFoundError(str(session_id), artifact_type.value)

        messages = [
            ChatMessage(role="system", content=build_refine_system_prompt(artifact_type.value, artifact.content_md)),
            ChatMessage(role="user", content=message),
        ]
        context = CallContext(route="refine", session_id=str(session_id))
        chunks = self.client.complete_chat_stream(
            self.llm.refine_model, messages, REFINE_MAX_TOKENS, context
        )
        title = artifact.title

        async def persist(reply: str) -> None:
            _, revised = split_artifact_update(reply)
            if revised is None:
                return
            await self._save_fresh(session, artifact_type, revised, title)
            logger.info(
                "Refinement replaced document",
                extra={"session_id": str(session_id), "artifact_type": artifact_type.value},
            )

        return self._relay(chunks, persist, "refine.stream", session_id)

    # -- idea explorer ---------------------------------------------------

    async def explore_ideas(
        self,
        question_set_id: str,
        questions: Sequence[IdeaQuestion],
    ) -> list[IdeaSuggestion]:
        """
        Turn three playful answers into three app ideas.

        Raises:
            ParseError: Unless the output holds exactly three valid ideas
        """
        prompt = build_idea_explorer_prompt(question_set_id, questions)
        context = CallContext(route="generate/idea-explorer")

        with log_stage(logger, "generate.idea_explorer", question_set_id=question_set_id) as result:
            raw = await self.client.complete(
                self.llm.idea_explorer_model, prompt.system, prompt.user, IDEA_MAX_TOKENS, context
            )
            ideas = parse_ideas(raw)
            result["idea_count"] = len(ideas)
        return ideas
