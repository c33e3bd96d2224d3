"""
Tech walkthrough service orchestrator.

Stages: drivers, agentic profile, decisions, spec, diagram. Drivers and
the profile are saved independently. Proposing decisions replaces the
whole set. The spec is composed from whatever decisions are current,
approved or not, and stored as the session's TECH_SPEC artifact.

Dependencies: specwright.boundary.db, specwright.core.llm, specwright.core.prompts
System role: Architecture walkthrough use cases
"""

import logging
from collections.abc import Mapping, Sequence
from typing import Any
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from specwright.application.services.session_service import SessionService, load_session
from specwright.boundary.db.CRUD.artifact_crud import artifact_crud
from specwright.boundary.db.CRUD.walkthrough_crud import walkthrough_crud
from specwright.boundary.db.models import ArchitectureDecisionModel, TechWalkthroughModel
from specwright.configs import get_settings
from specwright.configs.llm import LLMSettings
from specwright.core.exceptions import (
    DecisionNotFoundError,
    ValidationError,
    WalkthroughNotFoundError,
)
from specwright.core.llm import CallContext, CompletionClient
from specwright.core.llm.structured import (
    extract_mermaid,
    parse_decisions,
    parse_string_list,
    parse_walkthrough_prefill,
)
from specwright.core.pipeline import (
    ArtifactType,
    DecisionStatus,
    WalkthroughStatus,
    artifact_title,
)
from specwright.core.prompts import (
    AgenticProfileInput,
    DecisionInput,
    build_diagram_prompt,
    build_driver_suggest_prompt,
    build_generate_spec_prompt,
    build_propose_decisions_prompt,
    build_walkthrough_prefill_prompt,
    is_agentic,
)
from specwright.observability.log_utils import log_stage

logger = logging.getLogger(__name__)

PROPOSE_MAX_TOKENS = 8000
SPEC_MAX_TOKENS = 16000
DIAGRAM_MAX_TOKENS = 2000
PREFILL_MAX_TOKENS = 2000
DRIVER_SUGGEST_MAX_TOKENS = 1000


def decision_to_dict(decision: ArchitectureDecisionModel) -> dict[str, Any]:
    return {
        "id": decision.id,
        "title": decision.title,
        "area": decision.area,
        "chosen_option": decision.chosen_option,
        "alternatives": list(decision.alternatives or []),
        "tradeoffs": decision.tradeoffs,
        "user_visible_consequence": decision.user_visible_consequence,
        "mvp_impact": decision.mvp_impact,
        "open_questions": decision.open_questions,
        "status": decision.status.value,
    }


def walkthrough_to_dict(walkthrough: TechWalkthroughModel) -> dict[str, Any]:
    """Walkthrough with drivers, ordered decisions and profile as plain data."""
    profile = walkthrough.agentic_profile
    return {
        "id": walkthrough.id,
        "session_id": walkthrough.session_id,
        "status": walkthrough.status,
        "drivers": [{"question_key": d.question_key, "answer": d.answer} for d in walkthrough.drivers],
        "decisions": [decision_to_dict(d) for d in sorted(walkthrough.decisions, key=lambda d: d.sort_order)],
        "agentic_profile": (
            {
                "agentic_mode": profile.agentic_mode,
                "orchestration_shape": profile.orchestration_shape,
                "tool_capabilities": list(profile.tool_capabilities or []),
                "memory_requirements": profile.memory_requirements,
                "human_approval_required": list(profile.human_approval_required or []),
                "guardrails_notes": profile.guardrails_notes,
            }
            if profile is not None
            else None
        ),
    }


def _decision_inputs(decisions: Sequence[Mapping[str, Any]]) -> list[DecisionInput]:
    return [
        DecisionInput(
            title=d.get("title", ""),
            area=d.get("area", ""),
            chosen_option=d.get("chosen_option", ""),
            alternatives=tuple(d.get("alternatives") or ()),
            tradeoffs=d.get("tradeoffs") or "",
            user_visible_consequence=d.get("user_visible_consequence") or "",
            mvp_impact=d.get("mvp_impact") or "",
            open_questions=d.get("open_questions") or "",
            status=str(d.get("status") or DecisionStatus.TENTATIVE.value),
        )
        for d in decisions
    ]


def _profile_input(profile: Mapping[str, Any] | None) -> AgenticProfileInput | None:
    if profile is None:
        return None
    return AgenticProfileInput(
        agentic_mode=profile.get("agentic_mode") or "none",
        orchestration_shape=profile.get("orchestration_shape"),
        tool_capabilities=tuple(profile.get("tool_capabilities") or ()),
        memory_requirements=profile.get("memory_requirements"),
        human_approval_required=tuple(profile.get("human_approval_required") or ()),
        guardrails_notes=profile.get("guardrails_notes"),
    )


class WalkthroughService:
    """Tech walkthrough service orchestrator."""

    def __init__(
        self,
        db: AsyncSession,
        client: CompletionClient | None = None,
        llm_settings: LLMSettings | None = None,
    ) -> None:
        """
        Initialize walkthrough service.

        Args:
            db: Async SQLAlchemy session
            client: Completion client; only needed by model-backed stages
            llm_settings: Model names (defaults to settings)
        """
        self.db = db
        self.client = client
        self.llm = llm_settings or get_settings().llm

    async def _require(self, walkthrough_id: UUID) -> TechWalkthroughModel:
        walkthrough = await walkthrough_crud.get_by_id(self.db, walkthrough_id)
        if walkthrough is None:
            raise WalkthroughNotFoundError(str(walkthrough_id))
        return walkthrough

    async def _load(self, *, id: UUID | None = None, session_id: UUID | None = None) -> dict[str, Any]:
        walkthrough = await walkthrough_crud.get_with_children(self.db, id=id, session_id=session_id)
        if walkthrough is None:
            raise WalkthroughNotFoundError(str(id or session_id))
        return walkthrough_to_dict(walkthrough)

    # -- lifecycle -------------------------------------------------------

    async def open_walkthrough(self, session_id: UUID) -> dict[str, Any]:
        """
        Create the session's walkthrough on first open, or return the existing one.

        A missing session is restored and an expired one extended first.
        """
        await SessionService(self.db).restore_or_extend(session_id)
        walkthrough = await walkthrough_crud.get_or_create_for_session(self.db, session_id)
        await self.db.commit()
        logger.info(
            "Walkthrough opened",
            extra={"session_id": str(session_id), "walkthrough_id": str(walkthrough.id)},
        )
        return await self._load(id=walkthrough.id)

    async def get_walkthrough(self, session_id: UUID) -> dict[str, Any]:
        """
        Raises:
            WalkthroughNotFoundError: If the session has no walkthrough
        """
        return await self._load(session_id=session_id)

    # -- drivers and profile ---------------------------------------------

    async def save_drivers(self, walkthrough_id: UUID, drivers: Sequence[Mapping[str, str]]) -> int:
        """
        Upsert driver answers one by one.

        Each answer is committed on its own; a failure part way leaves the
        earlier answers saved and propagates.

        Returns:
            int: Number of answers saved
        """
        await self._require(walkthrough_id)
        for driver in drivers:
            await walkthrough_crud.upsert_driver_answer(
                self.db, walkthrough_id, driver["question_key"], driver["answer"]
            )
            await self.db.commit()
        logger.info(
            "Driver answers saved",
            extra={"walkthrough_id": str(walkthrough_id), "count": len(drivers)},
        )
        return len(drivers)

    async def save_agentic_profile(self, walkthrough_id: UUID, **profile: Any) -> None:
        await self._require(walkthrough_id)
        await walkthrough_crud.upsert_agentic_profile(self.db, walkthrough_id, **profile)
        await self.db.commit()
        logger.info(
            "Agentic profile saved",
            extra={"walkthrough_id": str(walkthrough_id), "agentic_mode": profile.get("agentic_mode")},
        )

    # -- decisions -------------------------------------------------------

    async def update_decision(self, decision_id: UUID, **updates: Any) -> UUID:
        """
        Edit one decision. Fields passed as None are left unchanged.

        Raises:
            DecisionNotFoundError: If no decision has this id
        """
        values = {key: value for key, value in updates.items() if value is not None}
        if "status" in values:
            values["status"] = DecisionStatus(values["status"])
        decision = await walkthrough_crud.update_decision(self.db, decision_id, **values)
        if decision is None:
            raise DecisionNotFoundError(str(decision_id))
        await self.db.commit()
        return decision.id

    async def propose_decisions(
        self,
        walkthrough_id: UUID,
        prd_content: str,
        drivers: Mapping[str, str],
        agentic_profile: Mapping[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """
        Ask the model for 5-7 decisions and replace the stored set with them.

        Replacement happens only after the output parsed; a parse failure
        leaves the existing decisions in place.

        Raises:
            WalkthroughNotFoundError: If walkthrough not found
            ParseError: If no valid decision could be read from the output
        """
        await self._require(walkthrough_id)
        profile = _profile_input(agentic_profile)
        prompt = build_propose_decisions_prompt(prd_content, drivers, profile)
        context = CallContext(route="tech-walkthrough/decisions/propose")

        with log_stage(
            logger, "walkthrough.decisions.propose",
            walkthrough_id=str(walkthrough_id), agentic=is_agentic(profile),
        ) as result:
            raw = await self.client.complete(
                self.llm.model_generate, prompt.system, prompt.user, PROPOSE_MAX_TOKENS, context
            )
            proposed = parse_decisions(raw)
            rows = await walkthrough_crud.replace_decisions(
                self.db,
                walkthrough_id,
                [{**d.model_dump(), "status": DecisionStatus.TENTATIVE} for d in proposed],
            )
            await self.db.commit()
            result["decision_count"] = len(rows)
        return [decision_to_dict(row) for row in rows]

    # -- spec and diagram ------------------------------------------------

    async def generate_spec(
        self,
        walkthrough_id: UUID,
        session_id: UUID,
        prd_content: str,
        drivers: Mapping[str, str],
        decisions: Sequence[Mapping[str, Any]] | None = None,
    ) -> str:
        """
        Compose the tech spec from the PRD, drivers and current decisions.

        The spec is stored as the session's TECH_SPEC artifact (same key the
        main flow uses) and the walkthrough is marked completed.

        Args:
            walkthrough_id: Walkthrough UUID
            session_id: Owning session UUID
            prd_content: PRD text
            drivers: Driver answers by key
            decisions: Decision snapshot; stored decisions are used when None

        Raises:
            WalkthroughNotFoundError: If walkthrough not found
            SessionNotFoundError: If session not found
        """
        await self._require(walkthrough_id)
        session = await load_session(self.db, session_id)
        if decisions is None:
            decisions = [decision_to_dict(d) for d in await walkthrough_crud.list_decisions(self.db, walkthrough_id)]

        prompt = build_generate_spec_prompt(prd_content, drivers, _decision_inputs(decisions))
        context = CallContext(route="tech-walkthrough/generate-spec", session_id=str(session_id))

        with log_stage(
            logger, "walkthrough.generate_spec",
            walkthrough_id=str(walkthrough_id), decision_count=len(decisions),
        ) as result:
            raw = await self.client.complete(
                self.llm.model_generate, prompt.system, prompt.user, SPEC_MAX_TOKENS, context
            )
            spec = raw.strip()
            await artifact_crud.upsert(
                self.db,
                session_id,
                ArtifactType.TECH_SPEC,
                artifact_title(ArtifactType.TECH_SPEC, session.title),
                spec,
            )
            await self.db.commit()
            await walkthrough_crud.set_status(self.db, walkthrough_id, WalkthroughStatus.COMPLETED)
            await self.db.commit()
            result["output_length"] = len(spec)
        return spec

    async def generate_diagram(
        self,
        prd_content: str,
        drivers: Mapping[str, str],
        decisions: Sequence[Mapping[str, Any]],
    ) -> str:
        """
        Return Mermaid source for the architecture. Nothing is stored.

        Raises:
            ValidationError: If the PRD text is empty
        """
        if not prd_content.strip():
            raise ValidationError("PRD content is required", field="prd_content")
        prompt = build_diagram_prompt(prd_content, drivers, _decision_inputs(decisions))
        context = CallContext(route="tech-walkthrough/generate-diagram")

        with log_stage(logger, "walkthrough.generate_diagram", decision_count=len(decisions)) as result:
            raw = await self.client.complete(
                self.llm.model_suggest, prompt.system, prompt.user, DIAGRAM_MAX_TOKENS, context
            )
            diagram = extract_mermaid(raw)
            result["output_length"] = len(diagram)
        return diagram

    # -- assistance ------------------------------------------------------

    async def prefill(self, prd_content: str) -> dict[str, Any]:
        """
        Extract driver answers and an agentic profile from a PRD. Nothing is stored.

        Raises:
            ParseError: If the output is not a JSON object
        """
        prompt = build_walkthrough_prefill_prompt(prd_content)
        context = CallContext(route="tech-walkthrough/prefill")

        with log_stage(logger, "walkthrough.prefill") as result:
            raw = await self.client.complete(
                self.llm.model_suggest, prompt.system, prompt.user, PREFILL_MAX_TOKENS, context
            )
            payload = parse_walkthrough_prefill(raw)
            result["driver_count"] = len(payload.drivers)
        return {
            "answers": payload.drivers,
            "agentic_profile": payload.agentic_profile.model_dump() if payload.agentic_profile else None,
        }

    async def suggest_driver(self, prd_content: str, question_key: str, current_answer: str) -> list[str]:
        """Offer 2-3 alternative answers for one driver question."""
        prompt = build_driver_suggest_prompt(prd_content, question_key, current_answer)
        context = CallContext(route="tech-walkthrough/suggest")

        with log_stage(logger, "walkthrough.suggest", question_key=question_key) as result:
            raw = await self.client.complete(
                self.llm.model_suggest, prompt.system, prompt.user, DRIVER_SUGGEST_MAX_TOKENS, context
            )
            suggestions = parse_string_list(raw)
            result["suggestion_count"] = len(suggestions)
        return suggestions
