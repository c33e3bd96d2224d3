"""
Test suite for WalkthroughService.

System role: Verification of architecture walkthrough use cases
"""

import json
import uuid

import pytest

from specwright.application.services.session_service import SessionService
from specwright.application.services.walkthrough_service import (
    DIAGRAM_MAX_TOKENS,
    PROPOSE_MAX_TOKENS,
    SPEC_MAX_TOKENS,
    WalkthroughService,
)
from specwright.boundary.db.CRUD.artifact_crud import artifact_crud
from specwright.boundary.db.CRUD.session_crud import session_crud
from specwright.core.exceptions import (
    DecisionNotFoundError,
    ParseError,
    ValidationError,
    WalkthroughNotFoundError,
)
from specwright.core.pipeline import ArtifactType, WalkthroughStatus

PRD = "# PRD\nA shared grocery list for households."
DRIVERS = {"unit_of_work": "One list edit", "latency_contract": "Under 1s"}


def _decisions_json(*titles: str) -> str:
    return json.dumps(
        [
            {
                "title": title,
                "area": "state_sync",
                "chosenOption": f"{title} choice",
                "alternatives": ["A", "B"],
                "tradeoffs": "Some",
                "userVisibleConsequence": "Fast",
                "mvpImpact": "Small",
                "openQuestions": "None",
            }
            for title in titles
        ]
    )


@pytest.fixture
def service(test_async_db, fake_client, llm_settings) -> WalkthroughService:
    return WalkthroughService(test_async_db, fake_client, llm_settings)


@pytest.fixture
async def session(test_async_db):
    return await SessionService(test_async_db, ttl_days=7).create_session(title="Groceries")


@pytest.fixture
async def walkthrough(service, session):
    return await service.open_walkthrough(session.id)


class TestOpenWalkthrough:
    """Test suite for open and get."""

    @pytest.mark.asyncio
    async def test_open_creates_in_progress_walkthrough(self, walkthrough, session) -> None:
        assert walkthrough["session_id"] == session.id
        assert walkthrough["status"] == WalkthroughStatus.IN_PROGRESS
        assert walkthrough["decisions"] == []
        assert walkthrough["agentic_profile"] is None

    @pytest.mark.asyncio
    async def test_open_twice_returns_same_walkthrough(self, service, session, walkthrough) -> None:
        again = await service.open_walkthrough(session.id)
        assert again["id"] == walkthrough["id"]

    @pytest.mark.asyncio
    async def test_open_for_unknown_session_restores_it(self, service, test_async_db) -> None:
        # Arrange
        session_id = uuid.uuid4()

        # Act
        result = await service.open_walkthrough(session_id)

        # Assert
        restored = await session_crud.get_by_id(test_async_db, session_id)
        assert restored.title == "Restored Session"
        assert result["session_id"] == session_id

    @pytest.mark.asyncio
    async def test_get_without_walkthrough_raises_not_found(self, service, session) -> None:
        with pytest.raises(WalkthroughNotFoundError):
            await service.get_walkthrough(session.id)


class TestDriversAndProfile:
    @pytest.mark.asyncio
    async def test_save_drivers_returns_count_and_upserts(self, service, session, walkthrough) -> None:
        # Act
        saved = await service.save_drivers(
            walkthrough["id"],
            [{"question_key": "unit_of_work", "answer": "v1"}, {"question_key": "scale_shape", "answer": "Small"}],
        )
        await service.save_drivers(walkthrough["id"], [{"question_key": "unit_of_work", "answer": "v2"}])

        # Assert
        assert saved == 2
        drivers = {d["question_key"]: d["answer"] for d in (await service.get_walkthrough(session.id))["drivers"]}
        assert drivers == {"unit_of_work": "v2", "scale_shape": "Small"}

    @pytest.mark.asyncio
    async def test_save_drivers_unknown_walkthrough(self, service) -> None:
        with pytest.raises(WalkthroughNotFoundError):
            await service.save_drivers(uuid.uuid4(), [{"question_key": "k", "answer": "v"}])

    @pytest.mark.asyncio
    async def test_save_agentic_profile_keeps_mode_none(self, service, session, walkthrough) -> None:
        await service.save_agentic_profile(
            walkthrough["id"],
            agentic_mode="none",
            orchestration_shape=None,
            tool_capabilities=[],
            memory_requirements="none",
            human_approval_required=[],
            guardrails_notes=None,
        )

        profile = (await service.get_walkthrough(session.id))["agentic_profile"]
        assert profile["agentic_mode"] == "none"
        assert profile["memory_requirements"] == "none"


class TestDecisions:
    """Test suite for proposing and editing decisions."""

    @pytest.mark.asyncio
    async def test_propose_replaces_decisions_in_order(self, service, walkthrough, fake_client) -> None:
        # Arrange
        fake_client.responses = [_decisions_json("First", "Second", "Third"), _decisions_json("Only")]

        # Act
        first = await service.propose_decisions(walkthrough["id"], PRD, DRIVERS)
        second = await service.propose_decisions(walkthrough["id"], PRD, DRIVERS)

        # Assert
        assert [d["title"] for d in first] == ["First", "Second", "Third"]
        assert [d["title"] for d in second] == ["Only"]
        assert second[0]["status"] == "tentative"
        assert fake_client.calls[0].model == "test/generate"
        assert fake_client.calls[0].max_tokens == PROPOSE_MAX_TOKENS

    @pytest.mark.asyncio
    async def test_agentic_profile_reaches_prompt(self, service, walkthrough, fake_client) -> None:
        fake_client.responses = [_decisions_json("Planner")]

        await service.propose_decisions(
            walkthrough["id"], PRD, DRIVERS, {"agentic_mode": "semi_autonomous", "tool_capabilities": ["web_browsing"]}
        )

        assert "AGENTIC SYSTEM" in fake_client.calls[0].system_prompt

    @pytest.mark.asyncio
    async def test_parse_failure_keeps_existing_decisions(self, service, session, walkthrough, fake_client) -> None:
        # Arrange
        fake_client.responses = [_decisions_json("Keep me"), "I need more information."]
        await service.propose_decisions(walkthrough["id"], PRD, DRIVERS)

        # Act
        with pytest.raises(ParseError):
            await service.propose_decisions(walkthrough["id"], PRD, DRIVERS)

        # Assert
        decisions = (await service.get_walkthrough(session.id))["decisions"]
        assert [d["title"] for d in decisions] == ["Keep me"]

    @pytest.mark.asyncio
    async def test_propose_unknown_walkthrough_makes_no_model_call(self, service, fake_client) -> None:
        with pytest.raises(WalkthroughNotFoundError):
            await service.propose_decisions(uuid.uuid4(), PRD, DRIVERS)
        assert fake_client.calls == []

    @pytest.mark.asyncio
    async def test_update_decision_approves(self, service, session, walkthrough, fake_client) -> None:
        # Arrange
        fake_client.responses = [_decisions_json("Sync")]
        decision = (await service.propose_decisions(walkthrough["id"], PRD, DRIVERS))[0]

        # Act
        updated_id = await service.update_decision(decision["id"], status="approved", title=None)

        # Assert
        assert updated_id == decision["id"]
        stored = (await service.get_walkthrough(session.id))["decisions"][0]
        assert stored["status"] == "approved"
        assert stored["title"] == "Sync"

    @pytest.mark.asyncio
    async def test_update_unknown_decision_raises(self, service) -> None:
        with pytest.raises(DecisionNotFoundError) as exc_info:
            await service.update_decision(uuid.uuid4(), title="x")
        assert exc_info.value.code == "NOT_FOUND"


class TestSpecAndDiagram:
    """Test suite for spec and diagram generation."""

    @pytest.mark.asyncio
    async def test_generate_spec_stores_tech_spec_and_completes(
        self, service, session, walkthrough, fake_client, test_async_db
    ) -> None:
        # Arrange
        fake_client.responses = [_decisions_json("Sync"), "  # Tech Spec from decisions  "]
        await service.propose_decisions(walkthrough["id"], PRD, DRIVERS)

        # Act
        spec = await service.generate_spec(walkthrough["id"], session.id, PRD, DRIVERS)

        # Assert
        assert spec == "# Tech Spec from decisions"
        assert "### Decision 1: Sync" in fake_client.calls[1].user_prompt
        assert fake_client.calls[1].max_tokens == SPEC_MAX_TOKENS
        artifact = await artifact_crud.get_for_session(test_async_db, session.id, ArtifactType.TECH_SPEC)
        assert artifact.content_md == spec
        assert artifact.title == "Tech Spec - Groceries"
        assert (await service.get_walkthrough(session.id))["status"] == WalkthroughStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_generate_spec_prefers_supplied_decisions(self, service, session, walkthrough, fake_client) -> None:
        fake_client.responses = ["# Spec"]
        supplied = [{"title": "Client snapshot", "area": "interfaces", "chosen_option": "GraphQL", "status": "approved"}]

        await service.generate_spec(walkthrough["id"], session.id, PRD, DRIVERS, supplied)

        assert "Client snapshot" in fake_client.calls[0].user_prompt
        assert "- **Status**: approved" in fake_client.calls[0].user_prompt

    @pytest.mark.asyncio
    async def test_diagram_with_empty_prd_raises_without_model_call(self, service, fake_client) -> None:
        with pytest.raises(ValidationError):
            await service.generate_diagram("   ", DRIVERS, [])
        assert fake_client.calls == []

    @pytest.mark.asyncio
    async def test_diagram_returns_mermaid_source(self, service, fake_client) -> None:
        fake_client.responses = ["```mermaid\nflowchart TD\n  A --> B\n```"]

        diagram = await service.generate_diagram(PRD, DRIVERS, [])

        assert diagram == "flowchart TD\n  A --> B"
        assert fake_client.calls[0].model == "test/suggest"
        assert fake_client.calls[0].max_tokens == DIAGRAM_MAX_TOKENS


class TestAssistance:
    @pytest.mark.asyncio
    async def test_prefill_returns_drivers_and_profile(self, service, fake_client) -> None:
        fake_client.responses = [
            json.dumps({"drivers": DRIVERS, "agenticProfile": {"agenticMode": "assistive", "toolCapabilities": []}})
        ]

        result = await service.prefill(PRD)

        assert result["answers"] == DRIVERS
        assert result["agentic_profile"]["agentic_mode"] == "assistive"

    @pytest.mark.asyncio
    async def test_suggest_driver_falls_back_to_raw_text(self, service, fake_client) -> None:
        fake_client.responses = ["Keep p95 under 500ms"]

        suggestions = await service.suggest_driver(PRD, "latency_contract", "")

        assert suggestions == ["Keep p95 under 500ms"]
