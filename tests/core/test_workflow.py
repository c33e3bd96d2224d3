"""
Test suite for workflow state derivation and stage preconditions.

System role: Verification of the main flow state machine
"""

import pytest

from specwright.core.content import SECTION_ORDER
from specwright.core.exceptions import MissingArtifactsError, PrerequisiteMissingError
from specwright.core.pipeline import (
    ArtifactType,
    MainFlowState,
    artifact_id,
    artifact_title,
    completed_sections,
    derive_main_flow_state,
    require_prd,
    require_reflection_inputs,
    unlocked_stages,
)

ALL_KEYS = [key.value for key in SECTION_ORDER]


class TestDeriveMainFlowState:
    """Test suite for derive_main_flow_state."""

    def test_empty_session(self) -> None:
        assert derive_main_flow_state([], [], []) == MainFlowState.EMPTY

    def test_answer_without_summary_is_in_progress(self) -> None:
        assert derive_main_flow_state(["CONTEXT"], [], []) == MainFlowState.SECTIONS_IN_PROGRESS

    def test_all_summaries_complete_sections(self) -> None:
        assert derive_main_flow_state(ALL_KEYS, ALL_KEYS, []) == MainFlowState.ALL_SECTIONS_COMPLETE

    def test_answers_alone_do_not_complete_sections(self) -> None:
        """Test completion is driven by summaries, not answers."""
        assert derive_main_flow_state(ALL_KEYS, ALL_KEYS[:-1], []) == MainFlowState.SECTIONS_IN_PROGRESS

    def test_prd_present(self) -> None:
        assert derive_main_flow_state(ALL_KEYS, ALL_KEYS, ["PRD"]) == MainFlowState.PRD_GENERATED

    def test_both_documents_unlock_reflection(self) -> None:
        assert derive_main_flow_state([], [], ["PRD", "TECH_SPEC"]) == MainFlowState.REFLECTION_AVAILABLE

    def test_tech_spec_without_prd(self) -> None:
        """Test a walkthrough-written tech spec is not reported as an empty session."""
        state = derive_main_flow_state([], [], ["TECH_SPEC"])

        assert state == MainFlowState.TECH_SPEC_GENERATED
        assert "reflection" not in unlocked_stages(state)


class TestUnlockedStages:
    def test_empty_only_sections(self) -> None:
        assert unlocked_stages(MainFlowState.EMPTY) == ["sections"]

    def test_prd_generated_unlocks_tech_stages(self) -> None:
        stages = unlocked_stages(MainFlowState.PRD_GENERATED)
        assert {"prd", "tech_spec", "tech_walkthrough", "refine"} <= set(stages)
        assert "reflection" not in stages

    def test_reflection_available(self) -> None:
        assert "reflection" in unlocked_stages(MainFlowState.REFLECTION_AVAILABLE)


class TestPreconditions:
    """Test suite for stage preconditions."""

    def test_require_prd_missing_raises(self) -> None:
        # Act
        with pytest.raises(PrerequisiteMissingError) as exc_info:
            require_prd(None, "sid")

        # Assert
        assert exc_info.value.code == "PREREQUISITE_MISSING"
        assert exc_info.value.status_code == 400

    def test_require_prd_returns_content(self) -> None:
        assert require_prd("# PRD", "sid") == "# PRD"

    def test_reflection_with_only_prd_lists_tech_spec_missing(self) -> None:
        with pytest.raises(MissingArtifactsError) as exc_info:
            require_reflection_inputs("# PRD", None, "sid")

        assert exc_info.value.code == "MISSING_ARTIFACTS"
        assert exc_info.value.details["missing"] == ["TECH_SPEC"]

    def test_reflection_with_nothing_lists_both(self) -> None:
        with pytest.raises(MissingArtifactsError) as exc_info:
            require_reflection_inputs(None, "", "sid")

        assert exc_info.value.details["missing"] == ["PRD", "TECH_SPEC"]


class TestArtifactNaming:
    def test_artifact_id_is_session_and_type(self) -> None:
        assert artifact_id("abc", ArtifactType.TECH_SPEC) == "abc-TECH_SPEC"

    def test_artifact_title_defaults_to_untitled(self) -> None:
        assert artifact_title(ArtifactType.PRD, None) == "PRD - Untitled"
        assert artifact_title("TECH_SPEC", "Invoicer") == "Tech Spec - Invoicer"

    def test_completed_sections_in_section_order_and_known_keys_only(self) -> None:
        assert completed_sections(["WINS", "BOGUS", "CONTEXT"]) == ["CONTEXT", "WINS"]
