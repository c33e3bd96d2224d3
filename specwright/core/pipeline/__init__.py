"""Stage workflow rules for the generation pipeline."""

from specwright.core.pipeline.workflow import (
    WALKTHROUGH_STAGE_ORDER,
    ArtifactType,
    DecisionStatus,
    MainFlowState,
    WalkthroughStage,
    WalkthroughStatus,
    artifact_id,
    artifact_title,
    completed_sections,
    derive_main_flow_state,
    require_prd,
    require_reflection_inputs,
    unlocked_stages,
)

__all__ = [
    "WALKTHROUGH_STAGE_ORDER",
    "ArtifactType",
    "DecisionStatus",
    "MainFlowState",
    "WalkthroughStage",
    "WalkthroughStatus",
    "artifact_id",
    "artifact_title",
    "completed_sections",
    "derive_main_flow_state",
    "require_prd",
    "require_reflection_inputs",
    "unlocked_stages",
]
