"""
Stage workflow rules.

The main flow state is never stored. It is derived from which summaries and
artifacts exist, so regenerating any stage keeps the state consistent.
Hard preconditions are checked here before a service spends a model call.

Dependencies: specwright.core.content, specwright.core.exceptions
System role: State machine for the generation pipeline
"""

import enum
from collections.abc import Iterable

from specwright.core.content import SECTION_ORDER
from specwright.core.exceptions import MissingArtifactsError, PrerequisiteMissingError


class ArtifactType(str, enum.Enum):
    PRD = "PRD"
    TECH_SPEC = "TECH_SPEC"


class MainFlowState(str, enum.Enum):
    EMPTY = "EMPTY"
    SECTIONS_IN_PROGRESS = "SECTIONS_IN_PROGRESS"
    ALL_SECTIONS_COMPLETE = "ALL_SECTIONS_COMPLETE"
    PRD_GENERATED = "PRD_GENERATED"
    TECH_SPEC_GENERATED = "TECH_SPEC_GENERATED"
    REFLECTION_AVAILABLE = "REFLECTION_AVAILABLE"


class WalkthroughStatus(str, enum.Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class DecisionStatus(str, enum.Enum):
    TENTATIVE = "tentative"
    APPROVED = "approved"


class WalkthroughStage(str, enum.Enum):
    DRIVERS = "drivers"
    AGENTIC_PROFILE = "agentic_profile"
    DECISIONS = "decisions"
    SPEC = "spec"
    DIAGRAM = "diagram"


WALKTHROUGH_STAGE_ORDER: tuple[WalkthroughStage, ...] = tuple(WalkthroughStage)


def artifact_id(session_id: str, artifact_type: ArtifactType | str) -> str:
    """Primary key for the single artifact of a type in a session."""
    value = artifact_type.value if isinstance(artifact_type, ArtifactType) else artifact_type
    return f"{session_id}-{value}"


def artifact_title(artifact_type: ArtifactType | str, session_title: str | None) -> str:
    value = artifact_type.value if isinstance(artifact_type, ArtifactType) else artifact_type
    prefix = "PRD" if value == ArtifactType.PRD.value else "Tech Spec"
    return f"{prefix} - {session_title or 'Untitled'}"


def completed_sections(summarized_keys: Iterable[str]) -> list[str]:
    """Known section keys that have a summary, in section order."""
    present = set(summarized_keys)
    return [key.value for key in SECTION_ORDER if key.value in present]


def derive_main_flow_state(
    answered_keys: Iterable[str],
    summarized_keys: Iterable[str],
    artifact_types: Iterable[str],
) -> MainFlowState:
    """
    Derive the main flow state from stored records.

    Args:
        answered_keys: Section keys with saved answers
        summarized_keys: Section keys with a persisted summary
        artifact_types: Types of the artifacts stored for the session

    Returns:
        MainFlowState: The furthest state the records support
    """
    artifacts = set(artifact_types)
    if ArtifactType.PRD.value in artifacts and ArtifactType.TECH_SPEC.value in artifacts:
        return MainFlowState.REFLECTION_AVAILABLE
    if ArtifactType.PRD.value in artifacts:
        return MainFlowState.PRD_GENERATED
    # Walkthrough generate-spec can store a tech spec without a PRD artifact.
    if ArtifactType.TECH_SPEC.value in artifacts:
        return MainFlowState.TECH_SPEC_GENERATED

    done = completed_sections(summarized_keys)
    if len(done) == len(SECTION_ORDER):
        return MainFlowState.ALL_SECTIONS_COMPLETE
    if done or set(answered_keys):
        return MainFlowState.SECTIONS_IN_PROGRESS
    return MainFlowState.EMPTY


def unlocked_stages(state: MainFlowState) -> list[str]:
    """
    Stages a client may run next.

    PRD generation is advisory-gated on all sections being complete, so it is
    listed only from ALL_SECTIONS_COMPLETE on. The service itself does not
    refuse it.
    """
    stages = ["sections"]
    if state in (
        MainFlowState.ALL_SECTIONS_COMPLETE,
        MainFlowState.PRD_GENERATED,
        MainFlowState.TECH_SPEC_GENERATED,
        MainFlowState.REFLECTION_AVAILABLE,
    ):
        stages.append("prd")
    if state in (
        MainFlowState.PRD_GENERATED,
        MainFlowState.TECH_SPEC_GENERATED,
        MainFlowState.REFLECTION_AVAILABLE,
    ):
        stages.extend(["tech_spec", "tech_walkthrough", "refine"])
    if state == MainFlowState.REFLECTION_AVAILABLE:
        stages.append("reflection")
    return stages


def require_prd(prd_content: str | None, session_id: str) -> str:
    """Tech spec generation needs a stored PRD."""
    if not prd_content:
        raise PrerequisiteMissingError(
            "PRD must be generated before the tech spec",
            {"session_id": session_id, "missing": [ArtifactType.PRD.value]},
        )
    return prd_content


def require_reflection_inputs(
    prd_content: str | None,
    tech_spec_content: str | None,
    session_id: str,
) -> tuple[str, str]:
    """Reflection needs both documents."""
    missing = [
        artifact.value
        for artifact, content in (
            (ArtifactType.PRD, prd_content),
            (ArtifactType.TECH_SPEC, tech_spec_content),
        )
        if not content
    ]
    if missing:
        raise MissingArtifactsError(
            "Both PRD and tech spec are required for reflection",
            {"session_id": session_id, "missing": missing},
        )
    return prd_content, tech_spec_content
