"""Prompt builders, one per generation stage."""

from specwright.core.prompts.base import PromptPair, QAEntry, SectionInput
from specwright.core.prompts.documents import (
    ARTIFACT_UPDATE_MARKER,
    build_prd_prompt,
    build_reflection_prompt,
    build_refine_system_prompt,
    build_tech_spec_prompt,
    split_artifact_update,
)
from specwright.core.prompts.ideas import IdeaQuestion, build_idea_explorer_prompt
from specwright.core.prompts.sections import (
    build_prefill_prompt,
    build_suggest_prompt,
    build_summarize_prompt,
)
from specwright.core.prompts.walkthrough import (
    AgenticProfileInput,
    DecisionInput,
    build_diagram_prompt,
    build_driver_suggest_prompt,
    build_generate_spec_prompt,
    build_propose_decisions_prompt,
    build_walkthrough_prefill_prompt,
    is_agentic,
)

__all__ = [
    "PromptPair",
    "QAEntry",
    "SectionInput",
    "ARTIFACT_UPDATE_MARKER",
    "build_prd_prompt",
    "build_reflection_prompt",
    "build_refine_system_prompt",
    "build_tech_spec_prompt",
    "split_artifact_update",
    "IdeaQuestion",
    "build_idea_explorer_prompt",
    "build_prefill_prompt",
    "build_suggest_prompt",
    "build_summarize_prompt",
    "AgenticProfileInput",
    "DecisionInput",
    "build_diagram_prompt",
    "build_driver_suggest_prompt",
    "build_generate_spec_prompt",
    "build_propose_decisions_prompt",
    "build_walkthrough_prefill_prompt",
    "is_agentic",
]
