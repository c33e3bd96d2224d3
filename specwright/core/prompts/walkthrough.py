"""
Prompts for the tech walkthrough stages.

Covers driver prefill, per-driver suggestions, decision proposal, spec
generation from decisions and the Mermaid diagram.

Dependencies: specwright.core.content, specwright.core.prompts.base
System role: Prompt construction for architecture walkthrough calls
"""

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from specwright.core.content import (
    AGENTIC_MODE_DESCRIPTIONS,
    DECISION_AREAS,
    DRIVER_QUESTIONS,
    get_driver,
    order_drivers,
)
from specwright.core.prompts.base import PromptPair, truncate

DIAGRAM_PRD_LIMIT = 2000
SUGGEST_PRD_LIMIT = 3000


@dataclass(frozen=True)
class AgenticProfileInput:
    agentic_mode: str
    orchestration_shape: str | None = None
    tool_capabilities: Sequence[str] = field(default_factory=tuple)
    memory_requirements: str | None = None
    human_approval_required: Sequence[str] = field(default_factory=tuple)
    guardrails_notes: str | None = None

    @property
    def is_agentic(self) -> bool:
        return self.agentic_mode != "none"


@dataclass(frozen=True)
class DecisionInput:
    title: str
    area: str
    chosen_option: str
    alternatives: Sequence[str] = field(default_factory=tuple)
    tradeoffs: str = ""
    user_visible_consequence: str = ""
    mvp_impact: str = ""
    open_questions: str = ""
    status: str = "tentative"


def is_agentic(profile: AgenticProfileInput | None) -> bool:
    """Agentic instructions apply only when a profile exists and its mode is not "none"."""
    return profile is not None and profile.is_agentic


# -- prefill ---------------------------------------------------------------

_PREFILL_FORMAT = {
    "drivers": {q.key: "..." for q in DRIVER_QUESTIONS},
    "agenticProfile": {
        "agenticMode": "none|assistive|semi_autonomous|autonomous",
        "orchestrationShape": "single_agent|multi_agent_collaborative|multi_agent_specialist|null",
        "toolCapabilities": ["text_only", "tool_calls", "external_actions"],
        "memoryRequirements": "none|session_only|long_term|null",
        "humanApprovalRequired": ["tool_calls", "external_actions", "data_access"],
        "guardrailsNotes": "...",
    },
}


def build_walkthrough_prefill_prompt(prd_content: str) -> PromptPair:
    """Extract architecture drivers and an agentic profile from a PRD."""
    questions = "\n".join(
        f"{index}. {q.key}: {q.prompt}" for index, q in enumerate(DRIVER_QUESTIONS, start=1)
    )
    system = f"""You are a senior software architect reading a PRD to extract its architecture drivers and agentic profile.

PART 1: Architecture drivers
Answer each question briefly and specifically from the PRD. Infer sensibly where the PRD is silent.

{questions}

PART 2: Agentic profile
Decide whether the system relies on AI agents. Be conservative: infer agentic behaviour only when the PRD explicitly mentions agents, AI autonomy or human-in-the-loop workflows.

Fields:
- agenticMode: "none" (traditional app), "assistive" (AI suggests, user drives), "semi_autonomous" (agent proposes, user approves), "autonomous" (agent acts within guardrails)
- orchestrationShape: "single_agent", "multi_agent_collaborative", "multi_agent_specialist", or null when not agentic
- toolCapabilities: any of "text_only", "tool_calls", "external_actions"
- memoryRequirements: "none", "session_only", "long_term", or null when not agentic
- humanApprovalRequired: any of "tool_calls", "external_actions", "data_access", or an empty array
- guardrailsNotes: safety, compliance, evaluation, audit or policy constraints the PRD mentions

Return one JSON object containing both parts."""
    user = (
        f"## PRD\n{prd_content}\n\n"
        "From this PRD provide:\n"
        "1. Answers to all 8 architecture driver questions\n"
        "2. The agentic profile (look for agents, autonomy, human-in-the-loop, tool use, memory, guardrails)\n\n"
        f"Return JSON in this format:\n{json.dumps(_PREFILL_FORMAT, indent=2)}"
    )
    return PromptPair(system=system, user=user)


# -- driver suggestions ------------------------------------------------------

def build_driver_suggest_prompt(prd_content: str, question_key: str, current_answer: str) -> PromptPair:
    """Ask for 2-3 alternative answers to one driver question."""
    driver = get_driver(question_key)
    label = driver.label if driver else question_key
    examples = driver.examples if driver else ""
    system = f"""You are a senior software architect helping define architecture drivers.

Give 2-3 specific, actionable suggestions for the "{label}" question.
{examples}

Each suggestion should be:
- Tailored to the product in the PRD
- Concrete and measurable where possible
- Distinct from the others

Return a JSON array of 2-3 suggestion strings."""
    user = (
        f"## PRD Summary\n{truncate(prd_content, SUGGEST_PRD_LIMIT, marker='')}\n\n"
        f"## Question: {label}\n"
        f"Current answer: {current_answer or '(empty)'}\n\n"
        'Give 2-3 alternative suggestions as a JSON array:\n["suggestion 1", "suggestion 2", "suggestion 3"]'
    )
    return PromptPair(system=system, user=user)


# -- decision proposal -------------------------------------------------------

def _agentic_instructions(profile: AgenticProfileInput) -> str:
    tools = ", ".join(profile.tool_capabilities) or "not specified"
    approvals = ", ".join(profile.human_approval_required) or "none specified"
    lines = [
        "",
        'IMPORTANT: This is an AGENTIC SYSTEM. Include at least 1-2 decisions in the "orchestration" area covering:',
        "- Agent orchestration pattern (planner/executor, state machine, workflow graph, ...)",
        "- Tool calling architecture (tool registry, permissions, sandboxing)",
        "- Memory architecture (session store, vector store, retention)",
        "- Human-in-the-loop UX (approval flows, review UI, rollback)",
        "- Evaluation and reliability (prompt tests, golden traces, guardrails)",
        "",
        "Agentic profile:",
        f"- Mode: {profile.agentic_mode} ({AGENTIC_MODE_DESCRIPTIONS.get(profile.agentic_mode, 'custom')})",
        f"- Orchestration: {profile.orchestration_shape or 'not specified'}",
        f"- Tool capabilities: {tools}",
        f"- Memory: {profile.memory_requirements or 'not specified'}",
        f"- Human approval required for: {approvals}",
    ]
    if profile.guardrails_notes:
        lines.append(f"- Additional guardrails: {profile.guardrails_notes}")
    return "\n".join(lines) + "\n"


_DECISION_FORMAT = """[
  {
    "title": "...",
    "area": "data_storage|compute_strategy|ux_contract|state_sync|interfaces|risk_controls|operations|orchestration",
    "chosenOption": "...",
    "alternatives": ["...", "..."],
    "tradeoffs": "...",
    "userVisibleConsequence": "...",
    "mvpImpact": "...",
    "openQuestions": "..."
  }
]"""


def build_propose_decisions_prompt(
    prd_content: str,
    drivers: Mapping[str, str],
    agentic_profile: AgenticProfileInput | None = None,
) -> PromptPair:
    """Ask for 5-7 load-bearing architecture decisions."""
    agentic = is_agentic(agentic_profile)
    areas = "\n".join(f"- {area}: {description}" for area, description in DECISION_AREAS.items())
    system = (
        "You are a senior software architect. From the PRD and architecture drivers, propose 5-7 load-bearing architecture decisions.\n\n"
        f"Each decision belongs to one of these areas:\n{areas} (REQUIRED for agentic systems)\n"
        + (_agentic_instructions(agentic_profile) if agentic else "")
        + "\nFor each decision give:\n"
        "- title: short descriptive name\n"
        "- area: one of the areas above\n"
        "- chosenOption: the recommended approach\n"
        "- alternatives: 2-3 other options considered\n"
        "- tradeoffs: the main tradeoffs of the chosen option\n"
        "- userVisibleConsequence: how users will experience this (REQUIRED)\n"
        "- mvpImpact: effect on MVP scope and timeline\n"
        "- openQuestions: what is still unresolved\n\n"
        "Return a JSON array of decisions."
    )
    drivers_text = "\n".join(f"{key}: {value}" for key, value in order_drivers(dict(drivers)))
    user = (
        f"## PRD\n{prd_content}\n\n"
        f"## Architecture Drivers\n{drivers_text}\n\n"
        + (
            f"## Agentic Profile\nThis system is agentic ({agentic_profile.agentic_mode}). "
            "Make sure orchestration decisions are included.\n\n"
            if agentic
            else ""
        )
        + f"Generate 5-7 architecture decisions as a JSON array:\n{_DECISION_FORMAT}"
    )
    return PromptPair(system=system, user=user)


# -- spec from decisions -------------------------------------------------------

GENERATE_SPEC_SYSTEM = """You are a senior software architect writing a complete technical specification.

Produce a markdown document with these sections:

1. **Executive Summary**: the system in brief and its key decisions
2. **Architecture Drivers Summary**: the main constraints and requirements
3. **Load-Bearing Decisions**: for each decision give title and area, chosen approach with rationale, alternatives considered, accepted tradeoffs, user-visible consequences, MVP impact and open questions
4. **System Architecture**: component overview and tech stack
5. **Data Model**: key entities and relationships in ORM-schema style
6. **API Contracts**: main endpoints with request and response shapes
7. **Implementation Plan**: phased micro-tasks
8. **Operational Considerations**: monitoring, deployment and incident response

Keep it practical. Tie the design back to the user-visible consequences throughout."""


def format_decisions(decisions: Sequence[DecisionInput]) -> str:
    return "\n\n".join(
        f"### Decision {index}: {d.title}\n"
        f"- **Area**: {d.area}\n"
        f"- **Chosen Option**: {d.chosen_option}\n"
        f"- **Alternatives**: {', '.join(d.alternatives)}\n"
        f"- **Tradeoffs**: {d.tradeoffs}\n"
        f"- **User-Visible Consequence**: {d.user_visible_consequence}\n"
        f"- **MVP Impact**: {d.mvp_impact}\n"
        f"- **Open Questions**: {d.open_questions}\n"
        f"- **Status**: {d.status}"
        for index, d in enumerate(decisions, start=1)
    )


def build_generate_spec_prompt(
    prd_content: str,
    drivers: Mapping[str, str],
    decisions: Sequence[DecisionInput],
) -> PromptPair:
    """Compose a tech spec from the PRD, drivers and current decisions."""
    drivers_text = "\n".join(f"- **{key}**: {value}" for key, value in order_drivers(dict(drivers)))
    user = (
        f"## PRD\n{prd_content}\n\n"
        f"## Architecture Drivers\n{drivers_text}\n\n"
        f"## Architecture Decisions\n{format_decisions(decisions)}\n\n"
        "Write the complete technical specification in markdown."
    )
    return PromptPair(system=GENERATE_SPEC_SYSTEM, user=user)


# -- diagram -------------------------------------------------------------------

DIAGRAM_SYSTEM = """You are a software architect drawing architecture diagrams in Mermaid.js.

Produce a clean, readable Mermaid flowchart or C4 diagram showing:
1. The main system components
2. Data flows between them
3. External integrations
4. Key architectural boundaries

Use flowchart TD (top-down) or LR (left-right). Keep it simple.

IMPORTANT: return ONLY valid Mermaid code, with no explanation.

Example:
```mermaid
flowchart TD
    A[Client] --> B[API Gateway]
    B --> C[Service]
    C --> D[(Database)]
```"""


def build_diagram_prompt(
    prd_content: str,
    drivers: Mapping[str, str],
    decisions: Sequence[DecisionInput],
) -> PromptPair:
    """Ask for a Mermaid architecture diagram; the PRD is cut to its first 2000 characters."""
    drivers_text = "\n".join(f"- {key}: {value}" for key, value in order_drivers(dict(drivers)))
    decisions_text = "\n".join(f"- {d.title} ({d.area}): {d.chosen_option}" for d in decisions)
    user = (
        "Based on this system:\n\n"
        f"## PRD Summary\n{prd_content[:DIAGRAM_PRD_LIMIT]}...\n\n"
        f"## Architecture Drivers\n{drivers_text}\n\n"
        f"## Key Decisions\n{decisions_text}\n\n"
        "Generate a Mermaid.js architecture diagram. Return ONLY the Mermaid code."
    )
    return PromptPair(system=DIAGRAM_SYSTEM, user=user)
