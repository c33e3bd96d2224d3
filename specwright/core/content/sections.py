"""
Guided section catalogue.

Eight fixed sections walk the user from context to success measures. The
order here is the canonical order used for display, prompt serialization
and progress reporting.

Dependencies: None
System role: Static question content for the section editor and prompts
"""

import enum
from dataclasses import dataclass


class SectionKey(str, enum.Enum):
    """Keys of the eight guided sections, in canonical order."""

    CONTEXT = "CONTEXT"
    OUTCOME = "OUTCOME"
    RISKS = "RISKS"
    EXPERIENCE = "EXPERIENCE"
    FLOW = "FLOW"
    LIMITS = "LIMITS"
    OPERATIONS = "OPERATIONS"
    WINS = "WINS"


class ProjectScope(str, enum.Enum):
    """How much ceremony the generated documents should carry."""

    PERSONAL = "personal"
    MVP = "mvp"
    PRODUCTION = "production"


PROJECT_SCOPE_CONFIG: dict[ProjectScope, dict[str, str]] = {
    ProjectScope.PERSONAL: {
        "label": "Personal / Hobby",
        "description": "Quick draft, minimal ceremony",
    },
    ProjectScope.MVP: {
        "label": "MVP",
        "description": "Practical planning for launch",
    },
    ProjectScope.PRODUCTION: {
        "label": "Production",
        "description": "Operationally complete",
    },
}


@dataclass(frozen=True)
class Question:
    id: str
    prompt: str
    help: str = ""


@dataclass(frozen=True)
class Section:
    key: SectionKey
    label: str
    goal: str
    questions: tuple[Question, ...]


SECTIONS: tuple[Section, ...] = (
    Section(
        key=SectionKey.CONTEXT,
        label="Context",
        goal="Establish who has the problem and why it matters now.",
        questions=(
            Question("context.problem", "What problem are you solving, in one or two sentences?"),
            Question("context.users", "Who experiences this problem most acutely?"),
            Question("context.current", "How do those people cope with it today?"),
            Question("context.why_now", "Why is now the right time to build this?"),
        ),
    ),
    Section(
        key=SectionKey.OUTCOME,
        label="Outcome",
        goal="Describe the change in the user's world once the product exists.",
        questions=(
            Question("outcome.success", "What does success look like for the user after one week?"),
            Question("outcome.value", "What is the single most important value the product delivers?"),
            Question("outcome.non_goals", "What is explicitly not a goal for the first version?"),
        ),
    ),
    Section(
        key=SectionKey.RISKS,
        label="Risks",
        goal="Surface the assumptions most likely to sink the product.",
        questions=(
            Question("risks.assumptions", "Which assumption, if wrong, would make this fail?"),
            Question("risks.adoption", "What could stop users from adopting it?"),
            Question("risks.technical", "What is the hardest technical unknown?"),
            Question("risks.mitigation", "How could you cheaply test the riskiest assumption?"),
        ),
    ),
    Section(
        key=SectionKey.EXPERIENCE,
        label="Experience",
        goal="Capture how the product should feel to use.",
        questions=(
            Question("experience.first_use", "What happens in the first five minutes of use?"),
            Question("experience.feel", "Which three words should describe the experience?"),
            Question("experience.platform", "Where will people use it (web, mobile, CLI, other)?"),
        ),
    ),
    Section(
        key=SectionKey.FLOW,
        label="Flow",
        goal="Lay out the core loop a user repeats to get value.",
        questions=(
            Question("flow.core_loop", "Describe the core loop step by step."),
            Question("flow.entry", "How does a user enter the loop for the first time?"),
            Question("flow.data", "What data does the user create or consume along the way?"),
            Question("flow.edge_cases", "What happens when something goes wrong mid-flow?"),
        ),
    ),
    Section(
        key=SectionKey.LIMITS,
        label="Limits",
        goal="Pin down constraints on budget, time, scale and compliance.",
        questions=(
            Question("limits.budget", "What budget and timeline constraints apply?"),
            Question("limits.scale", "How many users or requests must the first version handle?"),
            Question("limits.compliance", "Are there privacy, security or regulatory constraints?"),
        ),
    ),
    Section(
        key=SectionKey.OPERATIONS,
        label="Operations",
        goal="Decide how the product is run, supported and observed.",
        questions=(
            Question("operations.support", "Who handles support and how do users reach them?"),
            Question("operations.monitoring", "What must be monitored from day one?"),
            Question("operations.deploy", "How will releases be shipped and rolled back?"),
        ),
    ),
    Section(
        key=SectionKey.WINS,
        label="Wins",
        goal="Define measurable signals that the product is working.",
        questions=(
            Question("wins.metric", "What is the primary metric you will watch?"),
            Question("wins.first_milestone", "What milestone would prove the idea is worth continuing?"),
            Question("wins.kill", "What result would make you stop or pivot?"),
        ),
    ),
)

SECTION_ORDER: tuple[SectionKey, ...] = tuple(section.key for section in SECTIONS)

_SECTIONS_BY_KEY = {section.key: section for section in SECTIONS}


def get_section(key: SectionKey | str) -> Section:
    """Look up a section by key; raises KeyError for unknown keys."""
    return _SECTIONS_BY_KEY[SectionKey(key)]


def section_label(key: str) -> str:
    """Display label for a key, falling back to the raw key."""
    try:
        return get_section(key).label
    except (KeyError, ValueError):
        return key


def section_rank(key: str) -> int:
    """Position of a key in the canonical order; unknown keys sort last."""
    try:
        return SECTION_ORDER.index(SectionKey(key))
    except ValueError:
        return len(SECTION_ORDER)
