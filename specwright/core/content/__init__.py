"""Static question and vocabulary catalogue."""

from specwright.core.content.sections import (
    PROJECT_SCOPE_CONFIG,
    SECTION_ORDER,
    SECTIONS,
    ProjectScope,
    Question,
    Section,
    SectionKey,
    get_section,
    section_label,
    section_rank,
)
from specwright.core.content.walkthrough import (
    AGENTIC_MODE_DESCRIPTIONS,
    DECISION_AREAS,
    DRIVER_ORDER,
    DRIVER_QUESTIONS,
    AgenticMode,
    DriverQuestion,
    get_driver,
    order_drivers,
)

__all__ = [
    "PROJECT_SCOPE_CONFIG",
    "SECTION_ORDER",
    "SECTIONS",
    "ProjectScope",
    "Question",
    "Section",
    "SectionKey",
    "get_section",
    "section_label",
    "section_rank",
    "AGENTIC_MODE_DESCRIPTIONS",
    "DECISION_AREAS",
    "DRIVER_ORDER",
    "DRIVER_QUESTIONS",
    "AgenticMode",
    "DriverQuestion",
    "get_driver",
    "order_drivers",
]
