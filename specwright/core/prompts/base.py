"""
Shared prompt building blocks.

Prompt builders are pure: they take plain values and return a PromptPair.
Section and driver material is always serialized in catalogue order so
identical state produces identical prompts.

Dependencies: specwright.core.content
System role: Deterministic serialization of accumulated state
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field

from specwright.core.content import (
    PROJECT_SCOPE_CONFIG,
    ProjectScope,
    section_label,
    section_rank,
)


@dataclass(frozen=True)
class PromptPair:
    system: str
    user: str


@dataclass(frozen=True)
class QAEntry:
    question_id: str
    question: str
    answer: str


@dataclass(frozen=True)
class SectionInput:
    """Saved answers for one section, as fed to prompts."""

    key: str
    qa: Sequence[QAEntry] = field(default_factory=tuple)
    notes: str | None = None


def ordered_sections(sections: Iterable[SectionInput]) -> list[SectionInput]:
    return sorted(sections, key=lambda s: section_rank(s.key))


def ordered_summaries(summaries: Mapping[str, str]) -> list[tuple[str, str]]:
    return sorted(summaries.items(), key=lambda item: section_rank(item[0]))


def format_qa(qa: Sequence[QAEntry]) -> str:
    return "\n\n".join(f"Q: {item.question}\nA: {item.answer}" for item in qa)


def format_answers(sections: Iterable[SectionInput]) -> str:
    blocks = []
    for section in ordered_sections(sections):
        block = f"## {section_label(section.key)}\n{format_qa(section.qa)}"
        if section.notes:
            block += f"\n\nNotes: {section.notes}"
        blocks.append(block)
    return "\n\n---\n\n".join(blocks)


def format_summaries(summaries: Mapping[str, str]) -> str:
    return "\n\n".join(
        f"**{section_label(key)}:** {summary}" for key, summary in ordered_summaries(summaries)
    )


def scope_line(scope: str | None) -> str:
    """One-line description of the project scope, empty when unknown."""
    if not scope:
        return ""
    try:
        config = PROJECT_SCOPE_CONFIG[ProjectScope(scope)]
    except ValueError:
        return ""
    return f"Project scope: {config['label']} ({config['description']})"


def truncate(text: str, limit: int, marker: str = "...") -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + marker
