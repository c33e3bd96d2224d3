"""
Prompts for document stages: PRD, tech spec, reflection and refinement.

Dependencies: specwright.core.prompts.base
System role: Prompt construction for long-form document generation
"""

from collections.abc import Iterable, Mapping

from specwright.core.prompts.base import (
    PromptPair,
    SectionInput,
    format_answers,
    format_summaries,
    scope_line,
)

ARTIFACT_UPDATE_MARKER = "---ARTIFACT_UPDATE---"

PRD_SYSTEM = """You write product requirements documents. Turn the structured product thinking you are given into a complete, professional PRD.

## Required sections

1. **Executive Summary**: a 2-3 paragraph overview, the core value proposition and the MVP goal
2. **Mission**: mission statement plus 3-5 guiding principles
3. **Target Users**: primary personas, their technical comfort, their needs and pain points
4. **MVP Scope**: in-scope items marked ✅ and deferred items marked ❌
5. **User Stories**: 5-8 stories of the form "As a [user], I want to [action], so that [benefit]"
6. **Core Architecture & Patterns**: overall approach and key design patterns
7. **Tools/Features**: detailed feature descriptions
8. **Technology Stack**: recommended technologies where the input suggests them
9. **Security & Configuration**: security considerations and configuration approach
10. **Success Criteria**: what MVP success means, functional requirements, quality signals
11. **Implementation Phases**: 2-3 phases, each with goal, deliverables and validation
12. **Risks & Mitigations**: main risks, each with a concrete mitigation
13. **Future Considerations**: enhancements after the MVP

Guidelines:
- Use markdown throughout
- Be specific and actionable
- Keep every statement traceable to the user's own thinking
- Stay professional and readable"""


def build_prd_prompt(
    title: str | None,
    sections: Iterable[SectionInput],
    summaries: Mapping[str, str],
    product_description: str | None = None,
    project_scope: str | None = None,
) -> PromptPair:
    """Assemble the PRD prompt from all saved answers and summaries."""
    scope = scope_line(project_scope)
    user = (
        f"# Product: {title or 'Untitled Product'}\n\n"
        + (f"{scope}\n\n" if scope else "")
        + (f"## Product Description\n{product_description}\n\n" if product_description else "")
        + f"## Section Summaries\n{format_summaries(summaries)}\n\n"
        + f"## Detailed Answers\n{format_answers(sections)}\n\n"
        + "Write a complete PRD in markdown from the product thinking above."
    )
    return PromptPair(system=PRD_SYSTEM, user=user)


TECH_SPEC_SYSTEM = """You are a principal software architect. Convert a product requirements document into a technical specification an engineer can build from.

## Output structure (TECH_SPEC.md)

### 1. System Architecture
- **Component diagram** in Mermaid covering frontend, backend, storage and external APIs
- **Data flow** for the core user story, step by step
- **Stack decisions** with exact libraries and versions; choose one, do not list alternatives

### 2. Data Model
- **Database schema**: full SQL (PostgreSQL) or ORM schema with tables, enums, foreign keys and indexes
- **Shared types** for the core entities
- **Client state** shape

### 3. API & Interface Contracts
- **Routes**: every endpoint the MVP needs, with method, path, input schema and output schema
- **UI components**: props for the three most complex components

### 4. Implementation Plan
Small, checkable tasks grouped as:
- **Phase 1: Foundation** (setup, database, auth)
- **Phase 2: Core Logic** (endpoints, services)
- **Phase 3: UI** (components, pages)
Format each task like: [ ] create src/lib/db.ts with connection pooling

### 5. Critical Constraints
- **Errors**: the standard error response shape
- **Security**: concrete middleware rules and policies
- **Performance**: latency or bundle-size budgets

Guidelines:
- Be opinionated and pick the current standard
- Show real schemas and types, not prose about them
- Keep the implementation plan granular enough for an automated coder
- Use markdown throughout"""


def build_tech_spec_prompt(
    title: str | None,
    prd_content: str,
    summaries: Mapping[str, str],
    project_scope: str | None = None,
) -> PromptPair:
    """Assemble the tech spec prompt from the PRD and section summaries."""
    scope = scope_line(project_scope)
    user = (
        f"# Product: {title or 'Untitled Product'}\n\n"
        + (f"{scope}\n\n" if scope else "")
        + f"## PRD Content\n{prd_content}\n\n"
        + f"## Section Summaries\n{format_summaries(summaries)}\n\n"
        + "Write a complete technical specification in markdown that an automated coder can follow without guessing."
    )
    return PromptPair(system=TECH_SPEC_SYSTEM, user=user)


REFLECTION_SYSTEM = """You are a seasoned product strategist and technical lead. You give sharp, usable reflections on product plans and technical specifications.

Your output must be:
- Short and direct, without filler
- Specific and actionable
- Aimed at stress-testing assumptions
- Organised as markdown sections

Keep each section tight."""

_REFLECTION_OUTLINE = """Structure the reflection as follows.

## Pressure Tests
3-5 one-sentence questions that stress the plan, grouped under:

### What would make this obviously not work?

### What must be true for this to succeed?

### Where are we likely overconfident?

### What's the smallest version that still proves value?

### What will users do instead if we don't exist?

## What to Validate Next
2-3 experiments framed as learning, not features. For each:
- **Experiment title**
- **Hypothesis**: what is being tested
- **How to run it**: 1-2 bullets
- **What you learn**: the success signal

## Alternative Lenses
2-3 reframes that challenge the assumptions:

### If we weren't allowed to build software, what would we do?

### What if we must charge from day 1?

### What if we must deliver value in 5 minutes?

Keep everything brief and actionable."""


def build_reflection_prompt(
    title: str | None,
    product_description: str | None,
    prd_content: str,
    tech_spec_content: str,
) -> PromptPair:
    """Ask for pressure tests, experiments and reframes over both documents."""
    user = (
        "Here is a product plan as a PRD and a tech spec. Give final reflections before building starts.\n\n"
        f"## Product Context\nTitle: {title or 'Untitled'}\n"
        f"Description: {product_description or 'Not provided'}\n\n"
        f"## PRD\n{prd_content}\n\n"
        f"## Tech Spec\n{tech_spec_content}\n\n"
        f"{_REFLECTION_OUTLINE}"
    )
    return PromptPair(system=REFLECTION_SYSTEM, user=user)


def build_refine_system_prompt(artifact_type: str, content_md: str) -> str:
    """System turn for the refinement chat, embedding the current document."""
    kind = (
        "Product Requirements Documents (PRDs)"
        if artifact_type == "PRD"
        else "Technical Specifications"
    )
    return f"""You help refine {kind}.

The user has generated this document:

---
{content_md}
---

You can:
1. Answer questions about the document
2. Propose improvements when asked
3. Clarify sections
4. Make specific edits on request

When you reply:
- Be concise and useful
- If asked for changes, explain what you would change
- If you produce a substantially edited document, write the marker "{ARTIFACT_UPDATE_MARKER}" followed by the complete revised document
- Use the marker only when you include a full revised version

Stay focused and actionable."""


def split_artifact_update(reply: str) -> tuple[str, str | None]:
    """
    Split a refinement reply at the update marker.

    Returns:
        tuple: (chat text before the marker, revised document or None)
    """
    if ARTIFACT_UPDATE_MARKER not in reply:
        return reply.strip(), None
    message, _, document = reply.partition(ARTIFACT_UPDATE_MARKER)
    document = document.strip()
    return message.strip(), document or None
