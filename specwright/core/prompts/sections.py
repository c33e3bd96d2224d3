"""
Prompts for the guided section stages: prefill, suggest and summarize.

Dependencies: specwright.core.content, specwright.core.prompts.base
System role: Prompt construction for section-level model calls
"""

import json
from collections.abc import Mapping, Sequence

from specwright.core.content import SECTIONS, get_section
from specwright.core.prompts.base import (
    PromptPair,
    QAEntry,
    format_qa,
    ordered_summaries,
    scope_line,
)

PREFILL_SYSTEM = """You are a product specification specialist. From a short product description, draft first-pass answers to a structured set of product questions.

Guidelines:
- Ground every answer in the description; when something is missing, make a sensible assumption
- Keep each answer to 2-4 sentences
- Mark gaps with bracketed placeholders such as "[target price]"
- Write in a professional, product-minded voice
- Prioritise what matters for a first release"""

_PREFILL_FORMAT = {
    "answers": {
        "SECTION_KEY": {
            "qa": [
                {"questionId": "question.id", "question": "question text", "answer": "your answer"}
            ]
        }
    }
}


def build_prefill_prompt(description: str, project_scope: str | None = None) -> PromptPair:
    """Draft answers for every section from a free-text product description."""
    catalogue = "\n\n".join(
        f"{section.key.value}:\n" + "\n".join(f"- {q.id}: {q.prompt}" for q in section.questions)
        for section in SECTIONS
    )
    scope = scope_line(project_scope)
    user = (
        f"Product description:\n{description}\n\n"
        + (f"{scope}\n\n" if scope else "")
        + "Answer each question below. Respond with JSON only, using this structure:\n"
        + json.dumps(_PREFILL_FORMAT, indent=2)
        + f"\n\nSections and questions:\n\n{catalogue}\n\nReturn the JSON now:"
    )
    return PromptPair(system=PREFILL_SYSTEM, user=user)


def build_suggest_prompt(
    section_key: str,
    current_text: str,
    prior_summaries: Mapping[str, str],
) -> PromptPair:
    """Ask for risks, tradeoffs, questions and examples on the text being edited."""
    section = get_section(section_key)
    system = f"""You are a product thinking partner helping someone sharpen their product requirements.

Offer ideas, risks, tradeoffs and clarifying questions that push their thinking further. You are advisory only: the user decides what to keep, change or ignore.

Guidelines:
- Be brief and concrete
- Point out options they may have missed
- Call out risks and tradeoffs
- Ask a question when the reasoning looks unfinished
- Never rewrite or replace what the user wrote
- Phrase each suggestion so it can be acted on

Current section: {section.label}
Section goal: {section.goal}"""

    prior = "\n\n".join(f"## {key}\n{summary}" for key, summary in ordered_summaries(prior_summaries))
    user = (
        (f"## Prior Context\n{prior}\n\n" if prior else "")
        + f"## Current Input\n{current_text}\n\n"
        + "Give 3-5 suggestions to strengthen this thinking, as a JSON array:\n"
        + '[\n  { "type": "risk|tradeoff|question|example", "text": "..." }\n]'
    )
    return PromptPair(system=system, user=user)


SUMMARIZE_SYSTEM = """You are a product thinking partner. Condense the user's answers for one section of a product requirements document.

Guidelines:
- 2-4 sentences at most
- Keep the key decisions and constraints
- Mention any notable tradeoff
- Use plain, professional language
- Add nothing the user did not say"""


def build_summarize_prompt(
    section_key: str,
    qa: Sequence[QAEntry],
    notes: str | None = None,
) -> PromptPair:
    """Summarize one section's answers in a few sentences."""
    section = get_section(section_key)
    user = (
        f"Section: {section.label}\nGoal: {section.goal}\n\n"
        f"## User's Answers\n{format_qa(qa)}\n\n"
        + (f"## Additional Notes\n{notes}\n\n" if notes else "")
        + "Write a 2-4 sentence summary of the key points in this section."
    )
    return PromptPair(system=SUMMARIZE_SYSTEM, user=user)
