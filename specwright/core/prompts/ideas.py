"""
Prompt for the idea explorer: three playful answers in, three app ideas out.

Dependencies: specwright.core.prompts.base
System role: Prompt construction for idea brainstorming
"""

from collections.abc import Sequence
from dataclasses import dataclass

from specwright.core.prompts.base import PromptPair


@dataclass(frozen=True)
class IdeaQuestion:
    label: str
    question: str
    answer: str


IDEA_SYSTEM = """You are an inventive product founder who helps people find app ideas through playful brainstorming.

Take the user's loose, playful inputs and turn them into 3 DISTINCT, CONCRETE app ideas.

Guidelines:
- Make the ideas truly different: another problem, another user, or another approach
- Be specific about the target user, the core action and the MVP loop
- Skip generic "AI productivity assistant" ideas unless the inputs clearly lead there
- Keep every idea small enough for a side project or MVP
- "descriptionToPaste" is a 2-4 sentence paragraph that can be pasted into a spec generator
- Titles are punchy, 2-4 words
- "oneLiner" is a single sentence

Return ONLY a JSON array of exactly 3 objects and nothing else."""

_IDEA_FORMAT = """[
  {
    "title": "Short punchy name",
    "oneLiner": "One sentence describing the app",
    "descriptionToPaste": "2-4 sentences for a product spec: target user, core problem, MVP approach."
  }
]"""


def build_idea_explorer_prompt(question_set_id: str, questions: Sequence[IdeaQuestion]) -> PromptPair:
    """Build the brainstorming prompt; blank inputs get a surprise-me variant."""
    has_input = any(q.answer.strip() for q in questions)
    if has_input:
        answers = "\n\n".join(
            f"**{q.label}**: {q.question}\nAnswer: {q.answer or '(left blank)'}" for q in questions
        )
        user = (
            f'The user answered these playful prompts (question set: "{question_set_id}"):\n\n'
            f"{answers}\n\n"
            f"Using these inputs, generate 3 distinct app ideas as a JSON array:\n{_IDEA_FORMAT}"
        )
    else:
        user = (
            "The user wants app ideas but left every prompt blank. Generate 3 surprising, distinct app ideas that are:\n"
            "- Odd but plausible\n"
            "- Aimed at a clear target user\n"
            "- Buildable as an MVP in a few weeks\n\n"
            f"Return them as a JSON array:\n{_IDEA_FORMAT}"
        )
    return PromptPair(system=IDEA_SYSTEM, user=user)
