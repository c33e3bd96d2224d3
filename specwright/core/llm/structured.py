"""
Two-phase structured output parsing.

Phase one (``parse_json_payload``) extracts the candidate payload and runs
a loose ``json.loads`` plus a container type check. Phase two validates the
loose value into strict pydantic models. Either phase failing raises
``ParseError``; stages that tolerate bad output (suggestions) catch it and
fall back to wrapping the raw text.

Dependencies: pydantic, specwright.core.llm.extraction
System role: Turns model text into typed stage results
"""

import json
import logging
import uuid
from typing import Any

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from specwright.core.exceptions import ParseError
from specwright.core.llm.extraction import ExtractionKind, extract
from specwright.core.llm.schemas import (
    IdeaSuggestion,
    PrefillPayload,
    ProposedDecision,
    SuggestionItem,
    WalkthroughPrefillPayload,
)

logger = logging.getLogger(__name__)

_SUGGESTIONS = TypeAdapter(list[SuggestionItem])
_IDEAS = TypeAdapter(list[IdeaSuggestion])


def parse_json_payload(raw_text: str, kind: ExtractionKind) -> Any:
    """
    Extract and loosely parse a JSON array or object.

    Args:
        raw_text: Model output
        kind: JSON_ARRAY or JSON_OBJECT

    Returns:
        list | dict: Parsed value of the requested container type

    Raises:
        ParseError: If the candidate is not valid JSON of the expected type
    """
    candidate = extract(raw_text, kind)
    try:
        value = json.loads(candidate)
    except json.JSONDecodeError as e:
        raise ParseError(f"Model output is not valid JSON: {e.msg}", preview=raw_text) from e

    expected = list if kind == ExtractionKind.JSON_ARRAY else dict
    if not isinstance(value, expected):
        raise ParseError(
            f"Expected a JSON {'array' if expected is list else 'object'}, got {type(value).__name__}",
            preview=raw_text,
        )
    return value


def _validate(adapter_or_model: Any, value: Any, raw_text: str, what: str) -> Any:
    try:
        if isinstance(adapter_or_model, TypeAdapter):
            return adapter_or_model.validate_python(value)
        return adapter_or_model.model_validate(value)
    except PydanticValidationError as e:
        raise ParseError(
            f"Model output does not match the {what} schema",
            preview=raw_text,
            details={"errors": e.errors(include_url=False, include_context=False)},
        ) from e


def parse_suggestions(raw_text: str) -> list[dict[str, str]]:
    """
    Parse section suggestions, falling back to one "example" suggestion.

    Each suggestion gets a fresh id.
    """
    try:
        value = parse_json_payload(raw_text, ExtractionKind.JSON_ARRAY)
        items = _validate(_SUGGESTIONS, value, raw_text, "suggestion")
    except ParseError as e:
        logger.info(
            "Suggestion output unstructured, using raw text",
            extra={"event": "suggest.parse.fallback", "error_msg": e.message},
        )
        return [{"id": str(uuid.uuid4()), "type": "example", "text": (raw_text or "").strip()}]
    return [{"id": str(uuid.uuid4()), "type": item.type, "text": item.text} for item in items]


def parse_string_list(raw_text: str) -> list[str]:
    """Parse a JSON array of strings, falling back to the whole trimmed text."""
    try:
        value = parse_json_payload(raw_text, ExtractionKind.JSON_ARRAY)
    except ParseError:
        return [(raw_text or "").strip()]
    return [item if isinstance(item, str) else json.dumps(item) for item in value]


def parse_prefill(raw_text: str) -> PrefillPayload:
    """Parse the answer prefill payload ``{"answers": {KEY: {"qa": [...]}}}``."""
    value = parse_json_payload(raw_text, ExtractionKind.JSON_OBJECT)
    return _validate(PrefillPayload, value, raw_text, "prefill")


def parse_decisions(raw_text: str) -> list[ProposedDecision]:
    """
    Parse proposed architecture decisions.

    Items that fail validation are skipped; if none survive the output is
    rejected as a whole.
    """
    value = parse_json_payload(raw_text, ExtractionKind.JSON_ARRAY)
    decisions: list[ProposedDecision] = []
    for index, item in enumerate(value):
        try:
            decisions.append(ProposedDecision.model_validate(item))
        except PydanticValidationError as e:
            logger.warning(
                "Skipping invalid proposed decision",
                extra={"index": index, "error_count": e.error_count()},
            )
    if not decisions:
        raise ParseError("Model output contained no valid decisions", preview=raw_text)
    return decisions


def parse_ideas(raw_text: str) -> list[IdeaSuggestion]:
    """Parse exactly three idea suggestions."""
    value = parse_json_payload(raw_text, ExtractionKind.JSON_ARRAY)
    ideas = _validate(_IDEAS, value, raw_text, "idea")
    if len(ideas) != 3:
        raise ParseError(f"Expected 3 ideas, got {len(ideas)}", preview=raw_text)
    return ideas


def parse_walkthrough_prefill(raw_text: str) -> WalkthroughPrefillPayload:
    """
    Parse extracted drivers and agentic profile.

    A bare object of driver answers (without the "drivers" wrapper) is
    accepted as the drivers map.
    """
    value = parse_json_payload(raw_text, ExtractionKind.JSON_OBJECT)
    if "drivers" not in value and "agenticProfile" not in value and "agentic_profile" not in value:
        value = {"drivers": value}
    return _validate(WalkthroughPrefillPayload, value, raw_text, "walkthrough prefill")


def extract_mermaid(raw_text: str) -> str:
    """Isolate Mermaid source from model output."""
    return extract(raw_text, ExtractionKind.MERMAID)
