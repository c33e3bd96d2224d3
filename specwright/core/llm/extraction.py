"""
Structured-content extraction from model output.

Models wrap payloads in markdown fences, prepend chatter, or return bare
JSON. ``extract`` isolates the candidate payload by trying an ordered list
of strategies; the first one that returns a candidate wins. No parsing
happens here, so a JSON payload returned by ``extract`` may still be
invalid.

Strategy order:
1. the whole text is exactly one fence (untagged or tagged with the kind's language)
2. a fence tagged with the kind's language anywhere in the text
3. an untagged fence anywhere in the text
4. JSON kinds only: first opening bracket through last closing bracket
5. the trimmed original text

Dependencies: re (stdlib)
System role: First phase of structured output handling
"""

import enum
import re
from collections.abc import Callable
from dataclasses import dataclass


class ExtractionKind(str, enum.Enum):
    JSON_ARRAY = "json-array"
    JSON_OBJECT = "json-object"
    MERMAID = "mermaid"


@dataclass(frozen=True)
class _KindSpec:
    language: str
    brackets: tuple[str, str] | None


_SPECS: dict[ExtractionKind, _KindSpec] = {
    ExtractionKind.JSON_ARRAY: _KindSpec(language="json", brackets=("[", "]")),
    ExtractionKind.JSON_OBJECT: _KindSpec(language="json", brackets=("{", "}")),
    ExtractionKind.MERMAID: _KindSpec(language="mermaid", brackets=None),
}

Strategy = Callable[[str, _KindSpec], str | None]


def _whole_fence(text: str, spec: _KindSpec) -> str | None:
    pattern = rf"^```(?:{re.escape(spec.language)})?[ \t]*\n(.*?)\n?```\s*$"
    match = re.match(pattern, text.strip(), flags=re.DOTALL | re.IGNORECASE)
    if match is None or "```" in match.group(1):
        # Several fences: leave it to the tagged and generic strategies.
        return None
    return match.group(1).strip()


def _tagged_fence(text: str, spec: _KindSpec) -> str | None:
    pattern = rf"```{re.escape(spec.language)}[ \t]*\n(.*?)\n?```"
    match = re.search(pattern, text, flags=re.DOTALL | re.IGNORECASE)
    return match.group(1).strip() if match else None


def _generic_fence(text: str, spec: _KindSpec) -> str | None:
    match = re.search(r"```[ \t]*\n(.*?)\n?```", text, flags=re.DOTALL)
    return match.group(1).strip() if match else None


def _bracket_scan(text: str, spec: _KindSpec) -> str | None:
    if spec.brackets is None:
        return None
    opening, closing = spec.brackets
    start = text.find(opening)
    end = text.rfind(closing)
    if start == -1 or end == -1 or end <= start:
        return None
    return text[start : end + 1].strip()


def _raw(text: str, spec: _KindSpec) -> str | None:
    return text.strip()


STRATEGIES: tuple[Strategy, ...] = (
    _whole_fence,
    _tagged_fence,
    _generic_fence,
    _bracket_scan,
    _raw,
)


def extract(raw_text: str, kind: ExtractionKind | str) -> str:
    """
    Isolate the payload of the given kind from model output.

    Args:
        raw_text: Model output as received
        kind: Expected payload kind

    Returns:
        str: Candidate payload (may still fail to parse)
    """
    spec = _SPECS[ExtractionKind(kind)]
    text = raw_text or ""
    for strategy in STRATEGIES:
        candidate = strategy(text, spec)
        if candidate is not None:
            return candidate
    return text.strip()
