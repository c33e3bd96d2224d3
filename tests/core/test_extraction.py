"""
Test suite for structured-content extraction.

Covers each strategy in order and the fence/bracket equivalence.

System role: Verification of the first phase of structured output handling
"""

import pytest

from specwright.core.llm.extraction import STRATEGIES, ExtractionKind, extract


class TestExtractScenarios:
    """Literal extraction scenarios."""

    def test_fenced_json_array_returns_interior(self) -> None:
        """Test a json-tagged fence is unwrapped."""
        # Act
        result = extract('```json\n[{"a":1}]\n```', ExtractionKind.JSON_ARRAY)

        # Assert
        assert result == '[{"a":1}]'

    def test_prose_around_array_returns_brackets(self) -> None:
        """Test bracket scan isolates the array from prose."""
        assert extract("here you go: [1,2,3] thanks", ExtractionKind.JSON_ARRAY) == "[1,2,3]"

    def test_no_brackets_returns_text_unchanged(self) -> None:
        """Test the raw fallback."""
        assert extract("no brackets here", ExtractionKind.JSON_ARRAY) == "no brackets here"


class TestExtractStrategies:
    """Test suite for strategy ordering."""

    def test_strategy_list_is_ordered_fallback_chain(self) -> None:
        """Test there are five strategies ending with the raw fallback."""
        names = [strategy.__name__ for strategy in STRATEGIES]
        assert names == ["_whole_fence", "_tagged_fence", "_generic_fence", "_bracket_scan", "_raw"]

    def test_untagged_fence_is_unwrapped(self) -> None:
        assert extract('```\n{"k": "v"}\n```', ExtractionKind.JSON_OBJECT) == '{"k": "v"}'

    def test_tagged_fence_inside_prose_wins_over_brackets(self) -> None:
        """Test a json fence in the middle of text is preferred to bracket scanning."""
        # Arrange
        raw = 'Intro [not this]\n```json\n["this"]\n```\nOutro'

        # Act
        result = extract(raw, ExtractionKind.JSON_ARRAY)

        # Assert
        assert result == '["this"]'

    def test_generic_fence_used_when_no_tagged_fence(self) -> None:
        raw = 'Sure!\n```\n{"x": 2}\n```'
        assert extract(raw, ExtractionKind.JSON_OBJECT) == '{"x": 2}'

    def test_object_bracket_scan_spans_first_to_last_brace(self) -> None:
        raw = 'Result: {"outer": {"inner": 1}} done'
        assert extract(raw, ExtractionKind.JSON_OBJECT) == '{"outer": {"inner": 1}}'

    def test_mermaid_fence_is_unwrapped(self) -> None:
        raw = "Here is the diagram:\n```mermaid\ngraph TD\n  A --> B\n```"
        assert extract(raw, ExtractionKind.MERMAID) == "graph TD\n  A --> B"

    def test_mermaid_without_fence_returns_trimmed_text(self) -> None:
        """Test mermaid kind never bracket-scans."""
        assert extract("  graph LR\n  A[x] --> B  ", ExtractionKind.MERMAID) == "graph LR\n  A[x] --> B"

    def test_empty_input_returns_empty_string(self) -> None:
        assert extract("", ExtractionKind.JSON_ARRAY) == ""

    def test_kind_accepts_string_value(self) -> None:
        assert extract("[1]", "json-array") == "[1]"


class TestFenceBracketEquivalence:
    """Fenced payloads and prose-wrapped payloads extract identically."""

    @pytest.mark.parametrize(
        "payload",
        [
            "[1,2,3]",
            '[{"type": "risk", "text": "Vendor lock-in"}]',
            '[{"nested": [1, [2, 3]]}, "tail"]',
        ],
    )
    def test_fenced_equals_prose_wrapped(self, payload: str) -> None:
        # Arrange
        fenced = f"```json\n{payload}\n```"
        wrapped = f"Here are my thoughts: {payload} Let me know!"

        # Act / Assert
        assert extract(fenced, ExtractionKind.JSON_ARRAY) == extract(wrapped, ExtractionKind.JSON_ARRAY) == payload


class TestSeveralFences:
    """Replies holding more than one fenced block."""

    def test_json_reply_with_two_fences_returns_first_payload(self) -> None:
        # Arrange
        raw = '```json\n[{"a":1}]\n```\n\nAlternative:\n```\n[{"b":2}]\n```'

        # Act
        result = extract(raw, ExtractionKind.JSON_ARRAY)

        # Assert
        assert result == '[{"a":1}]'

    def test_mermaid_reply_with_legend_fence_returns_diagram(self) -> None:
        raw = "```mermaid\nflowchart TD\n A-->B\n```\nLegend:\n```\nA = client\n```"

        assert extract(raw, ExtractionKind.MERMAID) == "flowchart TD\n A-->B"

    def test_two_untagged_fences_return_first(self) -> None:
        raw = '```\n{"x": 1}\n```\nor\n```\n{"x": 2}\n```'

        assert extract(raw, ExtractionKind.JSON_OBJECT) == '{"x": 1}'
