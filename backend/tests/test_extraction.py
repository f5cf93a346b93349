"""
Helios Intel - Extraction Engine Tests
Delimited block extraction, JSON normalization and payload parsing.
"""
import json
import os
import sys

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from extraction import (  # noqa: E402
    extract_delimited_block,
    extract_json_block,
    find_balanced_json,
    normalize_json_text,
    parse_json_payload,
    split_delimited_block,
)

pytestmark = pytest.mark.timeout(10)

REPORT = (
    "# Report\n...body...\n"
    "[START_JSON_DATA]\n{\"executiveSummary\":\"Sum.\"}\n[END_JSON_DATA]"
)


# ==============================================================================
# Delimiter Extractor Tests
# ==============================================================================

class TestDelimitedBlock:
    """Tests for extract_delimited_block / split_delimited_block."""

    def test_returns_bytes_between_markers(self):
        text = 'intro [START_JSON_DATA]{"a": 1}[END_JSON_DATA] outro'
        assert extract_delimited_block(text) == '{"a": 1}'

    def test_missing_end_marker(self):
        assert extract_delimited_block("intro [START_JSON_DATA]{}") is None

    def test_missing_start_marker(self):
        assert extract_delimited_block("intro {} [END_JSON_DATA]") is None

    def test_end_before_start(self):
        text = "[END_JSON_DATA] middle [START_JSON_DATA]"
        assert extract_delimited_block(text) is None
        assert split_delimited_block(text) is None

    def test_custom_markers(self):
        assert extract_delimited_block("x<<payload>>y", "<<", ">>") == "payload"

    def test_first_occurrence_wins(self):
        text = "[START_JSON_DATA]one[END_JSON_DATA][START_JSON_DATA]two[END_JSON_DATA]"
        assert extract_delimited_block(text) == "one"

    def test_split_removes_block_and_markers(self):
        split = split_delimited_block('before[START_JSON_DATA]{"x":1}[END_JSON_DATA]after')
        assert split.block == '{"x":1}'
        assert split.remainder == "beforeafter"
        assert split.start == len("before")

    def test_split_restore_reproduces_original(self):
        texts = [
            REPORT,
            "[START_JSON_DATA][END_JSON_DATA]",
            "a\n[START_JSON_DATA]\n[1, 2]\n[END_JSON_DATA]\ntrailing text",
        ]
        for text in texts:
            assert split_delimited_block(text).restore() == text

    def test_split_of_empty_text(self):
        assert split_delimited_block("") is None


# ==============================================================================
# JSON Normalizer Tests
# ==============================================================================

class TestNormalizeJsonText:
    """Tests for the first-open / last-close heuristic."""

    def test_strips_json_fence(self):
        payload = {"subject": "Hi", "body": "Line one\nLine two"}
        fenced = "```json\n" + json.dumps(payload) + "\n```"
        assert json.loads(normalize_json_text(fenced)) == payload

    def test_strips_untagged_fence(self):
        assert json.loads(normalize_json_text("```\n[1, 2, 3]\n```")) == [1, 2, 3]

    def test_uppercase_json_tag(self):
        assert json.loads(normalize_json_text('```JSON\n{"a": true}\n```')) == {"a": True}

    def test_surrounding_prose_trimmed(self):
        assert normalize_json_text('Here you go: {"a": 1} Thanks!') == '{"a": 1}'

    def test_array_before_object(self):
        assert normalize_json_text('list: [{"a": 1}] end') == '[{"a": 1}]'

    def test_no_delimiter_returns_input_unchanged(self):
        for text in ["no json here", "  padded prose  ", ""]:
            assert normalize_json_text(text) == text

    def test_multiple_objects_over_capture(self):
        text = 'first {"a": 1} then {"b": 2}'
        assert normalize_json_text(text) == '{"a": 1} then {"b": 2}'

    def test_unclosed_object_returns_tail(self):
        assert normalize_json_text('lead {"a": 1') == '{"a": 1'


class TestFindBalancedJson:
    """Tests for the depth-counting scanner."""

    def test_first_object_only(self):
        assert find_balanced_json('first {"a": 1} then {"b": 2}') == '{"a": 1}'

    def test_brackets_inside_strings_ignored(self):
        assert find_balanced_json('{"a": "}]"} trailing }') == '{"a": "}]"}'

    def test_escaped_quotes(self):
        text = '{"a": "say \\"hi\\" {"} tail'
        assert json.loads(find_balanced_json(text)) == {"a": 'say "hi" {'}

    def test_nested(self):
        assert find_balanced_json('x {"a": [1, {"b": 2}]} y') == '{"a": [1, {"b": 2}]}'

    def test_unbalanced_returns_none(self):
        assert find_balanced_json('{"a": [1, 2}') is None
        assert find_balanced_json('{"a": 1') is None

    def test_no_json_returns_none(self):
        assert find_balanced_json("plain words") is None


# ==============================================================================
# Payload Parsing Tests
# ==============================================================================

class TestParseJsonPayload:
    """Tests for parse_json_payload."""

    def test_parses_fenced_object(self):
        assert parse_json_payload('```json\n{"isGap": true}\n```') == {"isGap": True}

    def test_trailing_comma_returns_none(self):
        assert parse_json_payload('{"a": 1,}') is None

    def test_empty_returns_none(self):
        assert parse_json_payload("") is None
        assert parse_json_payload("   ") is None
        assert parse_json_payload(None) is None

    def test_prose_returns_none(self):
        assert parse_json_payload("I could not find anything.") is None

    def test_strict_recovers_first_of_many(self):
        text = 'first {"a": 1} then {"b": 2}'
        assert parse_json_payload(text) is None
        assert parse_json_payload(text, strict=True) == {"a": 1}


class TestExtractJsonBlock:
    """Tests for the body / payload split used by profile generation."""

    def test_well_formed_report(self):
        body, payload = extract_json_block(REPORT)
        assert body == "# Report\n...body..."
        assert payload == {"executiveSummary": "Sum."}

    def test_trailing_comma_keeps_original_text(self):
        text = REPORT.replace('"Sum."}', '"Sum.",}')
        body, payload = extract_json_block(text)
        assert body == text
        assert payload is None

    def test_no_markers_keeps_original_text(self):
        text = "# Report\nJust prose."
        assert extract_json_block(text) == (text, None)

    def test_array_payload_is_not_an_extension(self):
        text = "# Report\n[START_JSON_DATA][1, 2][END_JSON_DATA]"
        assert extract_json_block(text) == (text, None)

    def test_fenced_payload_inside_markers(self):
        text = "# R\n[START_JSON_DATA]\n```json\n{\"a\": 1}\n```\n[END_JSON_DATA]\nAfter."
        body, payload = extract_json_block(text)
        assert payload == {"a": 1}
        assert body == "# R\n\nAfter."
