"""
Unit tests for model JSON extraction and repair.
"""
import json

import pytest

from interview_prep.ai.response_parser import (
    extract_json_text,
    parse_model_json,
    repair_json_text,
    validate_shape,
)
from interview_prep.ai.schemas import GeneratedPlanContent, OpeningQuestion
from interview_prep.core.exceptions import MalformedResponse


class TestExtraction:
    def test_fenced_block(self):
        raw = 'Here you go:\n```json\n{"a": 1}\n```\nGood luck!'
        assert extract_json_text(raw) == '{"a": 1}'

    def test_prose_around_object(self):
        raw = 'The answer is {"a": {"b": 2}} as requested.'
        assert extract_json_text(raw) == '{"a": {"b": 2}}'

    def test_no_braces_left_as_is(self):
        assert extract_json_text("  nothing here ") == "nothing here"

    def test_whole_reply_fence_is_stripped(self):
        raw = '```json\n{"answer": "Use ```xs[::-1]``` here"}\n```'
        assert extract_json_text(raw) == '{"answer": "Use ```xs[::-1]``` here"}'


class TestCodeInsideValues:
    """Code fences inside string values belong to the value."""

    def test_plain_reply_with_fenced_answer(self):
        data = {"prepared_questions": [{"question": "Reverse a list", "answer": "Use slicing:\n```python\nxs[::-1]\n```"}]}
        assert parse_model_json(json.dumps(data)) == data

    def test_wrapped_reply_with_fenced_answer(self):
        data = {"next_question": "Walk me through this:\n```\nfor x in xs: pass\n```"}
        raw = "```json\n" + json.dumps(data) + "\n```"
        assert parse_model_json(raw) == data


class TestRepair:
    def test_trailing_commas(self):
        assert repair_json_text('{"a": [1, 2,], }') == '{"a": [1, 2]}'

    def test_bare_keys(self):
        assert repair_json_text('{first_question: "Why?"}') == '{"first_question": "Why?"}'

    def test_single_quotes(self):
        assert parse_model_json("{'first_question': 'Why?'}") == {"first_question": "Why?"}

    def test_curly_quotes(self):
        assert parse_model_json("{“warning”: “Stay on topic”}") == {"warning": "Stay on topic"}

    def test_string_contents_are_not_rewritten(self):
        repaired = repair_json_text('{"warning": "Good start, note: stay on the question",}')
        assert repaired == '{"warning": "Good start, note: stay on the question"}'

    def test_trailing_comma_after_value_with_colon(self):
        parsed = parse_model_json('{"warning": "Good start, note: stay on the question",}')
        assert parsed == {"warning": "Good start, note: stay on the question"}

    def test_bare_key_next_to_string_with_comma(self):
        parsed = parse_model_json('{hint: "Think about it, then: answer", response: "ok",}')
        assert parsed == {"hint": "Think about it, then: answer", "response": "ok"}


class TestParse:
    def test_valid_json_untouched(self):
        assert parse_model_json('{"opening_remark": "Hi", "first_question": "Why?"}')["first_question"] == "Why?"

    def test_garbage_raises_with_raw_text(self):
        with pytest.raises(MalformedResponse) as exc_info:
            parse_model_json("I cannot help with that.")
        assert exc_info.value.raw_text == "I cannot help with that."

    def test_array_is_not_an_object(self):
        with pytest.raises(MalformedResponse):
            parse_model_json("[1, 2, 3]")


class TestValidateShape:
    def test_valid(self):
        result = validate_shape({"first_question": "Why?"}, OpeningQuestion)
        assert result.first_question == "Why?"
        assert result.opening_remark == ""

    def test_plan_without_topics_rejected(self):
        data = {
            "study_topics": [],
            "practice_problems": [{"title": "Two Sum"}],
        }
        with pytest.raises(MalformedResponse):
            validate_shape(data, GeneratedPlanContent, raw_text="{}")

    def test_unknown_enum_value_rejected(self):
        data = {
            "study_topics": [{"topic": "Graphs", "category": "cooking"}],
            "practice_problems": [{"title": "Two Sum"}],
        }
        with pytest.raises(MalformedResponse):
            validate_shape(data, GeneratedPlanContent)
