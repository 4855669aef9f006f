"""Tests for OpenAI response helpers."""

from types import SimpleNamespace

import pytest

from profileextract.errors import ExtractionParseError
from profileextract.extractors.openai_utils import first_message_content, parse_json_object, strip_markdown_fences


class TestStripMarkdownFences:
    def test_json_fence(self):
        assert strip_markdown_fences('```json\n{"a": 1}\n```') == '{"a": 1}'

    def test_plain_fence(self):
        assert strip_markdown_fences('```\n{"a": 1}\n```') == '{"a": 1}'

    def test_no_fence(self):
        assert strip_markdown_fences('  {"a": 1} ') == '{"a": 1}'


class TestParseJsonObject:
    def test_object(self):
        assert parse_json_object('```json\n{"firstName": "Ada"}\n```') == {"firstName": "Ada"}

    @pytest.mark.parametrize("text", ["", "   ", None, "not json", "[1, 2]", '"string"'])
    def test_rejects(self, text):
        with pytest.raises(ExtractionParseError) as exc_info:
            parse_json_object(text)
        assert exc_info.value.status_code == 500


class TestFirstMessageContent:
    def test_reads_first_choice(self):
        response = SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content="hi"))])
        assert first_message_content(response) == "hi"

    def test_missing_parts(self):
        assert first_message_content(SimpleNamespace(choices=[])) == ""
        assert first_message_content(SimpleNamespace(choices=[SimpleNamespace(message=None)])) == ""
        assert first_message_content(object()) == ""
