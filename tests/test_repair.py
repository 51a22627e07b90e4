#!/usr/bin/env python3
"""
Tests for tolerant JSON loading:
1. Plain, BOM-prefixed, fenced and prose-wrapped input
2. Balanced object extraction
3. Error payload when every repair stage fails
"""

import logging

import pytest

from pojson.errors import JsonSyntaxError
from pojson.repair import (
    EXPECTED_SCHEMA,
    SNIPPET_LENGTH,
    extract_fenced_block,
    extract_json_object,
    parse_json_document,
    strip_bom,
)

DOC = '{"entries": [{"msgid": "a", "msgstr": "b"}]}'
EXPECTED = {"entries": [{"msgid": "a", "msgstr": "b"}]}


def test_plain_json_needs_no_repair(caplog):
    with caplog.at_level(logging.WARNING, logger="pojson.repair"):
        assert parse_json_document(DOC) == EXPECTED
    assert caplog.records == []


def test_bom_prefixed_text_and_bytes():
    assert parse_json_document('\ufeff' + DOC) == EXPECTED
    assert parse_json_document(('\ufeff' + DOC).encode('utf-8')) == EXPECTED
    assert parse_json_document(DOC.encode('utf-8')) == EXPECTED


def test_fenced_block_with_language_tag(caplog):
    content = "Sure! Here is the translation:\n\n```json\n" + DOC + "\n```\nLet me know if you need more."
    with caplog.at_level(logging.WARNING, logger="pojson.repair"):
        assert parse_json_document(content) == EXPECTED
    assert any("fence" in r.getMessage() for r in caplog.records)


def test_prose_wrapped_object_with_braces_in_strings():
    content = 'Result: {"entries": [{"msgid": "}{ \\" }", "msgstr": "x"}]} -- done {not json}'
    assert parse_json_document(content) == {"entries": [{"msgid": '}{ " }', "msgstr": "x"}]}


def test_strip_bom():
    assert strip_bom('\ufeff  {}  \n') == '{}'
    assert strip_bom('{}') == '{}'


def test_extract_fenced_block():
    assert extract_fenced_block('```\n{"a": 1}\n```') == '{"a": 1}'
    assert extract_fenced_block('```json {"a": 1}```') == '{"a": 1}'
    assert extract_fenced_block('```json\n{"a": 1}') == '{"a": 1}'
    assert extract_fenced_block('no fence here') is None


@pytest.mark.parametrize('text,expected', [
    ('{"a": {"b": 1}} trailing', '{"a": {"b": 1}}'),
    ('prefix {"a": "}"} {"b": 2}', '{"a": "}"}'),
    ('{"a": "\\\\"}', '{"a": "\\\\"}'),
    ('{"a": 1', None),
    ('no object', None),
])
def test_extract_json_object(text, expected):
    assert extract_json_object(text) == expected


def test_failure_reports_diagnostic_and_schema():
    content = '{"a": json}'
    with pytest.raises(JsonSyntaxError) as exc_info:
        parse_json_document(content, source="fr.json")

    error = exc_info.value
    assert error.stage == "scan"
    assert error.offset == 6
    assert error.snippet == content
    assert error.diagnostic
    message = str(error)
    assert "fr.json" in message
    assert "Parse error" in message
    assert EXPECTED_SCHEMA in message
    assert "Please fix the JSON file" in message


def test_long_content_snippet_is_truncated():
    content = 'x' * 1000
    with pytest.raises(JsonSyntaxError) as exc_info:
        parse_json_document(content)

    error = exc_info.value
    assert error.stage == "strip"
    assert error.snippet.startswith('x' * SNIPPET_LENGTH)
    assert "truncated, total 1000 characters" in error.snippet


def test_array_root_is_rejected():
    with pytest.raises(JsonSyntaxError) as exc_info:
        parse_json_document('[1, 2]')
    assert exc_info.value.stage != "schema"


def test_invalid_utf8_bytes():
    with pytest.raises(JsonSyntaxError) as exc_info:
        parse_json_document(b'{"a": "\xff"}')
    assert exc_info.value.stage == "decode"


def test_error_to_dict():
    with pytest.raises(JsonSyntaxError) as exc_info:
        parse_json_document('{broken')
    data = exc_info.value.to_dict()
    assert data['type'] == 'JSON_SYNTAX'
    assert data['stage'] == exc_info.value.stage
    assert data['message'] == str(exc_info.value)
