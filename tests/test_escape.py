#!/usr/bin/env python3
"""
Tests for the escape codec:
1. PO unescape/escape of named, octal and hex escapes
2. Canonical form
3. Bit-exact JSON encoding and its inverse
"""

import json

import pytest

from pojson.escape import (
    canonicalize,
    from_json,
    po_escape,
    po_unescape,
    to_json,
    to_json_value,
)


def test_unescape_named_escapes():
    assert po_unescape('a\\nb\\tc\\rd\\"e\\\\f') == 'a\nb\tc\rd"e\\f'
    assert po_unescape('\\a\\b\\f\\v') == '\a\b\f\v'


def test_unescape_octal_and_hex():
    assert po_unescape('\\x41\\101\\x7a') == 'AAz'


def test_unescape_without_backslash_is_identity():
    assert po_unescape('plain text') == 'plain text'


@pytest.mark.parametrize('bad', ['\\q', 'trailing\\', '\\x'])
def test_unescape_rejects_invalid_escapes(bad):
    with pytest.raises(ValueError):
        po_unescape(bad)


def test_escape_is_canonical():
    assert po_escape('tab\there "quoted" \\ and\nnewline') == 'tab\\there \\"quoted\\" \\\\ and\\nnewline'
    assert po_escape('\a') == '\\a'


def test_canonicalize_normalizes_numeric_escapes():
    assert canonicalize('\\x41\\102') == 'AB'
    assert canonicalize('\\007') == '\\a'
    assert canonicalize('a\\nb') == 'a\\nb'


def test_unnamed_controls_become_octal_escapes():
    assert po_escape('\x1b[1mbold') == '\\033[1mbold'
    assert po_escape('\x00\x01\x7f') == '\\000\\001\\177'
    assert canonicalize('\\x1b[0m') == '\\033[0m'
    assert canonicalize('\\033[1m') == '\\033[1m'
    assert canonicalize('\\0012') == '\\0012'


CONTROL_CHARACTERS = [chr(c) for c in range(0x20)] + ['\x7f']


def _has_raw_control(text):
    return any(ord(ch) < 0x20 or ord(ch) == 0x7f for ch in text)


@pytest.mark.parametrize('char', CONTROL_CHARACTERS, ids=lambda c: f"U+{ord(c):04X}")
def test_control_character_round_trip(char):
    raw = 'a' + char + '1'
    model = from_json(raw)
    assert not _has_raw_control(model)
    assert canonicalize(model) == model
    assert po_unescape(model) == raw
    assert to_json(model) == json.dumps(raw, ensure_ascii=False)
    assert from_json(json.loads(to_json(model))) == model


def test_to_json_is_bit_exact():
    """Control characters without a short JSON escape become \\uXXXX."""
    s = '1 \\n 2 \\r 3 \\" 4 \\t 5 \\a 6 \\\\'
    assert to_json(s) == '"1 \\n 2 \\r 3 \\" 4 \\t 5 \\u0007 6 \\\\"'


def test_to_json_keeps_non_ascii():
    assert to_json('héllo wörld') == '"héllo wörld"'


def test_json_round_trip_is_exact():
    samples = ['', 'simple', 'a\\nb', 'quote \\" and backslash \\\\', 'bell \\a tab \\t', '日本語\\n']
    for s in samples:
        assert from_json(json.loads(to_json(s))) == s
        assert from_json(to_json_value(s)) == s


def test_from_json_encodes_real_control_characters():
    assert from_json('line\nnext') == 'line\\nnext'
    assert from_json('back\\slash') == 'back\\\\slash'


def test_from_json_rejects_non_strings():
    with pytest.raises(TypeError):
        from_json(42)
