#!/usr/bin/env python3
"""
Escape codec between PO string escaping and JSON string escaping.

Model strings always hold the catalog's backslash-escaped form (``\\n`` is a
backslash followed by ``n``). JSON carries the characters those escapes
denote, so a JSON consumer sees a real newline. This module is the only place
where the two representations are converted into each other:

    PO text  "Line\\n"  ->  model  'Line\\n'  ->  JSON  "Line\\n"
                                    (two chars)        (one newline char)

Escaping is canonical: named escapes where C has one, 3-digit octal for the
remaining control characters and DEL, every other character as itself. The
parser canonicalizes each quoted string, so ``po_escape(po_unescape(s)) == s``
for every string it stores, which makes JSON encode/decode an exact inverse
pair. A numeric escape of a printable character (``\\x41``) is read as the
character itself, so the first serialization of such a catalog normalizes it;
every later round trip is byte-identical.
"""

import json
import re

# Named escapes understood by gettext (C escapes).
_UNESCAPE = {
    'n': '\n',
    't': '\t',
    'r': '\r',
    '"': '"',
    '\\': '\\',
    'a': '\a',
    'b': '\b',
    'f': '\f',
    'v': '\v',
}

_NAMED_ESCAPES = {
    '\\': '\\\\',
    '"': '\\"',
    '\n': '\\n',
    '\t': '\\t',
    '\r': '\\r',
    '\a': '\\a',
    '\b': '\\b',
    '\f': '\\f',
    '\v': '\\v',
}

# Other C0 controls and DEL become 3-digit octal escapes (ESC -> \033).
_ESCAPE_TABLE = str.maketrans({
    **{chr(c): f"\\{c:03o}" for c in list(range(0x20)) + [0x7f]},
    **_NAMED_ESCAPES,
})

_ESCAPE_RE = re.compile(r'\\(x[0-9A-Fa-f]{1,2}|[0-7]{1,3}|.|$)', re.DOTALL)


def _replace_escape(match: re.Match) -> str:
    seq = match.group(1)
    if seq in _UNESCAPE:
        return _UNESCAPE[seq]
    if len(seq) > 1 and seq[0] == 'x':
        return chr(int(seq[1:], 16))
    if seq and seq[0] in '01234567':
        return chr(int(seq, 8))
    if not seq:
        raise ValueError("dangling backslash at end of string")
    raise ValueError(f"invalid escape sequence: \\{seq}")


def po_unescape(s: str) -> str:
    """
    Decode PO escape sequences into the characters they denote.

    Args:
        s: Catalog-escaped text (content between the quotes of a PO string)

    Returns:
        Raw text

    Raises:
        ValueError: On an unknown escape or a dangling backslash
    """
    if '\\' not in s:
        return s
    return _ESCAPE_RE.sub(_replace_escape, s)


def po_escape(s: str) -> str:
    """Encode raw text in canonical PO escaping."""
    return s.translate(_ESCAPE_TABLE)


def canonicalize(s: str) -> str:
    """Normalize catalog-escaped text (e.g. ``\\x41`` -> ``A``)."""
    return po_escape(po_unescape(s))


def to_json(s: str) -> str:
    """
    Encode a catalog-escaped model string as a JSON string literal.

    The output is byte-for-byte what ``json.dumps`` produces for the decoded
    text: named escapes for quote, backslash, newline, tab, carriage return,
    backspace and form feed, ``\\uXXXX`` for other control characters.
    """
    return json.dumps(po_unescape(s), ensure_ascii=False)


def to_json_value(s: str) -> str:
    """Decoded text for a model string, ready to be placed in a JSON payload."""
    return po_unescape(s)


def from_json(value: str) -> str:
    """
    Convert a string decoded from JSON back to the model's escaped form.

    Exact inverse of ``to_json``/``to_json_value`` for canonical strings.
    """
    if not isinstance(value, str):
        raise TypeError(f"expected str, got {type(value).__name__}")
    return po_escape(value)
