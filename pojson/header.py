#!/usr/bin/env python3
"""
Header splitting and header metadata access.

The parser hands over the leading line block of a catalog: comment and blank
lines, optionally followed by the header entry (``msgid ""`` plus its
``msgstr`` body). This module turns that block into the two header fields of
a Document.
"""

import re
from typing import Optional

from .errors import HeaderError
from .escape import canonicalize, po_unescape

_QUOTED_RE = re.compile(r'^"((?:[^"\\]|\\.)*)"$')
_NPLURALS_RE = re.compile(r'nplurals\s*=\s*(\d+)')


def _quoted(text: str, line: str) -> str:
    match = _QUOTED_RE.match(text.strip())
    if not match:
        raise HeaderError("unquoted line in header entry", line)
    return match.group(1)


def _keyword(stripped: str) -> tuple[str, str]:
    """Split ``keyword "value"`` into its two parts."""
    keyword, _, rest = stripped.partition(' ')
    return keyword, rest


def split_header(lines: list[str]) -> tuple[str, str]:
    """
    Split a header line block into (header_comment, header_meta).

    Args:
        lines: Comment/blank lines, optionally followed by the header entry

    Returns:
        Tuple of (comment block joined with newlines and newline-terminated,
        catalog-escaped msgstr of the header entry)

    Raises:
        HeaderError: If the header entry body is malformed
    """
    comment_lines: list[str] = []
    i = 0
    while i < len(lines):
        stripped = lines[i].strip()
        if stripped.startswith('msgid') or stripped.startswith('msgctxt'):
            break
        comment_lines.append(lines[i].rstrip('\r\n'))
        i += 1

    while comment_lines and not comment_lines[-1].strip():
        comment_lines.pop()
    while comment_lines and not comment_lines[0].strip():
        comment_lines.pop(0)
    header_comment = "\n".join(comment_lines) + "\n" if comment_lines else ""

    if i >= len(lines):
        return header_comment, ""

    msgid_parts: list[str] = []
    msgstr_parts: list[str] = []
    current: Optional[list[str]] = None

    for line in lines[i:]:
        stripped = line.strip()
        if not stripped:
            continue
        if stripped.startswith('"'):
            if current is None:
                raise HeaderError("continuation line without keyword in header entry", line)
            current.append(_quoted(stripped, line))
            continue

        keyword, rest = _keyword(stripped)
        if keyword == 'msgid':
            if msgid_parts:
                raise HeaderError("duplicate msgid in header entry", line)
            current = msgid_parts
        elif keyword == 'msgstr':
            if msgstr_parts:
                raise HeaderError("duplicate msgstr in header entry", line)
            current = msgstr_parts
        elif keyword == 'msgctxt':
            raise HeaderError("msgctxt is not allowed in the header entry", line)
        elif keyword == 'msgid_plural' or keyword.startswith('msgstr['):
            raise HeaderError("plural forms are not allowed in the header entry", line)
        else:
            raise HeaderError("unexpected line in header entry", line)
        current.append(_quoted(rest, line))

    if "".join(msgid_parts):
        raise HeaderError("header entry must have an empty msgid", "".join(msgid_parts))

    try:
        header_meta = canonicalize("".join(msgstr_parts))
    except ValueError as e:
        raise HeaderError(f"invalid escape in header entry: {e}") from e

    return header_comment, header_meta


def parse_header_meta(header_meta: str) -> dict[str, str]:
    """
    Decode header metadata into an ordered ``Key -> Value`` mapping.

    Args:
        header_meta: Catalog-escaped header msgstr

    Returns:
        Dict in header order, e.g. {"Content-Type": "text/plain; charset=UTF-8"}

    Raises:
        HeaderError: On a metadata line without a colon
    """
    try:
        text = po_unescape(header_meta)
    except ValueError as e:
        raise HeaderError(f"invalid escape in header metadata: {e}") from e

    fields: dict[str, str] = {}
    for line in text.split('\n'):
        if not line.strip():
            continue
        key, sep, value = line.partition(':')
        if not sep:
            raise HeaderError("header metadata line without colon", line)
        fields[key.strip()] = value.strip()
    return fields


def nplurals(header_meta: str) -> Optional[int]:
    """Number of plural forms declared by ``Plural-Forms``, or None."""
    plural_forms = parse_header_meta(header_meta).get('Plural-Forms')
    if not plural_forms:
        return None
    match = _NPLURALS_RE.search(plural_forms)
    return int(match.group(1)) if match else None
