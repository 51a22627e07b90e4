#!/usr/bin/env python3
"""
Tolerant JSON loading for documents produced by language models.

Agents wrap JSON in markdown code fences, prepend a byte-order mark, or
surround the object with prose. parse_json_document() first parses the input
as-is and only then applies a fixed sequence of repair stages. When every
stage fails, the raised JsonSyntaxError carries everything an agent needs to
fix its output: a content snippet, the decoder diagnostic and the expected
schema.
"""

import json
import logging
import re
from typing import Any, Optional, Union

from .errors import JsonSyntaxError

logger = logging.getLogger(__name__)

SNIPPET_LENGTH = 800

EXPECTED_SCHEMA = (
    '{"header_comment": "", "header_meta": "", "entries": '
    '[{"msgid": "...", "msgstr": "...", "fuzzy": false, ...}]}'
)

_FENCE_RE = re.compile(r'```[\w+-]*[ \t]*\n?(.*?)(?:```|\Z)', re.DOTALL)


def strip_bom(text: str) -> str:
    """Remove a leading byte-order mark and surrounding whitespace."""
    return text.strip().lstrip('\ufeff').strip()


def extract_fenced_block(text: str) -> Optional[str]:
    """
    Interior of the first markdown code fence, or None.

    The language tag on the opening fence (```json) is skipped. An
    unterminated fence yields everything after the opening line.
    """
    match = _FENCE_RE.search(text)
    if not match:
        return None
    return match.group(1).strip()


def extract_json_object(text: str) -> Optional[str]:
    """
    Find the first balanced JSON object in text.

    Braces inside string literals (including escaped quotes) are ignored.

    Args:
        text: Content that may contain prose around the object

    Returns:
        The object's source text, or None if no balanced object exists
    """
    start = text.find('{')
    if start < 0:
        return None

    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == '\\':
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == '{':
            depth += 1
        elif ch == '}':
            depth -= 1
            if depth == 0:
                return text[start:i + 1]
    return None


def _try_load(text: str) -> tuple[Optional[dict[str, Any]], Optional[str], Optional[int]]:
    """Returns (object, diagnostic, offset); object is None on failure."""
    try:
        value = json.loads(text)
    except json.JSONDecodeError as e:
        return None, e.msg, e.pos
    if not isinstance(value, dict):
        return None, f"expected a JSON object, got {type(value).__name__}", None
    return value, None, None


def parse_json_document(data: Union[str, bytes], source: str = "<input>") -> dict[str, Any]:
    """
    Parse JSON text, repairing common agent output defects.

    Stages, tried in order after a plain parse fails:
        1. strip: remove a UTF-8 BOM and surrounding whitespace
        2. fence: take the interior of a markdown code fence
        3. scan: take the first balanced {...} object

    Args:
        data: JSON document as text or UTF-8 bytes
        source: Name used in the error message (e.g. a file path)

    Returns:
        The decoded JSON object

    Raises:
        JsonSyntaxError: If no stage yields a JSON object
    """
    if isinstance(data, bytes):
        try:
            data = data.decode('utf-8')
        except UnicodeDecodeError as e:
            raise _build_error(source, data.decode('utf-8', errors='replace'),
                               f"invalid UTF-8: {e}", e.start, "decode") from e

    value, diagnostic, offset = _try_load(data)
    if value is not None:
        return value

    first_diagnostic, first_offset = diagnostic, offset
    text = data
    attempted = "raw"

    for stage, transform in (("strip", strip_bom), ("fence", extract_fenced_block), ("scan", extract_json_object)):
        candidate = transform(text)
        if candidate is None:
            continue
        logger.warning("JSON parse failed (%s), retrying after stage '%s'", diagnostic, stage)
        attempted = stage
        text = candidate
        value, diagnostic, _ = _try_load(text)
        if value is not None:
            return value

    raise _build_error(source, data, first_diagnostic, first_offset, attempted)


def _build_error(
    source: str,
    content: str,
    diagnostic: Optional[str],
    offset: Optional[int],
    stage: str,
) -> JsonSyntaxError:
    snippet = content[:SNIPPET_LENGTH]
    if len(content) > SNIPPET_LENGTH:
        snippet += f"\n... (truncated, total {len(content)} characters)"

    location = f" at offset {offset}" if offset is not None else ""
    message = (
        f"failed to parse JSON catalog document: {source}\n"
        f"\n"
        f"Parse error: {diagnostic}{location}\n"
        f"\n"
        f"Repair attempts (BOM removal, code fence extraction, object scan) all failed.\n"
        f"The content may have:\n"
        f"- Invalid JSON syntax (missing commas, brackets, quotes, trailing commas)\n"
        f"- Truncated or malformed content\n"
        f"- Incorrect catalog schema\n"
        f"\n"
        f"Expected schema:\n"
        f"  {EXPECTED_SCHEMA}\n"
        f"\n"
        f"Content snippet (first {SNIPPET_LENGTH} characters):\n"
        f"---\n"
        f"{snippet}\n"
        f"---\n"
        f"\n"
        f"Please fix the JSON file and make sure it is valid JSON matching the schema above."
    )
    return JsonSyntaxError(
        message,
        snippet=snippet,
        offset=offset,
        stage=stage,
        diagnostic=diagnostic or "",
    )
