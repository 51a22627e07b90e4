#!/usr/bin/env python3
"""
Range selection over document entries.

Range specs are comma-separated tokens over 1-based entry positions:

    "3"      single entry
    "2-5"    inclusive range
    "-4"     first through fourth
    "7-"     seventh through last
    "1,3-5"  union of tokens

An empty spec selects every entry.
"""

import re
from typing import Optional

from .errors import RangeSpecError
from .model import Document

_TOKEN_RE = re.compile(r'^(\d*)\s*-\s*(\d*)$')


def parse_range(spec: Optional[str], total: int) -> list[int]:
    """
    Parse a range spec into sorted, de-duplicated 1-based indices.

    Args:
        spec: Range specification; None or blank selects everything
        total: Number of entries available

    Returns:
        Ascending list of indices in [1, total]

    Raises:
        RangeSpecError: On an unparsable token, a reversed range, a zero
            index, or an index beyond total
    """
    if spec is None or not spec.strip():
        return list(range(1, total + 1))

    selected: set[int] = set()
    for raw in spec.split(','):
        token = raw.strip()
        if not token:
            continue
        start, end = _parse_token(token, total)
        if start < 1 or end < 1:
            raise RangeSpecError(f"index must start at 1 in '{token}'", token, 1, total)
        if start > total or end > total:
            raise RangeSpecError(f"index out of range in '{token}'", token, 1, total)
        if start > end:
            raise RangeSpecError(f"reversed range '{token}'", token, 1, total)
        selected.update(range(start, end + 1))
    return sorted(selected)


def _parse_token(token: str, total: int) -> tuple[int, int]:
    if token.isdigit():
        n = int(token)
        return n, n
    match = _TOKEN_RE.match(token)
    if not match or not (match.group(1) or match.group(2)):
        raise RangeSpecError(f"invalid range token '{token}'", token, 1, total)
    start = int(match.group(1)) if match.group(1) else 1
    end = int(match.group(2)) if match.group(2) else total
    return start, end


def select_entries(doc: Document, spec: Optional[str]) -> Document:
    """
    Extract the entries selected by spec.

    Args:
        doc: Source document
        spec: Range specification

    Returns:
        New Document with the same header and the selected entries in
        their original relative order
    """
    indices = parse_range(spec, len(doc.entries))
    return doc.with_entries(doc.entries[i - 1] for i in indices)


def apply_range(doc: Document, spec: Optional[str], batch: Document) -> Document:
    """
    Write a batch's entries back into the selected positions of doc.

    The i-th batch entry replaces the i-th selected entry. The header of
    doc is kept; the batch header is ignored.

    Args:
        doc: Whole document
        spec: Range specification the batch was extracted with
        batch: Processed batch

    Returns:
        New Document

    Raises:
        RangeSpecError: If the batch size differs from the selection size
    """
    total = len(doc.entries)
    indices = parse_range(spec, total)
    if len(batch.entries) != len(indices):
        raise RangeSpecError(
            f"batch has {len(batch.entries)} entries but range '{spec or ''}' "
            f"selects {len(indices)}",
            spec or "", 1, total,
        )
    entries = list(doc.entries)
    for index, entry in zip(indices, batch.entries):
        entries[index - 1] = entry
    return doc.with_entries(entries)
