#!/usr/bin/env python3
"""
Merge several documents into one.

Used to recombine batch results: entries are concatenated in input order
and de-duplicated by (msgctxt, msgid), keeping the first occurrence.
"""

import logging
from typing import Iterable

from .model import Document, Entry

logger = logging.getLogger(__name__)


def merge_documents(docs: Iterable[Document]) -> Document:
    """
    Merge documents, first occurrence wins.

    The header is taken from the first document that has one. Later
    entries whose key was already seen are dropped.

    Args:
        docs: Documents in priority order

    Returns:
        New merged Document (empty if no documents were given)
    """
    header_source = None
    seen: set = set()
    entries: list[Entry] = []
    dropped = 0

    for doc in docs:
        if header_source is None and doc.has_header:
            header_source = doc
        for entry in doc.entries:
            if entry.key in seen:
                dropped += 1
                logger.debug("Dropping duplicate entry msgctxt=%r msgid=%r", entry.msgctxt, entry.msgid)
                continue
            seen.add(entry.key)
            entries.append(entry)

    logger.debug("Merged %d entries, dropped %d duplicates", len(entries), dropped)
    if header_source is None:
        return Document(entries=tuple(entries))
    return header_source.with_entries(entries)
