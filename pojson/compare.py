#!/usr/bin/env python3
"""
Compare two versions of a catalog.

Active entries are matched by (msgctxt, msgid); obsolete entries are
ignored on both sides. The entries that are new or changed in the newer
version form the review input for a follow-up batch.
"""

import logging
from dataclasses import dataclass

from .model import Document, Entry

logger = logging.getLogger(__name__)


@dataclass
class DiffStat:
    """Entry-level differences between two catalogs."""
    added: int = 0    # in new but not in old
    changed: int = 0  # same key, different content
    deleted: int = 0  # in old but not in new

    @property
    def has_changes(self) -> bool:
        return bool(self.added or self.changed or self.deleted)


def entries_equal(a: Entry, b: Entry) -> bool:
    """Equal fuzzy state, source texts and translations."""
    return (
        a.fuzzy == b.fuzzy
        and a.msgid == b.msgid
        and a.msgstr == b.msgstr
        and a.msgid_plural == b.msgid_plural
        and a.msgstr_plural == b.msgstr_plural
    )


def compare_documents(old: Document, new: Document) -> tuple[DiffStat, Document]:
    """
    Compare old and new versions of a catalog.

    Args:
        old: Previous version
        new: Current version

    Returns:
        Tuple of (DiffStat, Document with new's header and the entries that
        are added or changed in new, in new's order)
    """
    old_entries = {e.key: e for e in old.entries if not e.obsolete}
    new_keys = set()
    stat = DiffStat()
    review = []

    for entry in new.entries:
        if entry.obsolete:
            continue
        new_keys.add(entry.key)
        previous = old_entries.get(entry.key)
        if previous is None:
            stat.added += 1
            review.append(entry)
        elif not entries_equal(previous, entry):
            stat.changed += 1
            review.append(entry)

    stat.deleted = sum(1 for key in old_entries if key not in new_keys)

    logger.debug("Compare: added=%d changed=%d deleted=%d", stat.added, stat.changed, stat.deleted)
    return stat, new.with_entries(review)
