#!/usr/bin/env python3
"""
Catalog statistics in the style of ``msgfmt --statistics``.
"""

from dataclasses import asdict, dataclass

from .filters import is_same, is_translated
from .model import Document


@dataclass
class CatalogStats:
    """
    Entry counts for one catalog.

    Attributes:
        translated: Translated, non-fuzzy entries (includes same, as msgfmt does)
        untranslated: Non-fuzzy entries without translation
        same: Translated entries whose translation equals the source
        fuzzy: Fuzzy entries
        obsolete: Obsolete entries (not counted in any other field)
    """
    translated: int = 0
    untranslated: int = 0
    same: int = 0
    fuzzy: int = 0
    obsolete: int = 0

    @property
    def total(self) -> int:
        """Active entries."""
        return self.translated + self.untranslated + self.fuzzy

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


def count_stats(doc: Document) -> CatalogStats:
    """Count entries of doc by state."""
    stats = CatalogStats()
    for entry in doc.entries:
        if entry.obsolete:
            stats.obsolete += 1
        elif entry.fuzzy:
            stats.fuzzy += 1
        elif not is_translated(entry):
            stats.untranslated += 1
        else:
            stats.translated += 1
            if is_same(entry):
                stats.same += 1
    return stats


def _plural(count: int, singular: str, plural: str) -> str:
    return f"{count} {singular if count == 1 else plural}"


def _msgfmt_parts(stats: CatalogStats) -> list[str]:
    parts = []
    if stats.translated:
        parts.append(_plural(stats.translated, "translated message", "translated messages"))
    if stats.fuzzy:
        parts.append(_plural(stats.fuzzy, "fuzzy translation", "fuzzy translations"))
    if stats.untranslated:
        parts.append(_plural(stats.untranslated, "untranslated message", "untranslated messages"))
    return parts


def _join(parts: list[str]) -> str:
    if not parts:
        return "0 translated messages."
    return ", ".join(parts) + "."


def format_msgfmt_statistics(stats: CatalogStats, extended: bool = False) -> str:
    """
    Render stats like ``msgfmt --statistics``.

    Example: "2 translated messages, 1 fuzzy translation, 1 untranslated message."
    Zero categories are left out; an empty catalog yields
    "0 translated messages.".

    Args:
        stats: Counts to render
        extended: Also report same and obsolete entries, which msgfmt
            does not count
    """
    parts = _msgfmt_parts(stats)
    if not extended:
        return _join(parts)
    if stats.same:
        parts.append(_plural(stats.same, "same message", "same messages"))
    if stats.obsolete:
        parts.append(_plural(stats.obsolete, "obsolete entry", "obsolete entries"))
    return _join(parts)
