#!/usr/bin/env python3
"""
Entry-state filtering and fuzzy-flag maintenance.

An entry is in one of these states:
- translated: has a non-empty translation and is not fuzzy
- untranslated: every msgstr is empty
- fuzzy: marked fuzzy (may or may not have a translation)
- same: translation identical to the source text
- obsolete: retired with the ``#~`` marker
"""

from dataclasses import dataclass, replace

from .model import Document, Entry


def is_translated(entry: Entry) -> bool:
    """Any non-empty msgstr (fuzzy state not considered)."""
    return any(entry.translations)


def is_untranslated(entry: Entry) -> bool:
    return not is_translated(entry)


def is_same(entry: Entry) -> bool:
    """Translation equals the source (first plural form for plural entries)."""
    return entry.translations[0] == entry.msgid


@dataclass
class EntryFilter:
    """
    Selection of entry states.

    With no state flag set, every non-obsolete entry matches, and obsolete
    entries match when with_obsolete is set and no_obsolete is not.

    Attributes:
        translated: Select translated entries
        untranslated: Select untranslated entries
        fuzzy: Select fuzzy entries
        with_obsolete: Include obsolete entries
        no_obsolete: Exclude obsolete entries (overrides with_obsolete)
        only_same: Only entries whose translation equals the source
        only_obsolete: Only obsolete entries
    """
    translated: bool = False
    untranslated: bool = False
    fuzzy: bool = False
    with_obsolete: bool = True
    no_obsolete: bool = False
    only_same: bool = False
    only_obsolete: bool = False

    @property
    def has_state_filter(self) -> bool:
        return self.translated or self.untranslated or self.fuzzy

    @property
    def include_obsolete(self) -> bool:
        if self.no_obsolete:
            return False
        return self.with_obsolete

    def validate(self) -> None:
        """
        Reject mutually exclusive combinations.

        Raises:
            ValueError: If only_same/only_obsolete are combined with each
                other or with a state flag
        """
        if self.only_same and self.only_obsolete:
            raise ValueError("only_same and only_obsolete are mutually exclusive")
        if self.only_same and self.has_state_filter:
            raise ValueError("only_same is mutually exclusive with translated, untranslated, fuzzy")
        if self.only_obsolete and self.has_state_filter:
            raise ValueError("only_obsolete is mutually exclusive with translated, untranslated, fuzzy")
        if self.only_obsolete and self.no_obsolete:
            raise ValueError("only_obsolete and no_obsolete are mutually exclusive")

    def matches(self, entry: Entry) -> bool:
        """Whether entry is selected by this filter."""
        if self.only_same:
            return is_same(entry) and not entry.obsolete
        if self.only_obsolete:
            return entry.obsolete

        if entry.obsolete:
            return self.include_obsolete

        if self.has_state_filter:
            if self.translated and is_translated(entry) and not entry.fuzzy:
                return True
            if self.untranslated and is_untranslated(entry):
                return True
            if self.fuzzy and entry.fuzzy:
                return True
            return False

        return True


def filter_entries(doc: Document, flt: EntryFilter) -> Document:
    """
    Keep the entries matched by flt.

    Raises:
        ValueError: If the filter combination is invalid
    """
    flt.validate()
    return doc.with_entries(e for e in doc.entries if flt.matches(e))


def unset_fuzzy(doc: Document) -> Document:
    """Clear the fuzzy flag on every entry, keeping translations."""
    return doc.with_entries(
        replace(e, fuzzy=False) if e.fuzzy else e for e in doc.entries
    )


def clear_fuzzy(doc: Document) -> Document:
    """Clear the fuzzy flag and discard the translations of fuzzy entries."""
    return doc.with_entries(_clear_entry(e) if e.fuzzy else e for e in doc.entries)


def _clear_entry(entry: Entry) -> Entry:
    return replace(
        entry,
        fuzzy=False,
        msgstr="",
        msgstr_plural=tuple("" for _ in entry.msgstr_plural),
    )
