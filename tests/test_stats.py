#!/usr/bin/env python3
"""
Tests for catalog statistics and msgfmt-style summaries.
"""

from pojson.model import Document, Entry
from pojson.stats import CatalogStats, count_stats, format_msgfmt_statistics


def make_doc():
    return Document(entries=(
        Entry(msgid="a", msgstr="A"),
        Entry(msgid="b", msgstr="b"),
        Entry(msgid="c"),
        Entry(msgid="d", msgstr="D?", fuzzy=True),
        Entry(msgid="e", fuzzy=True),
        Entry(msgid="f", msgid_plural="fs", msgstr_plural=("F", "Fs")),
        Entry(msgid="g", msgstr="G", obsolete=True),
    ))


def test_count_stats():
    stats = count_stats(make_doc())
    assert stats == CatalogStats(translated=3, untranslated=1, same=1, fuzzy=2, obsolete=1)
    assert stats.total == 6
    assert stats.to_dict() == {
        'translated': 3, 'untranslated': 1, 'same': 1, 'fuzzy': 2, 'obsolete': 1,
    }


def test_obsolete_fuzzy_counts_as_obsolete_only():
    stats = count_stats(Document(entries=(Entry(msgid="x", fuzzy=True, obsolete=True),)))
    assert stats == CatalogStats(obsolete=1)


def test_msgfmt_statistics():
    assert format_msgfmt_statistics(count_stats(make_doc())) == (
        "3 translated messages, 2 fuzzy translations, 1 untranslated message."
    )


def test_msgfmt_statistics_singular_and_omitted():
    assert format_msgfmt_statistics(CatalogStats(translated=1)) == "1 translated message."
    assert format_msgfmt_statistics(CatalogStats(fuzzy=1, untranslated=2)) == (
        "1 fuzzy translation, 2 untranslated messages."
    )


def test_empty_catalog():
    assert format_msgfmt_statistics(count_stats(Document())) == "0 translated messages."
    assert format_msgfmt_statistics(CatalogStats(), extended=True) == "0 translated messages."


def test_extended_statistics_report_same_and_obsolete():
    assert format_msgfmt_statistics(count_stats(make_doc()), extended=True) == (
        "3 translated messages, 2 fuzzy translations, 1 untranslated message, "
        "1 same message, 1 obsolete entry."
    )
