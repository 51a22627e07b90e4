#!/usr/bin/env python3
"""
Tests for comparing two catalog versions.
"""

from pojson.compare import DiffStat, compare_documents, entries_equal
from pojson.model import Document, Entry

OLD = Document(entries=(
    Entry(msgid="keep", msgstr="garder"),
    Entry(msgid="edit", msgstr="old"),
    Entry(msgid="gone", msgstr="parti"),
    Entry(msgid="retired", msgstr="x", obsolete=True),
))


def test_added_changed_deleted():
    new = Document(
        header_meta="Language: fr\\n",
        entries=(
            Entry(msgid="fresh", msgstr=""),
            Entry(msgid="keep", msgstr="garder"),
            Entry(msgid="edit", msgstr="new"),
            Entry(msgid="retired2", msgstr="y", obsolete=True),
        ),
    )
    stat, review = compare_documents(OLD, new)

    assert stat == DiffStat(added=1, changed=1, deleted=1)
    assert stat.has_changes
    assert [e.msgid for e in review.entries] == ["fresh", "edit"]
    assert review.header_meta == "Language: fr\\n"


def test_identical_documents():
    stat, review = compare_documents(OLD, OLD)
    assert not stat.has_changes
    assert review.entries == ()


def test_fuzzy_change_counts():
    old = Document(entries=(Entry(msgid="a", msgstr="b"),))
    new = Document(entries=(Entry(msgid="a", msgstr="b", fuzzy=True),))
    stat, _ = compare_documents(old, new)
    assert stat.changed == 1


def test_comments_are_not_compared():
    a = Entry(msgid="a", msgstr="b", comments=("#: x.c:1",))
    b = Entry(msgid="a", msgstr="b", comments=("#: x.c:2",))
    assert entries_equal(a, b)


def test_context_distinguishes_entries():
    old = Document(entries=(Entry(msgid="Open", msgstr="Ouvrir"),))
    new = Document(entries=(Entry(msgid="Open", msgstr="Ouvrir", msgctxt="menu"),))
    stat, _ = compare_documents(old, new)
    assert stat == DiffStat(added=1, changed=0, deleted=1)
