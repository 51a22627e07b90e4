#!/usr/bin/env python3
"""
Tests for token-based batch planning.

The tiktoken encoding is replaced by a fixed-size fake encoder (or made to
fail) so that no encoding files have to be downloaded.
"""

import logging

import pytest

from pojson import batcher as batcher_module
from pojson.batcher import BatchInfo, TokenBatcher, plan_batches
from pojson.model import Document, Entry
from pojson.select import select_entries


class FixedEncoder:
    """Every text encodes to the same number of tokens."""

    def __init__(self, tokens=10):
        self.tokens = tokens

    def encode(self, text):
        return [0] * self.tokens


@pytest.fixture
def no_tiktoken(monkeypatch):
    def fail(name):
        raise RuntimeError(f"encoding {name} unavailable")
    monkeypatch.setattr(batcher_module.tiktoken, "get_encoding", fail)


def make_doc(count):
    return Document(entries=tuple(Entry(msgid=f"message {i}") for i in range(1, count + 1)))


def test_estimate_tokens_applies_expansion_and_overhead():
    batcher = TokenBatcher(encoder=FixedEncoder(10))
    assert batcher.estimate_tokens("anything") == 22


def test_token_batches_are_contiguous():
    batcher = TokenBatcher(target_tokens=50, encoder=FixedEncoder(10))
    batches = batcher.create_batches(make_doc(5))

    assert batches == [
        BatchInfo(batch_num=1, start=1, end=2, estimated_tokens=44),
        BatchInfo(batch_num=2, start=3, end=4, estimated_tokens=44),
        BatchInfo(batch_num=3, start=5, end=5, estimated_tokens=22),
    ]
    assert [b.range_spec for b in batches] == ["1-2", "3-4", "5-5"]


def test_oversized_entry_gets_own_batch():
    batcher = TokenBatcher(target_tokens=10, encoder=FixedEncoder(10))
    batches = batcher.create_batches(make_doc(3))
    assert [(b.start, b.end) for b in batches] == [(1, 1), (2, 2), (3, 3)]


def test_batches_select_every_entry_once():
    doc = make_doc(7)
    batcher = TokenBatcher(target_tokens=70, encoder=FixedEncoder(10))
    selected = []
    for info in batcher.create_batches(doc):
        batch = select_entries(doc, info.range_spec)
        assert len(batch) == info.size
        selected.extend(batch.entries)
    assert tuple(selected) == doc.entries


def test_fixed_batches():
    batcher = TokenBatcher(encoder=FixedEncoder(10))
    batches = batcher.create_batches_fixed(make_doc(10), 3)
    assert [b.range_spec for b in batches] == ["1-3", "4-6", "7-9", "10-10"]
    assert batches[-1].estimated_tokens == 22


def test_empty_document():
    batcher = TokenBatcher(encoder=FixedEncoder())
    assert batcher.create_batches(Document()) == []
    assert batcher.create_batches_fixed(Document(), 5) == []
    assert batcher.get_stats([]) == {
        'total_batches': 0,
        'total_entries': 0,
        'total_estimated_tokens': 0,
        'avg_tokens_per_batch': 0,
        'min_tokens': 0,
        'max_tokens': 0,
    }


def test_get_stats():
    batcher = TokenBatcher(target_tokens=50, encoder=FixedEncoder(10))
    stats = batcher.get_stats(batcher.create_batches(make_doc(5)))
    assert stats == {
        'total_batches': 3,
        'total_entries': 5,
        'total_estimated_tokens': 110,
        'avg_tokens_per_batch': 36,
        'min_tokens': 22,
        'max_tokens': 44,
    }


def test_fallback_estimate_without_encoding(no_tiktoken, caplog):
    batcher = TokenBatcher(model="missing")
    with caplog.at_level(logging.WARNING, logger="pojson.batcher"):
        assert batcher.estimate_tokens("abcdefgh") == 12
        assert batcher.estimate_tokens("") == 10
    assert batcher.encoder is None
    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1


@pytest.mark.parametrize('target', [0, -5])
def test_invalid_target(target):
    with pytest.raises(ValueError):
        TokenBatcher(target_tokens=target)


def test_invalid_batch_size():
    with pytest.raises(ValueError):
        TokenBatcher(encoder=FixedEncoder()).create_batches_fixed(make_doc(3), 0)


def test_plan_batches(no_tiktoken):
    doc = make_doc(4)
    assert [b.range_spec for b in plan_batches(doc, batch_size=3)] == ["1-3", "4-4"]
    assert [b.range_spec for b in plan_batches(doc)] == ["1-4"]
    assert len(plan_batches(doc, target_tokens=1)) == 4
