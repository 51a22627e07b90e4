#!/usr/bin/env python3
"""
Token-based batch planning for agent translation sessions.

Uses tiktoken to split a document into contiguous batches whose estimated
output size fits a token budget. Each batch carries a range spec that
select.select_entries() and select.apply_range() accept, so a caller can
extract a batch, hand it to an agent and write the result back.
"""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

import tiktoken

from .model import Document, Entry

logger = logging.getLogger(__name__)


@dataclass
class BatchInfo:
    """Information about a single batch (1-based, inclusive positions)."""
    batch_num: int
    start: int
    end: int
    estimated_tokens: int

    @property
    def size(self) -> int:
        return self.end - self.start + 1

    @property
    def range_spec(self) -> str:
        return f"{self.start}-{self.end}"


class TokenBatcher:
    """
    Creates batches based on estimated output token count.

    Instead of fixed entry counts, this batcher groups entries to approximate
    a target token count per batch, which keeps agent responses within
    their output limits.
    """

    # Expansion factor: translations are typically longer than source
    EXPANSION_FACTOR = 1.2

    # Overhead per entry (brackets, newlines, etc.)
    ENTRY_OVERHEAD = 10

    def __init__(
        self,
        target_tokens: int = 5000,
        model: str = "cl100k_base",
        encoder: Optional[Any] = None,
    ):
        """
        Initialize token batcher.

        Args:
            target_tokens: Target output tokens per batch (default: 5000)
            model: Tiktoken encoding name (default: cl100k_base)
            encoder: Object with an ``encode(text) -> list`` method; loaded
                from tiktoken on first use when omitted
        """
        if target_tokens <= 0:
            raise ValueError(f"target_tokens must be positive, got {target_tokens}")
        self.target_tokens = target_tokens
        self.model = model
        self._encoder = encoder
        self._encoder_loaded = encoder is not None

    @property
    def encoder(self) -> Optional[Any]:
        """The token encoder, or None when the encoding could not be loaded."""
        if not self._encoder_loaded:
            self._encoder_loaded = True
            try:
                self._encoder = tiktoken.get_encoding(self.model)
            except Exception as e:
                logger.warning(
                    "Could not load tiktoken encoding %r (%s); estimating ~4 characters per token",
                    self.model, e,
                )
                self._encoder = None
        return self._encoder

    def estimate_tokens(self, text: str) -> int:
        """
        Estimate token count for text.

        Args:
            text: Text to estimate tokens for

        Returns:
            Estimated token count
        """
        if self.encoder is not None:
            base_tokens = len(self.encoder.encode(text))
        else:
            # Fallback: ~4 chars per token (rough estimate)
            base_tokens = len(text) // 4

        # Apply expansion factor and add overhead
        return int(base_tokens * self.EXPANSION_FACTOR) + self.ENTRY_OVERHEAD

    def estimate_entry_tokens(self, entry: Entry) -> int:
        """Estimate tokens of an entry as it appears in the JSON document."""
        return self.estimate_tokens(json.dumps(entry.to_dict(), ensure_ascii=False))

    def create_batches(self, doc: Document) -> list[BatchInfo]:
        """
        Group entries into contiguous batches based on token count.

        A single entry larger than the target still gets a batch of its own.

        Args:
            doc: Document to split

        Returns:
            List of BatchInfo objects covering every entry in order
        """
        batches: list[BatchInfo] = []
        current_tokens = 0
        start = 1

        for position, entry in enumerate(doc.entries, 1):
            entry_tokens = self.estimate_entry_tokens(entry)

            # Check if adding this entry would exceed target
            if current_tokens + entry_tokens > self.target_tokens and position > start:
                batches.append(BatchInfo(
                    batch_num=len(batches) + 1,
                    start=start,
                    end=position - 1,
                    estimated_tokens=current_tokens,
                ))
                start = position
                current_tokens = entry_tokens
            else:
                current_tokens += entry_tokens

        # Don't forget the last batch
        if doc.entries:
            batches.append(BatchInfo(
                batch_num=len(batches) + 1,
                start=start,
                end=len(doc.entries),
                estimated_tokens=current_tokens,
            ))

        logger.debug("Planned %d batches for %d entries", len(batches), len(doc.entries))
        return batches

    def create_batches_fixed(self, doc: Document, batch_size: int) -> list[BatchInfo]:
        """
        Create batches with fixed entry count.

        Args:
            doc: Document to split
            batch_size: Number of entries per batch

        Returns:
            List of BatchInfo objects
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        batches = []
        for i in range(0, len(doc.entries), batch_size):
            batch_entries = doc.entries[i:i + batch_size]
            batches.append(BatchInfo(
                batch_num=len(batches) + 1,
                start=i + 1,
                end=i + len(batch_entries),
                estimated_tokens=sum(self.estimate_entry_tokens(e) for e in batch_entries),
            ))

        logger.debug("Planned %d fixed batches of %d entries", len(batches), batch_size)
        return batches

    def get_stats(self, batches: list[BatchInfo]) -> dict:
        """
        Get statistics about batches.

        Args:
            batches: List of BatchInfo objects

        Returns:
            Dictionary with batch statistics
        """
        if not batches:
            return {
                'total_batches': 0,
                'total_entries': 0,
                'total_estimated_tokens': 0,
                'avg_tokens_per_batch': 0,
                'min_tokens': 0,
                'max_tokens': 0,
            }

        tokens_list = [b.estimated_tokens for b in batches]
        total_tokens = sum(tokens_list)
        return {
            'total_batches': len(batches),
            'total_entries': sum(b.size for b in batches),
            'total_estimated_tokens': total_tokens,
            'avg_tokens_per_batch': total_tokens // len(batches),
            'min_tokens': min(tokens_list),
            'max_tokens': max(tokens_list),
        }


def plan_batches(
    doc: Document,
    target_tokens: Optional[int] = None,
    batch_size: Optional[int] = None,
) -> list[BatchInfo]:
    """
    Plan batches with token-based or fixed-size batching.

    Args:
        doc: Document to split
        target_tokens: Target tokens per batch (token-based batching)
        batch_size: Fixed batch size, used when target_tokens is not given

    Returns:
        List of BatchInfo objects; token-based with 5000 tokens by default
    """
    if target_tokens is not None:
        return TokenBatcher(target_tokens=target_tokens).create_batches(doc)
    if batch_size is not None:
        return TokenBatcher().create_batches_fixed(doc, batch_size)
    return TokenBatcher(target_tokens=5000).create_batches(doc)
