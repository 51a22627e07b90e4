"""
pojson - lossless conversion between gettext PO catalogs and JSON documents

Converts PO catalogs into a JSON document a language model can edit and
back, without losing escapes, comments, plural forms, fuzzy or obsolete
markers, or header metadata. Also provides the operations a batching
workflow needs: range selection, write-back, merging, state filtering,
statistics, comparison and token-budget batch planning.

Quick start:
    doc = pojson.load_document(po_text)
    batch = pojson.select_entries(doc, "1-50")
    payload = pojson.dump_document(batch, "json")
    # ... agent edits payload ...
    doc = pojson.apply_range(doc, "1-50", pojson.load_document(agent_output))
    po_text = pojson.dump_document(doc, "po")
"""

__version__ = "1.0.0"

from typing import Optional, Union

from .batcher import BatchInfo, TokenBatcher, plan_batches
from .compare import DiffStat, compare_documents, entries_equal
from .errors import (
    CatalogSyntaxError,
    HeaderError,
    JsonSyntaxError,
    PoJsonError,
    RangeSpecError,
)
from .filters import EntryFilter, clear_fuzzy, filter_entries, unset_fuzzy
from .format_handlers import FormatHandler, FormatRegistry, JsonHandler, PoHandler
from .merge import merge_documents
from .model import Document, Entry, build_document
from .repair import parse_json_document
from .select import apply_range, parse_range, select_entries
from .stats import CatalogStats, count_stats, format_msgfmt_statistics


def load_document(content: Union[str, bytes], path: Optional[str] = None) -> Document:
    """
    Parse PO or JSON content, detecting the format.

    Args:
        content: File content
        path: Optional file name, consulted when the content is not JSON

    Returns:
        Parsed Document
    """
    handler = FormatRegistry.detect_format(path, content)
    return handler.parse(content)


def dump_document(doc: Document, fmt: str = "po", **options) -> str:
    """
    Serialize a Document.

    Args:
        doc: Document to write
        fmt: "po" or "json"
        **options: Handler options (include_header for PO, indent for JSON)

    Returns:
        Serialized text
    """
    return FormatRegistry.get_handler(fmt, **options).serialize(doc)


__all__ = [
    "BatchInfo",
    "CatalogStats",
    "CatalogSyntaxError",
    "DiffStat",
    "Document",
    "Entry",
    "EntryFilter",
    "FormatHandler",
    "FormatRegistry",
    "HeaderError",
    "JsonHandler",
    "JsonSyntaxError",
    "PoHandler",
    "PoJsonError",
    "RangeSpecError",
    "TokenBatcher",
    "apply_range",
    "build_document",
    "clear_fuzzy",
    "compare_documents",
    "count_stats",
    "dump_document",
    "entries_equal",
    "filter_entries",
    "format_msgfmt_statistics",
    "load_document",
    "merge_documents",
    "parse_json_document",
    "parse_range",
    "plan_batches",
    "select_entries",
    "unset_fuzzy",
]
