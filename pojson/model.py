#!/usr/bin/env python3
"""
Document model for PO catalogs and its JSON representation.

Entry is the universal data structure for one translatable unit; Document
holds a whole catalog (header + ordered entries). Both are immutable: every
transformation in this package returns a new value via dataclasses.replace.

All string fields that come from quoted PO strings (msgid, msgstr, ...,
header_meta) are stored catalog-escaped. Comments and header_comment are raw
lines and are never transcoded.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Iterable, Optional

from . import escape
from .errors import JsonSyntaxError
from .header import split_header

FUZZY_FLAG = "fuzzy"


def _split_flags(line: str) -> list[str]:
    return [f.strip() for f in line.strip()[2:].split(',') if f.strip()]


def is_flag_comment(line: str) -> bool:
    return line.strip().startswith('#,')


def has_fuzzy_flag(line: str) -> bool:
    """True for a ``#,`` flag comment that lists ``fuzzy``."""
    return is_flag_comment(line) and FUZZY_FLAG in _split_flags(line)


def strip_fuzzy_flag(line: str) -> str:
    """
    Remove ``fuzzy`` from a ``#,`` flag comment.

    ``#, fuzzy`` becomes an empty string; ``#, fuzzy, c-format`` becomes
    ``#, c-format``. Non-flag lines are returned unchanged.
    """
    if not is_flag_comment(line):
        return line
    flags = [f for f in _split_flags(line) if f != FUZZY_FLAG]
    if not flags:
        return ""
    return "#, " + ", ".join(flags)


def merge_fuzzy_flag(line: str) -> str:
    """Prepend ``fuzzy`` to the tokens of a ``#,`` flag comment."""
    if not is_flag_comment(line):
        return line
    flags = [f for f in _split_flags(line) if f != FUZZY_FLAG]
    return "#, " + ", ".join([FUZZY_FLAG] + flags)


def normalize_comments(comments: Iterable[str]) -> tuple[tuple[str, ...], bool]:
    """
    Split fuzzy state out of raw comment lines.

    Returns:
        Tuple of (comments without any fuzzy token, whether fuzzy was found)
    """
    result = []
    fuzzy = False
    for comment in comments:
        if has_fuzzy_flag(comment):
            fuzzy = True
            comment = strip_fuzzy_flag(comment)
            if not comment:
                continue
        result.append(comment)
    return tuple(result), fuzzy


@dataclass(frozen=True)
class Entry:
    """
    One translatable unit of a catalog.

    Attributes:
        msgid: Source text (catalog-escaped)
        msgstr: Translated text (catalog-escaped); empty for plural entries
        msgid_plural: Plural source text, None for singular entries
        msgstr_plural: One translation per plural form, index 0 first
        msgid_previous: Prior source text of a retired entry (``#~|``)
        msgctxt: Disambiguating context, None when absent
        comments: Raw comment lines, never containing a fuzzy token
        fuzzy: Whether the translation is marked fuzzy
        obsolete: Whether the entry is retired (``#~``)
    """
    msgid: str
    msgstr: str = ""
    msgid_plural: Optional[str] = None
    msgstr_plural: tuple[str, ...] = ()
    msgid_previous: Optional[str] = None
    msgctxt: Optional[str] = None
    comments: tuple[str, ...] = ()
    fuzzy: bool = False
    obsolete: bool = False

    def __post_init__(self):
        """Store sequences as tuples so entries stay hashable and immutable."""
        object.__setattr__(self, 'msgstr_plural', tuple(self.msgstr_plural))
        object.__setattr__(self, 'comments', tuple(self.comments))

    @property
    def is_plural(self) -> bool:
        return self.msgid_plural is not None

    @property
    def key(self) -> tuple[Optional[str], str]:
        """Identity used for de-duplication: (msgctxt, msgid)."""
        return (self.msgctxt, self.msgid)

    @property
    def translations(self) -> tuple[str, ...]:
        """All msgstr values of the entry (one for singular entries)."""
        if self.msgstr_plural:
            return self.msgstr_plural
        return (self.msgstr,)

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready dict; empty optional fields are omitted."""
        data: dict[str, Any] = {}
        if self.msgctxt is not None:
            data['msgctxt'] = escape.to_json_value(self.msgctxt)
        data['msgid'] = escape.to_json_value(self.msgid)
        data['msgstr'] = escape.to_json_value(self.msgstr)
        if self.msgid_plural is not None:
            data['msgid_plural'] = escape.to_json_value(self.msgid_plural)
        if self.msgstr_plural:
            data['msgstr_plural'] = [escape.to_json_value(s) for s in self.msgstr_plural]
        if self.msgid_previous is not None:
            data['msgid_previous'] = escape.to_json_value(self.msgid_previous)
        if self.comments:
            data['comments'] = list(self.comments)
        data['fuzzy'] = self.fuzzy
        if self.obsolete:
            data['obsolete'] = True
        return data

    @classmethod
    def from_dict(cls, data: Any, index: int = 0) -> "Entry":
        """
        Build an entry from a decoded JSON object.

        Args:
            data: Decoded JSON value for one entry
            index: 1-based position, used in error messages

        Raises:
            JsonSyntaxError: If the value does not match the entry schema
        """
        if not isinstance(data, dict):
            raise _schema_error(f"entry {index} must be an object")

        msgid = _get_str(data, 'msgid', index, required=True)
        msgstr = _get_str(data, 'msgstr', index) or ""
        msgctxt = _get_str(data, 'msgctxt', index)
        msgid_plural = _get_str(data, 'msgid_plural', index)
        msgid_previous = _get_str(data, 'msgid_previous', index)
        msgstr_plural = _get_str_list(data, 'msgstr_plural', index)
        if msgstr_plural and msgid_plural is None:
            raise _schema_error(f"entry {index}: 'msgstr_plural' requires 'msgid_plural'")
        comments, fuzzy_in_comments = normalize_comments(
            _normalize_comment_line(c) for c in _comment_lines(data, index)
        )

        return cls(
            msgid=escape.from_json(msgid),
            msgstr=escape.from_json(msgstr),
            msgid_plural=escape.from_json(msgid_plural) if msgid_plural is not None else None,
            msgstr_plural=tuple(escape.from_json(s) for s in msgstr_plural),
            msgid_previous=escape.from_json(msgid_previous) if msgid_previous is not None else None,
            msgctxt=escape.from_json(msgctxt) if msgctxt is not None else None,
            comments=comments,
            fuzzy=_get_bool(data, 'fuzzy', index) or fuzzy_in_comments,
            obsolete=_get_bool(data, 'obsolete', index),
        )


@dataclass(frozen=True)
class Document:
    """
    One catalog: header plus ordered entries.

    Attributes:
        header_comment: Raw comment block above the header entry, newline-terminated
        header_meta: Header entry msgstr (catalog-escaped ``Key: Value\\n`` lines)
        entries: Ordered entries, header entry excluded
    """
    header_comment: str = ""
    header_meta: str = ""
    entries: tuple[Entry, ...] = field(default_factory=tuple)

    def __post_init__(self):
        object.__setattr__(self, 'entries', tuple(self.entries))

    def __len__(self) -> int:
        return len(self.entries)

    @property
    def has_header(self) -> bool:
        return bool(self.header_comment or self.header_meta)

    def with_entries(self, entries: Iterable[Entry]) -> "Document":
        """Same header, different entries."""
        return replace(self, entries=tuple(entries))

    def to_dict(self) -> dict[str, Any]:
        return {
            'header_comment': self.header_comment,
            'header_meta': escape.to_json_value(self.header_meta),
            'entries': [e.to_dict() for e in self.entries],
        }

    @classmethod
    def from_dict(cls, data: Any) -> "Document":
        """
        Build a document from a decoded JSON object.

        Missing header fields default to empty strings and a missing
        ``entries`` key to an empty list.

        Raises:
            JsonSyntaxError: If the value does not match the document schema
        """
        if not isinstance(data, dict):
            raise _schema_error(f"document root must be an object, got {type(data).__name__}")

        header_comment = data.get('header_comment') or ""
        header_meta = data.get('header_meta') or ""
        if not isinstance(header_comment, str):
            raise _schema_error("header_comment must be a string")
        if not isinstance(header_meta, str):
            raise _schema_error("header_meta must be a string")

        raw_entries = data.get('entries')
        if raw_entries is None:
            raw_entries = []
        if not isinstance(raw_entries, list):
            raise _schema_error("entries must be an array")

        if header_comment:
            header_comment = "".join(
                (_normalize_comment_line(line) if line.strip() else "") + "\n"
                for line in header_comment.rstrip('\r\n').split('\n')
            )

        return cls(
            header_comment=header_comment,
            header_meta=escape.from_json(header_meta),
            entries=tuple(Entry.from_dict(e, i) for i, e in enumerate(raw_entries, 1)),
        )


def build_document(header_lines: list[str], entries: Iterable[Entry]) -> Document:
    """
    Assemble a Document from parser output.

    Args:
        header_lines: Leading line block captured by the parser
        entries: Parsed entries (header entry excluded)

    Returns:
        New Document
    """
    header_comment, header_meta = split_header(header_lines)
    return Document(
        header_comment=header_comment,
        header_meta=header_meta,
        entries=tuple(entries),
    )


# ── schema helpers ─────────────────────────────────────────────────────────────

def _schema_error(message: str) -> JsonSyntaxError:
    return JsonSyntaxError(
        f"JSON does not match the catalog schema: {message}",
        stage="schema",
        diagnostic=message,
    )


def _get_str(data: dict, key: str, index: int, required: bool = False) -> Optional[str]:
    if key not in data or data[key] is None:
        if required:
            raise _schema_error(f"entry {index} is missing '{key}'")
        return None
    value = data[key]
    if not isinstance(value, str):
        raise _schema_error(f"entry {index}: '{key}' must be a string")
    return value


def _get_str_list(data: dict, key: str, index: int) -> list[str]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise _schema_error(f"entry {index}: '{key}' must be an array of strings")
    return value


def _get_bool(data: dict, key: str, index: int) -> bool:
    value = data.get(key, False)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise _schema_error(f"entry {index}: '{key}' must be a boolean")
    return value


def _comment_lines(data: dict, index: int) -> list[str]:
    lines = []
    for comment in _get_str_list(data, 'comments', index):
        # "#, c-format\n" style values carry their own line terminator
        lines.extend(comment.rstrip('\r\n').split('\n'))
    return lines


def _normalize_comment_line(line: str) -> str:
    line = line.rstrip('\r')
    if line.lstrip().startswith('#'):
        return line
    return f"# {line}" if line else "#"
