#!/usr/bin/env python3
"""
GNU gettext PO/POT format handler.

Parses catalog text into a Document and serializes a Document back into
catalog text. For every document the parser produces, serialization is its
exact structural inverse: comments, fuzzy flags, obsolete entries, previous
values, plural forms and header metadata all survive a round trip.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Optional, Union

from ..errors import CatalogSyntaxError, HeaderError
from ..escape import canonicalize, po_escape, po_unescape
from ..header import nplurals
from ..model import (
    Document,
    Entry,
    build_document,
    has_fuzzy_flag,
    is_flag_comment,
    merge_fuzzy_flag,
    strip_fuzzy_flag,
)
from .base import FormatHandler

logger = logging.getLogger(__name__)

_QUOTED_RE = re.compile(r'^"((?:[^"\\]|\\.)*)"$')
_KEYWORD_RE = re.compile(r'^(msgctxt|msgid_plural|msgid|msgstr)(?:\[(\d+)\])?(?=[\s"]|$)\s*(.*)$')

OBSOLETE_PREFIX = "#~ "
PREVIOUS_PREFIX = "#~| "


@dataclass
class _PendingEntry:
    """Mutable accumulator for the entry currently being parsed."""
    start_line: int = 0
    lines: list[str] = field(default_factory=list)
    comments: list[str] = field(default_factory=list)
    fuzzy: bool = False
    obsolete: bool = False
    msgctxt: Optional[list[str]] = None
    msgid: Optional[list[str]] = None
    msgid_plural: Optional[list[str]] = None
    msgstr: Optional[list[str]] = None
    msgstr_plural: list[list[str]] = field(default_factory=list)
    msgid_previous: Optional[list[str]] = None
    current: Optional[list[str]] = None  # value receiving continuation lines

    @property
    def has_keyword(self) -> bool:
        return self.msgctxt is not None or self.msgid is not None

    @property
    def has_msgstr(self) -> bool:
        return self.msgstr is not None or bool(self.msgstr_plural)

    @property
    def is_empty(self) -> bool:
        return not self.lines


class PoHandler(FormatHandler):
    """
    Handler for GNU gettext PO/POT files.

    PO format structure:
    ```
    # Translator comment
    #. Extracted comment
    #: file.c:42
    #, fuzzy, c-format
    #| msgid "Old source text"
    msgctxt "context"
    msgid "Source text"
    msgstr "Translated text"

    # Plural form
    msgid "One file"
    msgid_plural "%d files"
    msgstr[0] "Un fichier"
    msgstr[1] "%d fichiers"

    # Obsolete entry
    #~| msgid "Older text"
    #~ msgid "Old text"
    #~ msgstr "Ancien texte"
    ```
    """

    def __init__(self, include_header: bool = True):
        """
        Initialize handler.

        Args:
            include_header: Emit the header block when serializing. Batch
                files written for an agent leave it out.
        """
        self.include_header = include_header

    @property
    def name(self) -> str:
        return "po"

    @property
    def file_extensions(self) -> list[str]:
        return ["po", "pot"]

    # ── parsing ───────────────────────────────────────────────────────────────

    def parse(self, content: Union[str, bytes]) -> Document:
        """
        Parse PO content into a Document.

        Args:
            content: Raw PO file content

        Returns:
            Document with header fields and ordered entries

        Raises:
            CatalogSyntaxError: On any unparsable construct
            HeaderError: If the header entry body is malformed
        """
        entries, header_lines = self.parse_entries(content)
        doc = build_document(header_lines, entries)
        logger.debug(
            "Parsed %d entries (header comment: %d chars, header meta: %d chars)",
            len(doc.entries), len(doc.header_comment), len(doc.header_meta),
        )
        return doc

    def parse_entries(self, content: Union[str, bytes]) -> tuple[list[Entry], list[str]]:
        """
        Parse PO content into entries plus the leading header line block.

        Args:
            content: Raw PO file content

        Returns:
            Tuple of (entries excluding the header entry, header lines)
        """
        text = self._decode(content).lstrip('\ufeff')
        entries: list[Entry] = []
        header_lines: list[str] = []
        header_seen = False
        pending = _PendingEntry()

        def before_first_entry() -> bool:
            return not entries and not header_seen

        def finish(p: _PendingEntry) -> None:
            nonlocal header_seen
            if not p.has_keyword:
                return
            if (before_first_entry() and p.msgctxt is None and not p.obsolete
                    and p.msgid is not None and not "".join(p.msgid)):
                header_lines.extend(p.lines)
                header_seen = True
                return
            entries.append(self._build_entry(p))

        for line_num, line in enumerate(text.split('\n'), 1):
            stripped = line.strip()

            if not stripped:
                if pending.has_keyword:
                    finish(pending)
                    pending = _PendingEntry()
                elif before_first_entry():
                    header_lines.extend(pending.lines)
                    header_lines.append(line)
                    pending = _PendingEntry()
                pending.current = None
                continue

            if stripped.startswith('#~|'):
                rest = stripped[3:].strip()
                match = _KEYWORD_RE.match(rest)
                if match and match.group(1) == 'msgid' and match.group(2) is None:
                    pending = self._start_comment(pending, finish, line_num, line)
                    if pending.msgid_previous is not None:
                        raise CatalogSyntaxError("duplicate previous msgid", line_num, line)
                    pending.msgid_previous = [self._quoted(match.group(3), line_num, line)]
                    pending.current = pending.msgid_previous
                    pending.lines.append(line)
                    continue
                if rest.startswith('"') and pending.current is not None \
                        and pending.current is pending.msgid_previous:
                    pending.current.append(self._quoted(rest, line_num, line))
                    pending.lines.append(line)
                    continue
                pending = self._start_comment(pending, finish, line_num, line)
                pending.comments.append(stripped)
                pending.lines.append(line)
                continue

            obsolete = False
            if stripped.startswith('#~'):
                rest = stripped[2:].strip()
                if rest.startswith('"') or _KEYWORD_RE.match(rest):
                    obsolete = True
                    stripped = rest

            if stripped.startswith('#') and not obsolete:
                pending = self._start_comment(pending, finish, line_num, line)
                pending.lines.append(line)
                if has_fuzzy_flag(stripped):
                    pending.fuzzy = True
                    stripped = strip_fuzzy_flag(stripped)
                    if not stripped:
                        continue
                pending.comments.append(stripped)
                continue

            if stripped.startswith('"'):
                if pending.current is None:
                    raise CatalogSyntaxError("continuation line without keyword", line_num, line)
                pending.current.append(self._quoted(stripped, line_num, line))
                pending.lines.append(line)
                pending.obsolete = pending.obsolete or obsolete
                continue

            match = _KEYWORD_RE.match(stripped)
            if not match:
                raise CatalogSyntaxError("unknown keyword", line_num, line)
            keyword, index, rest = match.group(1), match.group(2), match.group(3)
            if index is not None and keyword != 'msgstr':
                raise CatalogSyntaxError("unknown keyword", line_num, line)
            value = [self._quoted(rest, line_num, line)]

            if keyword in ('msgctxt', 'msgid') and pending.has_msgstr:
                finish(pending)
                pending = _PendingEntry()

            if not pending.has_keyword and not pending.start_line:
                pending.start_line = line_num

            if keyword == 'msgctxt':
                if pending.has_keyword:
                    raise CatalogSyntaxError("unexpected msgctxt", line_num, line)
                pending.msgctxt = value
            elif keyword == 'msgid':
                if pending.msgid is not None:
                    raise CatalogSyntaxError("entry without msgstr before msgid", line_num, line)
                pending.msgid = value
            elif keyword == 'msgid_plural':
                if pending.msgid is None or pending.msgid_plural is not None or pending.has_msgstr:
                    raise CatalogSyntaxError("unexpected msgid_plural", line_num, line)
                pending.msgid_plural = value
            elif index is None:
                if pending.msgid is None:
                    raise CatalogSyntaxError("msgstr without msgid", line_num, line)
                if pending.msgid_plural is not None:
                    raise CatalogSyntaxError("plural entry requires msgstr[N]", line_num, line)
                if pending.msgstr is not None:
                    raise CatalogSyntaxError("duplicate msgstr", line_num, line)
                pending.msgstr = value
            else:
                if pending.msgid_plural is None:
                    raise CatalogSyntaxError("msgstr[N] without msgid_plural", line_num, line)
                if int(index) != len(pending.msgstr_plural):
                    raise CatalogSyntaxError(
                        f"msgstr[{index}] out of order, expected msgstr[{len(pending.msgstr_plural)}]",
                        line_num, line,
                    )
                pending.msgstr_plural.append(value)

            pending.current = value
            pending.obsolete = pending.obsolete or obsolete
            pending.lines.append(line)

        if pending.has_keyword:
            finish(pending)
        elif not pending.is_empty:
            if not before_first_entry():
                raise CatalogSyntaxError(
                    "comments without entry at end of file", pending.start_line,
                    pending.lines[0].strip(),
                )
            header_lines.extend(pending.lines)

        while header_lines and not header_lines[-1].strip():
            header_lines.pop()

        return entries, header_lines

    def _start_comment(self, pending: _PendingEntry, finish, line_num: int, line: str) -> _PendingEntry:
        """Return the accumulator a comment line belongs to."""
        if pending.has_msgstr:
            finish(pending)
            pending = _PendingEntry()
        elif pending.has_keyword:
            raise CatalogSyntaxError("comment inside entry", line_num, line)
        if pending.is_empty:
            pending.start_line = line_num
        pending.current = None
        return pending

    def _quoted(self, text: str, line_num: int, line: str) -> str:
        """Content of a quoted string, canonically escaped."""
        match = _QUOTED_RE.match(text.strip())
        if not match:
            raise CatalogSyntaxError("unquoted or unterminated string", line_num, line)
        try:
            return canonicalize(match.group(1))
        except ValueError as e:
            raise CatalogSyntaxError(f"invalid escape sequence ({e})", line_num, line) from e

    def _build_entry(self, p: _PendingEntry) -> Entry:
        line = p.lines[0].strip() if p.lines else ""
        if p.msgid is None:
            raise CatalogSyntaxError("entry without msgid", p.start_line, line)
        if not p.has_msgstr:
            raise CatalogSyntaxError("entry without msgstr", p.start_line, line)
        return Entry(
            msgid="".join(p.msgid),
            msgstr="".join(p.msgstr) if p.msgstr is not None else "",
            msgid_plural="".join(p.msgid_plural) if p.msgid_plural is not None else None,
            msgstr_plural=tuple("".join(parts) for parts in p.msgstr_plural),
            msgid_previous="".join(p.msgid_previous) if p.msgid_previous is not None else None,
            msgctxt="".join(p.msgctxt) if p.msgctxt is not None else None,
            comments=tuple(p.comments),
            fuzzy=p.fuzzy,
            obsolete=p.obsolete,
        )

    # ── serialization ─────────────────────────────────────────────────────────

    def serialize(self, doc: Document) -> str:
        """
        Render a Document as PO text.

        Args:
            doc: Document to render

        Returns:
            Complete PO file content, newline-terminated
        """
        blocks = []
        if self.include_header and (doc.has_header or doc.entries):
            blocks.append(self._format_header(doc))
        plural_forms = 1
        if any(e.is_plural and not e.msgstr_plural for e in doc.entries):
            plural_forms = self._plural_forms(doc)
        for entry in doc.entries:
            blocks.append(self.format_entry(entry, plural_forms))

        logger.debug("Serialized %d entries", len(doc.entries))
        if not blocks:
            return ""
        return "\n\n".join("\n".join(block) for block in blocks) + "\n"

    def _plural_forms(self, doc: Document) -> int:
        """Plural count declared by the header, 1 when absent or unreadable."""
        try:
            count = nplurals(doc.header_meta)
        except HeaderError as e:
            logger.warning("Cannot read Plural-Forms from header (%s), writing one msgstr[N] form", e)
            return 1
        return count if count else 1

    def _format_header(self, doc: Document) -> list[str]:
        lines = []
        if doc.header_comment:
            lines.extend(doc.header_comment.rstrip('\n').split('\n'))
        lines.append('msgid ""')
        lines.append('msgstr ""')
        lines.extend(self._segments(doc.header_meta, ""))
        return lines

    def format_entry(self, entry: Entry, plural_forms: int = 1) -> list[str]:
        """
        Format a single entry as PO lines.

        Args:
            entry: Entry to format
            plural_forms: Number of empty msgstr[N] lines written for a
                plural entry without translations

        Returns:
            List of lines without trailing newlines
        """
        lines = self._format_comments(entry)
        prefix = OBSOLETE_PREFIX if entry.obsolete else ""

        if entry.msgid_previous is not None:
            lines.extend(self._format_string(PREVIOUS_PREFIX, 'msgid', entry.msgid_previous))
        if entry.msgctxt is not None:
            lines.extend(self._format_string(prefix, 'msgctxt', entry.msgctxt))
        lines.extend(self._format_string(prefix, 'msgid', entry.msgid))

        if entry.is_plural:
            lines.extend(self._format_string(prefix, 'msgid_plural', entry.msgid_plural))
            for idx, value in enumerate(entry.msgstr_plural or ("",) * plural_forms):
                lines.extend(self._format_string(prefix, f'msgstr[{idx}]', value))
        else:
            lines.extend(self._format_string(prefix, 'msgstr', entry.msgstr))
        return lines

    def _format_comments(self, entry: Entry) -> list[str]:
        lines = list(entry.comments)
        if not entry.fuzzy:
            return lines

        for i, comment in enumerate(lines):
            if is_flag_comment(comment):
                lines[i] = merge_fuzzy_flag(comment)
                return lines

        for i, comment in enumerate(lines):
            if comment.startswith('#|') or comment.startswith('#~|'):
                lines.insert(i, "#, fuzzy")
                return lines

        lines.append("#, fuzzy")
        return lines

    def _format_string(self, prefix: str, keyword: str, value: str) -> list[str]:
        """
        Format a keyword and its value, splitting after each newline.

        ``msgid "a\\nb"`` is written as::

            msgid ""
            "a\\n"
            "b"
        """
        if '\n' not in po_unescape(value):
            return [f'{prefix}{keyword} "{value}"']
        return [f'{prefix}{keyword} ""'] + self._segments(value, prefix)

    def _segments(self, value: str, prefix: str) -> list[str]:
        """Quoted continuation lines for a value, one per newline-terminated segment."""
        parts = po_unescape(value).split('\n')
        lines = [f'{prefix}"{po_escape(part)}\\n"' for part in parts[:-1]]
        if parts[-1]:
            lines.append(f'{prefix}"{po_escape(parts[-1])}"')
        return lines
