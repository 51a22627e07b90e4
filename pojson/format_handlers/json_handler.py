#!/usr/bin/env python3
"""
JSON format handler for the agent-facing catalog document.

The JSON document is what a language model reads and edits:

```json
{
  "header_comment": "# Translation template.\\n",
  "header_meta": "Project-Id-Version: demo\\nContent-Type: text/plain; charset=UTF-8\\n",
  "entries": [
    {"msgid": "Hello", "msgstr": "Bonjour", "comments": ["#: main.c:12"], "fuzzy": false}
  ]
}
```

String values carry the characters the catalog escapes denote, so a real
newline in JSON is ``\\n`` in the catalog. Input goes through JSON repair
before the schema is checked.
"""

import json
import logging
from typing import Optional, Union

from ..model import Document
from ..repair import parse_json_document
from .base import FormatHandler

logger = logging.getLogger(__name__)


class JsonHandler(FormatHandler):
    """Handler for the JSON catalog document."""

    def __init__(self, indent: Optional[int] = 2):
        """
        Initialize handler.

        Args:
            indent: Indentation for output (default: 2); None writes compact
                single-line JSON
        """
        self.indent = indent

    @property
    def name(self) -> str:
        return "json"

    @property
    def file_extensions(self) -> list[str]:
        return ["json"]

    def parse(self, content: Union[str, bytes]) -> Document:
        """
        Parse JSON content into a Document.

        Args:
            content: Raw JSON content, possibly wrapped in prose or code fences

        Returns:
            Document

        Raises:
            JsonSyntaxError: If the content cannot be repaired into a JSON
                object, or the object does not match the schema (stage "schema")
        """
        data = parse_json_document(content)
        doc = Document.from_dict(data)
        logger.debug("Decoded JSON document with %d entries", len(doc.entries))
        return doc

    def serialize(self, doc: Document) -> str:
        """
        Render a Document as JSON text.

        Args:
            doc: Document to render

        Returns:
            JSON text, newline-terminated when indented
        """
        text = json.dumps(doc.to_dict(), ensure_ascii=False, indent=self.indent)
        if self.indent is not None:
            text += "\n"
        return text
