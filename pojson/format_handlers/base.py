#!/usr/bin/env python3
"""
Base classes for format handlers.

FormatHandler is the abstract base class that both catalog representations
implement: the gettext PO text format and the JSON document consumed by
language models. Every handler converts between its text form and the
shared Document model.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Optional, Union

from ..model import Document


class FormatHandler(ABC):
    """
    Abstract base class for format-specific handlers.

    A handler holds only configuration (constructor keyword arguments), so
    one instance can be reused for any number of documents.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Format name used for registry lookup."""
        pass

    @property
    @abstractmethod
    def file_extensions(self) -> list[str]:
        """List of file extensions this handler supports (without dot)."""
        pass

    @abstractmethod
    def parse(self, content: Union[str, bytes]) -> Document:
        """
        Parse format-specific content into a Document.

        Args:
            content: Raw file content; bytes are decoded as UTF-8

        Returns:
            Parsed Document
        """
        pass

    @abstractmethod
    def serialize(self, doc: Document) -> str:
        """
        Render a Document in this handler's format.

        Args:
            doc: Document to render

        Returns:
            File content as string
        """
        pass

    def encode(self, doc: Document) -> bytes:
        """Serialized document as UTF-8 bytes."""
        return self.serialize(doc).encode('utf-8')

    def validate_content(self, content: Union[str, bytes]) -> list[str]:
        """
        Validate that content is properly formatted for this handler.

        Args:
            content: Raw file content

        Returns:
            List of validation error messages (empty if valid)
        """
        try:
            self.parse(content)
        except ValueError as e:
            return [str(e)]
        return []

    @staticmethod
    def _decode(content: Union[str, bytes]) -> str:
        if isinstance(content, bytes):
            return content.decode('utf-8')
        return content


class FormatRegistry:
    """Registry of available format handlers."""

    _handlers: dict[str, type[FormatHandler]] = {}
    _extension_map: dict[str, str] = {}  # extension -> handler name

    @classmethod
    def register(cls, handler_class: type[FormatHandler]) -> None:
        """Register a format handler class."""
        handler = handler_class()
        cls._handlers[handler.name.lower()] = handler_class
        for ext in handler.file_extensions:
            cls._extension_map[ext.lower()] = handler.name.lower()

    @classmethod
    def get_handler(cls, name: str, **options) -> FormatHandler:
        """Get handler instance by name, passing options to its constructor."""
        name_lower = name.lower()
        if name_lower not in cls._handlers:
            available = ', '.join(cls._handlers.keys())
            raise ValueError(f"Unknown format: {name}. Available: {available}")
        return cls._handlers[name_lower](**options)

    @classmethod
    def get_handler_for_extension(cls, extension: str) -> FormatHandler:
        """Get handler instance by file extension."""
        ext = extension.lower().lstrip('.')
        if ext not in cls._extension_map:
            available = ', '.join(cls._extension_map.keys())
            raise ValueError(f"Unknown extension: .{ext}. Supported: {available}")
        return cls.get_handler(cls._extension_map[ext])

    @classmethod
    def detect_format(
        cls,
        filepath: Optional[str] = None,
        content: Union[str, bytes, None] = None,
    ) -> FormatHandler:
        """
        Auto-detect format from content and/or file path.

        Content wins over the extension: a document whose first non-blank
        character (after an optional BOM) is ``{`` is JSON, which covers
        agent output saved under a ``.po`` name.

        Args:
            filepath: Optional path to the file
            content: Optional file content for content-based detection

        Returns:
            Appropriate FormatHandler instance
        """
        if content is not None:
            text = FormatHandler._decode(content).lstrip('\ufeff').lstrip()
            if text.startswith('{'):
                return cls.get_handler('json')
            if filepath is None:
                return cls.get_handler('po')

        if filepath is None:
            raise ValueError("Cannot detect format without a file path or content")

        ext = Path(filepath).suffix.lower().lstrip('.')
        return cls.get_handler_for_extension(ext)

    @classmethod
    def list_formats(cls) -> list[dict[str, Any]]:
        """List all registered formats with their extensions."""
        result = []
        for handler_class in cls._handlers.values():
            handler = handler_class()
            result.append({
                'name': handler.name,
                'extensions': handler.file_extensions,
            })
        return result
