#!/usr/bin/env python3
"""
Error types raised by the catalog/JSON core.

All errors subclass ValueError so callers that already guard parsing with
``except ValueError`` keep working. Each error can render itself as a dict
for agent-friendly reporting.
"""

from typing import Any, Optional


class PoJsonError(ValueError):
    """Base class for all pojson errors."""

    error_type = "ERROR"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def context(self) -> dict[str, Any]:
        """Extra fields describing where the error happened."""
        return {}

    def to_dict(self) -> dict[str, Any]:
        data = {"type": self.error_type, "message": self.message}
        data.update(self.context())
        return data


class CatalogSyntaxError(PoJsonError):
    """Unparsable PO construct."""

    error_type = "CATALOG_SYNTAX"

    def __init__(self, message: str, line_num: int = 0, line: str = ""):
        self.line_num = line_num
        self.line = line
        if line_num:
            message = f"line {line_num}: {message}: {line!r}"
        super().__init__(message)

    def context(self) -> dict[str, Any]:
        return {"line": self.line_num, "content": self.line}


class HeaderError(PoJsonError):
    """Malformed header entry body or header metadata line."""

    error_type = "HEADER"

    def __init__(self, message: str, line: str = ""):
        self.line = line
        if line:
            message = f"{message}: {line!r}"
        super().__init__(message)

    def context(self) -> dict[str, Any]:
        return {"content": self.line}


class JsonSyntaxError(PoJsonError):
    """
    JSON that could not be parsed, even after repair attempts.

    Attributes:
        snippet: Leading part of the offending content
        offset: Character offset reported by the decoder, if any
        stage: Last repair stage attempted
        diagnostic: Underlying decoder message
    """

    error_type = "JSON_SYNTAX"

    def __init__(
        self,
        message: str,
        snippet: str = "",
        offset: Optional[int] = None,
        stage: str = "",
        diagnostic: str = "",
    ):
        self.snippet = snippet
        self.offset = offset
        self.stage = stage
        self.diagnostic = diagnostic
        super().__init__(message)

    def context(self) -> dict[str, Any]:
        return {
            "offset": self.offset,
            "stage": self.stage,
            "diagnostic": self.diagnostic,
            "snippet": self.snippet,
        }


class RangeSpecError(PoJsonError):
    """Malformed or out-of-bounds range token."""

    error_type = "RANGE_SPEC"

    def __init__(self, message: str, token: str = "", lower: int = 1, upper: int = 0):
        self.token = token
        self.lower = lower
        self.upper = upper
        super().__init__(f"{message} (valid range: {lower}-{upper})")

    def context(self) -> dict[str, Any]:
        return {"token": self.token, "lower": self.lower, "upper": self.upper}
