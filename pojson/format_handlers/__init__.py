#!/usr/bin/env python3
"""
Format handlers for catalog representations.

Supported formats:
- PO: GNU gettext .po/.pot catalog text
- JSON: the agent-facing catalog document
"""

from .base import FormatHandler, FormatRegistry
from .json_handler import JsonHandler
from .po import PoHandler

# Register handlers (order matters for extension conflicts)
FormatRegistry.register(PoHandler)
FormatRegistry.register(JsonHandler)

__all__ = [
    'FormatHandler',
    'FormatRegistry',
    'JsonHandler',
    'PoHandler',
]
