"""Entry sources: reading translation files into raw entries.

Submodules:
    base        - EntrySource protocol, SourceFile / SourceEntry records
    json_source - JSON translation files
    discovery   - Directory walking and load tracking

Python 3.13+.
"""

from .base import EntrySource, SourceEntry, SourceFile, resolve_metadata
from .discovery import (
    LoadSummary,
    SourceLoadResult,
    default_sources,
    discover_sources,
    load_source,
)
from .json_source import JsonEntrySource, is_templated_text

__all__ = [
    "EntrySource",
    "JsonEntrySource",
    "LoadSummary",
    "SourceEntry",
    "SourceFile",
    "SourceLoadResult",
    "default_sources",
    "discover_sources",
    "is_templated_text",
    "load_source",
    "resolve_metadata",
]
