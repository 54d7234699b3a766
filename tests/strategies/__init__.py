"""Hypothesis strategies for loctable property-based testing.

Usage:
    from tests.strategies import translation_sets, source_files
"""

from .translations import (
    DEFAULT_LANGUAGE,
    OTHER_LANGUAGES,
    names,
    source_files,
    source_path,
    texts,
    translation_sets,
)

__all__ = [
    "DEFAULT_LANGUAGE",
    "OTHER_LANGUAGES",
    "names",
    "source_files",
    "source_path",
    "texts",
    "translation_sets",
]
