"""Shared constants for loctable.

Placing constants here avoids circular imports and provides a single
source of truth for defaults used by configuration, sources, and emitter.

Python 3.13+. Zero external dependencies.
"""

# ruff: noqa: RUF022 - __all__ organized by category for readability
__all__ = [
    # Configuration defaults
    "DEFAULT_TRANSLATIONS_DIR",
    "DEFAULT_LANGUAGE",
    "DEFAULT_ID_CATALOG_NAME",
    "CONFIG_SECTION",
    # Identifier space
    "FIRST_TEXT_ID",
    # Source files
    "SUPPORTED_EXTENSIONS",
    "SOURCE_ENCODING",
    # Generated code
    "GENERATED_HEADER",
    "DEFAULT_CURRENT_ACCESSOR",
    "DEFAULT_DEFAULT_ACCESSOR",
]

# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================

DEFAULT_TRANSLATIONS_DIR: str = "Translations"
"""Directory scanned for translation files, one subdirectory per language."""

DEFAULT_LANGUAGE: str = "english"
"""Default-language tag when none is configured."""

DEFAULT_ID_CATALOG_NAME: str = "R"
"""Class name of the generated symbolic ID catalog."""

CONFIG_SECTION: str = "loctable"
"""Section name under [tool] in pyproject.toml."""

# ============================================================================
# IDENTIFIER SPACE
# ============================================================================

FIRST_TEXT_ID: int = 1
"""First canonical ID. IDs are assigned from one counter shared by all modules."""

# ============================================================================
# SOURCE FILES
# ============================================================================

SUPPORTED_EXTENSIONS: frozenset[str] = frozenset({".json", ".yml", ".yaml", ".xml"})
"""Extensions picked up by discovery. Files without a parser are reported as unsupported."""

SOURCE_ENCODING: str = "utf-8"

# ============================================================================
# GENERATED CODE
# ============================================================================

GENERATED_HEADER: str = "# Generated by loctable. Do not edit by hand.\n"

DEFAULT_CURRENT_ACCESSOR: str = "provider"
"""Owner attribute returning the provider of the active language."""

DEFAULT_DEFAULT_ACCESSOR: str = "default_provider"
"""Owner attribute returning the provider of the default language."""
