"""Language tag utilities.

Centralizes language tag normalization used throughout the codebase.
Tags are identified case-insensitively: "en-US", "EN_us" and "en_us"
name the same locale. Tags need not be BCP-47 codes; directory names such
as "english" are accepted and simply have no Babel display name.

Python 3.13+.
"""

from __future__ import annotations

import functools
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from babel import Locale

__all__ = [
    "describe_language",
    "get_babel_locale",
    "normalize_language_tag",
    "same_language",
]


def normalize_language_tag(tag: str) -> str:
    """Return the identity key of a language tag.

    Casefolds the tag and converts BCP-47 hyphens to POSIX underscores so
    that lookups and dictionary keys are consistent across the pipeline.
    Normalize at the system boundary, then use the normalized form.

    Args:
        tag: Language tag (e.g., "en-US", "pl", "English")

    Returns:
        Normalized tag (e.g., "en_us", "pl", "english")

    Example:
        >>> normalize_language_tag("en-US")
        'en_us'
        >>> normalize_language_tag(" Polish ")
        'polish'
    """
    return tag.strip().casefold().replace("-", "_")


def same_language(left: str, right: str) -> bool:
    """Check whether two tags name the same language (case-insensitive)."""
    return normalize_language_tag(left) == normalize_language_tag(right)


@functools.lru_cache(maxsize=128)
def get_babel_locale(tag: str) -> Locale | None:
    """Get a Babel Locale object for a tag, with caching.

    Args:
        tag: Language tag (BCP-47 or POSIX format accepted)

    Returns:
        Babel Locale object, or None when Babel does not recognize the tag

    Example:
        >>> get_babel_locale("pt-BR").territory
        'BR'
        >>> get_babel_locale("english") is None
        True
    """
    # Lazy import: Babel loads CLDR data at import time; defer until needed
    from babel import Locale, UnknownLocaleError  # noqa: PLC0415

    try:
        return Locale.parse(tag.strip().replace("-", "_"))
    except (UnknownLocaleError, ValueError, TypeError):
        return None


def describe_language(tag: str, *, display_locale: str = "en") -> str:
    """Return a human-readable language name for documentation output.

    Args:
        tag: Language tag
        display_locale: Language in which to render the name

    Returns:
        Display name (e.g., "Polish", "German (Austria)"), or the tag itself
        when Babel does not know it.
    """
    locale = get_babel_locale(tag)
    if locale is None:
        return tag
    name = locale.get_display_name(display_locale)
    return name or tag
