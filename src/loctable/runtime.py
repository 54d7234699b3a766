"""In-process lookup over a compiled table.

LookupTable gives the same answers the generated facade gives, without
generating code: a text is read from the requested language, falls back
to the default language when the translation is missing, and is always
read from the default language when the default entry is untranslatable.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from loctable.locale_utils import normalize_language_tag
from loctable.model import IndexedLocaleData, IndexedTable, TextId

__all__ = ["FallbackInfo", "LookupTable"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FallbackInfo:
    """Information about a default-language fallback.

    Provided to the on_fallback callback when a text is resolved from the
    default language instead of the requested one.

    Attributes:
        requested_language: Language the caller asked for
        resolved_language: Language that supplied the text (the default)
        text_id: Canonical ID of the text
        untranslatable: True when the fallback was forced by the
            untranslatable flag rather than a missing translation

    Example:
        >>> def log_fallback(info: FallbackInfo) -> None:
        ...     print(f"{info.text_id}: {info.requested_language} -> {info.resolved_language}")
        >>> lookup = LookupTable(table, on_fallback=log_fallback)
    """

    requested_language: str
    resolved_language: str
    text_id: TextId
    untranslatable: bool = False


class LookupTable:
    """Resolve texts by canonical ID with fallback to the default language.

    The table is immutable, so a LookupTable may be shared between threads.

    Example:
        >>> lookup = LookupTable(result.table)
        >>> lookup.text("pl", 1)
        'Cześć'
        >>> lookup.text_for("pl", "Main", "Brand")  # untranslatable
        'Acme'
    """

    __slots__ = ("_on_fallback", "_table")

    def __init__(
        self,
        table: IndexedTable,
        *,
        on_fallback: Callable[[FallbackInfo], None] | None = None,
    ) -> None:
        self._table = table
        self._on_fallback = on_fallback

    def __repr__(self) -> str:
        return f"LookupTable(languages={self.languages!r}, texts={len(self._table.key_space)})"

    @property
    def table(self) -> IndexedTable:
        """The underlying indexed table."""
        return self._table

    @property
    def languages(self) -> tuple[str, ...]:
        """Language tags as first seen, default first."""
        return self._table.languages

    @property
    def default_language(self) -> str:
        """Tag of the default language."""
        return self._table.default.language

    def _locale(self, language: str) -> IndexedLocaleData:
        locale = self._table.locale(language)
        if locale is None:
            msg = f"Language '{language}' is not part of the table {self.languages}"
            raise ValueError(msg)
        return locale

    def text(self, language: str, text_id: TextId) -> str:
        """Text for an ID in a language.

        Args:
            language: Language tag (case-insensitive)
            text_id: Canonical ID

        Returns:
            The language's text, or the default language's text when the
            translation is missing or the entry is untranslatable

        Raises:
            ValueError: If the language is not part of the table
            KeyError: If the ID is not part of the table
        """
        locale = self._locale(language)
        default = self._table.default
        default_entry = default.get(text_id)
        if default_entry is None:
            msg = f"Text ID {text_id} is not part of the table"
            raise KeyError(msg)

        if locale is default:
            return default_entry.text

        if not default_entry.is_untranslatable:
            entry = locale.get(text_id)
            if entry is not None:
                return entry.text

        logger.debug(
            "Text %d falls back from '%s' to '%s'", text_id, locale.language, default.language
        )
        if self._on_fallback is not None:
            self._on_fallback(
                FallbackInfo(
                    requested_language=locale.language,
                    resolved_language=default.language,
                    text_id=text_id,
                    untranslatable=default_entry.is_untranslatable,
                )
            )
        return default_entry.text

    def text_for(self, language: str, module: str, key: str) -> str:
        """Text for a (module, key) pair in a language.

        Raises:
            ValueError: If the language is not part of the table
            KeyError: If the pair has no canonical ID
        """
        return self.text(language, self._table.key_space.id_of(module, key))

    def has_translation(self, language: str, text_id: TextId) -> bool:
        """Check whether a language supplies its own text for an ID.

        Untranslatable entries only count as translated in the default
        language, since other languages never supply them.
        """
        default_entry = self._table.default.get(text_id)
        if default_entry is None:
            return False
        locale = self._table.locale(language)
        if locale is None:
            return False
        if normalize_language_tag(language) == self._table.default_tag:
            return True
        return not default_entry.is_untranslatable and text_id in locale

    def missing_ids(self, language: str) -> tuple[TextId, ...]:
        """IDs resolved through fallback in a language, ascending.

        Raises:
            ValueError: If the language is not part of the table
        """
        locale = self._locale(language)
        return tuple(
            text_id
            for text_id in self._table.default.text_ids
            if not self.has_translation(locale.language, text_id)
        )
