"""Tests for runtime.py LookupTable.

Python 3.13+.
"""

from __future__ import annotations

import pytest

from loctable.pipeline import compile_table
from loctable.runtime import FallbackInfo, LookupTable
from tests.helpers.builders import entry, registry_for, settings, source


@pytest.fixture
def lookup() -> LookupTable:
    files = [
        source(
            "english",
            "Main",
            ("Hello", "Hi"),
            ("Bye", "Bye"),
            entry("Brand", "Acme", 4, untranslatable=True),
        ),
        source("pl", "Main", ("Hello", "Cześć")),
        source("de", "Main", ("Hello", "Hallo"), ("Bye", "Tschüss"), ("Brand", "Acme GmbH")),
    ]
    result = compile_table(files, registry_for("english", "de", "pl"), settings())
    assert result.table is not None
    return LookupTable(result.table)


class TestLookupText:
    """Test text() resolution."""

    def test_translated_text(self, lookup):
        """A present translation is returned."""
        assert lookup.text("pl", 1) == "Cześć"

    def test_missing_translation_falls_back(self, lookup):
        """pl.Main.Bye is missing: the default text is returned."""
        assert lookup.text("pl", 2) == "Bye"

    def test_untranslatable_ignores_override(self, lookup):
        """de supplies Brand, but the default text is always used."""
        assert lookup.text("de", 3) == "Acme"

    def test_default_language(self, lookup):
        """The default language reads its own texts."""
        assert [lookup.text("english", i) for i in (1, 2, 3)] == ["Hi", "Bye", "Acme"]

    def test_language_is_case_insensitive(self, lookup):
        """Language tags compare case-insensitively."""
        assert lookup.text("DE", 2) == "Tschüss"

    def test_text_for_module_and_key(self, lookup):
        """Texts can be addressed by module and key."""
        assert lookup.text_for("de", "Main", "Hello") == "Hallo"

    def test_unknown_id(self, lookup):
        """IDs outside 1..N raise KeyError."""
        with pytest.raises(KeyError):
            lookup.text("pl", 99)

    def test_unknown_key(self, lookup):
        """Keys without an ID raise KeyError."""
        with pytest.raises(KeyError):
            lookup.text_for("pl", "Main", "Goodbye")

    def test_unknown_language(self, lookup):
        """Languages outside the table raise ValueError."""
        with pytest.raises(ValueError, match="'fr'"):
            lookup.text("fr", 1)

    def test_unknown_language_reported_before_unknown_id(self, lookup):
        """The language is checked first."""
        with pytest.raises(ValueError, match="'fr'"):
            lookup.text("fr", 99)


class TestFallbackCallback:
    """Test the on_fallback hook."""

    def test_called_for_fallbacks_only(self, lookup):
        """The callback fires for missing and untranslatable texts."""
        seen: list[FallbackInfo] = []
        observed = LookupTable(lookup.table, on_fallback=seen.append)

        observed.text("pl", 1)
        observed.text("pl", 2)
        observed.text("de", 3)
        observed.text("english", 2)

        assert seen == [
            FallbackInfo("pl", "english", 2, untranslatable=False),
            FallbackInfo("de", "english", 3, untranslatable=True),
        ]


class TestTranslationCoverage:
    """Test has_translation() and missing_ids()."""

    def test_has_translation(self, lookup):
        """Only a language's own, translatable texts count."""
        assert lookup.has_translation("pl", 1) is True
        assert lookup.has_translation("pl", 2) is False
        assert lookup.has_translation("de", 3) is False
        assert lookup.has_translation("english", 3) is True
        assert lookup.has_translation("fr", 1) is False
        assert lookup.has_translation("pl", 99) is False

    def test_missing_ids(self, lookup):
        """IDs served by fallback, ascending."""
        assert lookup.missing_ids("pl") == (2, 3)
        assert lookup.missing_ids("de") == (3,)
        assert lookup.missing_ids("english") == ()

    def test_missing_ids_unknown_language(self, lookup):
        """Unknown languages raise ValueError."""
        with pytest.raises(ValueError):
            lookup.missing_ids("fr")


class TestLookupTableProperties:
    """Test descriptive properties."""

    def test_languages_default_first(self, lookup):
        """Other languages follow in sorted-path order."""
        assert lookup.languages == ("english", "de", "pl")
        assert lookup.default_language == "english"

    def test_repr(self, lookup):
        assert repr(lookup) == "LookupTable(languages=('english', 'de', 'pl'), texts=3)"
