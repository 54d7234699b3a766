"""Tests for aggregator.py.

Covers per-language merging, default detection, excluded languages,
replace-not-merge module semantics and duplicate keys.

Python 3.13+.
"""

from __future__ import annotations

import pytest

from loctable.aggregator import aggregate
from loctable.diagnostics import DiagnosticCode, InternalError
from loctable.sources import SourceFile
from tests.helpers.builders import entry, registry_for, settings, source


class TestAggregate:
    """Test aggregate() merging."""

    def test_groups_files_by_language(self):
        """Each language gets one structure keyed by module name."""
        files = [
            source("english", "Main", ("Hello", "Hi")),
            source("english", "Menu", ("Open", "Open")),
            source("pl", "Main", ("Hello", "Cześć")),
        ]

        result = aggregate(files, registry_for("english", "pl"), settings())

        assert list(result.locales) == ["english", "pl"]
        english = result.locales["english"]
        assert english.is_default is True
        assert list(english.modules) == ["Main", "Menu"]
        assert result.locales["pl"].is_default is False
        assert result.report.is_clean

    def test_language_identity_is_case_insensitive(self):
        """Tags differing only in case name one language; first-seen spelling is kept."""
        files = [
            source("PL", "Main", ("Hello", "Cześć")),
            source("pl", "Menu", ("Open", "Otwórz")),
            source("English", "Main", ("Hello", "Hi")),
        ]

        result = aggregate(files, registry_for("english", "pl"), settings())

        polish = result.locale("Pl")
        assert polish is not None
        assert polish.language == "PL"
        assert list(polish.modules) == ["Main", "Menu"]
        assert result.locales["english"].is_default is True

    def test_language_without_target_excluded(self):
        """Unregistered languages are dropped with one MISSING_TARGET warning."""
        files = [
            source("english", "Main", ("Hello", "Hi")),
            source("fr", "Main", ("Hello", "Salut")),
            source("fr", "Menu", ("Open", "Ouvrir")),
        ]

        result = aggregate(files, registry_for("english"), settings())

        assert list(result.locales) == ["english"]
        assert result.excluded == ("fr",)
        (warning,) = result.report.by_code(DiagnosticCode.MISSING_TARGET)
        assert warning.language == "fr"
        assert len(result.report) == 1

    def test_entry_flags_carried(self):
        """Untranslatable and templated flags reach the aggregated entries."""
        files = [
            source(
                "english",
                "Main",
                entry("Brand", "Acme", 2, untranslatable=True),
                entry("Greet", "Hello, {name}", 3, templated=True),
            ),
        ]

        result = aggregate(files, registry_for("english"), settings())

        main = result.locales["english"].modules["Main"]
        assert main.entries["Brand"].is_untranslatable is True
        assert main.entries["Greet"].is_templated is True
        assert main.entries["Greet"].line == 3

    def test_record_without_module_is_internal_error(self):
        """Records missing language or module are rejected."""
        bad = SourceFile(language="english", module="", path="Translations/english/.json")

        with pytest.raises(InternalError):
            aggregate([bad], registry_for("english"), settings())

    def test_result_is_immutable(self):
        """Aggregated mappings cannot be mutated by later phases."""
        result = aggregate(
            [source("english", "Main", ("Hello", "Hi"))], registry_for("english"), settings()
        )

        with pytest.raises(TypeError):
            result.locales["english"].modules["Main"].entries["X"] = None  # type: ignore[index]


class TestReplaceNotMerge:
    """Test module replacement semantics."""

    def test_second_file_replaces_module(self):
        """Two files for the same module: the second replaces the first wholesale."""
        files = [
            source("english", "Main", ("A", "a"), ("B", "b"), path="Translations/english/Main.json"),
            source("english", "Main", ("C", "c"), ("D", "d"), path="Translations/english/x/Main.json"),
        ]

        result = aggregate(files, registry_for("english"), settings())

        main = result.locales["english"].modules["Main"]
        assert list(main.entries) == ["C", "D"]
        assert main.source_path == "Translations/english/x/Main.json"
        (warning,) = result.report.by_code(DiagnosticCode.DUPLICATE_MODULE)
        assert "replaces Translations/english/Main.json" in warning.message

    def test_replaced_module_keeps_position(self):
        """The replacing module keeps the first-seen module position."""
        files = [
            source("english", "Main", ("A", "a")),
            source("english", "Menu", ("M", "m")),
            source("english", "Main", ("C", "c"), path="Translations/english/Main2/Main.json"),
        ]

        result = aggregate(files, registry_for("english"), settings())

        assert list(result.locales["english"].modules) == ["Main", "Menu"]


class TestDuplicateKeys:
    """Test keys repeated within one file."""

    def test_last_value_wins_at_first_position(self):
        """A repeated key keeps the last text at the first position."""
        files = [source("english", "Main", ("A", "1"), ("B", "2"), ("A", "3"))]

        result = aggregate(files, registry_for("english"), settings())

        main = result.locales["english"].modules["Main"]
        assert list(main.entries) == ["A", "B"]
        assert main.entries["A"].text == "3"
        (warning,) = result.report.by_code(DiagnosticCode.DUPLICATE_KEY)
        assert warning.key == "A"
        assert warning.location is not None
        assert warning.location.line == 4
