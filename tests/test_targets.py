"""Tests for targets.py.

Python 3.13+.
"""

from __future__ import annotations

import pytest

from loctable.diagnostics import ConfigurationError, DiagnosticCode
from loctable.targets import (
    OutputTarget,
    TableMetadata,
    TargetRegistry,
    is_identifier,
    is_module_path,
)


class TestNameChecks:
    """Test identifier and module path validation."""

    @pytest.mark.parametrize("name", ["texts", "_private", "Texts2", "zażółć"])
    def test_identifiers(self, name):
        assert is_identifier(name)

    @pytest.mark.parametrize("name", ["", "2texts", "not valid", "class", "a.b"])
    def test_not_identifiers(self, name):
        assert not is_identifier(name)

    def test_module_paths(self):
        assert is_module_path("app.texts.english")
        assert not is_module_path("app..texts")
        assert not is_module_path("app.class")
        assert not is_module_path("")


class TestOutputTarget:
    """Test OutputTarget validation."""

    def test_valid(self):
        assert OutputTarget("pl", "app.texts.pl", "PolishTexts").problems() == []

    def test_problems_listed(self):
        target = OutputTarget(" ", "app-texts", "Polish Texts")

        assert len(target.problems()) == 3

    def test_tag_normalized(self):
        assert OutputTarget("pt-BR", "app.pt", "T").tag == "pt_br"


class TestTargetRegistry:
    """Test TargetRegistry registration and lookup."""

    def test_case_insensitive_lookup(self, registry):
        assert registry.get("PL").type_name == "PolishTexts"
        assert "De" in registry
        assert "fr" not in registry
        assert 3 not in registry

    def test_registration_order(self, registry):
        assert [t.language for t in registry] == ["english", "pl", "de"]
        assert repr(registry) == "TargetRegistry([english, pl, de])"

    def test_malformed_target_rejected(self):
        with pytest.raises(ConfigurationError) as exc_info:
            TargetRegistry([OutputTarget("pl", "app.texts.pl", "not valid")])

        assert exc_info.value.diagnostic is not None
        assert exc_info.value.diagnostic.code == DiagnosticCode.INVALID_TARGET

    def test_duplicate_language_rejected(self, registry):
        with pytest.raises(ConfigurationError, match="registered twice"):
            registry.register(OutputTarget("PL", "app.other", "Other"))

    def test_validate_accepts_matching_flag(self, registry):
        registry.validate("English")

    def test_validate_rejects_other_flag(self, registry):
        with pytest.raises(ConfigurationError, match="flagged default"):
            registry.validate("pl")

    def test_validate_rejects_two_flags(self):
        registry = TargetRegistry([
            OutputTarget("en", "app.en", "En", is_default=True),
            OutputTarget("pl", "app.pl", "Pl", is_default=True),
        ])

        with pytest.raises(ConfigurationError) as exc_info:
            registry.validate("en")

        assert exc_info.value.diagnostic.code == DiagnosticCode.MULTIPLE_DEFAULT_LOCALES

    def test_unflagged_registry_valid(self):
        """Flags are optional: the configured default language decides."""
        TargetRegistry([OutputTarget("en", "app.en", "En")]).validate("en")


class TestTableMetadata:
    """Test TableMetadata validation."""

    def test_defaults(self):
        metadata = TableMetadata("app.texts.table", "TextTable")

        assert metadata.field_name == "texts"
        assert metadata.current_accessor == "provider"
        assert metadata.default_accessor == "default_provider"
        assert metadata.id_catalog_namespace == "app.texts.table_ids"

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"namespace": "app texts"},
            {"type_name": "Text Table"},
            {"field_name": "class"},
            {"current_accessor": "same", "default_accessor": "same"},
            {"catalog_namespace": "app..ids"},
            {"catalog_namespace": "app.texts.table"},
        ],
    )
    def test_invalid(self, kwargs):
        options = {"namespace": "app.texts.table", "type_name": "TextTable", **kwargs}

        with pytest.raises(ConfigurationError):
            TableMetadata(**options)
