"""Tests for emitter.py.

Generated modules are written to a temporary directory and imported, so
the assertions exercise the code a consuming application would run.

Python 3.13+.
"""

from __future__ import annotations

import importlib
import itertools
import sys
from collections.abc import Callable, Iterator
from pathlib import Path
from types import ModuleType
from typing import TypeAlias

import pytest

from loctable.diagnostics import ConfigurationError
from loctable.emitter import (
    EmittedFiles,
    TableEmitter,
    emit_table,
    module_path,
    python_identifier,
    write_files,
)
from loctable.model import IndexedTable
from loctable.pipeline import compile_table
from loctable.targets import OutputTarget, TableMetadata, TargetRegistry
from tests.helpers.builders import entry, settings, source

_ROOTS = itertools.count()

Loader: TypeAlias = Callable[[EmittedFiles, str], ModuleType]


def _registry(root: str, type_name: str | None = None) -> TargetRegistry:
    return TargetRegistry([
        OutputTarget("english", f"{root}.english", type_name or "EnglishTexts"),
        OutputTarget("pl", f"{root}.pl", type_name or "PolishTexts"),
        OutputTarget("de", f"{root}.de", type_name or "GermanTexts"),
    ])


def _table(registry: TargetRegistry) -> IndexedTable:
    files = [
        source(
            "english",
            "Main",
            ("Hello", "Hi"),
            ("Bye", "Bye"),
            entry("Brand", "Acme", 4, untranslatable=True),
            entry("Greet", "Hello, {name}!", 5, templated=True),
        ),
        source("english", "Menu", ("Open", "Open"), ("class", "Class")),
        source("pl", "Main", ("Hello", "Cześć")),
        source("pl", "Menu", ("Open", "Otwórz"), ("class", "Klasa")),
        source("de", "Main", ("Hello", "Hallo"), ("Bye", "Tschüss"), ("Brand", "Acme GmbH")),
    ]
    result = compile_table(files, registry, settings())
    assert result.table is not None
    return result.table


@pytest.fixture
def root() -> Iterator[str]:
    """Unique top-level package name; its modules are unloaded afterwards."""
    name = f"generated_texts_{next(_ROOTS)}"
    yield name
    for module in [m for m in sys.modules if m == name or m.startswith(f"{name}.")]:
        del sys.modules[module]


@pytest.fixture
def load(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Loader:
    """Write generated files and import one of the modules."""
    output = tmp_path / "generated"

    def load_module(files: EmittedFiles, name: str) -> ModuleType:
        write_files(files, output)
        monkeypatch.syspath_prepend(str(output))
        return importlib.import_module(name)

    return load_module


def _owner_class(facade: ModuleType) -> type:
    class Owner(facade.TextTable):
        def __init__(self, language: str) -> None:
            self.provider = facade.provider_for(language)
            self.default_provider = facade.provider_for(facade.DEFAULT_LANGUAGE)

    return Owner


class TestNaming:
    """Test identifier and path helpers."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("Hello", "Hello"),
            ("main-menu", "main_menu"),
            ("2fa", "_2fa"),
            ("class", "class_"),
            ("__init__", "k__init__"),
            ("", "_"),
            ("Zażółć", "Zażółć"),
            ("a b.c", "a_b_c"),
        ],
    )
    def test_python_identifier(self, name, expected):
        """Names become valid, non-keyword, non-dunder identifiers."""
        ident = python_identifier(name)

        assert ident == expected
        assert ident.isidentifier()

    def test_module_path(self):
        """Dotted paths map to relative file paths."""
        assert module_path("app.texts.english") == "app/texts/english.py"
        assert module_path("texts") == "texts.py"


class TestEmittedFiles:
    """Test emitted file layout."""

    def test_paths_in_emission_order(self, root):
        """Providers (default first), then facade and ID catalog."""
        registry = _registry(root)
        metadata = TableMetadata(f"{root}.table", "TextTable", field_name="R")

        files = emit_table(_table(registry), registry, metadata)

        assert files.paths == (
            f"{root}/english.py",
            f"{root}/de.py",
            f"{root}/pl.py",
            f"{root}/table.py",
            f"{root}/table_ids.py",
        )
        assert all(files[path].startswith("# Generated by loctable.") for path in files)

    def test_providers_only_without_metadata(self, root):
        """No metadata means no facade and no catalog."""
        registry = _registry(root)

        files = TableEmitter().emit(_table(registry), registry)

        assert len(files) == 3

    def test_catalog_can_be_disabled(self, root):
        """generate_id_catalog=False drops the catalog module."""
        registry = _registry(root)
        metadata = TableMetadata(f"{root}.table", "TextTable")

        files = emit_table(
            _table(registry), registry, metadata, settings(generate_id_catalog=False)
        )

        assert f"{root}/table_ids.py" not in files
        assert f"{root}/table.py" in files

    def test_custom_catalog_namespace(self, root):
        """The catalog goes where catalog_namespace says."""
        registry = _registry(root)
        metadata = TableMetadata(
            f"{root}.table", "TextTable", catalog_namespace=f"{root}.ids"
        )

        files = emit_table(_table(registry), registry, metadata)

        assert f"{root}/ids.py" in files

    def test_namespace_collision_rejected(self, root):
        """Facade and provider may not share a module."""
        registry = _registry(root)
        metadata = TableMetadata(f"{root}.english", "TextTable")

        with pytest.raises(ConfigurationError, match="already used"):
            emit_table(_table(registry), registry, metadata)

    def test_docs_can_be_disabled(self, root):
        """generate_docs=False emits no docstrings or comments."""
        registry = _registry(root)
        metadata = TableMetadata(f"{root}.table", "TextTable")

        files = emit_table(_table(registry), registry, metadata, settings(generate_docs=False))

        assert all('"""' not in files[path] for path in files)
        assert "  # " not in files[f"{root}/english.py"]

    def test_facade_docstrings_describe_translations(self, root):
        """Key docstrings show each language and flag special entries."""
        registry = _registry(root)
        metadata = TableMetadata(f"{root}.table", "TextTable")

        facade = emit_table(_table(registry), registry, metadata)[f"{root}/table.py"]

        assert "Polish (pl): Cześć" in facade
        assert "(missing, falls back to the default language)" in facade
        assert "Untranslatable: always read from the default language." in facade
        assert "Contains placeholders." in facade


class TestGeneratedSourceIsValid:
    """Texts that need escaping still produce compilable, faithful modules."""

    TRICKY = (
        ("Quotes", 'Say """hi""" and \'bye\''),
        ("Backslash", "C:\\temp\\"),
        ("Lines", "first\nsecond\r\n\tthird"),
        ("Braces", "{{not a field}} {name}"),
    )

    @pytest.mark.parametrize("generate_docs", [True, False])
    def test_all_modules_compile(self, root, generate_docs):
        """Provider, facade and catalog are valid Python."""
        registry = _registry(root)
        result = compile_table(
            [source("english", "Main", *self.TRICKY), source("pl", "Main", *self.TRICKY)],
            registry,
            settings(),
        )
        assert result.table is not None
        metadata = TableMetadata(f"{root}.table", "TextTable")

        emitted = emit_table(
            result.table, registry, metadata, settings(generate_docs=generate_docs)
        )

        assert len(emitted) == 4
        for path in emitted:
            compile(emitted[path], path, "exec")

    def test_texts_survive_escaping(self, root, load):
        """Imported providers hold the exact source texts."""
        registry = _registry(root)
        result = compile_table(
            [source("english", "Main", *self.TRICKY)], registry, settings()
        )
        assert result.table is not None

        english = load(emit_table(result.table, registry), f"{root}.english").EnglishTexts()

        assert [english[i] for i in (1, 2, 3, 4)] == [
            text for _, text in self.TRICKY
        ]


class TestGeneratedProviders:
    """Test imported provider modules."""

    def test_provider_lookup(self, root, load):
        """Providers return the text or None."""
        registry = _registry(root)
        files = emit_table(_table(registry), registry)

        module = load(files, f"{root}.pl")
        polish = module.PolishTexts()

        assert polish.LANGUAGE == "pl"
        assert polish.IS_DEFAULT is False
        assert polish[1] == "Cześć"
        assert polish[2] is None
        assert 6 in polish
        assert len(polish) == 3

    def test_untranslatable_override_not_emitted(self, root, load):
        """Non-default providers never carry untranslatable IDs."""
        registry = _registry(root)
        files = emit_table(_table(registry), registry)

        german = load(files, f"{root}.de").GermanTexts()

        assert 3 not in german
        assert german[3] is None
        assert german[2] == "Tschüss"

    def test_default_provider_is_complete(self, root, load):
        """The default provider holds every ID."""
        registry = _registry(root)
        files = emit_table(_table(registry), registry)

        english = load(files, f"{root}.english").EnglishTexts()

        assert english.IS_DEFAULT is True
        assert [english[i] for i in range(1, 7)] == [
            "Hi",
            "Bye",
            "Acme",
            "Hello, {name}!",
            "Open",
            "Class",
        ]


class TestGeneratedFacade:
    """Test the imported lookup facade."""

    @pytest.fixture
    def owner(self, root, load) -> type:
        registry = _registry(root)
        metadata = TableMetadata(f"{root}.table", "TextTable", field_name="R")
        facade = load(emit_table(_table(registry), registry, metadata), f"{root}.table")
        return _owner_class(facade)

    def test_translated_text(self, owner):
        """Properties read the current provider."""
        assert owner("pl").R.Main.Hello == "Cześć"

    def test_missing_translation_falls_back(self, owner):
        """Missing texts come from the default provider."""
        assert owner("pl").R.Main.Bye == "Bye"

    def test_untranslatable_reads_default(self, owner):
        """Untranslatable keys ignore the current provider."""
        assert owner("de").R.Main.Brand == "Acme"
        assert owner("de").R.get(3) == "Acme"

    def test_keyword_key(self, owner):
        """Keyword keys get an underscore suffix."""
        assert owner("pl").R.Menu.class_ == "Klasa"

    def test_lookup_by_id(self, owner):
        """Texts can be read by canonical ID."""
        texts = owner("PL").R

        assert texts[1] == "Cześć"
        assert texts.get(99) is None
        with pytest.raises(KeyError):
            texts[99]

    def test_provider_for(self, root, load):
        """provider_for() is case-insensitive and returns None for unknown tags."""
        registry = _registry(root)
        metadata = TableMetadata(f"{root}.table", "TextTable")
        facade = load(emit_table(_table(registry), registry, metadata), f"{root}.table")

        assert facade.DEFAULT_LANGUAGE == "english"
        assert facade.provider_for("DE").LANGUAGE == "de"
        assert facade.provider_for("fr") is None
        assert _owner_class(facade)("english").texts.Main.Hello == "Hi"

    def test_duplicate_provider_names_aliased(self, root, load):
        """Providers sharing a class name are imported under unique aliases."""
        registry = _registry(root, type_name="Texts")
        metadata = TableMetadata(f"{root}.table", "TextTable")
        files = emit_table(_table(registry), registry, metadata)

        facade = load(files, f"{root}.table")

        assert "as Texts_2" in files[f"{root}/table.py"]
        assert facade.PROVIDERS["pl"]().LANGUAGE == "pl"
        assert _owner_class(facade)("pl").texts.Main.Hello == "Cześć"


class TestGeneratedCatalog:
    """Test the imported ID catalog."""

    def test_ids_match_key_space(self, root, load):
        """Catalog constants equal the canonical IDs."""
        registry = _registry(root)
        table = _table(registry)
        metadata = TableMetadata(f"{root}.table", "TextTable")

        catalog = load(emit_table(table, registry, metadata), f"{root}.table_ids")

        assert catalog.R.Main.Hello == 1
        assert catalog.R.Main.Greet == 4
        assert catalog.R.Menu.class_ == 6
        for module, key, text_id in table.key_space:
            group = getattr(catalog.R, python_identifier(module))
            assert getattr(group, python_identifier(key)) == text_id

    def test_colliding_keys_suffixed(self, root, load):
        """Keys that sanitize to the same identifier get numeric suffixes."""
        registry = TargetRegistry([OutputTarget("english", f"{root}.english", "EnglishTexts")])
        files = [source("english", "Main", ("a-b", "dash"), ("a_b", "underscore"))]
        result = compile_table(files, registry, settings())
        assert result.table is not None
        metadata = TableMetadata(f"{root}.table", "TextTable")

        catalog = load(
            emit_table(result.table, registry, metadata, settings(id_catalog_name="Ids")),
            f"{root}.table_ids",
        )

        assert catalog.Ids.Main.a_b == 1
        assert catalog.Ids.Main.a_b_2 == 2


class TestWriteFiles:
    """Test write_files()."""

    def test_unchanged_files_skipped(self, root, tmp_path):
        """A second write of identical output touches nothing."""
        registry = _registry(root)
        files = emit_table(_table(registry), registry)

        first = write_files(files, tmp_path / "out")
        second = write_files(files, tmp_path / "out")

        assert len(first) == 3
        assert second == ()
        assert (tmp_path / "out" / root / "pl.py").read_text(encoding="utf-8") == files[
            f"{root}/pl.py"
        ]

    def test_changed_file_rewritten(self, root, tmp_path):
        """Only files whose content differs are written."""
        registry = _registry(root)
        files = emit_table(_table(registry), registry)
        write_files(files, tmp_path)
        (tmp_path / root / "de.py").write_text("stale", encoding="utf-8")

        written = write_files(files, tmp_path)

        assert written == (tmp_path / root / "de.py",)
