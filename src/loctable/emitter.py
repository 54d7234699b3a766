"""Python code generation for compiled tables.

Renders an IndexedTable into Python source modules:

    - One provider module per language (``target.namespace``): a class
      whose ``TEXTS`` maps canonical IDs to texts and whose
      ``__getitem__`` returns the text or None.
    - A facade module (``metadata.namespace``): mixin ``type_name``
      exposing ``field_name``, with one accessor object per module and one
      property per key. Properties read the owner's current provider and
      fall back to its default provider; untranslatable keys read the
      default provider only.
    - An ID catalog module (optional): class ``id_catalog_name`` with one
      nested class per module and one int constant per key.

Rendering is pure: TableEmitter builds strings and never touches the
filesystem. write_files() does that.

Python 3.13+.
"""

from __future__ import annotations

import keyword
import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType

from loctable.config import CompilerSettings
from loctable.constants import GENERATED_HEADER, SOURCE_ENCODING
from loctable.diagnostics import ConfigurationError, DiagnosticTemplate
from loctable.locale_utils import describe_language
from loctable.model import CanonicalKeySpace, IndexedLocaleData, IndexedTable, TextId
from loctable.targets import OutputTarget, TableMetadata, TargetRegistry

__all__ = [
    "EmittedFiles",
    "TableEmitter",
    "emit_table",
    "module_path",
    "python_identifier",
    "write_files",
]

logger = logging.getLogger(__name__)

_INDENT = "    "
_PREVIEW_LENGTH = 60

# Names defined by the generated facade module and its accessor classes.
_FACADE_ROOT_MEMBERS: frozenset[str] = frozenset({"_owner", "get"})
_FACADE_MODULE_MEMBERS: frozenset[str] = frozenset({"_owner"})
_FACADE_GLOBALS: frozenset[str] = frozenset({
    "annotations",
    "MappingProxyType",
    "PROVIDERS",
    "DEFAULT_LANGUAGE",
    "_UNTRANSLATABLE",
    "provider_for",
    "_resolve",
    "_resolve_default",
    "_Texts",
})


# ============================================================================
# NAMING
# ============================================================================


def python_identifier(name: str) -> str:
    """Turn an arbitrary module or key name into a Python identifier.

    Invalid characters become underscores, a leading digit gets an
    underscore prefix, names that would be dunder or name-mangled get a
    ``k`` prefix and keywords get an underscore suffix.

    Example:
        >>> python_identifier("main-menu")
        'main_menu'
        >>> python_identifier("2fa")
        '_2fa'
        >>> python_identifier("class")
        'class_'
    """
    ident = "".join(ch if f"_{ch}".isidentifier() else "_" for ch in name) or "_"
    if not ident.isidentifier():
        ident = f"_{ident}"
    if ident.startswith("__"):
        ident = f"k{ident}"
    if keyword.iskeyword(ident):
        ident = f"{ident}_"
    return ident


def module_path(namespace: str) -> str:
    """Relative file path of a dotted module path.

    Example:
        >>> module_path("app.texts.english")
        'app/texts/english.py'
    """
    return namespace.replace(".", "/") + ".py"


class _NameAllocator:
    """Hands out unique identifiers, suffixing repeats with _2, _3, ..."""

    __slots__ = ("_taken",)

    def __init__(self, reserved: Iterable[str] = ()) -> None:
        self._taken: set[str] = set(reserved)

    def allocate(self, name: str) -> str:
        base = python_identifier(name)
        candidate = base
        counter = 2
        while candidate in self._taken:
            candidate = f"{base}_{counter}"
            counter += 1
        self._taken.add(candidate)
        return candidate


@dataclass(frozen=True, slots=True)
class _Naming:
    """Identifiers for every module and key, shared by facade and catalog."""

    modules: Mapping[str, str]
    keys: Mapping[str, Mapping[str, str]]

    @staticmethod
    def build(key_space: CanonicalKeySpace) -> _Naming:
        module_names = _NameAllocator(_FACADE_ROOT_MEMBERS)
        modules: dict[str, str] = {}
        keys: dict[str, dict[str, str]] = {}
        for module, key_ids in key_space.modules.items():
            modules[module] = module_names.allocate(module)
            key_names = _NameAllocator(_FACADE_MODULE_MEMBERS)
            keys[module] = {key: key_names.allocate(key) for key in key_ids}
        return _Naming(modules=modules, keys=keys)


# ============================================================================
# TEXT ESCAPING
# ============================================================================


def _doc_text(text: str) -> str:
    """Escape text for a line inside a triple-quoted docstring."""
    escaped = text.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    return "".join(
        ch if ch.isprintable() else ch.encode("unicode_escape").decode("ascii")
        for ch in escaped
    )


def _preview(text: str) -> str:
    """Single-line repr of text for comments, shortened when long."""
    if len(text) > _PREVIEW_LENGTH:
        text = text[: _PREVIEW_LENGTH - 3] + "..."
    return repr(text)


def _language_label(language: str) -> str:
    name = describe_language(language)
    return language if name == language else f"{name} ({language})"


# ============================================================================
# OUTPUT
# ============================================================================


@dataclass(frozen=True, slots=True)
class EmittedFiles:
    """Generated modules by relative file path.

    Attributes:
        files: Relative POSIX path -> Python source, in emission order
    """

    files: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.files, MappingProxyType):
            object.__setattr__(self, "files", MappingProxyType(dict(self.files)))

    def __len__(self) -> int:
        return len(self.files)

    def __iter__(self) -> Iterator[str]:
        return iter(self.files)

    def __contains__(self, path: object) -> bool:
        return path in self.files

    def __getitem__(self, path: str) -> str:
        return self.files[path]

    @property
    def paths(self) -> tuple[str, ...]:
        """Relative paths in emission order."""
        return tuple(self.files)


def write_files(files: EmittedFiles, directory: Path | str) -> tuple[Path, ...]:
    """Write generated modules below a directory.

    Files whose content is unchanged are left untouched so build tools
    watching modification times do not rebuild needlessly.

    Args:
        files: Output of emit_table()
        directory: Output root; missing parent directories are created

    Returns:
        Paths actually written

    Raises:
        OSError: If a file cannot be written
    """
    root = Path(directory)
    written: list[Path] = []
    for relative, content in files.files.items():
        path = root / relative
        if path.is_file() and path.read_text(encoding=SOURCE_ENCODING) == content:
            logger.debug("Unchanged %s", path)
            continue
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding=SOURCE_ENCODING, newline="\n")
        written.append(path)
        logger.debug("Wrote %s", path)
    logger.info("Wrote %d of %d generated file(s) to %s", len(written), len(files), root)
    return tuple(written)


# ============================================================================
# EMITTER
# ============================================================================


class TableEmitter:
    """Renders an indexed table to Python modules.

    Stateless: all rendering state is local to emit(), so one emitter can
    be shared freely.

    Example:
        >>> files = TableEmitter().emit(result.table, registry, metadata)
        >>> files.paths
        ('app/texts/english.py', 'app/texts/pl.py', 'app/texts/table.py', 'app/texts/table_ids.py')
    """

    def emit(
        self,
        table: IndexedTable,
        registry: TargetRegistry,
        metadata: TableMetadata | None = None,
        settings: CompilerSettings | None = None,
    ) -> EmittedFiles:
        """Render every module for a table.

        Args:
            table: Compiled table
            registry: Output targets, used for locales without a target
            metadata: Facade names (None: providers only)
            settings: Compiler settings (docs and ID catalog toggles)

        Returns:
            EmittedFiles with providers first (default language first),
            then the facade and the ID catalog

        Raises:
            ConfigurationError: If a language has no target, or two
                modules would be written to the same namespace
        """
        settings = settings or CompilerSettings()
        targets = self._resolve_targets(table, registry)
        self._check_namespaces(targets, metadata, settings)

        untranslatable = frozenset(
            text_id for text_id, entry in table.default.texts.items() if entry.is_untranslatable
        )
        files: dict[str, str] = {}
        for tag, locale in table.locales.items():
            target = targets[tag]
            files[module_path(target.namespace)] = self._render_provider(
                locale, target, untranslatable, len(table.key_space), settings
            )

        if metadata is None:
            logger.debug("No table metadata; emitting providers only")
        else:
            naming = _Naming.build(table.key_space)
            files[module_path(metadata.namespace)] = self._render_facade(
                table, targets, metadata, naming, untranslatable, settings
            )
            if settings.generate_id_catalog:
                files[module_path(metadata.id_catalog_namespace)] = self._render_catalog(
                    table, naming, settings
                )

        logger.info("Emitted %d module(s) for %d language(s)", len(files), len(targets))
        return EmittedFiles(files)

    # ------------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------------

    @staticmethod
    def _resolve_targets(
        table: IndexedTable, registry: TargetRegistry
    ) -> dict[str, OutputTarget]:
        targets: dict[str, OutputTarget] = {}
        for tag, locale in table.locales.items():
            target = locale.target or registry.get(locale.language)
            if target is None:
                raise ConfigurationError(
                    DiagnosticTemplate.invalid_target(locale.language, "no output target registered")
                )
            targets[tag] = target
        return targets

    @staticmethod
    def _check_namespaces(
        targets: Mapping[str, OutputTarget],
        metadata: TableMetadata | None,
        settings: CompilerSettings,
    ) -> None:
        owners: dict[str, str] = {}

        def claim(namespace: str, owner: str) -> None:
            previous = owners.get(namespace)
            if previous is not None:
                raise ConfigurationError(
                    DiagnosticTemplate.invalid_target(
                        owner, f"namespace '{namespace}' is already used by {previous}"
                    )
                )
            owners[namespace] = owner

        for target in targets.values():
            claim(target.namespace, target.language)
        if metadata is not None:
            claim(metadata.namespace, "the lookup facade")
            if settings.generate_id_catalog:
                claim(metadata.id_catalog_namespace, "the ID catalog")

    # ------------------------------------------------------------------------
    # Providers
    # ------------------------------------------------------------------------

    @staticmethod
    def _render_provider(
        locale: IndexedLocaleData,
        target: OutputTarget,
        untranslatable: frozenset[TextId],
        total: int,
        settings: CompilerSettings,
    ) -> str:
        # Non-default providers never carry untranslatable IDs: those
        # always resolve from the default provider.
        texts = [
            entry
            for text_id, entry in locale.texts.items()
            if locale.is_default or text_id not in untranslatable
        ]
        label = _language_label(locale.language)
        docs = settings.generate_docs

        output: list[str] = [GENERATED_HEADER]
        if docs:
            output.append(f'"""Texts for {_doc_text(label)}."""\n\n')
        output.append("from __future__ import annotations\n\n")
        output.append("from types import MappingProxyType\n\n")
        output.append(f"__all__ = [{target.type_name!r}]\n\n\n")
        output.append(f"class {target.type_name}:\n")
        if docs:
            kind = "default language" if locale.is_default else "translation"
            output.append(
                f'{_INDENT}"""{_doc_text(label)} ({kind}): '
                f'{len(texts)} of {total} texts."""\n\n'
            )
        output.append(f"{_INDENT}__slots__ = ()\n\n")
        output.append(f"{_INDENT}LANGUAGE = {locale.language!r}\n")
        output.append(f"{_INDENT}IS_DEFAULT = {locale.is_default!r}\n")
        output.append(f"{_INDENT}TEXTS = MappingProxyType({{\n")
        for entry in texts:
            output.append(f"{_INDENT * 2}{entry.text_id}: {entry.text!r},")
            if docs:
                output.append(f"  # {_doc_text(entry.module)}.{_doc_text(entry.key)}")
            output.append("\n")
        output.append(f"{_INDENT}}})\n\n")
        output.append(f"{_INDENT}def __getitem__(self, text_id: int) -> str | None:\n")
        output.append(f"{_INDENT * 2}return self.TEXTS.get(text_id)\n\n")
        output.append(f"{_INDENT}def __contains__(self, text_id: object) -> bool:\n")
        output.append(f"{_INDENT * 2}return text_id in self.TEXTS\n\n")
        output.append(f"{_INDENT}def __len__(self) -> int:\n")
        output.append(f"{_INDENT * 2}return len(self.TEXTS)\n")
        return "".join(output)

    # ------------------------------------------------------------------------
    # Facade
    # ------------------------------------------------------------------------

    def _render_facade(
        self,
        table: IndexedTable,
        targets: Mapping[str, OutputTarget],
        metadata: TableMetadata,
        naming: _Naming,
        untranslatable: frozenset[TextId],
        settings: CompilerSettings,
    ) -> str:
        docs = settings.generate_docs
        current = metadata.current_accessor
        default = metadata.default_accessor
        module_classes = {
            module: f"_Module_{ident}" for module, ident in naming.modules.items()
        }

        imports = _NameAllocator(
            {*_FACADE_GLOBALS, metadata.type_name, *module_classes.values()}
        )
        provider_names: dict[str, str] = {}
        import_lines: list[str] = []
        for tag, target in targets.items():
            alias = imports.allocate(target.type_name)
            provider_names[tag] = alias
            suffix = "" if alias == target.type_name else f" as {alias}"
            import_lines.append(f"from {target.namespace} import {target.type_name}{suffix}\n")

        output: list[str] = [GENERATED_HEADER]
        if docs:
            output.append('"""Lookup facade for compiled texts."""\n\n')
        output.append("from __future__ import annotations\n\n")
        output.append("from types import MappingProxyType\n\n")
        output.extend(import_lines)
        output.append("\n")
        output.append(
            f"__all__ = ['DEFAULT_LANGUAGE', 'PROVIDERS', {metadata.type_name!r}, 'provider_for']\n\n"
        )
        output.append(f"DEFAULT_LANGUAGE = {table.default_tag!r}\n")
        output.append("PROVIDERS = MappingProxyType({\n")
        for tag in targets:
            output.append(f"{_INDENT}{tag!r}: {provider_names[tag]},\n")
        output.append("})\n")
        output.append(f"_UNTRANSLATABLE = frozenset({sorted(untranslatable)!r})\n\n\n")

        output.append("def provider_for(language: str):\n")
        if docs:
            output.append(
                f'{_INDENT}"""Provider instance for a language tag (case-insensitive), or None."""\n'
            )
        output.append(
            f'{_INDENT}cls = PROVIDERS.get(language.strip().casefold().replace("-", "_"))\n'
        )
        output.append(f"{_INDENT}return None if cls is None else cls()\n\n\n")

        output.append("def _resolve(owner, text_id: int) -> str | None:\n")
        output.append(f"{_INDENT}text = owner.{current}[text_id]\n")
        output.append(f"{_INDENT}if text is None:\n")
        output.append(f"{_INDENT * 2}text = owner.{default}[text_id]\n")
        output.append(f"{_INDENT}return text\n\n\n")
        output.append("def _resolve_default(owner, text_id: int) -> str | None:\n")
        output.append(f"{_INDENT}return owner.{default}[text_id]\n\n\n")

        for module, key_ids in table.key_space.modules.items():
            self._render_module_accessor(
                output, table, module, key_ids, module_classes[module], naming, docs
            )

        output.append("class _Texts:\n")
        if docs:
            output.append(f'{_INDENT}"""Compiled texts by module."""\n\n')
        output.append(f'{_INDENT}__slots__ = ("_owner",)\n\n')
        output.append(f"{_INDENT}def __init__(self, owner) -> None:\n")
        output.append(f"{_INDENT * 2}self._owner = owner\n\n")
        output.append(f"{_INDENT}def __getitem__(self, text_id: int) -> str:\n")
        output.append(f"{_INDENT * 2}text = self.get(text_id)\n")
        output.append(f"{_INDENT * 2}if text is None:\n")
        output.append(f"{_INDENT * 3}raise KeyError(text_id)\n")
        output.append(f"{_INDENT * 2}return text\n\n")
        output.append(f"{_INDENT}def get(self, text_id: int) -> str | None:\n")
        output.append(f"{_INDENT * 2}if text_id in _UNTRANSLATABLE:\n")
        output.append(f"{_INDENT * 3}return _resolve_default(self._owner, text_id)\n")
        output.append(f"{_INDENT * 2}return _resolve(self._owner, text_id)\n")
        for module, class_name in module_classes.items():
            output.append("\n")
            output.append(f"{_INDENT}@property\n")
            output.append(f"{_INDENT}def {naming.modules[module]}(self) -> {class_name}:\n")
            output.append(f"{_INDENT * 2}return {class_name}(self._owner)\n")
        output.append("\n\n")

        output.append(f"class {metadata.type_name}:\n")
        if docs:
            output.append(
                f'{_INDENT}"""Mixin exposing compiled texts as ``{metadata.field_name}``.\n\n'
                f"{_INDENT}Classes using it provide ``{current}`` (provider of the active\n"
                f"{_INDENT}language) and ``{default}`` (provider of the default language).\n"
                f'{_INDENT}"""\n\n'
            )
        output.append(f"{_INDENT}__slots__ = ()\n\n")
        output.append(f"{_INDENT}@property\n")
        output.append(f"{_INDENT}def {metadata.field_name}(self) -> _Texts:\n")
        output.append(f"{_INDENT * 2}return _Texts(self)\n")
        return "".join(output)

    @staticmethod
    def _render_module_accessor(
        output: list[str],
        table: IndexedTable,
        module: str,
        key_ids: Mapping[str, TextId],
        class_name: str,
        naming: _Naming,
        docs: bool,
    ) -> None:
        output.append(f"class {class_name}:\n")
        if docs:
            output.append(f'{_INDENT}"""Texts of module {_doc_text(module)}."""\n\n')
        output.append(f'{_INDENT}__slots__ = ("_owner",)\n\n')
        output.append(f"{_INDENT}def __init__(self, owner) -> None:\n")
        output.append(f"{_INDENT * 2}self._owner = owner\n")

        key_names = naming.keys[module]
        for key, text_id in key_ids.items():
            entry = table.default.texts[text_id]
            resolver = "_resolve_default" if entry.is_untranslatable else "_resolve"
            output.append("\n")
            output.append(f"{_INDENT}@property\n")
            output.append(f"{_INDENT}def {key_names[key]}(self) -> str:\n")
            if docs:
                output.append(f'{_INDENT * 2}"""{_doc_text(entry.text)}\n\n')
                if entry.is_untranslatable:
                    output.append(f"{_INDENT * 2}Untranslatable: always read from the default language.\n")
                else:
                    for locale in table.locales.values():
                        translated = locale.get(text_id)
                        shown = (
                            _doc_text(translated.text)
                            if translated is not None
                            else "(missing, falls back to the default language)"
                        )
                        output.append(
                            f"{_INDENT * 2}{_doc_text(_language_label(locale.language))}: {shown}\n"
                        )
                if entry.is_templated:
                    output.append(f"{_INDENT * 2}Contains placeholders.\n")
                output.append(f'{_INDENT * 2}"""\n')
            output.append(f"{_INDENT * 2}return {resolver}(self._owner, {text_id})\n")
        output.append("\n\n")

    # ------------------------------------------------------------------------
    # ID catalog
    # ------------------------------------------------------------------------

    @staticmethod
    def _render_catalog(
        table: IndexedTable,
        naming: _Naming,
        settings: CompilerSettings,
    ) -> str:
        docs = settings.generate_docs
        name = settings.id_catalog_name

        output: list[str] = [GENERATED_HEADER]
        if docs:
            output.append('"""Symbolic names for canonical text IDs."""\n\n')
        output.append(f"__all__ = [{name!r}]\n\n\n")
        output.append(f"class {name}:\n")
        if docs:
            output.append(f'{_INDENT}"""Canonical text IDs by module and key."""\n')
        elif not table.key_space.modules:
            output.append(f"{_INDENT}pass\n")

        for module, key_ids in table.key_space.modules.items():
            output.append("\n")
            output.append(f"{_INDENT}class {naming.modules[module]}:\n")
            if docs:
                source = table.default.modules[module].source_path
                output.append(
                    f'{_INDENT * 2}"""Module {_doc_text(module)} ({_doc_text(source)})."""\n'
                )
                if key_ids:
                    output.append("\n")
            elif not key_ids:
                output.append(f"{_INDENT * 2}pass\n")
            for key, text_id in key_ids.items():
                output.append(f"{_INDENT * 2}{naming.keys[module][key]} = {text_id}")
                if docs:
                    output.append(f"  # {_preview(table.default.texts[text_id].text)}")
                output.append("\n")
        return "".join(output)


def emit_table(
    table: IndexedTable,
    registry: TargetRegistry,
    metadata: TableMetadata | None = None,
    settings: CompilerSettings | None = None,
) -> EmittedFiles:
    """Render a compiled table to Python modules.

    Convenience function for TableEmitter.emit().

    Example:
        >>> result = compile_table(files, registry, settings)
        >>> files = emit_table(result.table, registry, metadata, settings)
        >>> write_files(files, "build/generated")
    """
    return TableEmitter().emit(table, registry, metadata, settings)
