"""Compiler configuration.

A plain typed configuration structure with explicit defaults per option,
populated from a mapping (build properties, CLI arguments) or from the
``[tool.loctable]`` section of a pyproject.toml.

Python 3.13+.
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from pathlib import Path

from loctable.constants import (
    CONFIG_SECTION,
    DEFAULT_ID_CATALOG_NAME,
    DEFAULT_LANGUAGE,
    DEFAULT_TRANSLATIONS_DIR,
)
from loctable.diagnostics import ConfigurationError
from loctable.targets import OutputTarget, TableMetadata, TargetRegistry, is_identifier

__all__ = [
    "CompilerSettings",
    "ProjectConfig",
    "load_project_config",
]

_TRUE_VALUES = frozenset({"true", "1", "yes", "on"})
_FALSE_VALUES = frozenset({"false", "0", "no", "off", ""})


def _parse_bool(name: str, value: object) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    msg = f"Option '{name}' expects a boolean, got {value!r}"
    raise ConfigurationError(msg)


def _parse_str(name: str, value: object) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    msg = f"Option '{name}' expects a non-empty string, got {value!r}"
    raise ConfigurationError(msg)


@dataclass(frozen=True, slots=True)
class CompilerSettings:
    """Immutable compiler configuration.

    All fields have defaults; ``CompilerSettings()`` is a usable
    configuration.

    Attributes:
        translations_dir: Directory with one subdirectory per language
        enable_logging: Emit debug logging from the CLI
        default_language: Tag of the default language (case-insensitive)
        strict_mode: Escalate validation warnings to a ConfigurationError
        generate_docs: Emit docstrings in generated code
        generate_id_catalog: Emit the symbolic ID catalog module
        id_catalog_name: Class name of the ID catalog

    Example:
        >>> settings = CompilerSettings.from_mapping({"default-language": "en", "strict-mode": "true"})
        >>> settings.strict_mode
        True
    """

    translations_dir: str = DEFAULT_TRANSLATIONS_DIR
    enable_logging: bool = False
    default_language: str = DEFAULT_LANGUAGE
    strict_mode: bool = False
    generate_docs: bool = True
    generate_id_catalog: bool = True
    id_catalog_name: str = DEFAULT_ID_CATALOG_NAME

    def __post_init__(self) -> None:
        """Validate configuration values at construction time.

        Raises:
            ConfigurationError: If default_language is empty or the ID
                catalog name is not a Python identifier
        """
        if not self.default_language.strip():
            msg = "default_language must not be empty"
            raise ConfigurationError(msg)
        if self.generate_id_catalog and not is_identifier(self.id_catalog_name):
            msg = f"id_catalog_name '{self.id_catalog_name}' is not a Python identifier"
            raise ConfigurationError(msg)

    @staticmethod
    def from_mapping(options: Mapping[str, object]) -> CompilerSettings:
        """Build settings from loosely typed options.

        Keys may use dashes or underscores (``default-language`` or
        ``default_language``). Boolean options accept booleans or the
        strings true/false/1/0/yes/no/on/off. Unknown keys are ignored.

        Raises:
            ConfigurationError: If a value has the wrong type
        """
        normalized = {key.replace("-", "_"): value for key, value in options.items()}
        defaults = CompilerSettings()

        def get_bool(name: str, default: bool) -> bool:
            return _parse_bool(name, normalized[name]) if name in normalized else default

        def get_str(name: str, default: str) -> str:
            return _parse_str(name, normalized[name]) if name in normalized else default

        return CompilerSettings(
            translations_dir=get_str("translations_dir", defaults.translations_dir),
            enable_logging=get_bool("enable_logging", defaults.enable_logging),
            default_language=get_str("default_language", defaults.default_language),
            strict_mode=get_bool("strict_mode", defaults.strict_mode),
            generate_docs=get_bool("generate_docs", defaults.generate_docs),
            generate_id_catalog=get_bool("generate_id_catalog", defaults.generate_id_catalog),
            id_catalog_name=get_str("id_catalog_name", defaults.id_catalog_name),
        )

    def with_overrides(self, **overrides: object) -> CompilerSettings:
        """Return a copy with non-None overrides applied."""
        changes = {name: value for name, value in overrides.items() if value is not None}
        return replace(self, **changes)  # type: ignore[arg-type]


@dataclass(frozen=True, slots=True)
class ProjectConfig:
    """Everything a compilation run needs besides the translation files.

    Attributes:
        settings: Compiler settings
        registry: Output targets by language
        table: Lookup facade metadata (None: no facade is emitted)
        root: Directory relative paths are resolved against
    """

    settings: CompilerSettings = field(default_factory=CompilerSettings)
    registry: TargetRegistry = field(default_factory=TargetRegistry)
    table: TableMetadata | None = None
    root: Path = field(default_factory=Path.cwd)

    @property
    def translations_path(self) -> Path:
        """Absolute translations directory."""
        return (self.root / self.settings.translations_dir).resolve()


def _parse_targets(section: Mapping[str, object]) -> TargetRegistry:
    registry = TargetRegistry()
    for language, raw in section.items():
        if not isinstance(raw, Mapping):
            msg = f"Target '{language}' must be a table with namespace and type-name"
            raise ConfigurationError(msg)
        options = {key.replace("-", "_"): value for key, value in raw.items()}
        registry.register(
            OutputTarget(
                language=language,
                namespace=_parse_str(f"targets.{language}.namespace", options.get("namespace")),
                type_name=_parse_str(f"targets.{language}.type-name", options.get("type_name")),
                is_default=_parse_bool(
                    f"targets.{language}.default", options.get("default", False)
                ),
            )
        )
    return registry


def _parse_table(raw: object) -> TableMetadata:
    if not isinstance(raw, Mapping):
        msg = "[tool.loctable.table] must be a table"
        raise ConfigurationError(msg)
    options = {key.replace("-", "_"): value for key, value in raw.items()}
    known = (
        "namespace",
        "type_name",
        "field_name",
        "current_accessor",
        "default_accessor",
        "catalog_namespace",
    )
    kwargs = {name: _parse_str(f"table.{name}", options[name]) for name in known if name in options}
    if "namespace" not in kwargs or "type_name" not in kwargs:
        msg = "[tool.loctable.table] requires namespace and type-name"
        raise ConfigurationError(msg)
    return TableMetadata(**kwargs)


def load_project_config(path: Path | str) -> ProjectConfig:
    """Load configuration from the [tool.loctable] section of a TOML file.

    Supported layout::

        [tool.loctable]
        translations-dir = "Translations"
        default-language = "en"
        strict-mode = false

        [tool.loctable.targets.en]
        namespace = "app.texts.english"
        type-name = "EnglishTexts"
        default = true

        [tool.loctable.table]
        namespace = "app.texts.table"
        type-name = "TextTable"
        field-name = "R"

    Args:
        path: pyproject.toml (or any TOML file with the same section)

    Returns:
        Parsed ProjectConfig; paths are relative to the file's directory

    Raises:
        ConfigurationError: If the file cannot be read or is malformed
    """
    config_path = Path(path)
    try:
        with config_path.open("rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        msg = f"Cannot read configuration {config_path}: {e}"
        raise ConfigurationError(msg) from e

    section = data.get("tool", {}).get(CONFIG_SECTION, {})
    if not isinstance(section, Mapping):
        msg = f"[tool.{CONFIG_SECTION}] must be a table"
        raise ConfigurationError(msg)

    options = {k: v for k, v in section.items() if k not in ("targets", "table")}
    targets = section.get("targets", {})
    if not isinstance(targets, Mapping):
        msg = f"[tool.{CONFIG_SECTION}.targets] must be a table"
        raise ConfigurationError(msg)

    return ProjectConfig(
        settings=CompilerSettings.from_mapping(options),
        registry=_parse_targets(targets),
        table=_parse_table(section["table"]) if "table" in section else None,
        root=config_path.resolve().parent,
    )
