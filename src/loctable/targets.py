"""Output target registry and lookup-table metadata.

Targets are registered explicitly (from configuration or code) rather
than discovered from source declarations. Each registration maps one
language tag to the Python module and class that will hold its texts.

Python 3.13+.
"""

from __future__ import annotations

import keyword
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from loctable.constants import DEFAULT_CURRENT_ACCESSOR, DEFAULT_DEFAULT_ACCESSOR
from loctable.diagnostics import ConfigurationError, DiagnosticTemplate
from loctable.locale_utils import normalize_language_tag, same_language

__all__ = [
    "OutputTarget",
    "TableMetadata",
    "TargetRegistry",
    "is_identifier",
    "is_module_path",
]


def is_identifier(name: str) -> bool:
    """Check that name is a usable Python identifier (not a keyword)."""
    return name.isidentifier() and not keyword.iskeyword(name)


def is_module_path(name: str) -> bool:
    """Check that name is a dotted Python module path."""
    return bool(name) and all(is_identifier(part) for part in name.split("."))


@dataclass(frozen=True, slots=True)
class OutputTarget:
    """Where generated code for one language goes.

    Attributes:
        language: Language tag (case-insensitive)
        namespace: Dotted Python module path of the generated provider
        type_name: Provider class name
        is_default: Registration claims to be the default language
    """

    language: str
    namespace: str
    type_name: str
    is_default: bool = False

    @property
    def tag(self) -> str:
        """Normalized language tag."""
        return normalize_language_tag(self.language)

    def problems(self) -> list[str]:
        """Return reasons this registration is malformed (empty when valid)."""
        reasons: list[str] = []
        if not self.tag:
            reasons.append("language tag is empty")
        if not is_module_path(self.namespace):
            reasons.append(f"namespace '{self.namespace}' is not a dotted Python module path")
        if not is_identifier(self.type_name):
            reasons.append(f"type name '{self.type_name}' is not a Python identifier")
        return reasons


@dataclass(frozen=True, slots=True)
class TableMetadata:
    """Names used by the generated lookup facade.

    The facade is emitted as a mixin class ``type_name`` exposing
    attribute ``field_name``. It reads the active and default providers
    from the owner's ``current_accessor`` and ``default_accessor``
    attributes.

    Attributes:
        namespace: Dotted module path of the generated facade
        type_name: Facade mixin class name
        field_name: Attribute through which texts are reached (e.g. ``R``)
        current_accessor: Owner attribute returning the active provider
        default_accessor: Owner attribute returning the default provider
        catalog_namespace: Dotted module path of the ID catalog (default:
            ``<namespace>_ids``)
    """

    namespace: str
    type_name: str
    field_name: str = "texts"
    current_accessor: str = DEFAULT_CURRENT_ACCESSOR
    default_accessor: str = DEFAULT_DEFAULT_ACCESSOR
    catalog_namespace: str | None = None

    def __post_init__(self) -> None:
        """Validate names at construction time.

        Raises:
            ConfigurationError: If any name is not a valid Python name
        """
        if not is_module_path(self.namespace):
            msg = f"Table namespace '{self.namespace}' is not a dotted Python module path"
            raise ConfigurationError(msg)
        for label, value in (
            ("type name", self.type_name),
            ("field name", self.field_name),
            ("current accessor", self.current_accessor),
            ("default accessor", self.default_accessor),
        ):
            if not is_identifier(value):
                msg = f"Table {label} '{value}' is not a Python identifier"
                raise ConfigurationError(msg)
        if self.current_accessor == self.default_accessor:
            msg = "Current and default accessors must differ"
            raise ConfigurationError(msg)
        if self.catalog_namespace is not None and not is_module_path(self.catalog_namespace):
            msg = f"Catalog namespace '{self.catalog_namespace}' is not a dotted Python module path"
            raise ConfigurationError(msg)
        if self.id_catalog_namespace == self.namespace:
            msg = "The ID catalog and the facade need different namespaces"
            raise ConfigurationError(msg)

    @property
    def id_catalog_namespace(self) -> str:
        """Dotted module path the ID catalog is emitted to."""
        return self.catalog_namespace or f"{self.namespace}_ids"


class TargetRegistry:
    """Explicit registration table: language tag -> OutputTarget.

    Lookups are case-insensitive. Registration order is preserved.

    Example:
        >>> registry = TargetRegistry()
        >>> registry.register(OutputTarget("en", "app.texts.en", "EnglishTexts"))
        >>> registry.get("EN").type_name
        'EnglishTexts'
    """

    __slots__ = ("_targets",)

    def __init__(self, targets: Iterable[OutputTarget] = ()) -> None:
        self._targets: dict[str, OutputTarget] = {}
        for target in targets:
            self.register(target)

    def __repr__(self) -> str:
        languages = ", ".join(t.language for t in self._targets.values())
        return f"TargetRegistry([{languages}])"

    def __len__(self) -> int:
        return len(self._targets)

    def __iter__(self) -> Iterator[OutputTarget]:
        return iter(self._targets.values())

    def __contains__(self, language: object) -> bool:
        return isinstance(language, str) and normalize_language_tag(language) in self._targets

    def register(self, target: OutputTarget) -> None:
        """Register an output target.

        Raises:
            ConfigurationError: If the registration is malformed, or the
                language is already registered
        """
        problems = target.problems()
        if problems:
            raise ConfigurationError(
                DiagnosticTemplate.invalid_target(target.language, "; ".join(problems))
            )
        if target.tag in self._targets:
            raise ConfigurationError(
                DiagnosticTemplate.invalid_target(target.language, "language registered twice")
            )
        self._targets[target.tag] = target

    def get(self, language: str) -> OutputTarget | None:
        """Target for a language (case-insensitive), or None."""
        return self._targets.get(normalize_language_tag(language))

    def validate(self, default_language: str) -> None:
        """Check default flags against the configured default language.

        The configured default language decides which locale is default;
        registrations may only confirm it.

        Raises:
            ConfigurationError: If a registration flagged default names a
                different language, or several registrations are flagged
        """
        flagged = [t for t in self._targets.values() if t.is_default]
        if len(flagged) > 1:
            raise ConfigurationError(
                DiagnosticTemplate.multiple_default_locales(tuple(t.language for t in flagged))
            )
        for target in flagged:
            if not same_language(target.language, default_language):
                raise ConfigurationError(
                    DiagnosticTemplate.invalid_target(
                        target.language,
                        f"flagged default but the default language is '{default_language}'",
                    )
                )
