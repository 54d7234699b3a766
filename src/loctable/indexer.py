"""Canonical ID assignment and cross-language rebuild.

Architecture:
    - find_default_locale(): Precondition check, exactly one default
    - build_key_space(): Pass 1 - Number the default language's entries
    - index_locales(): Main entry point; indexes the default language,
      then rebuilds every other language against the same IDs while
      validating it (validation.rebuild_module / check_modules)

IDs come from one counter shared by all modules, starting at
FIRST_TEXT_ID, in the default language's module/entry first-seen order.
Keys missing from the default language never receive an ID.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from loctable.constants import FIRST_TEXT_ID
from loctable.diagnostics import (
    ConfigurationError,
    Diagnostic,
    DiagnosticTemplate,
    ValidationReport,
)
from loctable.model import (
    AggregatedLocaleData,
    CanonicalKeySpace,
    IndexedEntry,
    IndexedLocaleData,
    IndexedModule,
    IndexedTable,
    TextId,
)
from loctable.validation import check_modules, rebuild_module

__all__ = [
    "IndexingResult",
    "build_key_space",
    "find_default_locale",
    "index_locales",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class IndexingResult:
    """Output of the indexing phase.

    Attributes:
        table: The canonical, ID-addressed table
        report: Cross-language findings
    """

    table: IndexedTable
    report: ValidationReport = field(default_factory=ValidationReport.empty)


def find_default_locale(
    locales: Mapping[str, AggregatedLocaleData],
    default_language: str | None = None,
) -> AggregatedLocaleData:
    """Return the single locale flagged default.

    Args:
        locales: Aggregated data by normalized tag
        default_language: Configured default tag, for the error message

    Raises:
        ConfigurationError: If zero or more than one locale is flagged default
    """
    defaults = [data for data in locales.values() if data.is_default]
    if not defaults:
        raise ConfigurationError(DiagnosticTemplate.no_default_locale(default_language))
    if len(defaults) > 1:
        raise ConfigurationError(
            DiagnosticTemplate.multiple_default_locales(tuple(d.language for d in defaults))
        )
    return defaults[0]


def build_key_space(default: AggregatedLocaleData) -> CanonicalKeySpace:
    """Assign canonical IDs to every entry of the default language.

    Example:
        >>> space = build_key_space(default)  # modules Main{A, B}, Menu{C}
        >>> list(space)
        [('Main', 'A', 1), ('Main', 'B', 2), ('Menu', 'C', 3)]
    """
    next_id = FIRST_TEXT_ID
    modules: dict[str, dict[str, TextId]] = {}
    for name, module in default.modules.items():
        key_ids: dict[str, TextId] = {}
        for key in module.entries:
            key_ids[key] = next_id
            next_id += 1
        modules[name] = key_ids
    return CanonicalKeySpace(modules)


def _index_default(default: AggregatedLocaleData, space: CanonicalKeySpace) -> IndexedLocaleData:
    modules: dict[str, IndexedModule] = {}
    for name, module in default.modules.items():
        key_ids = space.modules[name]
        entries = {
            key_ids[key]: IndexedEntry(text_id=key_ids[key], module=name, entry=entry)
            for key, entry in module.entries.items()
        }
        modules[name] = IndexedModule(name=name, source_path=module.source_path, entries=entries)
    return IndexedLocaleData(
        language=default.language,
        is_default=True,
        target=default.target,
        modules=modules,
    )


def _index_other(
    default: AggregatedLocaleData,
    other: AggregatedLocaleData,
    space: CanonicalKeySpace,
) -> tuple[IndexedLocaleData, list[Diagnostic]]:
    findings = check_modules(default, other)
    modules: dict[str, IndexedModule] = {}

    for name, default_module in default.modules.items():
        module = other.modules.get(name)
        if module is None:
            continue
        entries, module_findings = rebuild_module(
            default_module, module, space.modules[name], other.language
        )
        findings.extend(module_findings)
        modules[name] = IndexedModule(name=name, source_path=module.source_path, entries=entries)

    indexed = IndexedLocaleData(
        language=other.language,
        is_default=False,
        target=other.target,
        modules=modules,
    )
    logger.debug(
        "Indexed '%s': %d of %d texts translated, %d finding(s)",
        other.language,
        len(indexed),
        len(space),
        len(findings),
    )
    return indexed, findings


def index_locales(
    locales: Mapping[str, AggregatedLocaleData],
    *,
    default_language: str | None = None,
) -> IndexingResult:
    """Build the canonical table from aggregated per-language data.

    Args:
        locales: Aggregated data by normalized tag
        default_language: Configured default tag, for error messages

    Returns:
        IndexingResult with the table and the cross-language findings

    Raises:
        ConfigurationError: If zero or more than one locale is flagged default
    """
    default = find_default_locale(locales, default_language)
    space = build_key_space(default)
    logger.info(
        "Canonical key space: %d text(s) in %d module(s) from '%s'",
        len(space),
        len(space.modules),
        default.language,
    )

    indexed: dict[str, IndexedLocaleData] = {default.tag: _index_default(default, space)}
    findings: list[Diagnostic] = []
    for data in locales.values():
        if data is default:
            continue
        indexed[data.tag], locale_findings = _index_other(default, data, space)
        findings.extend(locale_findings)

    table = IndexedTable(key_space=space, locales=indexed, default_tag=default.tag)
    return IndexingResult(table=table, report=ValidationReport.of(findings))
