"""Aggregation of parsed files into per-language data.

Architecture:
    - aggregate(): Main entry point, one pass over the parsed files
    - _LocaleBuilder: Mutable per-language state used only during the pass
    - AggregationResult: Frozen snapshot handed to the indexer

Rules:
    - A language is identified case-insensitively; the tag as first seen
      is kept for display.
    - A language without a registered output target is excluded entirely
      (one MISSING_TARGET warning).
    - A second file for the same (language, module) replaces the first
      wholesale. The module keeps its first-seen position.
    - A key repeated within one file keeps the last occurrence's data at
      the first occurrence's position.

The order of files within a language is significant: it fixes module and
entry traversal order, and through it the canonical IDs.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from loctable.config import CompilerSettings
from loctable.diagnostics import (
    Diagnostic,
    DiagnosticTemplate,
    InternalError,
    ValidationReport,
)
from loctable.locale_utils import normalize_language_tag, same_language
from loctable.model import AggregatedLocaleData, Entry, Module
from loctable.sources import SourceFile
from loctable.targets import OutputTarget, TargetRegistry

__all__ = ["AggregationResult", "aggregate"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AggregationResult:
    """Frozen output of the aggregation phase.

    Attributes:
        locales: Per-language data by normalized tag, in first-seen order
        report: Findings collected while aggregating
        excluded: Languages dropped for lack of an output target (as first seen)
    """

    locales: Mapping[str, AggregatedLocaleData]
    report: ValidationReport = field(default_factory=ValidationReport.empty)
    excluded: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        if not isinstance(self.locales, MappingProxyType):
            object.__setattr__(self, "locales", MappingProxyType(dict(self.locales)))

    def locale(self, language: str) -> AggregatedLocaleData | None:
        """Data for a language (case-insensitive), or None."""
        return self.locales.get(normalize_language_tag(language))


class _LocaleBuilder:
    """Mutable state of one language while files are being merged."""

    __slots__ = ("is_default", "language", "modules", "target")

    def __init__(self, language: str, is_default: bool, target: OutputTarget) -> None:
        self.language = language
        self.is_default = is_default
        self.target = target
        self.modules: dict[str, Module] = {}

    def freeze(self) -> AggregatedLocaleData:
        return AggregatedLocaleData(
            language=self.language,
            is_default=self.is_default,
            target=self.target,
            modules=self.modules,
        )


def _build_module(source: SourceFile, warnings: list[Diagnostic]) -> Module:
    entries: dict[str, Entry] = {}
    for raw in source.entries:
        if raw.key in entries:
            warnings.append(
                DiagnosticTemplate.duplicate_key(
                    raw.key, source.module, source.language, source.path, raw.line
                )
            )
        entries[raw.key] = Entry(
            key=raw.key,
            text=raw.text,
            line=raw.line,
            is_untranslatable=raw.is_untranslatable,
            is_templated=raw.is_templated,
        )
    return Module(name=source.module, source_path=source.path, entries=entries)


def aggregate(
    files: Iterable[SourceFile],
    registry: TargetRegistry,
    settings: CompilerSettings,
) -> AggregationResult:
    """Merge parsed files into one structure per language.

    Files are processed in the order given; callers that need
    reproducible IDs pass them sorted by path.

    Args:
        files: Parsed translation files
        registry: Registered output targets
        settings: Compiler settings (default language)

    Returns:
        Frozen per-language data plus aggregation findings

    Raises:
        InternalError: If a file record lacks a language or module name
    """
    builders: dict[str, _LocaleBuilder] = {}
    excluded: dict[str, str] = {}
    warnings: list[Diagnostic] = []

    for source in files:
        if not source.language or not source.module:
            msg = f"Source record {source.path!r} has no language or module name"
            raise InternalError(msg)

        tag = normalize_language_tag(source.language)
        if tag in excluded:
            continue

        builder = builders.get(tag)
        if builder is None:
            target = registry.get(source.language)
            if target is None:
                logger.warning(
                    "No output target for language '%s'; skipping its files", source.language
                )
                excluded[tag] = source.language
                warnings.append(DiagnosticTemplate.missing_target(source.language, source.path))
                continue
            is_default = same_language(source.language, settings.default_language)
            builder = _LocaleBuilder(source.language, is_default, target)
            builders[tag] = builder
            logger.debug("New locale '%s' (default=%s)", source.language, is_default)

        module = _build_module(source, warnings)
        previous = builder.modules.get(module.name)
        if previous is not None:
            warnings.append(
                DiagnosticTemplate.duplicate_module(
                    module.name, builder.language, source.path, previous.source_path
                )
            )
        builder.modules[module.name] = module
        logger.debug(
            "Aggregated %s.%s: %d entries", builder.language, module.name, len(module)
        )

    locales = {tag: builder.freeze() for tag, builder in builders.items()}
    logger.info(
        "Aggregated %d language(s), %d excluded", len(locales), len(excluded)
    )
    return AggregationResult(
        locales=locales,
        report=ValidationReport.of(warnings),
        excluded=tuple(excluded.values()),
    )
