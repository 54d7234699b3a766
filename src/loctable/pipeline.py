"""Compilation pipeline.

Runs the phases in order:

    1. AGGREGATE: merge parsed files (sorted by path) per language
    2. INDEX: assign canonical IDs, rebuild and validate other languages
    3. VALIDATE: apply strict mode to the collected findings

Failure semantics:
    - ConfigurationError (no or ambiguous default locale, malformed
      targets, strict-mode escalation) propagates: no table.
    - CompilationCancelledError propagates when cancellation is requested
      before a phase starts; partial output is discarded.
    - Any other exception inside a phase is logged and recorded as one
      INTERNAL_ERROR diagnostic; the result has no table.

The pipeline keeps no state between runs.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Iterable
from dataclasses import dataclass, field
from typing import Protocol

from loctable.aggregator import AggregationResult, aggregate
from loctable.config import CompilerSettings
from loctable.diagnostics import (
    CompilationCancelledError,
    ConfigurationError,
    DiagnosticCode,
    DiagnosticTemplate,
    InternalError,
    ValidationReport,
)
from loctable.enums import PipelinePhase
from loctable.indexer import index_locales
from loctable.model import IndexedTable
from loctable.sources import LoadSummary, SourceFile
from loctable.targets import TargetRegistry
from loctable.validation import escalate_warnings

__all__ = [
    "CancelToken",
    "CompileResult",
    "compile_summary",
    "compile_table",
]

logger = logging.getLogger(__name__)


class CancelToken(Protocol):
    """Anything with ``is_set()``, e.g. ``threading.Event``."""

    def is_set(self) -> bool: ...


@dataclass(frozen=True, slots=True)
class CompileResult:
    """Outcome of a compilation run.

    Attributes:
        table: Indexed table (None when an internal error occurred)
        report: All findings, warnings are returned alongside the table
    """

    table: IndexedTable | None
    report: ValidationReport = field(default_factory=ValidationReport.empty)

    @property
    def succeeded(self) -> bool:
        """True when a table was produced."""
        return self.table is not None

    @property
    def internal_error(self) -> bool:
        """True when the run stopped on an unexpected failure."""
        return self.report.count(DiagnosticCode.INTERNAL_ERROR) > 0


def _check_cancel(cancel: CancelToken | None, phase: PipelinePhase) -> None:
    if cancel is not None and cancel.is_set():
        logger.info("Compilation cancelled before phase '%s'", phase)
        raise CompilationCancelledError(str(phase))


def _run_phases(
    files: list[SourceFile],
    registry: TargetRegistry,
    settings: CompilerSettings,
    strict_codes: Collection[DiagnosticCode] | None,
    cancel: CancelToken | None,
    report: ValidationReport,
) -> CompileResult:
    phase = PipelinePhase.AGGREGATE
    try:
        _check_cancel(cancel, phase)
        aggregation: AggregationResult = aggregate(files, registry, settings)
        report = report.merge(aggregation.report)

        phase = PipelinePhase.INDEX
        _check_cancel(cancel, phase)
        indexing = index_locales(
            aggregation.locales, default_language=settings.default_language
        )
        report = report.merge(indexing.report)

        phase = PipelinePhase.VALIDATE
        _check_cancel(cancel, phase)
        if settings.strict_mode:
            escalate_warnings(report, strict_codes)
    except (ConfigurationError, CompilationCancelledError):
        raise
    except InternalError as e:
        logger.error("Internal error during %s: %s", phase, e)
        return CompileResult(
            table=None,
            report=report.merge(ValidationReport.of((DiagnosticTemplate.internal_error(phase, e),))),
        )
    except Exception as e:  # noqa: BLE001 - pipeline boundary
        logger.exception("Unexpected failure during %s", phase)
        return CompileResult(
            table=None,
            report=report.merge(ValidationReport.of((DiagnosticTemplate.internal_error(phase, e),))),
        )

    return CompileResult(table=indexing.table, report=report)


def compile_table(
    files: Iterable[SourceFile],
    registry: TargetRegistry,
    settings: CompilerSettings | None = None,
    *,
    strict_codes: Collection[DiagnosticCode] | None = None,
    cancel: CancelToken | None = None,
    report: ValidationReport | None = None,
) -> CompileResult:
    """Compile parsed translation files into the canonical table.

    Files are sorted by path before aggregation so the same inputs always
    yield the same IDs, whatever order the caller supplies them in.

    Args:
        files: Parsed translation files
        registry: Output targets by language
        settings: Compiler settings (default: CompilerSettings())
        strict_codes: Warning codes strict mode escalates (default: all
            validation warnings)
        cancel: Checked before each phase
        report: Findings from earlier stages (e.g. file loading) to carry
            into the result

    Returns:
        CompileResult with the table and all findings

    Raises:
        ConfigurationError: On configuration failures and strict-mode escalation
        CompilationCancelledError: If cancellation was requested

    Example:
        >>> summary = discover_sources("Translations")
        >>> result = compile_table(summary.source_files, registry, settings)
        >>> for diagnostic in result.report.warnings:
        ...     print(diagnostic.format_error())
    """
    settings = settings or CompilerSettings()
    registry.validate(settings.default_language)
    ordered = sorted(files, key=lambda source: source.path)
    logger.info(
        "Compiling %d file(s), default language '%s'", len(ordered), settings.default_language
    )
    result = _run_phases(
        ordered,
        registry,
        settings,
        strict_codes,
        cancel,
        report or ValidationReport.empty(),
    )
    logger.info(
        "Compilation finished: %d error(s), %d warning(s)",
        len(result.report.errors),
        len(result.report.warnings),
    )
    return result


def compile_summary(
    summary: LoadSummary,
    registry: TargetRegistry,
    settings: CompilerSettings | None = None,
    **kwargs: object,
) -> CompileResult:
    """Compile the files of a LoadSummary, carrying its load errors along.

    Args:
        summary: Result of discover_sources()
        registry: Output targets by language
        settings: Compiler settings
        **kwargs: Forwarded to compile_table()

    Returns:
        CompileResult whose report starts with INVALID_SOURCE findings
    """
    return compile_table(
        summary.source_files,
        registry,
        settings,
        report=ValidationReport.of(summary.diagnostics()),
        **kwargs,  # type: ignore[arg-type]
    )
