"""Cross-language validation.

Architecture:
    - rebuild_module(): Rebuild one non-default module against the default
      module's IDs, reporting missing keys, extra keys and untranslatable
      overrides in the same pass
    - check_modules(): Report modules missing from, or extra to, a
      non-default language
    - escalate_warnings(): Strict-mode policy, turns selected warnings
      into a ConfigurationError

Extra-key detection always runs. A default entry flagged untranslatable
never produces MISSING_KEY: it resolves from the default language anyway.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Collection, Mapping

from loctable.diagnostics import (
    VALIDATION_WARNING_CODES,
    ConfigurationError,
    Diagnostic,
    DiagnosticCode,
    DiagnosticTemplate,
    ValidationReport,
)
from loctable.model import AggregatedLocaleData, IndexedEntry, Module, TextId

__all__ = [
    "check_modules",
    "escalate_warnings",
    "rebuild_module",
]

logger = logging.getLogger(__name__)


def check_modules(
    default: AggregatedLocaleData,
    other: AggregatedLocaleData,
) -> list[Diagnostic]:
    """Compare the module sets of the default and another language.

    Args:
        default: Default language data
        other: Non-default language data

    Returns:
        MISSING_MODULE for each default module the language lacks, then
        EXTRA_MODULE for each module the default language lacks
    """
    findings: list[Diagnostic] = [
        DiagnosticTemplate.missing_module(name, other.language, module.source_path)
        for name, module in default.modules.items()
        if name not in other.modules
    ]
    findings.extend(
        DiagnosticTemplate.extra_module(name, other.language, module.source_path)
        for name, module in other.modules.items()
        if name not in default.modules
    )
    return findings


def rebuild_module(
    default_module: Module,
    module: Module,
    key_ids: Mapping[str, TextId],
    language: str,
) -> tuple[dict[TextId, IndexedEntry], list[Diagnostic]]:
    """Rebuild a non-default module against canonical IDs.

    Args:
        default_module: Module of the default language
        module: Same-named module of the non-default language
        key_ids: Canonical IDs of the default module's keys
        language: Tag of the non-default language (for diagnostics)

    Returns:
        Tuple of (entries by ID, findings). IDs without a translation are
        absent from the mapping.
    """
    entries: dict[TextId, IndexedEntry] = {}
    findings: list[Diagnostic] = []

    for key, text_id in key_ids.items():
        default_entry = default_module.entries[key]
        entry = module.get(key)
        if entry is None:
            if not default_entry.is_untranslatable:
                findings.append(
                    DiagnosticTemplate.missing_key(
                        key, module.name, language, module.source_path, default_entry.line
                    )
                )
            continue
        if default_entry.is_untranslatable:
            findings.append(
                DiagnosticTemplate.untranslatable_override(
                    key, module.name, language, module.source_path, entry.line
                )
            )
        entries[text_id] = IndexedEntry(text_id=text_id, module=module.name, entry=entry)

    for key, entry in module.entries.items():
        if key not in key_ids:
            findings.append(
                DiagnosticTemplate.extra_key(
                    key, module.name, language, module.source_path, entry.line
                )
            )

    return entries, findings


def escalate_warnings(
    report: ValidationReport,
    codes: Collection[DiagnosticCode] | None = None,
) -> None:
    """Apply strict mode to a report.

    Args:
        report: Findings of a compilation run
        codes: Warning codes to escalate (default: all validation warnings)

    Raises:
        ConfigurationError: If the report has a warning with one of the codes
    """
    selected = VALIDATION_WARNING_CODES if codes is None else frozenset(codes)
    escalated = tuple(d for d in report.warnings if d.code in selected)
    if not escalated:
        return
    logger.error("Strict mode: %d warning(s) escalated", len(escalated))
    raise ConfigurationError(
        DiagnosticTemplate.strict_mode_violation(escalated),
        diagnostics=escalated,
    )
