"""Immutable collection of compilation findings.

Python 3.13+.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from loctable.locale_utils import normalize_language_tag

from .codes import Diagnostic, DiagnosticCode, Severity

__all__ = [
    "VALIDATION_WARNING_CODES",
    "ValidationReport",
]


# Warning codes produced by cross-language validation and aggregation.
# Strict mode escalates these unless the caller narrows the set.
VALIDATION_WARNING_CODES: frozenset[DiagnosticCode] = frozenset(
    {
        DiagnosticCode.MISSING_MODULE,
        DiagnosticCode.MISSING_KEY,
        DiagnosticCode.EXTRA_KEY,
        DiagnosticCode.UNTRANSLATABLE_OVERRIDE,
        DiagnosticCode.EXTRA_MODULE,
        DiagnosticCode.DUPLICATE_MODULE,
        DiagnosticCode.DUPLICATE_KEY,
    }
)


@dataclass(frozen=True, slots=True)
class ValidationReport:
    """Findings collected over one compilation run.

    Warnings do not prevent a table from being produced; errors mean some
    scope (a file, or the whole table) was dropped.

    Attributes:
        diagnostics: All findings, in the order they were produced

    Example:
        >>> report = ValidationReport.empty()
        >>> report.is_clean
        True
    """

    diagnostics: tuple[Diagnostic, ...] = ()

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(self.diagnostics)

    def __len__(self) -> int:
        return len(self.diagnostics)

    @property
    def warnings(self) -> tuple[Diagnostic, ...]:
        """Recoverable findings."""
        return tuple(d for d in self.diagnostics if d.severity == Severity.WARNING)

    @property
    def errors(self) -> tuple[Diagnostic, ...]:
        """Error and fatal findings."""
        return tuple(d for d in self.diagnostics if d.severity != Severity.WARNING)

    @property
    def has_errors(self) -> bool:
        """Check if any error-level finding was recorded."""
        return any(d.severity != Severity.WARNING for d in self.diagnostics)

    @property
    def is_clean(self) -> bool:
        """Check if no finding at all was recorded."""
        return not self.diagnostics

    def count(self, code: DiagnosticCode) -> int:
        """Number of findings with the given code."""
        return sum(1 for d in self.diagnostics if d.code == code)

    def by_code(self, code: DiagnosticCode) -> tuple[Diagnostic, ...]:
        """All findings with the given code."""
        return tuple(d for d in self.diagnostics if d.code == code)

    def for_language(self, language: str) -> tuple[Diagnostic, ...]:
        """All findings for a language (case-insensitive)."""
        wanted = normalize_language_tag(language)
        return tuple(
            d
            for d in self.diagnostics
            if d.language is not None and normalize_language_tag(d.language) == wanted
        )

    def merge(self, *others: "ValidationReport") -> "ValidationReport":
        """Concatenate this report with others, preserving order."""
        combined = list(self.diagnostics)
        for other in others:
            combined.extend(other.diagnostics)
        return ValidationReport(tuple(combined))

    @staticmethod
    def empty() -> "ValidationReport":
        """Create a report without findings."""
        return ValidationReport(())

    @staticmethod
    def of(diagnostics: Iterable[Diagnostic]) -> "ValidationReport":
        """Create a report from any iterable of diagnostics."""
        return ValidationReport(tuple(diagnostics))

    def format(self, *, include_warnings: bool = True) -> str:
        """Format report as human-readable text.

        Args:
            include_warnings: If True (default), include warnings in output.

        Returns:
            Formatted string with errors and optionally warnings.
        """
        lines: list[str] = []

        if self.errors:
            lines.append(f"Errors ({len(self.errors)}):")
            for error in self.errors:
                location = f" {error.location}" if error.location else ""
                lines.append(f"  [{error.code.label}]{location}: {error.message}")

        if include_warnings and self.warnings:
            lines.append(f"Warnings ({len(self.warnings)}):")
            for warning in self.warnings:
                location = f" {warning.location}" if warning.location else ""
                lines.append(f"  [{warning.code.label}]{location}: {warning.message}")

        if not lines:
            return "Validation passed: no errors or warnings"

        return "\n".join(lines)
