"""Diagnostic codes and data structures.

Defines diagnostic codes, source locations, and structured diagnostics
produced while compiling translation tables.
Python 3.13+. Zero external dependencies.
"""

from dataclasses import dataclass
from enum import Enum, StrEnum

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "Severity",
    "SourceLocation",
]


class Severity(StrEnum):
    """Diagnostic severity.

    Inherits from ``StrEnum`` so that formatted output and JSON payloads
    receive plain strings (``"warning"``, ``"error"``).

    Levels:
        WARNING: Recoverable finding, compilation proceeds with degraded data
        ERROR: Per-scope failure (file skipped, table not produced)
        FATAL: Configuration failure, the run is aborted
    """

    WARNING = "warning"
    ERROR = "error"
    FATAL = "fatal"


class DiagnosticCode(Enum):
    """Diagnostic codes with unique identifiers.

    Organized by category:
        1000-1099: Configuration errors (fatal, abort the run)
        1100-1199: Configuration warnings (per-language exclusions)
        2000-2099: Cross-language validation warnings
        2100-2199: Aggregation warnings (duplicate files and keys)
        3000-3999: Input and internal errors
    """

    # Configuration errors (1000-1099)
    NO_DEFAULT_LOCALE = 1001
    MULTIPLE_DEFAULT_LOCALES = 1002
    INVALID_TARGET = 1003
    STRICT_MODE_VIOLATION = 1004

    # Configuration warnings (1100-1199)
    MISSING_TARGET = 1101

    # Validation warnings (2000-2099)
    MISSING_MODULE = 2001
    MISSING_KEY = 2002
    EXTRA_KEY = 2003
    UNTRANSLATABLE_OVERRIDE = 2004
    EXTRA_MODULE = 2005

    # Aggregation warnings (2100-2199)
    DUPLICATE_MODULE = 2101
    DUPLICATE_KEY = 2102

    # Input and internal errors (3000-3999)
    INVALID_SOURCE = 3001
    INTERNAL_ERROR = 3002

    @property
    def label(self) -> str:
        """Short identifier used in formatted output (e.g. ``LT2002``)."""
        return f"LT{self.value:04d}"


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """Location of a finding in a translation source file.

    Attributes:
        path: Source file path
        line: Line number (1-indexed, None when unknown)
    """

    path: str
    line: int | None = None

    def __post_init__(self) -> None:
        """Validate SourceLocation invariants.

        Raises:
            ValueError: If line is less than 1 (lines are 1-indexed)
        """
        if self.line is not None and self.line < 1:
            msg = f"SourceLocation.line must be >= 1 (1-indexed), got {self.line}"
            raise ValueError(msg)

    def __str__(self) -> str:
        """Return ``path`` or ``path:line``."""
        if self.line is None:
            return self.path
        return f"{self.path}:{self.line}"


@dataclass(frozen=True, slots=True)
class Diagnostic:
    """Structured diagnostic message.

    Carries enough context for a human to locate and fix the offending
    translation file, and for tools to group findings by code.

    Attributes:
        code: Unique diagnostic code
        message: Human-readable description
        severity: Severity level
        location: File and line of the finding (None when not file-bound)
        language: Language tag the finding applies to
        module: Module name the finding applies to
        key: Entry key the finding applies to
        hint: Suggestion for fixing the finding
    """

    code: DiagnosticCode
    message: str
    severity: Severity = Severity.WARNING
    location: SourceLocation | None = None
    language: str | None = None
    module: str | None = None
    key: str | None = None
    hint: str | None = None

    def __str__(self) -> str:
        """Return human-readable description."""
        return self.message

    @property
    def is_warning(self) -> bool:
        """True for recoverable findings."""
        return self.severity == Severity.WARNING

    def format_error(self) -> str:
        """Format diagnostic like a compiler message.

        Example output:
            warning[LT2002]: The key 'Hello' is missing its translation in Translations/pl/Main.json file
              --> Translations/pl/Main.json
              = help: Add 'Hello' to this file; the default text is used until then

        Returns:
            Formatted diagnostic
        """
        from .formatter import DiagnosticFormatter  # noqa: PLC0415 - circular

        return DiagnosticFormatter().format(self)
