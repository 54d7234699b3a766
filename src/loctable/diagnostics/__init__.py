"""Diagnostic system for translation table compilation.

Provides structured diagnostics with codes, source locations, and hints,
the exception hierarchy, and formatting for terminals and tools.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, Severity, SourceLocation
from .errors import (
    CompilationCancelledError,
    ConfigurationError,
    InternalError,
    LocTableError,
    SourceFormatError,
)
from .formatter import DiagnosticFormatter, OutputFormat
from .templates import DiagnosticTemplate
from .validation import VALIDATION_WARNING_CODES, ValidationReport

__all__ = [
    "VALIDATION_WARNING_CODES",
    "CompilationCancelledError",
    "ConfigurationError",
    "Diagnostic",
    "DiagnosticCode",
    "DiagnosticFormatter",
    "DiagnosticTemplate",
    "InternalError",
    "LocTableError",
    "OutputFormat",
    "Severity",
    "SourceFormatError",
    "SourceLocation",
    "ValidationReport",
]
