"""Rendering of diagnostics for terminals and tooling.

Styles are listed in OutputFormat; JSON output is one object per line.
"""

import json
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from .codes import Diagnostic, Severity

if TYPE_CHECKING:
    from .validation import ValidationReport

__all__ = [
    "DiagnosticFormatter",
    "OutputFormat",
]


class OutputFormat(StrEnum):
    """Rendering style for DiagnosticFormatter."""

    RUST = "rust"  # Compiler-style multi-line output (default)
    SIMPLE = "simple"  # Single-line format
    JSON = "json"  # JSON format for tooling integration


_SEVERITY_COLORS: dict[Severity, str] = {
    Severity.WARNING: "\033[1;33m",  # Bold yellow
    Severity.ERROR: "\033[1;31m",  # Bold red
    Severity.FATAL: "\033[1;35m",  # Bold magenta
}


@dataclass(frozen=True, slots=True)
class DiagnosticFormatter:
    """Renders diagnostics and reports in one configured style.

    Attributes:
        output_format: Output style (rust, simple, json)
        sanitize: Truncate messages to max_content_length
        color: Enable ANSI color codes (for terminal output)
        max_content_length: Maximum message length when sanitizing

    Example:
        >>> formatter = DiagnosticFormatter(output_format=OutputFormat.SIMPLE)
        >>> print(formatter.format(diagnostic))
        Translations/pl/Main.json: warning[LT2002]: The key 'Hello' is missing ...
    """

    output_format: OutputFormat = OutputFormat.RUST
    sanitize: bool = False
    color: bool = False
    max_content_length: int = 200

    def format(self, diagnostic: Diagnostic) -> str:
        """Format a single diagnostic.

        Args:
            diagnostic: Diagnostic to format

        Returns:
            Formatted diagnostic string
        """
        match self.output_format:
            case OutputFormat.RUST:
                return self._format_rust(diagnostic)
            case OutputFormat.SIMPLE:
                return self._format_simple(diagnostic)
            case OutputFormat.JSON:
                return self._format_json(diagnostic)

    def format_all(self, diagnostics: Iterable[Diagnostic]) -> str:
        """Format multiple diagnostics.

        JSON output yields one object per line; other styles separate
        diagnostics with a blank line.
        """
        separator = "\n" if self.output_format == OutputFormat.JSON else "\n\n"
        return separator.join(self.format(d) for d in diagnostics)

    def format_report(self, report: "ValidationReport") -> str:
        """Format a ValidationReport with a summary line.

        Args:
            report: Report to format

        Returns:
            Every diagnostic followed by the summary line
        """
        summary = (
            f"{len(report.errors)} error(s), {len(report.warnings)} warning(s)"
        )
        if not report.diagnostics:
            return f"Compilation finished: {summary}"
        return f"{self.format_all(report.diagnostics)}\n\nCompilation finished: {summary}"

    def _severity(self, severity: Severity) -> str:
        if self.color:
            return f"{_SEVERITY_COLORS[severity]}{severity}\033[0m"
        return str(severity)

    def _format_rust(self, diagnostic: Diagnostic) -> str:
        """Format diagnostic in compiler style.

        Example output:
            warning[LT2003]: File pl/Main.json contains key 'Bye', which ...
              --> pl/Main.json:4
              = module: Main
              = key: Bye
              = help: Add the key to the default language or remove it here
        """
        message = self._maybe_sanitize(diagnostic.message)
        parts = [
            f"{self._severity(diagnostic.severity)}[{diagnostic.code.label}]: {message}"
        ]

        if diagnostic.location:
            parts.append(f"  --> {diagnostic.location}")

        if diagnostic.language:
            parts.append(f"  = language: {diagnostic.language}")

        if diagnostic.module:
            parts.append(f"  = module: {diagnostic.module}")

        if diagnostic.key:
            parts.append(f"  = key: {diagnostic.key}")

        if diagnostic.hint:
            parts.append(f"  = help: {self._maybe_sanitize(diagnostic.hint)}")

        return "\n".join(parts)

    def _format_simple(self, diagnostic: Diagnostic) -> str:
        """Format diagnostic in single-line format.

        Example output:
            pl/Main.json:4: warning[LT2003]: File pl/Main.json contains key 'Bye', ...
        """
        message = self._maybe_sanitize(diagnostic.message)
        prefix = f"{diagnostic.location}: " if diagnostic.location else ""
        return f"{prefix}{diagnostic.severity}[{diagnostic.code.label}]: {message}"

    def _format_json(self, diagnostic: Diagnostic) -> str:
        """Format diagnostic as a single JSON object."""
        data: dict[str, str | int | None] = {
            "code": diagnostic.code.name,
            "code_value": diagnostic.code.value,
            "severity": str(diagnostic.severity),
            "message": self._maybe_sanitize(diagnostic.message),
        }

        if diagnostic.location:
            data["path"] = diagnostic.location.path
            data["line"] = diagnostic.location.line

        if diagnostic.language:
            data["language"] = diagnostic.language

        if diagnostic.module:
            data["module"] = diagnostic.module

        if diagnostic.key:
            data["key"] = diagnostic.key

        if diagnostic.hint:
            data["hint"] = self._maybe_sanitize(diagnostic.hint)

        return json.dumps(data, ensure_ascii=False)

    def _maybe_sanitize(self, text: str) -> str:
        """Truncate text if sanitization is enabled."""
        if self.sanitize and len(text) > self.max_content_length:
            return text[: self.max_content_length] + "..."
        return text
