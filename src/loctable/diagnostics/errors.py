"""loctable exception hierarchy with structured diagnostics.

All exceptions can carry Diagnostic objects for rich error information.

Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic

__all__ = [
    "CompilationCancelledError",
    "ConfigurationError",
    "InternalError",
    "LocTableError",
    "SourceFormatError",
]


class LocTableError(Exception):
    """Base exception for all loctable errors.

    Attributes:
        diagnostic: Structured diagnostic information (optional)
    """

    def __init__(self, message: str | Diagnostic) -> None:
        """Initialize LocTableError.

        Args:
            message: Error message string OR Diagnostic object
        """
        if isinstance(message, Diagnostic):
            self.diagnostic: Diagnostic | None = message
            super().__init__(message.format_error())
        else:
            self.diagnostic = None
            super().__init__(message)


class ConfigurationError(LocTableError):
    """Fatal configuration problem. The run is aborted, no table is produced.

    Raised for a missing or ambiguous default locale, malformed output
    target registrations, and strict-mode escalation of warnings.

    Attributes:
        diagnostics: All diagnostics that triggered the error
    """

    def __init__(
        self,
        message: str | Diagnostic,
        *,
        diagnostics: tuple[Diagnostic, ...] = (),
    ) -> None:
        """Initialize ConfigurationError.

        Args:
            message: Error message string OR Diagnostic object
            diagnostics: Findings that caused the failure (e.g. escalated warnings)
        """
        super().__init__(message)
        if not diagnostics and self.diagnostic is not None:
            diagnostics = (self.diagnostic,)
        self.diagnostics = diagnostics


class SourceFormatError(LocTableError, ValueError):
    """Translation source file could not be parsed.

    Attributes:
        path: Path of the offending file
        line: Line where parsing failed (1-indexed, None when unknown)
    """

    def __init__(self, message: str, *, path: str = "", line: int | None = None) -> None:
        """Initialize SourceFormatError.

        Args:
            message: Error message
            path: Path of the offending file
            line: Line where parsing failed
        """
        super().__init__(message)
        self.path = path
        self.line = line


class CompilationCancelledError(LocTableError):
    """Cancellation was requested between pipeline phases.

    Partial output of completed phases is discarded.

    Attributes:
        phase: Name of the phase that was about to start
    """

    def __init__(self, phase: str) -> None:
        """Initialize CompilationCancelledError.

        Args:
            phase: Phase that was about to start
        """
        super().__init__(f"Compilation cancelled before phase '{phase}'")
        self.phase = phase


class InternalError(LocTableError):
    """Unexpected failure inside a pipeline phase.

    Never escapes compile_table(): the pipeline records it as a single
    INTERNAL_ERROR diagnostic instead.
    """
