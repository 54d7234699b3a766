"""Diagnostic message templates.

Centralized templates for testable, consistent diagnostic messages.
Python 3.13+. Zero external dependencies.
"""

from .codes import Diagnostic, DiagnosticCode, Severity, SourceLocation

__all__ = ["DiagnosticTemplate"]


class DiagnosticTemplate:
    """Centralized diagnostic templates.

    All diagnostics are created here. NO f-strings in exception constructors!
    This provides:
        - Testable messages
        - Consistent formatting
        - Documentation of all finding kinds
    """

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @staticmethod
    def no_default_locale(default_language: str | None = None) -> Diagnostic:
        """No locale is flagged as default.

        Args:
            default_language: Configured default language tag, if known

        Returns:
            Diagnostic for NO_DEFAULT_LOCALE
        """
        if default_language:
            msg = f"No translation files found for default language '{default_language}'"
        else:
            msg = "No default locale found"
        return Diagnostic(
            code=DiagnosticCode.NO_DEFAULT_LOCALE,
            message=msg,
            severity=Severity.FATAL,
            language=default_language,
            hint=(
                "Check the default-language setting and that its directory "
                "contains translation files with a registered output target"
            ),
        )

    @staticmethod
    def multiple_default_locales(languages: tuple[str, ...]) -> Diagnostic:
        """More than one locale is flagged as default.

        Args:
            languages: Tags of all locales flagged default

        Returns:
            Diagnostic for MULTIPLE_DEFAULT_LOCALES
        """
        joined = ", ".join(f"'{lang}'" for lang in languages)
        return Diagnostic(
            code=DiagnosticCode.MULTIPLE_DEFAULT_LOCALES,
            message=f"Multiple default locales found: {joined}",
            severity=Severity.FATAL,
            hint="Exactly one language may be the default",
        )

    @staticmethod
    def invalid_target(language: str, reason: str) -> Diagnostic:
        """Output target registration is malformed.

        Args:
            language: Language tag of the registration
            reason: What is wrong with it

        Returns:
            Diagnostic for INVALID_TARGET
        """
        return Diagnostic(
            code=DiagnosticCode.INVALID_TARGET,
            message=f"Invalid output target for language '{language}': {reason}",
            severity=Severity.FATAL,
            language=language,
        )

    @staticmethod
    def strict_mode_violation(findings: tuple[Diagnostic, ...]) -> Diagnostic:
        """Strict mode escalated warnings to an error.

        Args:
            findings: Escalated warnings

        Returns:
            Diagnostic for STRICT_MODE_VIOLATION
        """
        codes = sorted({d.code.name for d in findings})
        return Diagnostic(
            code=DiagnosticCode.STRICT_MODE_VIOLATION,
            message=(
                f"Strict mode: {len(findings)} warning(s) treated as errors "
                f"({', '.join(codes)})"
            ),
            severity=Severity.FATAL,
            hint="Fix the reported files or disable strict mode",
        )

    @staticmethod
    def missing_target(language: str, path: str) -> Diagnostic:
        """Language found in sources without a registered output target.

        Args:
            language: Language tag as found in the sources
            path: First file seen for the language

        Returns:
            Diagnostic for MISSING_TARGET
        """
        return Diagnostic(
            code=DiagnosticCode.MISSING_TARGET,
            message=(
                f"No output target registered for language '{language}'; "
                f"its translations are excluded"
            ),
            location=SourceLocation(path),
            language=language,
            hint=f"Register a target for '{language}' or remove its directory",
        )

    # ------------------------------------------------------------------
    # Cross-language validation
    # ------------------------------------------------------------------

    @staticmethod
    def missing_module(module: str, language: str, default_path: str) -> Diagnostic:
        """Non-default locale lacks a module of the default locale.

        Args:
            module: Module name
            language: Non-default language tag
            default_path: Source file of the module in the default locale

        Returns:
            Diagnostic for MISSING_MODULE
        """
        return Diagnostic(
            code=DiagnosticCode.MISSING_MODULE,
            message=f"The module '{module}' is missing in '{language}' language directory",
            location=SourceLocation(default_path),
            language=language,
            module=module,
            hint="All texts of this module fall back to the default language",
        )

    @staticmethod
    def missing_key(
        key: str,
        module: str,
        language: str,
        path: str,
        default_line: int | None = None,
    ) -> Diagnostic:
        """Default entry has no translation in a non-default module.

        Args:
            key: Entry key
            module: Module name
            language: Non-default language tag
            path: Source file of the non-default module
            default_line: Line of the key in the default file

        Returns:
            Diagnostic for MISSING_KEY
        """
        hint = f"Add '{key}' to this file; the default text is used until then"
        if default_line is not None:
            hint = f"{hint} (defined at line {default_line} of the default file)"
        return Diagnostic(
            code=DiagnosticCode.MISSING_KEY,
            message=f"The key '{key}' is missing its translation in {path} file",
            location=SourceLocation(path),
            language=language,
            module=module,
            key=key,
            hint=hint,
        )

    @staticmethod
    def extra_key(key: str, module: str, language: str, path: str, line: int | None) -> Diagnostic:
        """Non-default module contains a key absent from the default module.

        Args:
            key: Entry key
            module: Module name
            language: Non-default language tag
            path: Source file of the non-default module
            line: Line of the key

        Returns:
            Diagnostic for EXTRA_KEY
        """
        return Diagnostic(
            code=DiagnosticCode.EXTRA_KEY,
            message=(
                f"File {path} contains key '{key}', which is not present "
                f"in the main translations file"
            ),
            location=SourceLocation(path, line),
            language=language,
            module=module,
            key=key,
            hint="Add the key to the default language or remove it here",
        )

    @staticmethod
    def untranslatable_override(
        key: str, module: str, language: str, path: str, line: int | None
    ) -> Diagnostic:
        """Non-default locale supplies a value for an untranslatable key.

        Args:
            key: Entry key
            module: Module name
            language: Non-default language tag
            path: Source file of the non-default module
            line: Line of the key

        Returns:
            Diagnostic for UNTRANSLATABLE_OVERRIDE
        """
        return Diagnostic(
            code=DiagnosticCode.UNTRANSLATABLE_OVERRIDE,
            message=f"File {path} contains key '{key}', which is marked as untranslatable",
            location=SourceLocation(path, line),
            language=language,
            module=module,
            key=key,
            hint="The value is ignored at lookup time; remove it from this file",
        )

    @staticmethod
    def extra_module(module: str, language: str, path: str) -> Diagnostic:
        """Non-default locale has a module the default locale lacks.

        Args:
            module: Module name
            language: Non-default language tag
            path: Source file of the module

        Returns:
            Diagnostic for EXTRA_MODULE
        """
        return Diagnostic(
            code=DiagnosticCode.EXTRA_MODULE,
            message=(
                f"The module '{module}' of language '{language}' does not exist "
                f"in the default language"
            ),
            location=SourceLocation(path),
            language=language,
            module=module,
            hint="Its keys receive no IDs and are dropped",
        )

    # ------------------------------------------------------------------
    # Aggregation
    # ------------------------------------------------------------------

    @staticmethod
    def duplicate_module(module: str, language: str, path: str, replaced_path: str) -> Diagnostic:
        """Second file for the same (language, module) pair.

        Args:
            module: Module name
            language: Language tag
            path: File that wins
            replaced_path: File whose entries are discarded

        Returns:
            Diagnostic for DUPLICATE_MODULE
        """
        return Diagnostic(
            code=DiagnosticCode.DUPLICATE_MODULE,
            message=(
                f"Module '{module}' of language '{language}' is defined twice; "
                f"{path} replaces {replaced_path}"
            ),
            location=SourceLocation(path),
            language=language,
            module=module,
            hint="Modules are replaced, not merged; keep one file per module",
        )

    @staticmethod
    def duplicate_key(key: str, module: str, language: str, path: str, line: int | None) -> Diagnostic:
        """Key repeated within one file.

        Args:
            key: Entry key
            module: Module name
            language: Language tag
            path: Source file
            line: Line of the later occurrence

        Returns:
            Diagnostic for DUPLICATE_KEY
        """
        return Diagnostic(
            code=DiagnosticCode.DUPLICATE_KEY,
            message=(
                f"Duplicate key '{key}' in {path} "
                f"(later definition will overwrite earlier)"
            ),
            location=SourceLocation(path, line),
            language=language,
            module=module,
            key=key,
        )

    # ------------------------------------------------------------------
    # Input and internal
    # ------------------------------------------------------------------

    @staticmethod
    def invalid_source(path: str, reason: str, line: int | None = None) -> Diagnostic:
        """Translation source file could not be read or parsed.

        Args:
            path: Source file
            reason: Parser or I/O error text
            line: Line where parsing failed

        Returns:
            Diagnostic for INVALID_SOURCE
        """
        return Diagnostic(
            code=DiagnosticCode.INVALID_SOURCE,
            message=f"Cannot read translations from {path}: {reason}",
            severity=Severity.ERROR,
            location=SourceLocation(path, line),
            hint="The file is skipped",
        )

    @staticmethod
    def internal_error(phase: str, error: BaseException) -> Diagnostic:
        """Unexpected failure inside a pipeline phase.

        Args:
            phase: Phase that failed
            error: The exception

        Returns:
            Diagnostic for INTERNAL_ERROR
        """
        return Diagnostic(
            code=DiagnosticCode.INTERNAL_ERROR,
            message=(
                f"Internal error during {phase}: {type(error).__name__}: {error}"
            ),
            severity=Severity.ERROR,
            hint="No table was produced; please report this with the input files",
        )
