"""loctable - compile per-language translation files into an ID-addressed table.

Reads translation files (one directory per language, one file per
module), derives a canonical integer key space from the default language,
rebuilds every other language against it, and reports cross-language
drift as structured diagnostics. The compiled table can be looked up in
process or rendered to Python modules.

Public API:
    compile_table - Run aggregation, indexing and validation
    discover_sources - Load a translations directory
    emit_table - Render a compiled table to Python modules
    LookupTable - In-process lookup with default-language fallback
    CompilerSettings - Compiler configuration
    TargetRegistry / OutputTarget - Where generated code goes
    TableMetadata - Names of the generated lookup facade

Exceptions:
    LocTableError - Base exception class
    ConfigurationError - Fatal configuration problems
    SourceFormatError - Malformed translation files
    CompilationCancelledError - Cancellation between phases

Submodules:
    loctable.diagnostics - Diagnostic codes, templates, formatter, reports
    loctable.sources - Entry sources and file discovery
    loctable.model - Aggregated and indexed data containers
    loctable.cli - Command line interface
"""

from .config import CompilerSettings, ProjectConfig, load_project_config
from .diagnostics import (
    CompilationCancelledError,
    ConfigurationError,
    Diagnostic,
    DiagnosticCode,
    LocTableError,
    SourceFormatError,
    ValidationReport,
)
from .emitter import EmittedFiles, emit_table, write_files
from .pipeline import CompileResult, compile_summary, compile_table
from .runtime import LookupTable
from .sources import discover_sources
from .targets import OutputTarget, TableMetadata, TargetRegistry

# Version information - Auto-populated from package metadata
# SINGLE SOURCE OF TRUTH: pyproject.toml [project] version
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_version

try:
    __version__ = _get_version("loctable")
except PackageNotFoundError:
    # Development mode: package not installed yet
    __version__ = "0.0.0+dev"

__all__ = [
    "CompilationCancelledError",
    "CompileResult",
    "CompilerSettings",
    "ConfigurationError",
    "Diagnostic",
    "DiagnosticCode",
    "EmittedFiles",
    "LocTableError",
    "LookupTable",
    "OutputTarget",
    "ProjectConfig",
    "SourceFormatError",
    "TableMetadata",
    "TargetRegistry",
    "ValidationReport",
    "__version__",
    "compile_summary",
    "compile_table",
    "discover_sources",
    "emit_table",
    "load_project_config",
    "write_files",
]
