"""Command line interface.

Usage:
    loctable compile [--config PATH] [--translations DIR] [--output DIR]
                     [--default-language TAG] [--strict]
                     [--format rust|simple|json] [--verbose]
    loctable check   (same options, nothing is written)

Configuration is read from ``[tool.loctable]`` in ``--config`` (default:
``pyproject.toml`` in the working directory, when present); command line
options override it. Diagnostics go to stderr.

Exit codes:
    0: Success (warnings allowed)
    1: Errors (unreadable files, internal failure) or strict-mode failure
    2: Configuration error

Python 3.13+.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from loctable.config import ProjectConfig, load_project_config
from loctable.diagnostics import (
    ConfigurationError,
    DiagnosticCode,
    DiagnosticFormatter,
    OutputFormat,
)
from loctable.emitter import emit_table, write_files
from loctable.pipeline import CompileResult, compile_summary
from loctable.sources import discover_sources

__all__ = ["main"]

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2

_DEFAULT_CONFIG = "pyproject.toml"


def _version() -> str:
    from loctable import __version__  # noqa: PLC0415

    return __version__


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command-line arguments."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--config",
        type=Path,
        default=None,
        help=f"TOML file with a [tool.loctable] section (default: ./{_DEFAULT_CONFIG}).",
    )
    common.add_argument(
        "--translations",
        type=Path,
        default=None,
        help="Translations directory, one subdirectory per language.",
    )
    common.add_argument(
        "--default-language",
        default=None,
        help="Tag of the default language (case-insensitive).",
    )
    common.add_argument(
        "--strict",
        action="store_true",
        help="Fail on validation warnings.",
    )
    common.add_argument(
        "--format",
        choices=[str(f) for f in OutputFormat],
        default=str(OutputFormat.RUST),
        help="Diagnostic output style (default: rust).",
    )
    common.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging.",
    )

    parser = argparse.ArgumentParser(
        prog="loctable",
        description="Compile per-language translation files into an ID-addressed table.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_version()}")
    commands = parser.add_subparsers(dest="command", required=True)

    compile_parser = commands.add_parser(
        "compile",
        parents=[common],
        help="Compile translations and write the generated modules.",
    )
    compile_parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Root directory for generated modules (default: the configuration's directory).",
    )
    commands.add_parser(
        "check",
        parents=[common],
        help="Compile and report diagnostics without writing anything.",
    )
    return parser.parse_args(argv)


def _load_config(args: argparse.Namespace) -> ProjectConfig:
    """Read the configuration file and apply command line overrides."""
    config_path: Path | None = args.config
    if config_path is None and Path(_DEFAULT_CONFIG).is_file():
        config_path = Path(_DEFAULT_CONFIG)

    config = load_project_config(config_path) if config_path is not None else ProjectConfig()
    translations = args.translations.resolve() if args.translations is not None else None
    settings = config.settings.with_overrides(
        translations_dir=str(translations) if translations is not None else None,
        default_language=args.default_language,
        strict_mode=True if args.strict else None,
    )
    return ProjectConfig(
        settings=settings,
        registry=config.registry,
        table=config.table,
        root=config.root,
    )


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _report_configuration_error(error: ConfigurationError, formatter: DiagnosticFormatter) -> int:
    """Print a configuration failure; return the matching exit code."""
    diagnostics = list(error.diagnostics)
    if error.diagnostic is not None and error.diagnostic not in diagnostics:
        diagnostics.append(error.diagnostic)
    if diagnostics:
        print(formatter.format_all(diagnostics), file=sys.stderr)
    else:
        print(f"error: {error}", file=sys.stderr)

    if error.diagnostic is not None and error.diagnostic.code == DiagnosticCode.STRICT_MODE_VIOLATION:
        return EXIT_FAILURE
    return EXIT_CONFIG_ERROR


def _write_output(
    result: CompileResult,
    config: ProjectConfig,
    output: Path | None,
) -> None:
    """Emit and write generated modules for a successful result."""
    if result.table is None:
        return
    files = emit_table(result.table, config.registry, config.table, config.settings)
    written = write_files(files, output if output is not None else config.root)
    print(f"Generated {len(files)} module(s), {len(written)} updated", file=sys.stderr)


def main(argv: list[str] | None = None) -> int:
    """Run the loctable command line interface."""
    args = _parse_args(argv)
    output_format = OutputFormat(args.format)
    formatter = DiagnosticFormatter(
        output_format=output_format,
        color=output_format == OutputFormat.RUST and sys.stderr.isatty(),
    )

    try:
        config = _load_config(args)
    except ConfigurationError as e:
        _configure_logging(args.verbose)
        return _report_configuration_error(e, formatter)

    _configure_logging(args.verbose or config.settings.enable_logging)
    logger.debug("Settings: %r", config.settings)

    summary = discover_sources(config.translations_path)
    try:
        result = compile_summary(summary, config.registry, config.settings)
        print(formatter.format_report(result.report), file=sys.stderr)
        if args.command == "compile":
            if result.report.has_errors:
                print("Generated modules not written: compilation reported errors", file=sys.stderr)
            else:
                _write_output(result, config, args.output)
    except ConfigurationError as e:
        return _report_configuration_error(e, formatter)
    except OSError as e:
        print(f"error: cannot write generated modules: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if result.table is None or result.report.has_errors:
        return EXIT_FAILURE
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
