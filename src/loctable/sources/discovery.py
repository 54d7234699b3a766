"""Translation file discovery and loading.

Walks a translations directory (one subdirectory per language), parses
each candidate file with the first entry source that understands it, and
records one SourceLoadResult per file. Read and parse failures are
captured in results rather than raised, so one broken file never hides
the findings for the others.

Paths are returned sorted, which fixes the order in which files are
aggregated and therefore the canonical IDs.

Python 3.13+.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path

from loctable.constants import SOURCE_ENCODING, SUPPORTED_EXTENSIONS
from loctable.diagnostics import Diagnostic, DiagnosticTemplate, SourceFormatError
from loctable.enums import LoadStatus

from .base import EntrySource, SourceFile
from .json_source import JsonEntrySource

__all__ = [
    "LoadSummary",
    "SourceLoadResult",
    "default_sources",
    "discover_sources",
    "load_source",
]

logger = logging.getLogger(__name__)


def default_sources() -> tuple[EntrySource, ...]:
    """Entry sources used when the caller does not supply any."""
    return (JsonEntrySource(),)


@dataclass(frozen=True, slots=True)
class SourceLoadResult:
    """Result of loading a single translation file.

    Attributes:
        path: File path
        status: Load status (success, unsupported, error)
        source_file: Parsed file if status is SUCCESS
        error: Exception if status is ERROR
    """

    path: str
    status: LoadStatus
    source_file: SourceFile | None = None
    error: Exception | None = None

    @property
    def is_success(self) -> bool:
        """Check if the file was parsed."""
        return self.status == LoadStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        """Check if the file failed to load."""
        return self.status == LoadStatus.ERROR

    def to_diagnostic(self) -> Diagnostic | None:
        """INVALID_SOURCE diagnostic for failed loads, None otherwise."""
        if not self.is_error:
            return None
        line = self.error.line if isinstance(self.error, SourceFormatError) else None
        return DiagnosticTemplate.invalid_source(self.path, str(self.error), line)


@dataclass(frozen=True, slots=True)
class LoadSummary:
    """Immutable aggregate of load results, sorted by path.

    Attributes:
        results: All individual load results
    """

    results: tuple[SourceLoadResult, ...]

    def __repr__(self) -> str:
        return (
            f"LoadSummary(total={len(self.results)}, "
            f"ok={self.successful}, "
            f"unsupported={self.unsupported}, "
            f"errors={self.errors})"
        )

    @property
    def successful(self) -> int:
        """Number of parsed files."""
        return sum(1 for r in self.results if r.is_success)

    @property
    def unsupported(self) -> int:
        """Number of files no entry source understood."""
        return sum(1 for r in self.results if r.status == LoadStatus.UNSUPPORTED)

    @property
    def errors(self) -> int:
        """Number of files that failed to load."""
        return sum(1 for r in self.results if r.is_error)

    @property
    def has_errors(self) -> bool:
        """Check if any file failed to load."""
        return self.errors > 0

    @property
    def source_files(self) -> tuple[SourceFile, ...]:
        """Parsed files in path order."""
        return tuple(r.source_file for r in self.results if r.source_file is not None)

    def diagnostics(self) -> tuple[Diagnostic, ...]:
        """INVALID_SOURCE diagnostics for every failed file."""
        return tuple(d for r in self.results if (d := r.to_diagnostic()) is not None)


def load_source(path: Path, sources: Sequence[EntrySource]) -> SourceLoadResult:
    """Read and parse one file with the first source accepting it.

    Args:
        path: File to load
        sources: Entry sources, tried in order

    Returns:
        Load result; never raises for I/O or format errors
    """
    display = path.as_posix()
    suffix = path.suffix.lower()
    candidates = [s for s in sources if suffix in s.extensions]
    if not candidates:
        logger.debug("No entry source for %s", display)
        return SourceLoadResult(display, LoadStatus.UNSUPPORTED)

    try:
        text = path.read_text(encoding=SOURCE_ENCODING)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Cannot read %s: %s", display, e)
        return SourceLoadResult(display, LoadStatus.ERROR, error=e)

    for source in candidates:
        try:
            parsed = source.parse(display, text)
        except SourceFormatError as e:
            logger.warning("Malformed translation file %s: %s", display, e)
            return SourceLoadResult(display, LoadStatus.ERROR, error=e)
        if parsed is not None:
            logger.debug("Loaded %s: %d entries", display, len(parsed.entries))
            return SourceLoadResult(display, LoadStatus.SUCCESS, source_file=parsed)

    return SourceLoadResult(display, LoadStatus.UNSUPPORTED)


def discover_sources(
    root: Path | str,
    sources: Iterable[EntrySource] | None = None,
) -> LoadSummary:
    """Load every translation file below root.

    Only files directly inside a language subdirectory are considered
    (``root/<language>/<module>.<ext>``), matching how language and
    module are derived from paths. Files whose extension neither a
    given source nor SUPPORTED_EXTENSIONS names are not listed.

    Args:
        root: Translations directory
        sources: Entry sources (default: JSON)

    Returns:
        LoadSummary with results sorted by path. A missing root yields an
        empty summary.
    """
    root_path = Path(root)
    source_list = tuple(sources) if sources is not None else default_sources()

    if not root_path.is_dir():
        logger.warning("Translations directory %s does not exist", root_path)
        return LoadSummary(())

    extensions = SUPPORTED_EXTENSIONS | {ext for s in source_list for ext in s.extensions}
    candidates = sorted(
        path
        for path in root_path.glob("*/*")
        if path.is_file() and path.suffix.lower() in extensions
    )
    results = tuple(load_source(path, source_list) for path in candidates)
    summary = LoadSummary(results)
    logger.info("Discovered translations in %s: %r", root_path, summary)
    return summary
