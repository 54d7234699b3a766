"""Entry source protocol and parsed-file records.

An entry source turns the text of one translation file into a SourceFile:
the language tag and module name derived from the file's location, plus
the ordered list of raw entries.

Python 3.13+. Zero external dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath
from typing import Protocol

__all__ = [
    "EntrySource",
    "SourceEntry",
    "SourceFile",
    "resolve_metadata",
]


@dataclass(frozen=True, slots=True)
class SourceEntry:
    """One raw entry as read from a file.

    Attributes:
        key: Entry key
        text: Entry text
        line: Line of the key (1-indexed, None when unknown)
        is_templated: Text contains placeholders
        is_untranslatable: Must always resolve from the default language
    """

    key: str
    text: str
    line: int | None = None
    is_templated: bool = False
    is_untranslatable: bool = False


@dataclass(frozen=True, slots=True)
class SourceFile:
    """Parsed translation file.

    Attributes:
        language: Language tag (parent directory name)
        module: Module name (file stem)
        path: Path of the file
        entries: Entries in file order (duplicate keys preserved)
    """

    language: str
    module: str
    path: str
    entries: tuple[SourceEntry, ...] = ()


def resolve_metadata(path: str) -> tuple[str, str]:
    """Derive (language, module) from a file path.

    The language is the name of the containing directory, the module is
    the file name without extension.

    Example:
        >>> resolve_metadata("Translations/pl/Main.json")
        ('pl', 'Main')
    """
    pure = PurePath(path)
    return pure.parent.name, pure.stem


class EntrySource(Protocol):
    """Protocol for translation file parsers.

    This is a Protocol (structural typing) rather than ABC so that any
    object with matching methods can be plugged into discovery.

    Example:
        >>> class LinesSource:
        ...     extensions = frozenset({".txt"})
        ...     def parse(self, path: str, text: str) -> SourceFile | None:
        ...         language, module = resolve_metadata(path)
        ...         entries = tuple(
        ...             SourceEntry(*line.split("=", 1), line=n)
        ...             for n, line in enumerate(text.splitlines(), 1) if "=" in line
        ...         )
        ...         return SourceFile(language, module, path, entries)
    """

    extensions: frozenset[str]
    """Lower-case file extensions (with dot) this source understands."""

    def parse(self, path: str, text: str) -> SourceFile | None:
        """Parse file content.

        Args:
            path: File path (language and module are derived from it)
            text: File content

        Returns:
            Parsed file, or None when the format is not supported

        Raises:
            SourceFormatError: If the content is malformed
        """
        ...
