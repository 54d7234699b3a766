"""JSON translation files.

A file holds one top-level object. Each member is an entry:

    {
        "Hello": "Hello, {name}!",
        "Brand": {"text": "Acme", "untranslatable": true}
    }

String values are plain texts. Object values carry a ``text`` and the
optional boolean flags ``untranslatable`` and ``templated``. Texts with a
``{placeholder}`` segment are flagged templated unless the flag is given
explicitly. Members are read in file order with the line of each key, so
duplicate keys are preserved for the aggregator to report.

Python 3.13+.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterator
from json.decoder import scanstring
from pathlib import PurePath

from loctable.diagnostics import SourceFormatError

from .base import SourceEntry, SourceFile, resolve_metadata

__all__ = ["JsonEntrySource", "is_templated_text"]

_WHITESPACE = re.compile(r"[ \t\n\r]*")
_PLACEHOLDER = re.compile(r"(?<!\{)\{[^{}\s]*\}(?!\})")
_DECODER = json.JSONDecoder()


def is_templated_text(text: str) -> bool:
    """Check whether text contains a ``{placeholder}`` segment.

    Doubled braces (``{{`` / ``}}``) are escapes, not placeholders.

    Example:
        >>> is_templated_text("Hello, {0}!")
        True
        >>> is_templated_text("Use {{braces}}")
        False
    """
    return _PLACEHOLDER.search(text) is not None


class _MemberScanner:
    """Walks the members of a top-level JSON object, tracking key lines."""

    __slots__ = ("_line", "_line_pos", "_path", "_pos", "_text")

    def __init__(self, text: str, path: str) -> None:
        self._text = text
        self._path = path
        self._pos = 0
        self._line = 1
        self._line_pos = 0

    def _fail(self, message: str) -> SourceFormatError:
        return SourceFormatError(
            f"{message} (line {self._line_at(self._pos)})",
            path=self._path,
            line=self._line_at(self._pos),
        )

    def _line_at(self, pos: int) -> int:
        # Positions only move forward, so lines are counted incrementally
        if pos >= self._line_pos:
            self._line += self._text.count("\n", self._line_pos, pos)
            self._line_pos = pos
        return self._line

    def _skip_ws(self) -> None:
        match = _WHITESPACE.match(self._text, self._pos)
        if match is not None:
            self._pos = match.end()

    def _peek(self) -> str:
        if self._pos >= len(self._text):
            raise self._fail("Unexpected end of file")
        return self._text[self._pos]

    def _expect(self, char: str) -> None:
        if self._peek() != char:
            raise self._fail(f"Expected '{char}' but found {self._peek()!r}")
        self._pos += 1

    def members(self) -> Iterator[tuple[str, object, int]]:
        """Yield (key, value, line) for every member, in file order."""
        if self._text.startswith("\ufeff"):
            self._pos = 1
            self._line_pos = 1
        self._skip_ws()
        self._expect("{")
        self._skip_ws()
        if self._peek() == "}":
            self._pos += 1
        else:
            while True:
                self._skip_ws()
                if self._peek() != '"':
                    raise self._fail("Expected a string key")
                line = self._line_at(self._pos)
                try:
                    key, self._pos = scanstring(self._text, self._pos + 1)
                except json.JSONDecodeError as e:
                    raise self._fail(e.msg) from e
                self._skip_ws()
                self._expect(":")
                self._skip_ws()
                try:
                    value, self._pos = _DECODER.raw_decode(self._text, self._pos)
                except json.JSONDecodeError as e:
                    raise self._fail(e.msg) from e
                yield key, value, line
                self._skip_ws()
                if self._peek() == ",":
                    self._pos += 1
                    continue
                self._expect("}")
                break
        self._skip_ws()
        if self._pos != len(self._text):
            raise self._fail("Unexpected content after the top-level object")


class JsonEntrySource:
    """Entry source for ``.json`` translation files."""

    extensions: frozenset[str] = frozenset({".json"})

    def __repr__(self) -> str:
        return "JsonEntrySource()"

    def parse(self, path: str, text: str) -> SourceFile | None:
        """Parse a JSON translation file.

        Args:
            path: File path; parent directory is the language, stem the module
            text: File content

        Returns:
            Parsed file, or None for non-JSON paths

        Raises:
            SourceFormatError: If the content is not a JSON object of
                strings / entry objects
        """
        if PurePath(path).suffix.lower() not in self.extensions:
            return None

        language, module = resolve_metadata(path)
        entries = tuple(
            self._make_entry(path, key, value, line)
            for key, value, line in _MemberScanner(text, path).members()
        )
        return SourceFile(language=language, module=module, path=path, entries=entries)

    @staticmethod
    def _make_entry(path: str, key: str, value: object, line: int) -> SourceEntry:
        match value:
            case str():
                return SourceEntry(key, value, line, is_templated=is_templated_text(value))
            case {"text": str() as text, **flags}:
                untranslatable = flags.get("untranslatable", False)
                templated = flags.get("templated", is_templated_text(text))
                if not isinstance(untranslatable, bool) or not isinstance(templated, bool):
                    msg = f"Flags of '{key}' must be booleans"
                    raise SourceFormatError(msg, path=path, line=line)
                return SourceEntry(
                    key,
                    text,
                    line,
                    is_templated=templated,
                    is_untranslatable=untranslatable,
                )
            case _:
                msg = (
                    f"Value of '{key}' must be a string or an object with a 'text' "
                    f"string (line {line})"
                )
                raise SourceFormatError(msg, path=path, line=line)
