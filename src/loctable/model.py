"""Data model of the translation table.

Two families of immutable containers:

Aggregated (string-keyed, output of the aggregator):
    Entry, Module, AggregatedLocaleData

Indexed (ID-keyed, output of the indexer):
    CanonicalKeySpace, IndexedEntry, IndexedModule, IndexedLocaleData,
    IndexedTable

Mappings exposed by finished phases are MappingProxyType snapshots so a
later phase can never mutate what an earlier phase produced.

Python 3.13+.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, TypeAlias

from loctable.locale_utils import normalize_language_tag

if TYPE_CHECKING:
    from loctable.targets import OutputTarget

__all__ = [
    "AggregatedLocaleData",
    "CanonicalKeySpace",
    "Entry",
    "IndexedEntry",
    "IndexedLocaleData",
    "IndexedModule",
    "IndexedTable",
    "Module",
    "TextId",
]

TextId: TypeAlias = int
"""Canonical integer identifier of a text (1-based, unique per table)."""

_EMPTY: Mapping = MappingProxyType({})


# ============================================================================
# AGGREGATED DATA
# ============================================================================


@dataclass(frozen=True, slots=True)
class Entry:
    """A single key/text pair plus metadata.

    Attributes:
        key: Entry key, unique within its module
        text: Translated text
        line: Source line (1-indexed, None when unknown)
        is_untranslatable: Always resolved from the default language
        is_templated: Text contains placeholders (carried, never formatted)
    """

    key: str
    text: str
    line: int | None = None
    is_untranslatable: bool = False
    is_templated: bool = False


@dataclass(frozen=True, slots=True)
class Module:
    """Named group of entries, tied to one source file.

    Attributes:
        name: Module name (file stem)
        source_path: Path of the file the module was read from
        entries: Entries by key, in first-seen order
    """

    name: str
    source_path: str
    entries: Mapping[str, Entry] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.entries, MappingProxyType):
            object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: object) -> bool:
        return key in self.entries

    def get(self, key: str) -> Entry | None:
        """Entry for key, or None."""
        return self.entries.get(key)

    @staticmethod
    def of(name: str, source_path: str, *entries: Entry) -> Module:
        """Build a module from entries; a repeated key keeps the last one."""
        return Module(name, source_path, {entry.key: entry for entry in entries})


@dataclass(frozen=True, slots=True)
class AggregatedLocaleData:
    """All modules of one language.

    Attributes:
        language: Language tag as first seen
        is_default: Whether this is the default language
        target: Registered output target for the language
        modules: Modules by name, in first-seen order
    """

    language: str
    is_default: bool
    target: OutputTarget | None = None
    modules: Mapping[str, Module] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.modules, MappingProxyType):
            object.__setattr__(self, "modules", MappingProxyType(dict(self.modules)))

    @property
    def tag(self) -> str:
        """Normalized language tag (identity key)."""
        return normalize_language_tag(self.language)

    @property
    def entry_count(self) -> int:
        """Total number of entries across all modules."""
        return sum(len(module) for module in self.modules.values())


# ============================================================================
# INDEXED DATA
# ============================================================================


@dataclass(frozen=True, slots=True)
class CanonicalKeySpace:
    """Default-language-derived mapping from (module, key) to ID.

    Attributes:
        modules: Per-module mapping from key to ID, in ID order

    Example:
        >>> space = CanonicalKeySpace({"Main": {"Hello": 1, "Bye": 2}})
        >>> space.id_of("Main", "Bye")
        2
        >>> ("Main", "Nope") in space
        False
    """

    modules: Mapping[str, Mapping[str, TextId]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        frozen = {
            name: MappingProxyType(dict(keys)) for name, keys in self.modules.items()
        }
        object.__setattr__(self, "modules", MappingProxyType(frozen))

    def __len__(self) -> int:
        return sum(len(keys) for keys in self.modules.values())

    def __iter__(self) -> Iterator[tuple[str, str, TextId]]:
        """Yield (module, key, id) triples in ID order."""
        for module, keys in self.modules.items():
            for key, text_id in keys.items():
                yield module, key, text_id

    def __contains__(self, item: object) -> bool:
        match item:
            case (str() as module, str() as key):
                return key in self.modules.get(module, _EMPTY)
            case _:
                return False

    def get(self, module: str, key: str) -> TextId | None:
        """ID of (module, key), or None when the key has no ID."""
        return self.modules.get(module, _EMPTY).get(key)

    def id_of(self, module: str, key: str) -> TextId:
        """ID of (module, key).

        Raises:
            KeyError: If the pair is not part of the key space
        """
        text_id = self.get(module, key)
        if text_id is None:
            msg = f"'{module}.{key}' has no canonical ID"
            raise KeyError(msg)
        return text_id

    def module_ids(self, module: str) -> tuple[TextId, ...]:
        """All IDs of a module, ascending."""
        return tuple(self.modules.get(module, _EMPTY).values())


@dataclass(frozen=True, slots=True)
class IndexedEntry:
    """An entry addressed by its canonical ID.

    Attributes:
        text_id: Canonical ID
        module: Name of the owning module
        entry: The underlying entry
    """

    text_id: TextId
    module: str
    entry: Entry

    @property
    def key(self) -> str:
        return self.entry.key

    @property
    def text(self) -> str:
        return self.entry.text

    @property
    def line(self) -> int | None:
        return self.entry.line

    @property
    def is_untranslatable(self) -> bool:
        return self.entry.is_untranslatable

    @property
    def is_templated(self) -> bool:
        return self.entry.is_templated


@dataclass(frozen=True, slots=True)
class IndexedModule:
    """Module whose entries are keyed by canonical ID.

    Attributes:
        name: Module name
        source_path: Source file of the module in this language
        entries: Entries by ID, ascending
    """

    name: str
    source_path: str
    entries: Mapping[TextId, IndexedEntry] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.entries, MappingProxyType):
            object.__setattr__(self, "entries", MappingProxyType(dict(self.entries)))

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, text_id: object) -> bool:
        return text_id in self.entries


@dataclass(frozen=True, slots=True)
class IndexedLocaleData:
    """All indexed modules of one language.

    Non-default languages may have gaps: IDs whose translation is missing
    are simply absent.

    Attributes:
        language: Language tag as first seen
        is_default: Whether this is the default language
        target: Registered output target for the language
        modules: Indexed modules by name
    """

    language: str
    is_default: bool
    target: OutputTarget | None = None
    modules: Mapping[str, IndexedModule] = field(default_factory=dict)
    _texts: Mapping[TextId, IndexedEntry] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.modules, MappingProxyType):
            object.__setattr__(self, "modules", MappingProxyType(dict(self.modules)))
        texts: dict[TextId, IndexedEntry] = {}
        for module in self.modules.values():
            texts.update(module.entries)
        object.__setattr__(self, "_texts", MappingProxyType(dict(sorted(texts.items()))))

    def __contains__(self, text_id: object) -> bool:
        return text_id in self._texts

    def __len__(self) -> int:
        return len(self._texts)

    @property
    def tag(self) -> str:
        """Normalized language tag (identity key)."""
        return normalize_language_tag(self.language)

    @property
    def texts(self) -> Mapping[TextId, IndexedEntry]:
        """All entries of the language by ID, ascending."""
        return self._texts

    @property
    def text_ids(self) -> tuple[TextId, ...]:
        """All IDs present in this language, ascending."""
        return tuple(self._texts)

    def get(self, text_id: TextId) -> IndexedEntry | None:
        """Entry for an ID, or None when the language has no such text."""
        return self._texts.get(text_id)


@dataclass(frozen=True, slots=True)
class IndexedTable:
    """The canonical, ID-addressed translation table.

    Attributes:
        key_space: Canonical (module, key) -> ID mapping
        locales: Indexed data by normalized language tag
        default_tag: Normalized tag of the default language
    """

    key_space: CanonicalKeySpace
    locales: Mapping[str, IndexedLocaleData]
    default_tag: str

    def __post_init__(self) -> None:
        if not isinstance(self.locales, MappingProxyType):
            object.__setattr__(self, "locales", MappingProxyType(dict(self.locales)))
        if self.default_tag not in self.locales:
            msg = f"default locale '{self.default_tag}' is not part of the table"
            raise ValueError(msg)

    @property
    def default(self) -> IndexedLocaleData:
        """Indexed data of the default language."""
        return self.locales[self.default_tag]

    @property
    def languages(self) -> tuple[str, ...]:
        """Language tags as first seen, default first."""
        others = [data.language for tag, data in self.locales.items() if tag != self.default_tag]
        return (self.default.language, *others)

    def locale(self, language: str) -> IndexedLocaleData | None:
        """Indexed data for a language (case-insensitive), or None."""
        return self.locales.get(normalize_language_tag(language))
