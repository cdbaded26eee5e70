from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal


@dataclass(frozen=True, slots=True)
class StringEntry:
    """Single `<string>` element of a resource file."""

    key: str
    value: str
    translatable: bool = True


@dataclass(frozen=True, slots=True)
class LocaleFile:
    """Parsed resource file; `locale=None` marks the default language."""

    path: str
    locale: str | None
    entries: tuple[StringEntry, ...] = ()


@dataclass(frozen=True, slots=True)
class TreeItem:
    """Entry of a recursive repository listing."""

    path: str
    type: Literal["blob", "tree"] = "blob"


@dataclass(frozen=True, slots=True)
class ScanResult:
    """Aggregate view of a repository's string resources."""

    default_strings: tuple[StringEntry, ...]
    existing_by_locale: dict[str, tuple[StringEntry, ...]]
    missing_by_locale: dict[str, tuple[str, ...]]
    available_locales: tuple[str, ...]
    total_strings: int
    default_paths: tuple[str, ...] = ()
    branches: tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True, slots=True)
class TranslationRequestBatch:
    """One chunk of entries sent to the translation provider."""

    entries: tuple[StringEntry, ...]
    target_locale: str
    source_locale: str
    context: str


@dataclass(frozen=True, slots=True)
class TranslatedEntry:
    key: str
    original_value: str
    translated_value: str
    locale: str
    translatable: bool = True
