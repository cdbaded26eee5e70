"""Transient value types exchanged by the scanning and translation pipeline."""

from l10nbot.models.resources import (  # noqa: F401
    LocaleFile,
    ScanResult,
    StringEntry,
    TranslatedEntry,
    TranslationRequestBatch,
    TreeItem,
)

__all__ = [
    "LocaleFile",
    "ScanResult",
    "StringEntry",
    "TranslatedEntry",
    "TranslationRequestBatch",
    "TreeItem",
]
