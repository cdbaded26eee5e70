from __future__ import annotations

import posixpath
from typing import Iterable, Union

from l10nbot.models.resources import StringEntry, TranslatedEntry
from l10nbot.services.languages import resource_qualifier


XML_HEADER = '<?xml version="1.0" encoding="utf-8"?>\n'

SerializableEntry = Union[StringEntry, TranslatedEntry]


def escape_value(text: str) -> str:
    """Escape the five XML special characters, ampersand first.

    Carriage returns become `&#13;`; parsers fold a literal CR into LF.
    """
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
        .replace("\r", "&#13;")
    )


def _key_value(entry: SerializableEntry) -> tuple[str, str]:
    if isinstance(entry, TranslatedEntry):
        return entry.key, entry.translated_value
    return entry.key, entry.value


def serialize(entries: Iterable[SerializableEntry]) -> str:
    """Render entries as resource XML, keeping the caller's ordering."""
    lines = [XML_HEADER, "<resources>\n"]
    for entry in entries:
        key, value = _key_value(entry)
        attributes = f'name="{escape_value(key)}"'
        if not entry.translatable:
            attributes += ' translatable="false"'
        lines.append(f"    <string {attributes}>{escape_value(value)}</string>\n")
    lines.append("</resources>\n")
    return "".join(lines)


def target_path(default_path: str, locale: str) -> str:
    """Derive the locale file path from a default-language resource path."""
    qualifier = resource_qualifier(locale)
    segments = default_path.split("/")
    for index in range(len(segments) - 2, -1, -1):
        if segments[index] == "values":
            segments[index] = f"values-{qualifier}"
            return "/".join(segments)

    parent, basename = posixpath.split(default_path)
    if parent:
        return f"{parent}/values-{qualifier}/{basename}"
    return f"values-{qualifier}/{basename}"
