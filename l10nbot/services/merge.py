from __future__ import annotations

from typing import Sequence, Union

from l10nbot.models.resources import StringEntry, TranslatedEntry


MergeInput = Union[StringEntry, TranslatedEntry]


def _value_of(entry: MergeInput) -> str:
    if isinstance(entry, TranslatedEntry):
        return entry.translated_value
    return entry.value


def merge(
    existing: Sequence[MergeInput],
    fresh: Sequence[TranslatedEntry],
) -> list[TranslatedEntry]:
    """Combine reviewed translations with machine output, existing values winning.

    Output holds one entry per key from either side, sorted by key using
    ordinal string comparison so serialized files diff cleanly. A previously
    merged list is accepted as `existing`, which keeps the operation idempotent.
    """
    existing_values = {entry.key: _value_of(entry) for entry in existing}
    fresh_values = {entry.key: entry.translated_value for entry in fresh}

    originals = {
        entry.key: entry.original_value
        for entry in existing
        if isinstance(entry, TranslatedEntry)
    }
    originals.update((entry.key, entry.original_value) for entry in fresh)

    # A translatable="false" marker on the existing file outlives any fresh entry.
    flags = {entry.key: entry.translatable for entry in fresh}
    flags.update((entry.key, entry.translatable) for entry in existing)

    if fresh:
        locale = fresh[0].locale
    else:
        locale = next(
            (entry.locale for entry in existing if isinstance(entry, TranslatedEntry)),
            "unknown",
        )

    merged: list[TranslatedEntry] = []
    for key in sorted(existing_values.keys() | fresh_values.keys()):
        if existing_values.get(key):
            value = existing_values[key]
        else:
            value = fresh_values.get(key) or ""
        merged.append(
            TranslatedEntry(
                key=key,
                original_value=originals.get(key, ""),
                translated_value=value,
                locale=locale,
                translatable=flags.get(key, True),
            )
        )
    return merged
