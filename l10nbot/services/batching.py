from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Awaitable, Callable, Sequence

from l10nbot.core.errors import ProviderError, ProviderResponseError
from l10nbot.models.resources import StringEntry, TranslatedEntry, TranslationRequestBatch


logger = logging.getLogger(__name__)

TranslateFn = Callable[
    [Sequence[StringEntry], str, str, str],
    Awaitable[Mapping[str, str]],
]

PLACEHOLDER_TEMPLATE = "[Translation needed for: {value}]"


def placeholder_for(value: str) -> str:
    return PLACEHOLDER_TEMPLATE.format(value=value)


def chunked(items: Sequence[str], size: int) -> list[list[str]]:
    """Split items into consecutive chunks of at most `size` elements."""
    if size < 1:
        raise ValueError("batch_size must be at least 1.")
    return [list(items[index : index + size]) for index in range(0, len(items), size)]


class TranslationBatcher:
    """Drive the translation provider chunk by chunk for a single locale."""

    def __init__(
        self,
        *,
        batch_size: int = 50,
        pause_seconds: float = 1.0,
        source_locale: str = "en",
        fail_on_outage: bool = True,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1.")
        self._batch_size = batch_size
        self._pause_seconds = max(pause_seconds, 0.0)
        self._source_locale = source_locale
        self._fail_on_outage = fail_on_outage

    def build_batches(
        self,
        locale: str,
        missing_keys: Sequence[str],
        default_strings: Sequence[StringEntry],
        *,
        context: str = "",
        source_locale: str | None = None,
    ) -> list[TranslationRequestBatch]:
        """Resolve keys to default values; unresolvable keys never reach the provider."""
        source = source_locale or self._source_locale
        defaults = {entry.key: entry for entry in default_strings}
        batches: list[TranslationRequestBatch] = []
        for keys in chunked(list(dict.fromkeys(missing_keys)), self._batch_size):
            resolved = tuple(
                defaults[key]
                for key in keys
                if key in defaults and defaults[key].value and defaults[key].translatable
            )
            if len(resolved) < len(keys):
                logger.debug(
                    "Dropped %d unresolvable key(s) from %s batch.",
                    len(keys) - len(resolved),
                    locale,
                )
            batches.append(
                TranslationRequestBatch(
                    entries=resolved,
                    target_locale=locale,
                    source_locale=source,
                    context=context,
                )
            )
        return batches

    async def translate_missing(
        self,
        locale: str,
        missing_keys: Sequence[str],
        default_strings: Sequence[StringEntry],
        translate_fn: TranslateFn,
        *,
        context: str = "",
        source_locale: str | None = None,
    ) -> list[TranslatedEntry]:
        batches = [
            batch
            for batch in self.build_batches(
                locale,
                missing_keys,
                default_strings,
                context=context,
                source_locale=source_locale,
            )
            if batch.entries
        ]

        results: list[list[TranslatedEntry]] = []
        outages = 0
        last_outage: ProviderError | None = None
        for index, batch in enumerate(batches):
            if index and self._pause_seconds:
                await asyncio.sleep(self._pause_seconds)
            try:
                translated = await self._translate_batch(batch, translate_fn)
            except ProviderError as exc:
                outages += 1
                last_outage = exc
                logger.warning(
                    "Translation provider failed for %s batch %d/%d: %s",
                    locale,
                    index + 1,
                    len(batches),
                    exc,
                )
                translated = self._placeholders(batch)
            results.append(translated)

        if batches and outages == len(batches) and self._fail_on_outage:
            raise ProviderError(
                f"Translation provider unreachable for locale {locale}."
            ) from last_outage

        entries = [entry for chunk in results for entry in chunk]
        logger.info("Translated %d string(s) for %s in %d batch(es).", len(entries), locale, len(batches))
        return entries

    async def _translate_batch(
        self,
        batch: TranslationRequestBatch,
        translate_fn: TranslateFn,
    ) -> list[TranslatedEntry]:
        try:
            mapping = await translate_fn(
                batch.entries,
                batch.target_locale,
                batch.source_locale,
                batch.context,
            )
        except ProviderResponseError as exc:
            logger.warning("Unparseable translation response for %s: %s", batch.target_locale, exc)
            return self._placeholders(batch)

        if not isinstance(mapping, Mapping):
            logger.warning(
                "Translation response for %s was %s, not a mapping; using placeholders.",
                batch.target_locale,
                type(mapping).__name__,
            )
            return self._placeholders(batch)

        translated: list[TranslatedEntry] = []
        for entry in batch.entries:
            candidate = mapping.get(entry.key)
            value = candidate if isinstance(candidate, str) and candidate else entry.value
            translated.append(
                TranslatedEntry(
                    key=entry.key,
                    original_value=entry.value,
                    translated_value=value,
                    locale=batch.target_locale,
                )
            )
        return translated

    def _placeholders(self, batch: TranslationRequestBatch) -> list[TranslatedEntry]:
        return [
            TranslatedEntry(
                key=entry.key,
                original_value=entry.value,
                translated_value=placeholder_for(entry.value),
                locale=batch.target_locale,
            )
            for entry in batch.entries
        ]


async def translate_missing(
    locale: str,
    missing_keys: Sequence[str],
    default_strings: Sequence[StringEntry],
    batch_size: int,
    translate_fn: TranslateFn,
    *,
    source_locale: str = "en",
    context: str = "",
    pause_seconds: float = 0.0,
) -> list[TranslatedEntry]:
    batcher = TranslationBatcher(
        batch_size=batch_size,
        pause_seconds=pause_seconds,
        source_locale=source_locale,
    )
    return await batcher.translate_missing(
        locale,
        missing_keys,
        default_strings,
        translate_fn,
        context=context,
    )
