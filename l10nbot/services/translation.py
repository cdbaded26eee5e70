from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from l10nbot.core.config import AppSettings
from l10nbot.core.errors import OperationTimedOut
from l10nbot.integrations.llm import TranslationProvider
from l10nbot.models.resources import ScanResult, StringEntry, TranslatedEntry
from l10nbot.services.batching import TranslationBatcher
from l10nbot.services.languages import resource_qualifier


logger = logging.getLogger(__name__)


class TranslationService:
    """Translate missing resource strings locale by locale."""

    def __init__(
        self,
        provider: TranslationProvider,
        *,
        batch_size: int = 50,
        pause_seconds: float = 1.0,
        source_locale: str = "en",
        timeout: float | None = None,
    ) -> None:
        self._provider = provider
        self._source_locale = source_locale
        self._timeout = timeout
        self._batcher = TranslationBatcher(
            batch_size=batch_size,
            pause_seconds=pause_seconds,
            source_locale=source_locale,
        )

    @classmethod
    def from_settings(cls, settings: AppSettings, provider: TranslationProvider) -> "TranslationService":
        return cls(
            provider,
            batch_size=settings.translation_batch_size,
            pause_seconds=settings.translation_pause_seconds,
            source_locale=settings.source_locale,
            timeout=settings.translate_timeout_seconds,
        )

    @property
    def source_locale(self) -> str:
        return self._source_locale

    def are_locales_equivalent(self, first: str | None, second: str | None) -> bool:
        if not first or not second:
            return False
        return self._normalize_locale(first) == self._normalize_locale(second)

    async def translate_locale(
        self,
        locale: str,
        missing_keys: Sequence[str],
        default_strings: Sequence[StringEntry],
        *,
        context: str = "",
        source_locale: str | None = None,
    ) -> list[TranslatedEntry]:
        """Translate the missing keys of one locale; chunks run sequentially."""
        source = source_locale or self._source_locale
        if self.are_locales_equivalent(locale, source):
            defaults = {entry.key: entry for entry in default_strings}
            return [
                TranslatedEntry(
                    key=key,
                    original_value=defaults[key].value,
                    translated_value=defaults[key].value,
                    locale=locale,
                    translatable=defaults[key].translatable,
                )
                for key in dict.fromkeys(missing_keys)
                if key in defaults and defaults[key].value
            ]

        operation = self._batcher.translate_missing(
            locale,
            missing_keys,
            default_strings,
            self._provider.translate_batch,
            context=context,
            source_locale=source,
        )
        if self._timeout is None:
            return await operation
        try:
            return await asyncio.wait_for(operation, timeout=self._timeout)
        except asyncio.TimeoutError as exc:
            raise OperationTimedOut(f"Translation for {locale} timed out") from exc

    async def translate_entries(
        self,
        entries: Sequence[StringEntry],
        locale: str,
        *,
        context: str = "",
        source_locale: str | None = None,
    ) -> list[TranslatedEntry]:
        """Translate an explicit list of entries, e.g. one client-side batch."""
        return await self.translate_locale(
            locale,
            [entry.key for entry in entries],
            entries,
            context=context,
            source_locale=source_locale,
        )

    async def translate_scan(
        self,
        scan: ScanResult,
        locales: Sequence[str],
        *,
        context: str = "",
    ) -> dict[str, list[TranslatedEntry]]:
        """Translate several locales concurrently; locales without a file get every key."""
        all_keys = tuple(dict.fromkeys(entry.key for entry in scan.default_strings))
        targets = list(dict.fromkeys(locales))

        async def _one(locale: str) -> list[TranslatedEntry]:
            missing = scan.missing_by_locale.get(
                locale, scan.missing_by_locale.get(resource_qualifier(locale), all_keys)
            )
            logger.info("Translating %d missing key(s) for %s", len(missing), locale)
            return await self.translate_locale(
                locale,
                missing,
                scan.default_strings,
                context=context,
            )

        translated = await asyncio.gather(*(_one(locale) for locale in targets))
        return dict(zip(targets, translated))

    def _normalize_locale(self, value: str | None) -> str:
        if not value:
            return ""
        return value.replace("_", "-").lower()
