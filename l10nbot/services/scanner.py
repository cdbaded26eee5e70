from __future__ import annotations

import asyncio
import logging
from dataclasses import replace
from typing import Awaitable, Callable, Iterable, Sequence

from l10nbot.core.errors import (
    BranchError,
    NoResourceFilesFound,
    OperationTimedOut,
    SourceTreeError,
)
from l10nbot.integrations.source_tree import SourceTreeProvider
from l10nbot.models.resources import LocaleFile, ScanResult, StringEntry, TreeItem
from l10nbot.services.path_matcher import PathMatcher
from l10nbot.services.resource_parser import ResourceParser


logger = logging.getLogger(__name__)

FileReader = Callable[[str], Awaitable[str]]


class RepositoryScanner:
    """Discover string resource files in a repository tree and compare locales."""

    def __init__(
        self,
        *,
        matcher: PathMatcher | None = None,
        parser: ResourceParser | None = None,
        default_locale: str = "en",
    ) -> None:
        self._matcher = matcher or PathMatcher()
        self._parser = parser or ResourceParser()
        self._default_locale = default_locale

    def resource_paths(self, tree: Iterable[TreeItem]) -> list[str]:
        paths: list[str] = []
        for item in tree:
            if item.type != "blob" or not self._matcher.is_resource_file(item.path):
                continue
            if self._matcher.is_non_locale_variant(item.path):
                logger.debug("Skipping qualifier variant %s", item.path)
                continue
            paths.append(item.path)
        return paths

    async def scan(self, tree: Sequence[TreeItem], file_reader: FileReader) -> ScanResult:
        paths = self.resource_paths(tree)
        if not paths:
            raise NoResourceFilesFound()

        loaded = await asyncio.gather(*(self._load(path, file_reader) for path in paths))
        files = [locale_file for locale_file in loaded if locale_file is not None]
        if not files:
            raise NoResourceFilesFound("No readable string resource files found in repository")

        result = self.build_result(files)
        logger.info(
            "Scan complete. Found %d default strings, %d language(s)",
            result.total_strings,
            len(result.available_locales),
        )
        return result

    async def scan_repository(
        self,
        provider: SourceTreeProvider,
        ref: str,
        *,
        timeout: float | None = None,
        include_branches: bool = True,
    ) -> ScanResult:
        """Scan a provider-backed repository, optionally bounded by a timeout."""

        async def _run() -> ScanResult:
            logger.info("Scanning repository tree at %s", ref)
            tree = await provider.list_tree(ref)
            result = await self.scan(tree, lambda path: provider.read_file(path, ref))
            if not include_branches:
                return result
            try:
                branches = await provider.list_branches()
            except BranchError as exc:
                logger.warning("Could not list branches: %s", exc)
                return result
            return replace(result, branches=tuple(branches))

        if timeout is None:
            return await _run()
        try:
            return await asyncio.wait_for(_run(), timeout=timeout)
        except asyncio.TimeoutError as exc:
            raise OperationTimedOut() from exc

    async def _load(self, path: str, file_reader: FileReader) -> LocaleFile | None:
        try:
            content = await file_reader(path)
        except (SourceTreeError, OSError, UnicodeDecodeError) as exc:
            logger.warning("Could not read string file %s: %s", path, exc)
            return None

        locale = self._matcher.locale_of(path)
        entries = self._parser.parse(content, source=path)
        logger.debug(
            "Found string file: %s (%s) with %d strings",
            path,
            locale or "default",
            len(entries),
        )
        return LocaleFile(path=path, locale=locale, entries=tuple(entries))

    def build_result(self, files: Sequence[LocaleFile]) -> ScanResult:
        default_files = [locale_file for locale_file in files if locale_file.locale is None]
        default_strings = tuple(
            entry for locale_file in default_files for entry in locale_file.entries
        )

        grouped: dict[str, list[StringEntry]] = {}
        for locale_file in files:
            bucket = locale_file.locale or self._default_locale
            grouped.setdefault(bucket, []).extend(locale_file.entries)
        existing_by_locale = {locale: tuple(grouped[locale]) for locale in sorted(grouped)}

        default_keys = list(dict.fromkeys(entry.key for entry in default_strings))
        missing_by_locale: dict[str, tuple[str, ...]] = {}
        for locale, entries in existing_by_locale.items():
            present = {entry.key for entry in entries}
            missing_by_locale[locale] = tuple(key for key in default_keys if key not in present)

        return ScanResult(
            default_strings=default_strings,
            existing_by_locale=existing_by_locale,
            missing_by_locale=missing_by_locale,
            available_locales=tuple(existing_by_locale),
            total_strings=len(default_strings),
            default_paths=tuple(locale_file.path for locale_file in default_files),
        )


async def scan(tree: Sequence[TreeItem], file_reader: FileReader) -> ScanResult:
    return await RepositoryScanner().scan(tree, file_reader)
