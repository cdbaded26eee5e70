from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Sequence

from l10nbot.core.errors import FileMissingError
from l10nbot.integrations.source_tree import SourceTreeProvider
from l10nbot.models.resources import TranslatedEntry
from l10nbot.services.languages import language_name
from l10nbot.services.merge import merge
from l10nbot.services.resource_parser import ResourceParser
from l10nbot.services.serializer import serialize, target_path


logger = logging.getLogger(__name__)

DEFAULT_RESOURCE_PATH = "androidApp/src/main/res/values/strings.xml"


@dataclass(frozen=True, slots=True)
class LocaleTranslations:
    """Every translated entry accumulated for one locale across batches."""

    locale: str
    entries: tuple[TranslatedEntry, ...]


@dataclass(frozen=True, slots=True)
class RenderedLocaleFile:
    locale: str
    path: str
    content: str
    existing_count: int
    new_count: int
    total_count: int


@dataclass(frozen=True, slots=True)
class PublishResult:
    url: str
    branch: str
    title: str
    files: tuple[RenderedLocaleFile, ...]
    total_strings: int


class TranslationPublisher:
    """Merge translations into locale files on a fresh branch and open a pull request."""

    def __init__(
        self,
        provider: SourceTreeProvider,
        *,
        parser: ResourceParser | None = None,
        branch_prefix: str = "translations/batch-",
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._provider = provider
        self._parser = parser or ResourceParser()
        self._branch_prefix = branch_prefix
        self._clock = clock

    async def render_locale(
        self,
        translations: LocaleTranslations,
        *,
        ref: str,
        default_path: str = DEFAULT_RESOURCE_PATH,
    ) -> RenderedLocaleFile:
        """Merge fresh entries with the locale file currently at `ref`."""
        path = target_path(default_path, translations.locale)
        try:
            current = await self._provider.read_file(path, ref)
        except FileMissingError:
            logger.info("No existing translations found for %s, creating new file", translations.locale)
            existing = []
        else:
            existing = self._parser.parse(current, source=path)

        merged = merge(existing, list(translations.entries))
        return RenderedLocaleFile(
            locale=translations.locale,
            path=path,
            content=serialize(merged),
            existing_count=len(existing),
            new_count=len(translations.entries),
            total_count=len(merged),
        )

    async def publish(
        self,
        results: Sequence[LocaleTranslations],
        *,
        base_branch: str,
        default_path: str = DEFAULT_RESOURCE_PATH,
    ) -> PublishResult:
        if not results:
            raise ValueError("Translation results are required.")

        branch = f"{self._branch_prefix}{int(self._clock() * 1000)}"
        logger.info("Publishing %d language(s) on branch %s", len(results), branch)
        await self._provider.create_branch(branch, base_branch)

        # Commits to one branch must be sequential; each write moves the ref.
        files: list[RenderedLocaleFile] = []
        for translations in results:
            rendered = await self.render_locale(
                translations,
                ref=base_branch,
                default_path=default_path,
            )
            await self._provider.write_file(
                rendered.path,
                rendered.content,
                f"Update {language_name(translations.locale)} translations",
                branch,
            )
            logger.info(
                "Merged %d existing + %d new translations for %s",
                rendered.existing_count,
                rendered.new_count,
                translations.locale,
            )
            files.append(rendered)

        total_strings = sum(len(translations.entries) for translations in results)
        title = f"Add translations for {len(results)} language(s)"
        body = self.build_body(files, base_branch=base_branch, total_strings=total_strings)
        url = await self._provider.open_pull_request(title, body, branch, base_branch)

        return PublishResult(
            url=url,
            branch=branch,
            title=title,
            files=tuple(files),
            total_strings=total_strings,
        )

    def build_body(
        self,
        files: Sequence[RenderedLocaleFile],
        *,
        base_branch: str,
        total_strings: int,
    ) -> str:
        language_lines = "\n".join(
            f"- **{language_name(item.locale)}**: {item.new_count} strings" for item in files
        )
        file_lines = "\n".join(f"- `{item.path}`" for item in files)
        languages = ", ".join(language_name(item.locale) for item in files)
        return (
            "## Translation Update\n\n"
            "This PR adds automated translations for the following languages:\n\n"
            f"{language_lines}\n\n"
            "### Summary\n"
            f"- **Total strings translated**: {total_strings}\n"
            f"- **Languages**: {languages}\n"
            f"- **Source branch**: {base_branch}\n\n"
            "### Files Added/Updated\n"
            f"{file_lines}\n\n"
            "---\n"
            "Existing translations were kept as-is; only missing strings were added.\n"
            "Please review the translations before merging."
        )
