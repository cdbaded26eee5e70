from __future__ import annotations

import pytest

from l10nbot.core.errors import FileMissingError, FileReadError, WriteError
from l10nbot.models.resources import TranslatedEntry, TreeItem
from l10nbot.services.publisher import LocaleTranslations, TranslationPublisher
from l10nbot.services.resource_parser import parse
from l10nbot.services.scanner import scan


class RecordingSourceTree:
    def __init__(
        self,
        files: dict[str, str] | None = None,
        *,
        fail_writes: bool = False,
        unreadable: tuple[str, ...] = (),
    ) -> None:
        self.files = dict(files or {})
        self.fail_writes = fail_writes
        self.unreadable = unreadable
        self.branches: list[tuple[str, str]] = []
        self.writes: list[dict[str, str]] = []
        self.pull_requests: list[dict[str, str]] = []

    async def read_file(self, path: str, ref: str) -> str:
        if path in self.unreadable:
            raise FileReadError(path, f"Failed to fetch file: {path}")
        if path not in self.files:
            raise FileMissingError(path)
        return self.files[path]

    async def write_file(self, path: str, content: str, message: str, branch: str) -> None:
        if self.fail_writes:
            raise WriteError(path)
        self.writes.append({"path": path, "content": content, "message": message, "branch": branch})

    async def create_branch(self, new_name: str, base_ref: str) -> None:
        self.branches.append((new_name, base_ref))

    async def open_pull_request(self, title: str, body: str, head: str, base: str) -> str:
        self.pull_requests.append({"title": title, "body": body, "head": head, "base": base})
        return "https://github.com/acme/notes/pull/7"


def _entry(key: str, original: str, value: str, locale: str = "es") -> TranslatedEntry:
    return TranslatedEntry(key=key, original_value=original, translated_value=value, locale=locale)


DEFAULT_PATH = "app/src/main/res/values/strings.xml"


@pytest.mark.asyncio
async def test_publish_merges_existing_file_and_opens_pull_request() -> None:
    provider = RecordingSourceTree(
        {"app/src/main/res/values-es/strings.xml": '<resources><string name="welcome">Bienvenido</string></resources>'}
    )
    publisher = TranslationPublisher(provider, clock=lambda: 1_700_000_000.0)

    result = await publisher.publish(
        [LocaleTranslations("es", (_entry("welcome", "Hello", "Hola"), _entry("bye", "Goodbye", "Adiós")))],
        base_branch="main",
        default_path=DEFAULT_PATH,
    )

    assert provider.branches == [("translations/batch-1700000000000", "main")]
    write = provider.writes[0]
    assert write["path"] == "app/src/main/res/values-es/strings.xml"
    assert write["message"] == "Update Spanish translations"
    assert write["branch"] == "translations/batch-1700000000000"
    assert [(entry.key, entry.value) for entry in parse(write["content"])] == [
        ("bye", "Adiós"),
        ("welcome", "Bienvenido"),
    ]

    assert result.url == "https://github.com/acme/notes/pull/7"
    assert result.title == "Add translations for 1 language(s)"
    assert result.total_strings == 2
    assert result.files[0].existing_count == 1
    assert result.files[0].total_count == 2

    pull_request = provider.pull_requests[0]
    assert pull_request["head"] == "translations/batch-1700000000000"
    assert pull_request["base"] == "main"
    assert "- **Spanish**: 2 strings" in pull_request["body"]
    assert "`app/src/main/res/values-es/strings.xml`" in pull_request["body"]


@pytest.mark.asyncio
async def test_publish_creates_missing_locale_files_in_order() -> None:
    provider = RecordingSourceTree()
    publisher = TranslationPublisher(provider, clock=lambda: 1.5)

    result = await publisher.publish(
        [
            LocaleTranslations("fr", (_entry("ok", "OK", "D'accord", locale="fr"),)),
            LocaleTranslations("de", (_entry("ok", "OK", "Gut", locale="de"),)),
        ],
        base_branch="develop",
    )

    assert [write["path"] for write in provider.writes] == [
        "androidApp/src/main/res/values-fr/strings.xml",
        "androidApp/src/main/res/values-de/strings.xml",
    ]
    assert "D&apos;accord" in provider.writes[0]["content"]
    assert result.branch == "translations/batch-1500"
    assert result.title == "Add translations for 2 language(s)"


@pytest.mark.asyncio
async def test_render_locale_is_stable_across_repeated_merges() -> None:
    provider = RecordingSourceTree()
    publisher = TranslationPublisher(provider)
    translations = LocaleTranslations("es", (_entry("b", "B", "Be"), _entry("a", "A", "A-es")))

    first = await publisher.render_locale(translations, ref="main", default_path=DEFAULT_PATH)
    provider.files[first.path] = first.content
    second = await publisher.render_locale(translations, ref="main", default_path=DEFAULT_PATH)

    assert second.content == first.content


@pytest.mark.asyncio
async def test_publish_requires_results() -> None:
    publisher = TranslationPublisher(RecordingSourceTree())

    with pytest.raises(ValueError):
        await publisher.publish([], base_branch="main")


@pytest.mark.asyncio
async def test_write_failure_stops_before_pull_request() -> None:
    provider = RecordingSourceTree(fail_writes=True)
    publisher = TranslationPublisher(provider)

    with pytest.raises(WriteError):
        await publisher.publish([LocaleTranslations("es", (_entry("a", "A", "Á"),))], base_branch="main")

    assert provider.pull_requests == []


@pytest.mark.asyncio
async def test_unreadable_locale_file_aborts_publish_without_writing() -> None:
    provider = RecordingSourceTree(unreadable=("app/src/main/res/values-es/strings.xml",))
    publisher = TranslationPublisher(provider)

    with pytest.raises(FileReadError) as excinfo:
        await publisher.publish(
            [LocaleTranslations("es", (_entry("a", "A", "Á"),))],
            base_branch="main",
            default_path=DEFAULT_PATH,
        )

    assert not isinstance(excinfo.value, FileMissingError)
    assert provider.writes == []
    assert provider.pull_requests == []


@pytest.mark.asyncio
async def test_region_locales_are_written_where_a_rescan_finds_them() -> None:
    default = '<resources><string name="ok">OK</string><string name="bye">Bye</string></resources>'
    provider = RecordingSourceTree({DEFAULT_PATH: default})
    publisher = TranslationPublisher(provider)

    await publisher.publish(
        [
            LocaleTranslations("pt-BR", (_entry("ok", "OK", "Certo", locale="pt-BR"),)),
            LocaleTranslations("zh-TW", (_entry("ok", "OK", "好", locale="zh-TW"),)),
        ],
        base_branch="main",
        default_path=DEFAULT_PATH,
    )

    assert [write["path"] for write in provider.writes] == [
        "app/src/main/res/values-pt-rBR/strings.xml",
        "app/src/main/res/values-zh-rTW/strings.xml",
    ]
    assert provider.writes[0]["message"] == "Update Portuguese (Brazil) translations"

    files = {DEFAULT_PATH: default, **{write["path"]: write["content"] for write in provider.writes}}

    async def read(path: str) -> str:
        return files[path]

    result = await scan([TreeItem(path=path) for path in files], read)

    assert result.available_locales == ("en", "pt-rBR", "zh-rTW")
    assert result.missing_by_locale["pt-rBR"] == ("bye",)
    assert result.missing_by_locale["zh-rTW"] == ("bye",)
