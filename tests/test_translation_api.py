from __future__ import annotations

from contextlib import contextmanager
from typing import Sequence

from fastapi.testclient import TestClient

from l10nbot.api.deps import get_github_client, get_translation_service
from l10nbot.core.app import create_app
from l10nbot.core.errors import FileMissingError, ProviderError, WriteError
from l10nbot.models.resources import StringEntry
from l10nbot.services.translation import TranslationService


class StubProvider:
    def __init__(self, translations: dict[str, str] | None = None, *, error: Exception | None = None) -> None:
        self.translations = translations or {}
        self.error = error
        self.calls: list[dict[str, object]] = []

    async def translate_batch(
        self,
        entries: Sequence[StringEntry],
        target_locale: str,
        source_locale: str,
        context: str,
    ) -> dict[str, str]:
        self.calls.append(
            {
                "keys": [entry.key for entry in entries],
                "target": target_locale,
                "source": source_locale,
                "context": context,
            }
        )
        if self.error:
            raise self.error
        return {key: value for key, value in self.translations.items()}


class StubPublishTarget:
    def __init__(self, files: dict[str, str] | None = None, *, fail_writes: bool = False) -> None:
        self.files = files or {}
        self.fail_writes = fail_writes
        self.writes: list[tuple[str, str, str, str]] = []
        self.branches: list[tuple[str, str]] = []

    async def read_file(self, path: str, ref: str) -> str:
        if path not in self.files:
            raise FileMissingError(path)
        return self.files[path]

    async def write_file(self, path: str, content: str, message: str, branch: str) -> None:
        if self.fail_writes:
            raise WriteError(path)
        self.writes.append((path, content, message, branch))

    async def create_branch(self, new_name: str, base_ref: str) -> None:
        self.branches.append((new_name, base_ref))

    async def open_pull_request(self, title: str, body: str, head: str, base: str) -> str:
        return "https://github.com/acme/notes/pull/42"


class StubGitHub:
    def __init__(self, target: StubPublishTarget) -> None:
        self.target = target

    def repository(self, owner: str, repo: str) -> StubPublishTarget:
        return self.target


@contextmanager
def client_with_overrides(*, provider: StubProvider | None = None, github: StubGitHub | None = None):
    app = create_app()

    if provider is not None:

        async def override_service():
            return TranslationService(provider, batch_size=2, pause_seconds=0)

        app.dependency_overrides[get_translation_service] = override_service

    if github is not None:

        async def override_github():
            return github

        app.dependency_overrides[get_github_client] = override_github

    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()


def test_languages_lists_supported_catalog() -> None:
    with client_with_overrides() as client:
        response = client.get("/api/translate/languages")

    assert response.status_code == 200
    payload = response.json()
    assert payload["count"] == len(payload["languages"]) == 26
    assert {"code": "es", "name": "Spanish", "native": "Español"} in payload["languages"]


def test_translate_batch_returns_entries_and_resource_preview() -> None:
    provider = StubProvider({"welcome": "Hola", "bye": "Adiós", "save": "Guardar"})

    with client_with_overrides(provider=provider) as client:
        response = client.post(
            "/api/translate/batch",
            json={
                "strings": [
                    {"key": "welcome", "value": "Hello"},
                    {"key": "bye", "value": "Goodbye"},
                    {"key": "save", "value": "Save"},
                ],
                "targetLanguage": "es",
                "sourceLanguage": "en",
                "appContext": "Note taking app",
                "repository": "acme/notes",
            },
        )

    assert response.status_code == 200
    payload = response.json()
    assert payload["targetLanguage"] == "es"
    assert payload["sourceLanguage"] == "en"
    assert payload["stringCount"] == 3
    assert payload["repository"] == "acme/notes"
    assert payload["translations"][0] == {
        "key": "welcome",
        "originalValue": "Hello",
        "translatedValue": "Hola",
        "language": "es",
    }
    assert '<string name="bye">Adiós</string>' in payload["xmlContent"]
    assert [call["keys"] for call in provider.calls] == [["welcome", "bye"], ["save"]]
    assert all(call["context"] == "Note taking app" for call in provider.calls)


def test_translate_batch_forwards_requested_source_language() -> None:
    provider = StubProvider({"welcome": "Hello"})

    with client_with_overrides(provider=provider) as client:
        response = client.post(
            "/api/translate/batch",
            json={
                "strings": [{"key": "welcome", "value": "Bonjour"}],
                "targetLanguage": "en-US",
                "sourceLanguage": "fr",
                "appContext": "Travel app",
            },
        )

    assert response.status_code == 200
    assert provider.calls[0]["source"] == "fr"
    assert response.json()["translations"][0]["translatedValue"] == "Hello"


def test_translate_batch_requires_strings_and_context() -> None:
    with client_with_overrides(provider=StubProvider()) as client:
        empty = client.post(
            "/api/translate/batch",
            json={"strings": [], "targetLanguage": "es", "appContext": "App"},
        )
        no_context = client.post(
            "/api/translate/batch",
            json={"strings": [{"key": "a", "value": "A"}], "targetLanguage": "es"},
        )

    assert empty.status_code == 422
    assert no_context.status_code == 422


def test_translate_batch_reports_provider_outage() -> None:
    provider = StubProvider(error=ProviderError("connection refused"))

    with client_with_overrides(provider=provider) as client:
        response = client.post(
            "/api/translate/batch",
            json={"strings": [{"key": "a", "value": "A"}], "targetLanguage": "es", "appContext": "App"},
        )

    assert response.status_code == 502
    assert response.json()["detail"].startswith("Translation service error:")


def test_create_pull_request_publishes_merged_files() -> None:
    target = StubPublishTarget(
        {"app/src/main/res/values-es/strings.xml": '<resources><string name="welcome">Bienvenido</string></resources>'}
    )

    with client_with_overrides(github=StubGitHub(target)) as client:
        response = client.post(
            "/api/translate/create-pr",
            json={
                "owner": "acme",
                "repo": "notes",
                "branch": "main",
                "defaultPath": "app/src/main/res/values/strings.xml",
                "translationResults": [
                    {
                        "language": "es",
                        "translations": [
                            {"key": "welcome", "originalValue": "Hello", "translatedValue": "Hola", "language": "es"},
                            {"key": "bye", "originalValue": "Goodbye", "translatedValue": "Adiós", "language": "es"},
                        ],
                    }
                ],
            },
        )

    assert response.status_code == 201
    payload = response.json()
    assert payload["pullRequest"]["url"] == "https://github.com/acme/notes/pull/42"
    assert payload["pullRequest"]["title"] == "Add translations for 1 language(s)"
    assert payload["pullRequest"]["branch"].startswith("translations/batch-")
    assert payload["filesCreated"] == 1
    assert payload["totalStrings"] == 2
    assert payload["files"][0] == {
        "language": "es",
        "path": "app/src/main/res/values-es/strings.xml",
        "existingCount": 1,
        "newCount": 2,
        "totalCount": 2,
    }

    path, content, message, branch = target.writes[0]
    assert path == "app/src/main/res/values-es/strings.xml"
    assert '<string name="welcome">Bienvenido</string>' in content
    assert content.index('name="bye"') < content.index('name="welcome"')
    assert message == "Update Spanish translations"
    assert target.branches == [(branch, "main")]


def test_create_pull_request_requires_results() -> None:
    with client_with_overrides(github=StubGitHub(StubPublishTarget())) as client:
        response = client.post(
            "/api/translate/create-pr",
            json={"owner": "acme", "repo": "notes", "translationResults": []},
        )

    assert response.status_code == 422


def test_create_pull_request_maps_write_failures_to_502() -> None:
    target = StubPublishTarget(fail_writes=True)

    with client_with_overrides(github=StubGitHub(target)) as client:
        response = client.post(
            "/api/translate/create-pr",
            json={
                "owner": "acme",
                "repo": "notes",
                "translationResults": [
                    {
                        "language": "fr",
                        "translations": [{"key": "a", "originalValue": "A", "translatedValue": "À", "language": "fr"}],
                    }
                ],
            },
        )

    assert response.status_code == 502
    assert "androidApp/src/main/res/values-fr/strings.xml" in response.json()["detail"]
