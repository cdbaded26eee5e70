from __future__ import annotations

import json
from types import SimpleNamespace

import pytest

from l10nbot.core.config import AppSettings
from l10nbot.core.errors import ProviderError, ProviderResponseError
from l10nbot.integrations import llm as llm_module
from l10nbot.integrations.llm import TranslationOrchestrator
from l10nbot.models.resources import StringEntry


def _settings(**overrides: object) -> AppSettings:
    values: dict[str, object] = {
        "OPENAI_API_KEY": None,
        "AZURE_OPENAI_API_KEY": None,
        "AZURE_OPENAI_ENDPOINT": None,
        "AZURE_OPENAI_DEPLOYMENT": None,
        "BEDROCK_REGION": None,
        "BEDROCK_MODEL_ID": None,
        "AWS_ACCESS_KEY_ID": None,
        "AWS_SECRET_ACCESS_KEY": None,
    }
    values.update(overrides)
    return AppSettings(**values)  # type: ignore[arg-type]


ENTRIES = [StringEntry(key="welcome", value="Hello"), StringEntry(key="bye", value="Goodbye")]


@pytest.mark.parametrize(
    "content",
    [
        '{"welcome": "Hola", "bye": "Adiós"}',
        '```json\n{"welcome": "Hola", "bye": "Adiós"}\n```',
        '```\n{"welcome": "Hola", "bye": "Adiós"}\n```',
        'Here you go:\n{"welcome": "Hola", "bye": "Adiós"}\nLet me know!',
    ],
)
def test_parse_response_extracts_json_object(content: str) -> None:
    orchestrator = TranslationOrchestrator(_settings())

    assert orchestrator.parse_response(content) == {"welcome": "Hola", "bye": "Adiós"}


def test_parse_response_drops_non_string_and_empty_values() -> None:
    orchestrator = TranslationOrchestrator(_settings())

    parsed = orchestrator.parse_response('{"a": "Uno", "b": 2, "c": "", "d": null}')

    assert parsed == {"a": "Uno"}


@pytest.mark.parametrize("content", ["no json here", "{not: valid json}", "[1, 2]"])
def test_parse_response_rejects_unreadable_output(content: str) -> None:
    orchestrator = TranslationOrchestrator(_settings())

    with pytest.raises(ProviderResponseError):
        orchestrator.parse_response(content)


def test_build_prompt_names_languages_and_embeds_strings() -> None:
    orchestrator = TranslationOrchestrator(_settings())

    prompt = orchestrator.build_prompt(ENTRIES, target_locale="es", source_locale="en", context="Notes app")

    assert "Please translate the following English strings to Spanish." in prompt
    assert "Application Context: Notes app" in prompt
    assert '"welcome": "Hello"' in prompt
    assert "%1$s" in prompt


@pytest.mark.asyncio
async def test_translate_batch_without_provider_raises() -> None:
    orchestrator = TranslationOrchestrator(_settings())

    assert not orchestrator.is_configured
    with pytest.raises(ProviderError):
        await orchestrator.translate_batch(ENTRIES, "es", "en", "")


@pytest.mark.asyncio
async def test_translate_batch_with_no_entries_skips_provider() -> None:
    orchestrator = TranslationOrchestrator(_settings())

    assert await orchestrator.translate_batch([], "es", "en", "") == {}


@pytest.mark.asyncio
async def test_translate_batch_uses_openai_client() -> None:
    calls: list[dict[str, object]] = []

    async def create(**kwargs: object) -> SimpleNamespace:
        calls.append(kwargs)
        message = SimpleNamespace(content='```json\n{"welcome": "Hola", "bye": "Adiós"}\n```')
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])

    orchestrator = TranslationOrchestrator(_settings(OPENAI_API_KEY="sk-test", OPENAI_MODEL="gpt-4o-mini"))
    orchestrator._openai_client = SimpleNamespace(  # type: ignore[assignment]
        chat=SimpleNamespace(completions=SimpleNamespace(create=create))
    )

    result = await orchestrator.translate_batch(ENTRIES, "es", "en", "Notes app")

    assert result == {"welcome": "Hola", "bye": "Adiós"}
    assert calls[0]["model"] == "gpt-4o-mini"
    assert calls[0]["temperature"] == 0.1


@pytest.mark.asyncio
async def test_translate_batch_uses_bedrock_when_configured(monkeypatch: pytest.MonkeyPatch) -> None:
    invocations: list[dict[str, object]] = []

    class StubBody:
        def __init__(self, payload: bytes) -> None:
            self._payload = payload

        async def read(self) -> bytes:
            return self._payload

    class StubBedrockClient:
        async def __aenter__(self) -> "StubBedrockClient":
            return self

        async def __aexit__(self, exc_type, exc, tb) -> None:
            return None

        async def invoke_model(self, *, modelId: str, body: str) -> dict[str, object]:
            invocations.append({"model_id": modelId, "body": json.loads(body)})
            payload = json.dumps({"results": [{"outputText": '{"welcome": "Bonjour"}'}]}).encode("utf-8")
            return {"body": StubBody(payload)}

    class StubSession:
        def client(self, *args, **kwargs):
            invocations.append({"client_args": args, "client_kwargs": kwargs})
            return StubBedrockClient()

    monkeypatch.setattr(llm_module.aioboto3, "Session", lambda: StubSession())

    orchestrator = TranslationOrchestrator(
        _settings(BEDROCK_REGION="us-east-1", BEDROCK_MODEL_ID="amazon.titan-text-express-v1")
    )

    result = await orchestrator.translate_batch(ENTRIES[:1], "fr", "en", "")

    assert result == {"welcome": "Bonjour"}
    assert invocations[0]["client_args"] == ("bedrock-runtime",)
    assert invocations[0]["client_kwargs"] == {"region_name": "us-east-1"}
    assert invocations[1]["model_id"] == "amazon.titan-text-express-v1"


@pytest.mark.asyncio
async def test_translate_batch_reports_failure_when_every_provider_is_silent() -> None:
    async def create(**kwargs: object) -> SimpleNamespace:
        return SimpleNamespace(choices=[])

    orchestrator = TranslationOrchestrator(_settings(OPENAI_API_KEY="sk-test"))
    orchestrator._openai_client = SimpleNamespace(  # type: ignore[assignment]
        chat=SimpleNamespace(completions=SimpleNamespace(create=create))
    )

    with pytest.raises(ProviderError, match="All translation providers failed"):
        await orchestrator.translate_batch(ENTRIES, "es", "en", "")
