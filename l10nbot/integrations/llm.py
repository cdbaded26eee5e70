from __future__ import annotations

import json
import logging
import re
from typing import Any, Protocol, Sequence

import aioboto3
from openai import AsyncAzureOpenAI, AsyncOpenAI

from l10nbot.core.config import AppSettings
from l10nbot.core.errors import ProviderError, ProviderResponseError
from l10nbot.models.resources import StringEntry
from l10nbot.services.languages import language_name


logger = logging.getLogger(__name__)

_JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")


class TranslationProvider(Protocol):
    async def translate_batch(
        self,
        entries: Sequence[StringEntry],
        target_locale: str,
        source_locale: str,
        context: str,
    ) -> dict[str, str]: ...


class TranslationOrchestrator:
    """Batch string translation with Azure OpenAI primary, OpenAI and Bedrock fallbacks."""

    def __init__(self, settings: AppSettings):
        self._settings = settings
        self._azure_client: AsyncAzureOpenAI | None = None
        self._openai_client: AsyncOpenAI | None = None

        if settings.azure_openai_api_key and settings.azure_openai_endpoint and settings.azure_openai_deployment:
            self._azure_client = AsyncAzureOpenAI(
                api_key=settings.azure_openai_api_key.get_secret_value(),
                azure_endpoint=settings.azure_openai_endpoint,
                api_version=settings.azure_openai_api_version or "2024-02-15-preview",
            )
        elif settings.openai_api_key:
            self._openai_client = AsyncOpenAI(api_key=settings.openai_api_key.get_secret_value())

    @property
    def is_configured(self) -> bool:
        return bool(
            self._azure_client
            or self._openai_client
            or (self._settings.bedrock_region and self._settings.bedrock_model_id)
        )

    async def translate_batch(
        self,
        entries: Sequence[StringEntry],
        target_locale: str,
        source_locale: str,
        context: str,
    ) -> dict[str, str]:
        """Return translations keyed by entry key; keys the model skipped are absent."""
        if not entries:
            return {}
        if not self.is_configured:
            raise ProviderError("No translation provider is configured.")

        prompt = self.build_prompt(
            entries,
            target_locale=target_locale,
            source_locale=source_locale,
            context=context,
        )
        logger.info(
            "Sending translation request for %d strings (%s -> %s)",
            len(entries),
            source_locale,
            target_locale,
        )
        content = await self._complete(prompt)
        if content is None:
            raise ProviderError("All translation providers failed.")
        return self.parse_response(content)

    async def _complete(self, prompt: str) -> str | None:
        messages = [
            {"role": "system", "content": "You are a professional app localization expert."},
            {"role": "user", "content": prompt},
        ]
        max_tokens = self._settings.translation_max_tokens

        if self._azure_client:
            try:
                response = await self._azure_client.chat.completions.create(
                    model=self._settings.azure_openai_deployment,
                    messages=messages,
                    temperature=0.1,
                    max_tokens=max_tokens,
                )
                content = response.choices[0].message.content if response.choices else None
                if content:
                    return content.strip()
            except Exception as exc:  # pragma: no cover - network failure path
                logger.warning("Azure OpenAI translation failed; attempting fallback.", exc_info=exc)

        if self._openai_client:
            try:
                response = await self._openai_client.chat.completions.create(
                    model=self._settings.openai_model,
                    messages=messages,
                    temperature=0.1,
                    max_tokens=max_tokens,
                )
                content = response.choices[0].message.content if response.choices else None
                if content:
                    return content.strip()
            except Exception as exc:  # pragma: no cover - network failure path
                logger.warning("OpenAI translation failed; attempting Bedrock fallback.", exc_info=exc)

        if self._settings.bedrock_region and self._settings.bedrock_model_id:
            return await self._invoke_bedrock_prompt(prompt, max_tokens=max_tokens)

        return None

    def build_prompt(
        self,
        entries: Sequence[StringEntry],
        *,
        target_locale: str,
        source_locale: str,
        context: str,
    ) -> str:
        source_label = language_name(source_locale)
        target_label = language_name(target_locale)
        payload = json.dumps({entry.key: entry.value for entry in entries}, ensure_ascii=False, indent=2)
        return (
            f"Please translate the following {source_label} strings to {target_label}.\n\n"
            f"Application Context: {context or 'Not provided'}\n\n"
            "Important Instructions:\n"
            "1. Maintain the exact same formatting, placeholders, and special characters\n"
            "2. Keep HTML tags, URL parameters, and programming placeholders unchanged\n"
            "3. Preserve %s, %d, %1$s, {{variable}}, {0}, [text], etc. exactly as they appear\n"
            "4. For technical terms, use commonly accepted translations in the target language\n"
            "5. Consider the app context when choosing appropriate terminology\n"
            "6. Return ONLY a valid JSON object with the translations\n\n"
            f"Strings to translate:\n{payload}\n\n"
            "Return the result as a JSON object where each key maps to its translated value."
        )

    def parse_response(self, content: str) -> dict[str, str]:
        sanitized = self._strip_json_fences(content.strip())
        match = _JSON_OBJECT_PATTERN.search(sanitized)
        if not match:
            raise ProviderResponseError("No JSON object found in translation response.")
        try:
            parsed = json.loads(match.group(0))
        except json.JSONDecodeError as exc:
            raise ProviderResponseError(f"Translation response is not valid JSON: {exc}") from exc
        if not isinstance(parsed, dict):
            raise ProviderResponseError("Translation response is not a JSON object.")
        return {
            str(key): value
            for key, value in parsed.items()
            if isinstance(value, str) and value
        }

    def _strip_json_fences(self, value: str) -> str:
        if value.startswith("```"):
            value = value.strip()
            if value.lower().startswith("```json"):
                value = value[7:]
            elif value.startswith("```"):
                value = value[3:]
            if value.endswith("```"):
                value = value[:-3]
        return value.strip()

    async def _invoke_bedrock_prompt(self, prompt: str, *, max_tokens: int) -> str | None:
        try:
            async with self._bedrock_client() as client:
                body = json.dumps(
                    {
                        "inputText": prompt,
                        "textGenerationConfig": {
                            "maxTokenCount": max_tokens,
                            "temperature": 0.1,
                            "topP": 0.9,
                        },
                    }
                )
                response = await client.invoke_model(
                    modelId=self._settings.bedrock_model_id,
                    body=body,
                )
                payload = await response["body"].read()
                parsed = json.loads(payload)
                results = parsed.get("results")
                if results:
                    text = results[0].get("outputText")
                    if text:
                        return text.strip()
        except Exception as exc:  # pragma: no cover - network path
            logger.warning("Bedrock translation failed", exc_info=exc)

        return None

    def _bedrock_client(self):
        session_kwargs: dict[str, Any] = {"region_name": self._settings.bedrock_region}
        if self._settings.aws_access_key_id and self._settings.aws_secret_access_key:
            session_kwargs.update(
                {
                    "aws_access_key_id": self._settings.aws_access_key_id.get_secret_value(),
                    "aws_secret_access_key": self._settings.aws_secret_access_key.get_secret_value(),
                }
            )

        session = aioboto3.Session()
        return session.client("bedrock-runtime", **session_kwargs)
