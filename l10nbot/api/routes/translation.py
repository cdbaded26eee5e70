from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from l10nbot.api.deps import get_github_client, get_translation_service
from l10nbot.core.config import get_settings
from l10nbot.core.errors import OperationTimedOut, ProviderError, SourceTreeError
from l10nbot.integrations.github import GitHubClient
from l10nbot.schemas.translation import (
    CreatePullRequestRequest,
    LanguageItem,
    LanguageListResponse,
    PullRequestResponse,
    TranslatedEntryItem,
    TranslationBatchRequest,
    TranslationBatchResponse,
)
from l10nbot.services.languages import SUPPORTED_LANGUAGES
from l10nbot.services.publisher import (
    DEFAULT_RESOURCE_PATH,
    LocaleTranslations,
    TranslationPublisher,
)
from l10nbot.services.serializer import serialize
from l10nbot.services.translation import TranslationService


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get(
    "/languages",
    response_model=LanguageListResponse,
    summary="List languages the translator can target.",
)
async def list_languages() -> LanguageListResponse:
    languages = [LanguageItem.from_domain(language) for language in SUPPORTED_LANGUAGES]
    return LanguageListResponse(languages=languages, count=len(languages))


@router.post(
    "/batch",
    response_model=TranslationBatchResponse,
    status_code=status.HTTP_200_OK,
    summary="Translate a batch of resource strings into the requested locale.",
)
async def translate_batch(
    payload: TranslationBatchRequest,
    translator: TranslationService = Depends(get_translation_service),
) -> TranslationBatchResponse:
    """Return translated entries; unparseable provider output degrades to placeholders."""
    source_language = payload.source_language or translator.source_locale
    entries = [item.to_domain() for item in payload.strings if item.value]
    logger.info(
        "Starting translation batch: %d strings, %s -> %s",
        len(entries),
        source_language,
        payload.target_language,
    )

    try:
        translated = await translator.translate_entries(
            entries,
            payload.target_language,
            context=payload.app_context,
            source_locale=source_language,
        )
    except OperationTimedOut as exc:
        raise HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=str(exc)) from exc
    except ProviderError as exc:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=f"Translation service error: {exc}",
        ) from exc

    return TranslationBatchResponse(
        translations=[TranslatedEntryItem.from_domain(entry) for entry in translated],
        target_language=payload.target_language,
        source_language=source_language,
        string_count=len(translated),
        repository=payload.repository,
        branch=payload.branch,
        xml_content=serialize(translated),
    )


@router.post(
    "/create-pr",
    response_model=PullRequestResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Merge translations into locale files and open a pull request.",
)
async def create_pull_request(
    payload: CreatePullRequestRequest,
    github: GitHubClient = Depends(get_github_client),
) -> PullRequestResponse:
    logger.info(
        "Creating PR for %s/%s with %d language(s)",
        payload.owner,
        payload.repo,
        len(payload.translation_results),
    )
    results = [
        LocaleTranslations(
            locale=item.language,
            entries=tuple(entry.to_domain() for entry in item.translations),
        )
        for item in payload.translation_results
    ]
    publisher = TranslationPublisher(
        github.repository(payload.owner, payload.repo),
        branch_prefix=get_settings().translation_branch_prefix,
    )
    try:
        published = await publisher.publish(
            results,
            base_branch=payload.branch,
            default_path=payload.default_path or DEFAULT_RESOURCE_PATH,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except SourceTreeError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    return PullRequestResponse.from_domain(published)
