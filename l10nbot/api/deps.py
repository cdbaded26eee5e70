from fastapi import Depends, Header, HTTPException, status

from l10nbot.core.config import get_settings
from l10nbot.integrations.github import GitHubClient
from l10nbot.integrations.llm import TranslationOrchestrator, TranslationProvider
from l10nbot.services.repositories import RepositoryPolicy
from l10nbot.services.scanner import RepositoryScanner
from l10nbot.services.translation import TranslationService

_orchestrator: TranslationOrchestrator | None = None
_scanner: RepositoryScanner | None = None


async def get_github_client(
    x_github_token: str | None = Header(default=None, alias="X-GitHub-Token"),
) -> GitHubClient:
    """Provide a GitHub client for the caller's token, or the configured service token."""
    settings = get_settings()
    token = x_github_token or (
        settings.github_token.get_secret_value() if settings.github_token else None
    )
    if not token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="GitHub token not found")
    return GitHubClient.from_settings(settings, token=token)


async def get_repository_scanner() -> RepositoryScanner:
    """Provide singleton RepositoryScanner instance."""
    global _scanner
    if _scanner is None:
        _scanner = RepositoryScanner(default_locale=get_settings().default_locale)
    return _scanner


async def get_translation_provider() -> TranslationProvider:
    """Provide singleton TranslationOrchestrator instance."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = TranslationOrchestrator(get_settings())
    return _orchestrator


async def get_translation_service(
    provider: TranslationProvider = Depends(get_translation_provider),
) -> TranslationService:
    """Provide TranslationService bound to the configured provider."""
    return TranslationService.from_settings(get_settings(), provider)


async def get_repository_policy() -> RepositoryPolicy:
    return RepositoryPolicy.from_settings(get_settings())
