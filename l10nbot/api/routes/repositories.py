from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query, status

from l10nbot.api.deps import get_github_client, get_repository_policy
from l10nbot.core.errors import SourceTreeError
from l10nbot.integrations.github import GitHubClient
from l10nbot.schemas.repositories import RepositoryItem, RepositoryListResponse
from l10nbot.services.repositories import RepositoryPolicy


router = APIRouter()


@router.get(
    "",
    response_model=RepositoryListResponse,
    summary="List the caller's repositories that look suitable for translation.",
)
async def list_repositories(
    include_private: bool = Query(True, alias="includePrivate"),
    github: GitHubClient = Depends(get_github_client),
    policy: RepositoryPolicy = Depends(get_repository_policy),
) -> RepositoryListResponse:
    try:
        repositories = await github.list_repositories(include_private=include_private)
    except SourceTreeError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    items = [
        RepositoryItem.from_domain(repo, estimated_strings=policy.estimate_strings(repo))
        for repo in policy.filter(repositories)
    ]
    return RepositoryListResponse(repositories=items, count=len(items))
