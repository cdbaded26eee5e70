from __future__ import annotations

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, status

from l10nbot.api.deps import get_github_client, get_repository_scanner
from l10nbot.core.config import get_settings
from l10nbot.core.errors import (
    BranchError,
    NoResourceFilesFound,
    OperationTimedOut,
    SourceTreeError,
)
from l10nbot.integrations.github import GitHubClient
from l10nbot.schemas.scan import BranchListResponse, ScanRequest, ScanResponse, ScanResultItem
from l10nbot.services.scanner import RepositoryScanner


logger = logging.getLogger(__name__)

router = APIRouter()


def preferred_branch(branches: list[str]) -> str | None:
    if "main" in branches:
        return "main"
    if "master" in branches:
        return "master"
    return branches[0] if branches else None


@router.get(
    "/branches/{owner}/{repo}",
    response_model=BranchListResponse,
    summary="List repository branches and the preferred base branch.",
)
async def list_branches(
    owner: str,
    repo: str,
    github: GitHubClient = Depends(get_github_client),
) -> BranchListResponse:
    try:
        branches = await github.repository(owner, repo).list_branches()
    except BranchError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc
    return BranchListResponse(branches=branches, default=preferred_branch(branches))


@router.post(
    "/repository",
    response_model=ScanResponse,
    status_code=status.HTTP_200_OK,
    summary="Scan a repository for string resources and missing translations.",
)
async def scan_repository(
    payload: ScanRequest,
    github: GitHubClient = Depends(get_github_client),
    scanner: RepositoryScanner = Depends(get_repository_scanner),
) -> ScanResponse:
    """Return default strings, per-locale translations, and missing keys."""
    logger.info("Starting scan for %s/%s on branch %s", payload.owner, payload.repo, payload.branch)
    settings = get_settings()
    try:
        result = await scanner.scan_repository(
            github.repository(payload.owner, payload.repo),
            payload.branch,
            timeout=settings.scan_timeout_seconds,
        )
    except NoResourceFilesFound as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except OperationTimedOut as exc:
        raise HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=str(exc)) from exc
    except SourceTreeError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(exc)) from exc

    return ScanResponse(
        repository=f"{payload.owner}/{payload.repo}",
        branch=payload.branch,
        scan=ScanResultItem.from_domain(result),
        timestamp=datetime.now(timezone.utc),
    )
