from __future__ import annotations

import base64
import logging
from typing import Any, Callable
from urllib.parse import quote

import httpx

from l10nbot.core.config import AppSettings
from l10nbot.core.errors import (
    BranchError,
    FileMissingError,
    FileReadError,
    PullRequestError,
    SourceTreeError,
    WriteError,
)
from l10nbot.models.resources import TreeItem
from l10nbot.services.repositories import RepositorySummary


logger = logging.getLogger(__name__)

ClientFactory = Callable[[], httpx.AsyncClient]


class GitHubClient:
    """Thin GitHub REST v3 client authenticated with a user or app token."""

    def __init__(
        self,
        token: str | None,
        *,
        base_url: str = "https://api.github.com",
        user_agent: str = "l10nbot-translation-system/1.0",
        timeout: float = 20.0,
        client_factory: ClientFactory | None = None,
    ) -> None:
        headers = {
            "Accept": "application/vnd.github+json",
            "User-Agent": user_agent,
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client_factory = client_factory or (
            lambda: httpx.AsyncClient(
                base_url=base_url,
                headers=headers,
                timeout=httpx.Timeout(timeout),
            )
        )

    @classmethod
    def from_settings(
        cls,
        settings: AppSettings,
        *,
        token: str | None = None,
        client_factory: ClientFactory | None = None,
    ) -> "GitHubClient":
        resolved = token or (
            settings.github_token.get_secret_value() if settings.github_token else None
        )
        return cls(
            resolved,
            base_url=settings.github_api_url,
            user_agent=settings.github_user_agent,
            timeout=settings.github_timeout_seconds,
            client_factory=client_factory,
        )

    def repository(self, owner: str, repo: str) -> "GitHubSourceTree":
        return GitHubSourceTree(self, owner, repo)

    async def request(
        self,
        method: str,
        url: str,
        *,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        try:
            async with self._client_factory() as client:
                return await client.request(method, url, params=params, json=json)
        except httpx.HTTPError as exc:
            raise SourceTreeError(f"GitHub request {method} {url} failed: {exc}") from exc

    async def list_repositories(self, *, include_private: bool = True) -> list[RepositorySummary]:
        response = await self.request(
            "GET",
            "/user/repos",
            params={
                "sort": "updated",
                "direction": "desc",
                "per_page": 50,
                "type": "all" if include_private else "public",
            },
        )
        if response.status_code != 200:
            raise SourceTreeError(_error_message(response, "Failed to fetch repositories from GitHub"))

        summaries: list[RepositorySummary] = []
        for payload in response.json():
            languages = await self._repository_languages(payload.get("full_name", ""))
            summaries.append(
                RepositorySummary(
                    id=str(payload.get("id", "")),
                    name=payload.get("name", ""),
                    full_name=payload.get("full_name", ""),
                    description=payload.get("description"),
                    language=payload.get("language"),
                    size=int(payload.get("size") or 0),
                    stars=int(payload.get("stargazers_count") or 0),
                    forks=int(payload.get("forks_count") or 0),
                    private=bool(payload.get("private")),
                    default_branch=payload.get("default_branch") or "main",
                    html_url=payload.get("html_url") or "",
                    languages=tuple(languages),
                )
            )
        logger.info("Found %d repositories", len(summaries))
        return summaries

    async def _repository_languages(self, full_name: str) -> list[str]:
        if not full_name:
            return []
        try:
            response = await self.request("GET", f"/repos/{full_name}/languages")
        except SourceTreeError as exc:
            logger.warning("Error fetching languages for %s: %s", full_name, exc)
            return []
        if response.status_code != 200:
            return []
        return list(response.json())


class GitHubSourceTree:
    """Source-tree provider backed by a single GitHub repository."""

    def __init__(self, client: GitHubClient, owner: str, repo: str) -> None:
        self._client = client
        self._owner = owner
        self._repo = repo
        self._prefix = f"/repos/{owner}/{repo}"

    @property
    def full_name(self) -> str:
        return f"{self._owner}/{self._repo}"

    async def list_tree(self, ref: str) -> list[TreeItem]:
        response = await self._client.request(
            "GET",
            f"{self._prefix}/git/trees/{quote(ref, safe='')}",
            params={"recursive": "1"},
        )
        if response.status_code != 200:
            raise SourceTreeError(_error_message(response, "Failed to fetch repository structure"))
        payload = response.json()
        if payload.get("truncated"):
            logger.warning("Repository tree for %s@%s was truncated by GitHub.", self.full_name, ref)
        return [
            TreeItem(path=item["path"], type=item.get("type", "blob"))
            for item in payload.get("tree", [])
            if item.get("type") in ("blob", "tree")
        ]

    async def read_file(self, path: str, ref: str) -> str:
        try:
            payload = await self._get_contents(path, ref)
        except SourceTreeError as exc:
            raise FileReadError(path, str(exc)) from exc
        if payload is None:
            raise FileMissingError(path)
        if "content" not in payload:
            raise FileReadError(path, f"File is not a regular file: {path}")
        try:
            return base64.b64decode(payload["content"]).decode("utf-8")
        except (ValueError, UnicodeDecodeError) as exc:
            raise FileReadError(path, f"Could not decode file: {path}") from exc

    async def write_file(self, path: str, content: str, message: str, branch: str) -> None:
        try:
            existing = await self._get_contents(path, branch)
        except SourceTreeError as exc:
            raise WriteError(path, str(exc)) from exc

        body: dict[str, Any] = {
            "message": message,
            "content": base64.b64encode(content.encode("utf-8")).decode("ascii"),
            "branch": branch,
        }
        if existing and existing.get("sha"):
            body["sha"] = existing["sha"]

        try:
            response = await self._client.request(
                "PUT", f"{self._prefix}/contents/{quote(path)}", json=body
            )
        except SourceTreeError as exc:
            raise WriteError(path, str(exc)) from exc
        if response.status_code not in (200, 201):
            raise WriteError(path, _error_message(response, f"Failed to create/update file: {path}"))
        logger.info("%s file: %s", "Updated" if "sha" in body else "Created", path)

    async def create_branch(self, new_name: str, base_ref: str) -> None:
        try:
            base = await self._client.request(
                "GET", f"{self._prefix}/git/ref/heads/{quote(base_ref, safe='/')}"
            )
            if base.status_code != 200:
                raise BranchError(_error_message(base, f"Unknown base branch: {base_ref}"))
            sha = base.json()["object"]["sha"]
            created = await self._client.request(
                "POST",
                f"{self._prefix}/git/refs",
                json={"ref": f"refs/heads/{new_name}", "sha": sha},
            )
        except SourceTreeError as exc:
            if isinstance(exc, BranchError):
                raise
            raise BranchError(f"Failed to create branch: {new_name}") from exc
        if created.status_code != 201:
            raise BranchError(_error_message(created, f"Failed to create branch: {new_name}"))
        logger.info("Created branch: %s", new_name)

    async def open_pull_request(self, title: str, body: str, head: str, base: str) -> str:
        try:
            response = await self._client.request(
                "POST",
                f"{self._prefix}/pulls",
                json={"title": title, "body": body, "head": head, "base": base},
            )
        except SourceTreeError as exc:
            raise PullRequestError("Failed to create pull request") from exc
        if response.status_code != 201:
            raise PullRequestError(_error_message(response, "Failed to create pull request"))
        url = response.json().get("html_url", "")
        logger.info("Created pull request: %s", url)
        return url

    async def list_branches(self) -> list[str]:
        try:
            response = await self._client.request(
                "GET", f"{self._prefix}/branches", params={"per_page": 50}
            )
        except SourceTreeError as exc:
            raise BranchError("Failed to fetch repository branches") from exc
        if response.status_code != 200:
            raise BranchError(_error_message(response, "Failed to fetch repository branches"))
        return [branch["name"] for branch in response.json()]

    async def _get_contents(self, path: str, ref: str) -> dict[str, Any] | None:
        response = await self._client.request(
            "GET", f"{self._prefix}/contents/{quote(path)}", params={"ref": ref}
        )
        if response.status_code == 404:
            return None
        if response.status_code != 200:
            raise SourceTreeError(_error_message(response, f"Failed to fetch file: {path}"))
        payload = response.json()
        if not isinstance(payload, dict):
            raise SourceTreeError(f"Not a regular file: {path}")
        return payload


def _error_message(response: httpx.Response, fallback: str) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and payload.get("message"):
        return f"{fallback} (GitHub {response.status_code}: {payload['message']})"
    return f"{fallback} (GitHub status {response.status_code})"
