from __future__ import annotations

from pydantic import BaseModel, Field

from l10nbot.services.repositories import RepositorySummary


class RepositoryItem(BaseModel):
    """Repository offered for translation."""

    id: str
    name: str
    full_name: str = Field(..., serialization_alias="fullName")
    description: str
    language: str
    stars: int = 0
    forks: int = 0
    default_branch: str = Field("main", serialization_alias="defaultBranch")
    is_private: bool = Field(False, serialization_alias="isPrivate")
    size: int = 0
    html_url: str = Field("", serialization_alias="htmlUrl")
    languages: list[str] = Field(default_factory=list)
    estimated_strings: int = Field(0, serialization_alias="estimatedStrings")

    @classmethod
    def from_domain(cls, repo: RepositorySummary, *, estimated_strings: int) -> "RepositoryItem":
        return cls(
            id=repo.id,
            name=repo.name,
            full_name=repo.full_name,
            description=repo.description or "No description available",
            language=repo.language or "Unknown",
            stars=repo.stars,
            forks=repo.forks,
            default_branch=repo.default_branch,
            is_private=repo.private,
            size=repo.size,
            html_url=repo.html_url,
            languages=list(repo.languages),
            estimated_strings=estimated_strings,
        )


class RepositoryListResponse(BaseModel):
    repositories: list[RepositoryItem] = Field(default_factory=list)
    count: int = 0
