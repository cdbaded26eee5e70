from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from l10nbot.core.config import AppSettings


@dataclass(frozen=True, slots=True)
class RepositorySummary:
    """Subset of GitHub repository metadata used for eligibility decisions."""

    id: str
    name: str
    full_name: str
    description: str | None
    language: str | None
    size: int
    stars: int = 0
    forks: int = 0
    private: bool = False
    default_branch: str = "main"
    html_url: str = ""
    languages: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class RepositoryPolicy:
    """Heuristic filter deciding which repositories are offered for translation."""

    min_size_kb: int = 10
    max_size_kb: int = 100_000
    supported_languages: frozenset[str] = field(
        default_factory=lambda: frozenset(
            {
                "JavaScript",
                "TypeScript",
                "React",
                "Vue",
                "Java",
                "Kotlin",
                "Swift",
                "Python",
                "PHP",
                "C#",
                "C++",
                "Go",
                "Rust",
                "HTML",
                "CSS",
            }
        )
    )
    excluded_terms: tuple[str, ...] = (
        "dotfiles",
        "config",
        "backup",
        "archive",
        "test",
        "demo",
        "example",
        "tutorial",
        "learning",
        "practice",
        "exercise",
    )

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "RepositoryPolicy":
        return cls(
            min_size_kb=settings.repository_min_size_kb,
            max_size_kb=settings.repository_max_size_kb,
        )

    def is_translatable(self, repo: RepositorySummary) -> bool:
        if repo.size < self.min_size_kb or repo.size > self.max_size_kb:
            return False

        has_supported = any(lang in self.supported_languages for lang in repo.languages)
        if not has_supported and not repo.language:
            return False
        if repo.language and repo.language not in self.supported_languages:
            return False

        haystack = f"{repo.name} {repo.description or ''}".lower()
        return not any(term in haystack for term in self.excluded_terms)

    def estimate_strings(self, repo: RepositorySummary) -> int:
        """Rough count of UI strings, clamped to 10..2000."""
        density = {
            "JavaScript": 0.8,
            "TypeScript": 0.8,
            "Java": 0.6,
            "Kotlin": 0.6,
            "Swift": 0.5,
            "Python": 0.4,
            "PHP": 0.4,
        }.get(repo.language or "", 0.3)
        estimate = int(repo.size * density)

        if "HTML" in repo.languages or "CSS" in repo.languages:
            estimate += int(repo.size * 0.2)
        if "mobile" in repo.name or "app" in repo.name:
            estimate += int(repo.size * 0.3)
        if "web" in repo.name or "frontend" in repo.name:
            estimate += int(repo.size * 0.2)

        return max(10, min(estimate, 2000))

    def filter(self, repositories: Sequence[RepositorySummary]) -> list[RepositorySummary]:
        eligible = [repo for repo in repositories if self.is_translatable(repo)]
        return sorted(eligible, key=lambda repo: repo.stars, reverse=True)
