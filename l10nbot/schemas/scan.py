from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from l10nbot.models.resources import ScanResult, StringEntry


class StringEntryItem(BaseModel):
    """Serialized `<string>` resource entry."""

    key: str
    value: str
    translatable: bool = True

    @classmethod
    def from_domain(cls, entry: StringEntry) -> "StringEntryItem":
        return cls(key=entry.key, value=entry.value, translatable=entry.translatable)

    def to_domain(self) -> StringEntry:
        return StringEntry(key=self.key, value=self.value, translatable=self.translatable)


class ScanRequest(BaseModel):
    owner: str = Field(..., min_length=1, description="Repository owner or organisation.")
    repo: str = Field(..., min_length=1, description="Repository name.")
    branch: str = Field(default="main", description="Branch or ref to scan.")


class ScanResultItem(BaseModel):
    """Aggregate scan payload keyed by locale."""

    model_config = ConfigDict(populate_by_name=True)

    default_strings: list[StringEntryItem] = Field(
        default_factory=list,
        serialization_alias="defaultStrings",
        description="Base-language entries every locale is compared against.",
    )
    existing_translations: dict[str, list[StringEntryItem]] = Field(
        default_factory=dict,
        serialization_alias="existingTranslations",
    )
    missing_translations: dict[str, list[str]] = Field(
        default_factory=dict,
        serialization_alias="missingTranslations",
        description="Keys present in the default strings but absent for each locale.",
    )
    available_languages: list[str] = Field(
        default_factory=list, serialization_alias="availableLanguages"
    )
    total_strings: int = Field(0, ge=0, serialization_alias="totalStrings")
    default_paths: list[str] = Field(default_factory=list, serialization_alias="defaultPaths")
    branches: list[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, result: ScanResult) -> "ScanResultItem":
        return cls(
            default_strings=[StringEntryItem.from_domain(entry) for entry in result.default_strings],
            existing_translations={
                locale: [StringEntryItem.from_domain(entry) for entry in entries]
                for locale, entries in result.existing_by_locale.items()
            },
            missing_translations={
                locale: list(keys) for locale, keys in result.missing_by_locale.items()
            },
            available_languages=list(result.available_locales),
            total_strings=result.total_strings,
            default_paths=list(result.default_paths),
            branches=list(result.branches),
        )


class ScanResponse(BaseModel):
    repository: str
    branch: str
    scan: ScanResultItem
    timestamp: datetime


class BranchListResponse(BaseModel):
    branches: list[str] = Field(default_factory=list)
    default: str | None = Field(
        default=None,
        description="Preferred base branch: main, then master, then the first listed.",
    )
