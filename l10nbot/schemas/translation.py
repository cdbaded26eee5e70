from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from l10nbot.models.resources import StringEntry, TranslatedEntry
from l10nbot.services.languages import Language
from l10nbot.services.publisher import PublishResult, RenderedLocaleFile


class TranslationStringItem(BaseModel):
    key: str = Field(..., min_length=1, description="Stable identifier for the string entry.")
    value: str = Field("", description="Source text in the base locale.")

    def to_domain(self) -> StringEntry:
        return StringEntry(key=self.key, value=self.value)


class TranslationBatchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    strings: list[TranslationStringItem] = Field(
        ...,
        min_length=1,
        description="Collection of key-value pairs to translate.",
    )
    target_language: str = Field(..., min_length=1, alias="targetLanguage")
    source_language: str | None = Field(
        default=None,
        alias="sourceLanguage",
        description="Locale code of the provided source text. Defaults to the configured source locale.",
    )
    app_context: str = Field(
        ...,
        min_length=1,
        alias="appContext",
        description="Short description of the application to steer terminology.",
    )
    repository: str | None = None
    branch: str | None = None


class TranslatedEntryItem(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    key: str
    original_value: str = Field("", alias="originalValue")
    translated_value: str = Field(..., alias="translatedValue")
    language: str

    @classmethod
    def from_domain(cls, entry: TranslatedEntry) -> "TranslatedEntryItem":
        return cls(
            key=entry.key,
            original_value=entry.original_value,
            translated_value=entry.translated_value,
            language=entry.locale,
        )

    def to_domain(self) -> TranslatedEntry:
        return TranslatedEntry(
            key=self.key,
            original_value=self.original_value,
            translated_value=self.translated_value,
            locale=self.language,
        )


class TranslationBatchResponse(BaseModel):
    translations: list[TranslatedEntryItem] = Field(default_factory=list)
    target_language: str = Field(..., serialization_alias="targetLanguage")
    source_language: str = Field(..., serialization_alias="sourceLanguage")
    string_count: int = Field(0, ge=0, serialization_alias="stringCount")
    repository: str | None = None
    branch: str | None = None
    xml_content: str = Field(
        "",
        serialization_alias="xmlContent",
        description="Preview of this batch rendered as a resource file.",
    )


class LanguageItem(BaseModel):
    code: str
    name: str
    native: str

    @classmethod
    def from_domain(cls, language: Language) -> "LanguageItem":
        return cls(code=language.code, name=language.name, native=language.native)


class LanguageListResponse(BaseModel):
    languages: list[LanguageItem] = Field(default_factory=list)
    count: int = 0


class LocaleTranslationsItem(BaseModel):
    language: str = Field(..., min_length=1)
    translations: list[TranslatedEntryItem] = Field(default_factory=list)


class CreatePullRequestRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    owner: str = Field(..., min_length=1)
    repo: str = Field(..., min_length=1)
    branch: str = Field(default="main", description="Base branch the pull request targets.")
    default_path: str | None = Field(
        default=None,
        alias="defaultPath",
        description="Default-language resource path locale files are derived from.",
    )
    translation_results: list[LocaleTranslationsItem] = Field(
        ...,
        min_length=1,
        alias="translationResults",
    )


class PublishedFileItem(BaseModel):
    language: str
    path: str
    existing_count: int = Field(0, serialization_alias="existingCount")
    new_count: int = Field(0, serialization_alias="newCount")
    total_count: int = Field(0, serialization_alias="totalCount")

    @classmethod
    def from_domain(cls, rendered: RenderedLocaleFile) -> "PublishedFileItem":
        return cls(
            language=rendered.locale,
            path=rendered.path,
            existing_count=rendered.existing_count,
            new_count=rendered.new_count,
            total_count=rendered.total_count,
        )


class PullRequestItem(BaseModel):
    url: str
    title: str
    branch: str


class PullRequestResponse(BaseModel):
    pull_request: PullRequestItem = Field(..., serialization_alias="pullRequest")
    files_created: int = Field(0, serialization_alias="filesCreated")
    total_strings: int = Field(0, serialization_alias="totalStrings")
    files: list[PublishedFileItem] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, result: PublishResult) -> "PullRequestResponse":
        return cls(
            pull_request=PullRequestItem(url=result.url, title=result.title, branch=result.branch),
            files_created=len(result.files),
            total_strings=result.total_strings,
            files=[PublishedFileItem.from_domain(item) for item in result.files],
        )
