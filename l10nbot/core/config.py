from functools import lru_cache
from typing import Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Application configuration loaded from environment or .env."""

    app_name: str = Field(default="l10nbot Translation API")
    app_env: str = Field(default="dev", alias="APP_ENV")
    debug: bool = Field(default=False, alias="APP_DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    api_host: str = Field(default="127.0.0.1", alias="API_HOST")
    api_port: int = Field(default=8000, alias="API_PORT")
    cors_allow_origins: list[str] = Field(
        default_factory=lambda: ["*"], alias="CORS_ALLOW_ORIGINS"
    )

    github_token: Optional[SecretStr] = Field(default=None, alias="GITHUB_TOKEN")
    github_api_url: str = Field(default="https://api.github.com", alias="GITHUB_API_URL")
    github_user_agent: str = Field(
        default="l10nbot-translation-system/1.0", alias="GITHUB_USER_AGENT"
    )
    github_timeout_seconds: float = Field(default=20.0, alias="GITHUB_TIMEOUT_SECONDS")

    openai_api_key: Optional[SecretStr] = Field(default=None, alias="OPENAI_API_KEY")
    openai_model: str = Field(default="gpt-4o-mini", alias="OPENAI_MODEL")
    azure_openai_endpoint: Optional[str] = Field(default=None, alias="AZURE_OPENAI_ENDPOINT")
    azure_openai_api_key: Optional[SecretStr] = Field(default=None, alias="AZURE_OPENAI_API_KEY")
    azure_openai_deployment: Optional[str] = Field(default=None, alias="AZURE_OPENAI_DEPLOYMENT")
    azure_openai_api_version: Optional[str] = Field(default=None, alias="AZURE_OPENAI_API_VERSION")
    bedrock_region: Optional[str] = Field(default=None, alias="BEDROCK_REGION")
    bedrock_model_id: Optional[str] = Field(default=None, alias="BEDROCK_MODEL_ID")
    aws_access_key_id: Optional[SecretStr] = Field(default=None, alias="AWS_ACCESS_KEY_ID")
    aws_secret_access_key: Optional[SecretStr] = Field(default=None, alias="AWS_SECRET_ACCESS_KEY")

    default_locale: str = Field(default="en", alias="DEFAULT_LOCALE")
    source_locale: str = Field(default="en", alias="SOURCE_LOCALE")
    translation_batch_size: int = Field(default=50, ge=1, alias="TRANSLATION_BATCH_SIZE")
    translation_pause_seconds: float = Field(
        default=1.0, ge=0.0, alias="TRANSLATION_PAUSE_SECONDS"
    )
    translation_max_tokens: int = Field(default=2048, alias="TRANSLATION_MAX_TOKENS")
    translation_branch_prefix: str = Field(
        default="translations/batch-", alias="TRANSLATION_BRANCH_PREFIX"
    )
    scan_timeout_seconds: float = Field(default=120.0, alias="SCAN_TIMEOUT_SECONDS")
    translate_timeout_seconds: float = Field(default=600.0, alias="TRANSLATE_TIMEOUT_SECONDS")

    repository_min_size_kb: int = Field(default=10, alias="REPOSITORY_MIN_SIZE_KB")
    repository_max_size_kb: int = Field(default=100_000, alias="REPOSITORY_MAX_SIZE_KB")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )


@lru_cache
def get_settings() -> AppSettings:
    """Return cached application settings."""
    return AppSettings()  # type: ignore[call-arg]
