from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOCAL_ENVIRONMENTS = frozenset({"development", "dev", "local", "test"})
DEFAULT_CREDENTIAL_STORE_PATH = Path("~/.config/botstudio/credentials.json")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    app_name: str = Field(default="Gemini Bot Studio", validation_alias="APP_NAME")
    environment: str = Field(default="development", validation_alias="ENVIRONMENT")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")

    gemini_api_key: str = Field(
        default="",
        validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY"),
    )
    gemini_image_model: str = Field(
        default="gemini-2.5-flash-image",
        validation_alias="GEMINI_IMAGE_MODEL",
    )

    telegram_bot_token: str = Field(default="", validation_alias="TELEGRAM_BOT_TOKEN")
    telegram_api_base_url: str = Field(
        default="https://api.telegram.org",
        validation_alias="TELEGRAM_API_BASE_URL",
    )
    telegram_parse_mode: str = Field(default="Markdown", validation_alias="TELEGRAM_PARSE_MODE")
    telegram_poll_timeout_seconds: int = Field(
        default=30,
        validation_alias="TELEGRAM_POLL_TIMEOUT_SECONDS",
        ge=1,
    )
    telegram_retry_delay_seconds: float = Field(
        default=5.0,
        validation_alias="TELEGRAM_RETRY_DELAY_SECONDS",
        gt=0,
    )
    telegram_request_timeout_seconds: float = Field(
        default=30.0,
        validation_alias="TELEGRAM_REQUEST_TIMEOUT_SECONDS",
        gt=0,
    )

    credential_store_path: Path = Field(
        default=DEFAULT_CREDENTIAL_STORE_PATH,
        validation_alias="CREDENTIAL_STORE_PATH",
    )
    history_limit: int = Field(default=10, validation_alias="HISTORY_LIMIT", ge=1)
    bot_log_limit: int = Field(default=50, validation_alias="BOT_LOG_LIMIT", ge=1)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        """Normalize LOG_LEVEL to uppercase for stable comparisons."""
        return str(value).upper()

    @field_validator("telegram_api_base_url", mode="before")
    @classmethod
    def normalize_telegram_api_base_url(cls, value: str) -> str:
        """Drop trailing slashes so method URLs can be joined safely."""
        return str(value).strip().rstrip("/")

    @field_validator("credential_store_path", mode="after")
    @classmethod
    def expand_credential_store_path(cls, value: Path) -> Path:
        """Resolve '~' in the credential store location."""
        return value.expanduser()


@lru_cache
def get_settings() -> Settings:
    """Build settings from environment variables."""
    return Settings()
