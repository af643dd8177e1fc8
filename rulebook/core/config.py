from functools import lru_cache

from babel.core import parse_locale
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Package resource holding the built-in messages (see rulebook/i18n/resources)
DEFAULT_BUNDLE = "rulebook.i18n:resources/messages"

class Settings(BaseSettings):
    # Messages
    DEFAULT_LOCALE: str = "en"
    BUNDLE_PATHS: list[str] = []
    STRICT_MESSAGES: bool = False  # Raise on a key missing from every bundle instead of returning the key

    # Logging
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False  # True for structured JSON, False for colored console output

    model_config = SettingsConfigDict(env_prefix="RULEBOOK_", env_file=".env", extra="ignore")

    @field_validator("DEFAULT_LOCALE")
    @classmethod
    def _check_locale(cls, value: str) -> str:
        if value:
            parse_locale(value.replace("-", "_"))
        return value


@lru_cache
def get_settings() -> Settings:
    return Settings()
