from pathlib import Path
from typing import List

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def choose_env_file() -> str:
    return ".env.local" if Path(".env.local").exists() else ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=choose_env_file(),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",  # tolerate unrelated env vars
    )

    # Content store
    CONTENT_DIR: Path = Path("content/blog")

    # Languages, in canonical order. Single-post lookups fall back to DEFAULT_LANGUAGE.
    SUPPORTED_LANGUAGES: List[str] = ["en", "es", "da"]
    DEFAULT_LANGUAGE: str = "en"

    # Post defaults
    DEFAULT_AUTHOR: str = "Juan Herreros"
    EXCERPT_LENGTH: int = 150
    RECENT_POSTS_COUNT: int = 3

    # Logging
    LOG_LEVEL: str = "INFO"

    @model_validator(mode="after")
    def _check_default_language(self) -> "Settings":
        if self.DEFAULT_LANGUAGE not in self.SUPPORTED_LANGUAGES:
            raise ValueError(
                f"DEFAULT_LANGUAGE={self.DEFAULT_LANGUAGE!r} is not one of "
                f"SUPPORTED_LANGUAGES={self.SUPPORTED_LANGUAGES}"
            )
        return self


# Global settings instance (evaluated at import, but reads env on construction)
settings = Settings()
