"""Importer configuration loaded from environment variables."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings shared by the import pipeline and the HTTP service."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "canvasqti"
    environment: str = "development"
    log_level: str = "INFO"

    # Locale used for generated names and the localized "false" literal.
    question_locale: str = "en"

    moodle_category: str = "$course$/Canvas import"
    export_dir: str = "/tmp/canvasqti-exports"
    max_upload_bytes: int = Field(default=50 * 1024 * 1024, ge=1)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()
