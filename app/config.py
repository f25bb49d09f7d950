"""Application configuration models."""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated, Iterable, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_GROUP_NAME = "unnamed group"
DEFAULT_SERIES_NAME = "unnamed tvshow"
DEFAULT_COVER_LIMIT = 9


def _split_names(value: object, setting: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        raw_values = [part.strip() for part in value.split(",")]
    elif isinstance(value, Iterable):
        raw_values = [str(part).strip() for part in value]
    else:
        raise ValueError(f"{setting} must be a string or iterable of strings")

    cleaned: list[str] = []
    for entry in raw_values:
        if entry and entry not in cleaned:
            cleaned.append(entry)
    return tuple(cleaned)


class Settings(BaseSettings):
    """Settings loaded from environment variables or a .env file."""

    app_name: str = Field(default="StreamShelf", alias="APP_NAME")
    server_host: str = Field(default="0.0.0.0", alias="HOST")
    server_port: int = Field(default=3000, alias="PORT")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO", alias="LOG_LEVEL"
    )

    default_group_name: str = Field(
        default=DEFAULT_GROUP_NAME, alias="DEFAULT_GROUP_NAME", min_length=1
    )
    default_series_name: str = Field(
        default=DEFAULT_SERIES_NAME, alias="DEFAULT_SERIES_NAME", min_length=1
    )
    cover_image_limit: int = Field(
        default=DEFAULT_COVER_LIMIT, alias="COVER_IMAGE_LIMIT", ge=1, le=50
    )
    recent_window_days: int = Field(
        default=31, alias="RECENT_WINDOW_DAYS", ge=0, le=3_650
    )
    pinned_groups: Annotated[tuple[str, ...], NoDecode] = Field(
        default=(), alias="PINNED_GROUPS"
    )
    hidden_groups: Annotated[tuple[str, ...], NoDecode] = Field(
        default=(), alias="HIDDEN_GROUPS"
    )
    strict_entries: bool = Field(default=False, alias="STRICT_ENTRIES")

    environment: Literal["development", "production"] = Field(
        default="development", alias="ENVIRONMENT"
    )

    @field_validator("pinned_groups", mode="before")
    @classmethod
    def _parse_pinned_groups(cls, value: object) -> tuple[str, ...]:
        """Normalise pinned group names from environment values."""

        return _split_names(value, "PINNED_GROUPS")

    @field_validator("hidden_groups", mode="before")
    @classmethod
    def _parse_hidden_groups(cls, value: object) -> tuple[str, ...]:
        """Normalise hidden group names from environment values."""

        return _split_names(value, "HIDDEN_GROUPS")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")


@lru_cache
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[call-arg]


settings = get_settings()
