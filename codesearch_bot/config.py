"""Runtime configuration based on environment variables."""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import AnyHttpUrl, BaseModel, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SearchSettings(BaseModel):
    endpoint: AnyHttpUrl = Field(
        default="http://127.0.0.1:3000",
        description="Base URL of the code search service; requests go to <endpoint>/search.",
    )
    request_timeout_seconds: int = Field(default=10, ge=1, le=120)
    escape_pattern: bool = Field(
        default=True,
        description="Backslash-escape regex metacharacters after percent-encoding the query.",
    )


class PaginationSettings(BaseModel):
    page_size: int = Field(default=10, ge=1, le=50)
    window_size: int = Field(default=5, ge=1, le=20)
    snippet_char_limit: int = Field(default=600, ge=40)


class RequestLimitSettings(BaseModel):
    max_requests: int = Field(default=5, ge=1)
    interval_seconds: int = Field(default=10, ge=1)


class BotSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="CODESEARCH_",
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__"
    )

    environment: Literal["dev", "staging", "prod"] = "dev"
    telegram_token: SecretStr
    telegram_proxy: str | None = None
    default_language: str = "en"
    admin_telegram_id: int | None = None

    search: SearchSettings = Field(default_factory=SearchSettings)
    pagination: PaginationSettings = Field(default_factory=PaginationSettings)
    request_limit: RequestLimitSettings = Field(default_factory=RequestLimitSettings)

    @field_validator("telegram_proxy", mode="before")
    @classmethod
    def _empty_str_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


@lru_cache
def get_settings() -> BotSettings:
    """Return cached settings instance."""

    return BotSettings()  # type: ignore[call-arg]


__all__ = [
    "BotSettings",
    "PaginationSettings",
    "RequestLimitSettings",
    "SearchSettings",
    "get_settings",
]
