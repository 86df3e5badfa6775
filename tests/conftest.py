"""Shared pytest fixtures for the search pipeline tests."""

from __future__ import annotations

import pytest
from pydantic import SecretStr

from codesearch_bot.config import BotSettings, PaginationSettings
from codesearch_bot.domain.models import SearchResult
from codesearch_bot.i18n import I18nService


@pytest.fixture
def settings() -> BotSettings:
    return BotSettings(
        telegram_token=SecretStr("test-token"),
        pagination=PaginationSettings(page_size=10, window_size=5, snippet_char_limit=600),
    )


@pytest.fixture
def i18n() -> I18nService:
    return I18nService(default_locale="en")


@pytest.fixture
def make_results():
    def factory(count: int, *, suffix: str = "py") -> list[SearchResult]:
        return [
            SearchResult(path=f"src/module_{idx}.{suffix}", line=idx, body=f"value = {idx}")
            for idx in range(1, count + 1)
        ]

    return factory
