"""HTTP client for the remote code search service."""

from __future__ import annotations

import json
import math
from typing import Any

import httpx
from pydantic import ValidationError

from codesearch_bot.config import SearchSettings
from codesearch_bot.domain.models import SearchResponse, SearchResult
from codesearch_bot.logging import logger
from codesearch_bot.services.exceptions import SearchServiceError


class SearchService:
    """Issues ``GET <endpoint>/search?text=<query>`` and parses the reply.

    Failures are terminal for the request: there is no retry, the caller
    reports the error and the user resubmits.
    """

    def __init__(self, http_client: httpx.AsyncClient, settings: SearchSettings | None = None) -> None:
        self._client = http_client
        self._settings = settings or SearchSettings()

    def request_url(self, encoded_query: str) -> str:
        # The query is already percent-encoded; passing it through ``params``
        # would encode it a second time.
        base = str(self._settings.endpoint).rstrip("/")
        return f"{base}/search?text={encoded_query}"

    async def search(self, encoded_query: str) -> SearchResponse:
        url = self.request_url(encoded_query)
        try:
            response = await self._client.get(
                url,
                timeout=self._settings.request_timeout_seconds,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            detail = exc.response.text[:500] if exc.response is not None else str(exc)
            status_code = exc.response.status_code if exc.response is not None else "unknown"
            logger.warning("search_request_failed", status_code=status_code, detail=detail)
            raise SearchServiceError(f"Search request failed ({status_code}): {detail}") from exc
        except httpx.RequestError as exc:
            logger.warning("search_request_failed", error=str(exc))
            raise SearchServiceError(f"Search request failed: {exc}") from exc

        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("search_response_undecodable", error=str(exc))
            raise SearchServiceError("Search service returned invalid JSON.") from exc

        parsed = parse_search_payload(payload)
        logger.info(
            "search_request_completed",
            result_count=len(parsed.results),
            elapsed=parsed.time,
        )
        return parsed


def parse_search_payload(payload: Any) -> SearchResponse:
    """Build a :class:`SearchResponse`, skipping malformed result items."""

    if not isinstance(payload, dict):
        raise SearchServiceError("Search service returned an unexpected payload.")

    raw_results = payload.get("results")
    if raw_results is None:
        raw_results = []
    if not isinstance(raw_results, list):
        raise SearchServiceError("Search service returned malformed results.")

    results: list[SearchResult] = []
    for index, item in enumerate(raw_results):
        try:
            results.append(SearchResult.model_validate(item))
        except ValidationError as exc:
            logger.warning(
                "search_result_skipped",
                index=index,
                errors=exc.error_count(),
            )

    return SearchResponse(results=results, time=_parse_elapsed(payload.get("time")))


def _parse_elapsed(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        seconds = float(value)
    except (TypeError, ValueError):
        logger.info("search_time_unparseable", value=str(value)[:50])
        return None
    if not math.isfinite(seconds):
        logger.info("search_time_unparseable", value=str(value)[:50])
        return None
    return seconds


__all__ = ["SearchService", "parse_search_payload"]
