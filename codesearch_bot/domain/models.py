"""Pydantic models for search service payloads."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class LineRange(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=1)
    end: int = Field(ge=1)


class SearchResult(BaseModel):
    """A single match: the file, the matching line and a snippet around it."""

    model_config = ConfigDict(frozen=True)

    path: str = Field(min_length=1)
    line: int = Field(ge=1)
    body: str
    line_range: LineRange | None = None


class SearchResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    results: list[SearchResult] = Field(default_factory=list)
    # Seconds spent by the backend; None when the service did not report it.
    time: float | None = None


def format_elapsed(seconds: float | None) -> str | None:
    if seconds is None:
        return None
    return f"{seconds:.2f}"


__all__ = [
    "LineRange",
    "SearchResponse",
    "SearchResult",
    "format_elapsed",
]
