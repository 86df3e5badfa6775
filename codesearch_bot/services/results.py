"""In-memory result sets and page state, one per chat."""

from __future__ import annotations

from typing import Sequence

from codesearch_bot.domain.models import SearchResponse, SearchResult


class ResultStore:
    """Holds the latest result set of a chat and the page being viewed.

    Every outgoing request gets a token from :meth:`begin_request`. Only the
    response carrying the most recently issued token is installed, so a slow
    response can never overwrite the results of a newer search.
    """

    def __init__(self) -> None:
        self._results: list[SearchResult] = []
        self._current_page = 1
        self._query: str | None = None
        self._elapsed: float | None = None
        self._issued = 0
        self._generation = 0

    @property
    def results(self) -> Sequence[SearchResult]:
        return tuple(self._results)

    @property
    def total(self) -> int:
        return len(self._results)

    @property
    def current_page(self) -> int:
        return self._current_page

    @property
    def query(self) -> str | None:
        return self._query

    @property
    def elapsed(self) -> float | None:
        return self._elapsed

    @property
    def generation(self) -> int:
        """Token of the request whose results are currently installed."""

        return self._generation

    @property
    def latest_token(self) -> int:
        return self._issued

    def reset(
        self,
        results: Sequence[SearchResult],
        *,
        query: str | None = None,
        elapsed: float | None = None,
    ) -> None:
        self._results = list(results)
        self._current_page = 1
        self._query = query
        self._elapsed = elapsed

    def set_page(self, page: int) -> None:
        # No clamping: callers only pass pages taken from rendered controls.
        self._current_page = page

    def current_slice(self, page_size: int) -> list[SearchResult]:
        start = (self._current_page - 1) * page_size
        if start < 0:
            return []
        return self._results[start : start + page_size]

    def begin_request(self) -> int:
        self._issued += 1
        return self._issued

    def is_latest(self, token: int) -> bool:
        return token == self._issued

    def accept(self, token: int, response: SearchResponse, *, query: str | None = None) -> bool:
        """Install ``response`` if ``token`` belongs to the newest request."""

        if not self.is_latest(token):
            return False
        self.reset(response.results, query=query, elapsed=response.time)
        self._generation = token
        return True


class ResultStoreRegistry:
    """Lazily creates one :class:`ResultStore` per chat."""

    def __init__(self) -> None:
        self._stores: dict[int, ResultStore] = {}

    def get(self, chat_id: int) -> ResultStore:
        store = self._stores.get(chat_id)
        if store is None:
            store = ResultStore()
            self._stores[chat_id] = store
        return store

    def peek(self, chat_id: int) -> ResultStore | None:
        return self._stores.get(chat_id)

    def __len__(self) -> int:
        return len(self._stores)


__all__ = ["ResultStore", "ResultStoreRegistry"]
