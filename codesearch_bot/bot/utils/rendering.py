"""Turn a page of search results into Telegram HTML and pagination buttons.

Rendering is split in two steps. :class:`ResultRenderer` projects results and
page controls into a small display tree (:class:`ResultCard`,
:class:`~codesearch_bot.services.pagination.PageControl`) and hands it to a
:class:`ResultSink`. :class:`TelegramResultView` is the sink used by the bot;
it produces the message text and the inline keyboard.

Snippets go into ``<pre><code class="language-...">`` blocks. Telegram
clients highlight those blocks themselves, so the grammar identifier is all
the bot has to supply.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, Sequence

from aiogram.filters.callback_data import CallbackData
from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup
from aiogram.utils.keyboard import InlineKeyboardBuilder
from aiogram.utils.text_decorations import html_decoration

from codesearch_bot.bot.utils.telegram import TELEGRAM_MESSAGE_LIMIT
from codesearch_bot.config import PaginationSettings
from codesearch_bot.domain.models import SearchResult, format_elapsed
from codesearch_bot.i18n import I18nService
from codesearch_bot.services.pagination import PageControl, Pagination, paginate
from codesearch_bot.services.results import ResultStore
from codesearch_bot.utils.languages import classify_language

NOOP_PAGE = 0
MAX_BUTTONS_PER_ROW = 8
MIN_SNIPPET_CHARS = 40
QUERY_PREVIEW_CHAR_LIMIT = 100
TRUNCATION_MARK = "..."
BLOCK_SEPARATOR = "\n\n"


class PageCallback(CallbackData, prefix="page"):
    generation: int
    page: int


@dataclass(slots=True, frozen=True)
class ResultCard:
    """One rendered match. Text fields are already HTML-escaped."""

    heading: str
    subheading: str
    language: str
    body: str


class ResultSink(Protocol):
    def render_notice(self, text: str) -> None: ...

    def render_cards(self, cards: Sequence[ResultCard]) -> None: ...

    def render_controls(self, controls: Sequence[PageControl], generation: int) -> None: ...


def truncate_snippet(body: str, limit: int) -> str:
    if len(body) <= limit:
        return body
    cut = body[:limit]
    newline = cut.rfind("\n")
    if newline > 0:
        cut = cut[:newline]
    return f"{cut.rstrip()}\n{TRUNCATION_MARK}"


def preview_query(query: str, limit: int = QUERY_PREVIEW_CHAR_LIMIT) -> str:
    """Collapse whitespace and cap the query for display."""

    compact = " ".join(query.split())
    if len(compact) <= limit:
        return compact
    return f"{compact[:limit].rstrip()}{TRUNCATION_MARK}"


def build_card(
    result: SearchResult,
    *,
    i18n: I18nService,
    locale: str,
    snippet_char_limit: int,
) -> ResultCard:
    if result.line_range is not None:
        subheading = i18n.gettext(
            "search.line_range",
            locale=locale,
            line=result.line,
            start=result.line_range.start,
            end=result.line_range.end,
        )
    else:
        subheading = i18n.gettext("search.line", locale=locale, line=result.line)
    return ResultCard(
        heading=html_decoration.quote(result.path),
        subheading=html_decoration.quote(subheading),
        language=classify_language(result.path),
        body=html_decoration.quote(truncate_snippet(result.body, snippet_char_limit)),
    )


class ResultRenderer:
    def __init__(
        self,
        sink: ResultSink,
        *,
        i18n: I18nService,
        locale: str,
        snippet_char_limit: int,
    ) -> None:
        self.sink = sink
        self.i18n = i18n
        self.locale = locale
        self.snippet_char_limit = snippet_char_limit

    def render(self, results: Sequence[SearchResult]) -> None:
        if not results:
            self.sink.render_notice(self.i18n.gettext("search.no_results", locale=self.locale))
            return
        cards = [
            build_card(
                result,
                i18n=self.i18n,
                locale=self.locale,
                snippet_char_limit=self.snippet_char_limit,
            )
            for result in results
        ]
        self.sink.render_cards(cards)

    def render_pagination(self, pagination: Pagination, generation: int) -> None:
        self.sink.render_controls(pagination.controls, generation)


class TelegramResultView:
    """Sink collecting an HTML message body and an inline keyboard."""

    def __init__(self, header: str = "", *, limit: int = TELEGRAM_MESSAGE_LIMIT, reserve: int = 0) -> None:
        self.header = header
        self.limit = limit
        self.reserve = reserve
        self.omitted = 0
        self._blocks: list[str] = []
        self._markup: InlineKeyboardMarkup | None = None

    @property
    def text(self) -> str:
        parts = [self.header] if self.header else []
        parts.extend(self._blocks)
        return BLOCK_SEPARATOR.join(parts)

    @property
    def markup(self) -> InlineKeyboardMarkup | None:
        return self._markup

    def render_notice(self, text: str) -> None:
        self._blocks.append(html_decoration.quote(text))

    def render_cards(self, cards: Sequence[ResultCard]) -> None:
        used = len(self.text)
        for index, card in enumerate(cards):
            block = self._format_card(card)
            if used + len(BLOCK_SEPARATOR) + len(block) > self.limit - self.reserve:
                self.omitted = len(cards) - index
                break
            self._blocks.append(block)
            used += len(BLOCK_SEPARATOR) + len(block)

    def render_controls(self, controls: Sequence[PageControl], generation: int) -> None:
        if not controls:
            self._markup = None
            return
        builder = InlineKeyboardBuilder()
        page_buttons = [
            self._button(control, generation) for control in controls if control.kind == "page"
        ]
        if page_buttons:
            builder.row(*page_buttons, width=MAX_BUTTONS_PER_ROW)
        builder.row(
            *(self._button(control, generation) for control in controls if control.kind != "page")
        )
        self._markup = builder.as_markup()

    @staticmethod
    def _format_card(card: ResultCard) -> str:
        return (
            f"<b>{card.heading}</b>\n"
            f"<i>{card.subheading}</i>\n"
            f'<pre><code class="language-{card.language}">{card.body}</code></pre>'
        )

    @staticmethod
    def _button(control: PageControl, generation: int) -> InlineKeyboardButton:
        if control.disabled or control.active:
            page = NOOP_PAGE
        else:
            page = control.page
        label = f"[{control.label}]" if control.active else control.label
        return InlineKeyboardButton(
            text=label,
            callback_data=PageCallback(generation=generation, page=page).pack(),
        )


def render_header(store: ResultStore, pagination: Pagination, *, i18n: I18nService, locale: str) -> str:
    if not store.total:
        return ""
    seconds = format_elapsed(store.elapsed)
    if seconds is None:
        summary = i18n.gettext("search.header", locale=locale, count=store.total)
    else:
        summary = i18n.gettext("search.header_timed", locale=locale, count=store.total, seconds=seconds)
    page_line = i18n.gettext(
        "search.page",
        locale=locale,
        page=store.current_page,
        pages=pagination.total_pages,
    )
    lines = [f"<b>{html_decoration.quote(summary)}</b>"]
    if store.query:
        lines.append(f"<code>{html_decoration.quote(preview_query(store.query))}</code>")
    lines.append(f"<i>{html_decoration.quote(page_line)}</i>")
    return "\n".join(lines)


def render_page(
    store: ResultStore,
    settings: PaginationSettings,
    *,
    i18n: I18nService,
    locale: str,
    limit: int = TELEGRAM_MESSAGE_LIMIT,
) -> tuple[str, InlineKeyboardMarkup | None]:
    """Render the store's current page; shrinks snippets to fit one message."""

    pagination = paginate(
        store.total,
        settings.page_size,
        store.current_page,
        settings.window_size,
        previous_label=i18n.gettext("pagination.previous", locale=locale),
        next_label=i18n.gettext("pagination.next", locale=locale),
    )
    header = render_header(store, pagination, i18n=i18n, locale=locale)
    page_slice = store.current_slice(settings.page_size)
    # Worst case: every card on the page is left out.
    omission_notice = html_decoration.quote(i18n.gettext("search.omitted", locale=locale, count=len(page_slice)))
    reserve = len(BLOCK_SEPARATOR) + len(omission_notice)
    snippet_limit = settings.snippet_char_limit
    while True:
        view = TelegramResultView(header, limit=limit, reserve=reserve)
        renderer = ResultRenderer(view, i18n=i18n, locale=locale, snippet_char_limit=snippet_limit)
        renderer.render(page_slice)
        if not view.omitted or snippet_limit <= MIN_SNIPPET_CHARS:
            break
        snippet_limit = max(MIN_SNIPPET_CHARS, snippet_limit // 2)
    if view.omitted:
        view.render_notice(i18n.gettext("search.omitted", locale=locale, count=view.omitted))
    renderer.render_pagination(pagination, store.generation)
    return view.text, view.markup


__all__ = [
    "PageCallback",
    "ResultCard",
    "ResultRenderer",
    "ResultSink",
    "TelegramResultView",
    "build_card",
    "preview_query",
    "render_header",
    "render_page",
    "truncate_snippet",
]
