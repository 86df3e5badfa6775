"""Telegram handlers for searching code and paging through results."""

from __future__ import annotations

from aiogram import F, Router
from aiogram.enums import ParseMode
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command, CommandObject, CommandStart
from aiogram.types import CallbackQuery, InaccessibleMessage, Message

from codesearch_bot.bot.utils.rendering import NOOP_PAGE, PageCallback, preview_query, render_page
from codesearch_bot.bot.utils.telegram import answer_with_retry, edit_with_retry
from codesearch_bot.config import BotSettings
from codesearch_bot.i18n import I18nService
from codesearch_bot.logging import bound_contextvars, logger
from codesearch_bot.services.exceptions import SearchServiceError
from codesearch_bot.services.results import ResultStoreRegistry
from codesearch_bot.services.search import SearchService
from codesearch_bot.utils.query import encode_query

router = Router()


def _i18n_for(settings: BotSettings, from_user) -> tuple[I18nService, str]:
    i18n = I18nService(default_locale=settings.default_language)
    locale = i18n.resolve_locale(getattr(from_user, "language_code", None))
    return i18n, locale


@router.message(CommandStart())
async def handle_start(message: Message, settings: BotSettings) -> None:
    i18n, locale = _i18n_for(settings, message.from_user)
    name = message.from_user.full_name if message.from_user else ""
    await answer_with_retry(
        message,
        i18n.gettext("start.greeting", locale=locale, name=name),
        parse_mode=None,
    )


@router.message(Command("help"))
async def handle_help(message: Message, settings: BotSettings) -> None:
    i18n, locale = _i18n_for(settings, message.from_user)
    await answer_with_retry(message, i18n.gettext("help.text", locale=locale), parse_mode=None)


@router.message(Command("search"))
async def handle_search_command(
    message: Message,
    command: CommandObject,
    settings: BotSettings,
    search_service: SearchService,
    stores: ResultStoreRegistry,
) -> None:
    raw = command.args or ""
    if not raw.strip():
        i18n, locale = _i18n_for(settings, message.from_user)
        await answer_with_retry(message, i18n.gettext("search.usage", locale=locale), parse_mode=None)
        return
    await run_search(
        message,
        raw,
        settings=settings,
        search_service=search_service,
        stores=stores,
    )


@router.message(F.text & ~F.text.startswith("/"))
async def handle_text(
    message: Message,
    settings: BotSettings,
    search_service: SearchService,
    stores: ResultStoreRegistry,
) -> None:
    await run_search(
        message,
        message.text or "",
        settings=settings,
        search_service=search_service,
        stores=stores,
    )


async def run_search(
    message: Message,
    raw: str,
    *,
    settings: BotSettings,
    search_service: SearchService,
    stores: ResultStoreRegistry,
) -> None:
    encoded = encode_query(raw, escape_pattern=settings.search.escape_pattern)
    if encoded is None:
        return

    query = raw.strip()
    i18n, locale = _i18n_for(settings, message.from_user)
    store = stores.get(message.chat.id)
    token = store.begin_request()

    with bound_contextvars(chat_id=message.chat.id, request_token=token):
        logger.info("search_dispatched", query_length=len(query))
        status = await answer_with_retry(
            message,
            i18n.gettext("search.pending", locale=locale, query=preview_query(query)),
            parse_mode=None,
        )
        try:
            response = await search_service.search(encoded)
        except SearchServiceError as exc:
            logger.info("search_failed", error=str(exc))
            await edit_with_retry(status, i18n.gettext("search.failed", locale=locale), parse_mode=None)
            return

        if not store.accept(token, response, query=query):
            logger.info("search_response_discarded", latest_token=store.latest_token)
            await edit_with_retry(status, i18n.gettext("search.superseded", locale=locale), parse_mode=None)
            return

        text, markup = render_page(store, settings.pagination, i18n=i18n, locale=locale)
        try:
            await edit_with_retry(status, text, parse_mode=ParseMode.HTML, reply_markup=markup)
        except TelegramBadRequest as exc:
            logger.warning("search_results_rejected", error=str(exc), text_length=len(text))
            await edit_with_retry(status, i18n.gettext("search.failed", locale=locale), parse_mode=None)


@router.callback_query(PageCallback.filter())
async def handle_page(
    query: CallbackQuery,
    callback_data: PageCallback,
    settings: BotSettings,
    stores: ResultStoreRegistry,
) -> None:
    message = query.message
    if message is None or isinstance(message, InaccessibleMessage):
        await query.answer()
        return

    i18n, locale = _i18n_for(settings, query.from_user)
    store = stores.peek(message.chat.id)
    if store is None or store.generation != callback_data.generation:
        await query.answer(i18n.gettext("pagination.expired", locale=locale), show_alert=True)
        return
    if callback_data.page == NOOP_PAGE or callback_data.page == store.current_page:
        await query.answer()
        return

    with bound_contextvars(chat_id=message.chat.id, generation=store.generation):
        store.set_page(callback_data.page)
        logger.info("search_page_changed", page=callback_data.page, total=store.total)
        text, markup = render_page(store, settings.pagination, i18n=i18n, locale=locale)
        await edit_with_retry(message, text, parse_mode=ParseMode.HTML, reply_markup=markup)
    await query.answer()
