"""Application entrypoint."""

from __future__ import annotations

import asyncio

import httpx
from aiogram import Bot, Dispatcher
from aiogram.client.default import DefaultBotProperties
from aiogram.client.session.aiohttp import AiohttpSession
from aiogram.enums import ParseMode

from codesearch_bot.bot.middlewares import ThrottleMiddleware
from codesearch_bot.bot.routers import setup_routers
from codesearch_bot.config import get_settings
from codesearch_bot.logging import configure_logging, logger
from codesearch_bot.services.error_monitor import ErrorMonitor
from codesearch_bot.services.results import ResultStoreRegistry
from codesearch_bot.services.search import SearchService


async def main() -> None:
    configure_logging()
    settings = get_settings()

    session = (
        AiohttpSession(proxy=settings.telegram_proxy) if settings.telegram_proxy else None
    )
    bot = Bot(
        token=settings.telegram_token.get_secret_value(),
        default=DefaultBotProperties(parse_mode=ParseMode.HTML),
        session=session,
    )
    dp = Dispatcher()
    dp.include_router(setup_routers())
    dp.errors.register(ErrorMonitor(settings=settings))

    throttle_middleware = ThrottleMiddleware(settings)
    dp.message.middleware(throttle_middleware)
    dp.callback_query.middleware(throttle_middleware)

    stores = ResultStoreRegistry()
    async with httpx.AsyncClient() as http_client:
        search_service = SearchService(http_client, settings=settings.search)
        logger.info(
            "bot_starting",
            environment=settings.environment,
            endpoint=str(settings.search.endpoint),
            page_size=settings.pagination.page_size,
        )
        await dp.start_polling(
            bot,
            settings=settings,
            search_service=search_service,
            stores=stores,
        )


if __name__ == "__main__":
    asyncio.run(main())
