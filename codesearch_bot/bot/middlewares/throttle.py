"""Simple per-user throttle to keep search requests and page flips in check."""

from __future__ import annotations

import time
from collections import defaultdict, deque
from typing import Any, Awaitable, Callable, Deque, Dict

from aiogram import BaseMiddleware
from aiogram.types import CallbackQuery, Message, TelegramObject

from codesearch_bot.config import BotSettings, get_settings
from codesearch_bot.logging import logger

LIMIT_TEXT = "Too many requests, please slow down."


class ThrottleMiddleware(BaseMiddleware):
    def __init__(self, settings: BotSettings | None = None) -> None:
        self.settings = settings or get_settings()
        self.window_seconds = self.settings.request_limit.interval_seconds
        self.max_requests = self.settings.request_limit.max_requests
        self._events: Dict[int, Deque[float]] = defaultdict(deque)

    async def __call__(
        self,
        handler: Callable[[TelegramObject, Dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: Dict[str, Any],
    ) -> Any:
        user_id = self._extract_user_id(event)
        if user_id is None:
            return await handler(event, data)

        now = time.monotonic()
        bucket = self._events[user_id]

        while bucket and now - bucket[0] > self.window_seconds:
            bucket.popleft()

        if len(bucket) >= self.max_requests:
            logger.info("request_throttled", user_id=user_id, window_seconds=self.window_seconds)
            await self._notify_limit(event)
            return None

        bucket.append(now)
        return await handler(event, data)

    @staticmethod
    def _extract_user_id(event: TelegramObject) -> int | None:
        if isinstance(event, (Message, CallbackQuery)) and event.from_user is not None:
            return event.from_user.id
        return None

    @staticmethod
    async def _notify_limit(event: TelegramObject) -> None:
        if isinstance(event, Message):
            await event.answer(LIMIT_TEXT, parse_mode=None)
        elif isinstance(event, CallbackQuery):
            await event.answer(LIMIT_TEXT, show_alert=False)


__all__ = ["ThrottleMiddleware"]
