"""Telegram sending helpers with retry support."""

from __future__ import annotations

from typing import Any

from aiogram import Bot
from aiogram.exceptions import TelegramBadRequest
from aiogram.types import Message

from codesearch_bot.logging import logger
from codesearch_bot.utils.retry import retry_async

TELEGRAM_SEND_MAX_ATTEMPTS = 3
TELEGRAM_SEND_BASE_DELAY = 0.3
# Telegram rejects messages longer than 4096 characters.
TELEGRAM_MESSAGE_LIMIT = 4096


async def answer_with_retry(message: Message, text: str, **kwargs: Any) -> Any:
    """Send a reply with retry/backoff."""

    async def _send():
        return await message.answer(text, **kwargs)

    return await retry_async(
        _send,
        max_attempts=TELEGRAM_SEND_MAX_ATTEMPTS,
        base_delay=TELEGRAM_SEND_BASE_DELAY,
        give_up_on=(TelegramBadRequest,),
        logger=logger,
        operation_name="telegram_answer",
    )


async def edit_with_retry(message: Message, text: str, **kwargs: Any) -> Any:
    """Replace the text of a sent message; identical content is not an error."""

    async def _edit():
        return await message.edit_text(text, **kwargs)

    try:
        return await retry_async(
            _edit,
            max_attempts=TELEGRAM_SEND_MAX_ATTEMPTS,
            base_delay=TELEGRAM_SEND_BASE_DELAY,
            give_up_on=(TelegramBadRequest,),
            logger=logger,
            operation_name="telegram_edit_message",
        )
    except TelegramBadRequest as exc:
        if "message is not modified" in str(exc):
            return None
        raise


async def bot_send_with_retry(bot: Bot, *, chat_id: int, text: str, **kwargs: Any) -> Any:
    """Send a message via Bot with retry/backoff."""

    async def _send():
        return await bot.send_message(chat_id=chat_id, text=text, **kwargs)

    return await retry_async(
        _send,
        max_attempts=TELEGRAM_SEND_MAX_ATTEMPTS,
        base_delay=TELEGRAM_SEND_BASE_DELAY,
        give_up_on=(TelegramBadRequest,),
        logger=logger,
        operation_name="telegram_send_message",
    )


__all__ = [
    "TELEGRAM_MESSAGE_LIMIT",
    "answer_with_retry",
    "bot_send_with_retry",
    "edit_with_retry",
]
