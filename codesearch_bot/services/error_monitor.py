"""Log unhandled handler errors and forward a summary to the administrator."""

from __future__ import annotations

import traceback

from aiogram import Bot
from aiogram.dispatcher.event.bases import UNHANDLED
from aiogram.types import ErrorEvent, Update, User

from codesearch_bot.bot.utils.telegram import bot_send_with_retry
from codesearch_bot.config import BotSettings
from codesearch_bot.logging import logger

# Leaves headroom below Telegram's 4096-character message limit.
REPORT_CHAR_LIMIT = 3900
TRACEBACK_CHAR_LIMIT = 1800
TRIGGER_CHAR_LIMIT = 300


class ErrorMonitor:
    """Async callable plugged into the aiogram error observer."""

    def __init__(self, settings: BotSettings) -> None:
        self._settings = settings

    async def __call__(self, event: ErrorEvent, bot: Bot):
        return await self.handle_error(event, bot)

    async def handle_error(self, event: ErrorEvent, bot: Bot):
        update_id = getattr(event.update, "update_id", None)
        logger.error(
            "bot_error_captured",
            exception_type=event.exception.__class__.__name__,
            exception=str(event.exception),
            update_id=update_id,
        )

        admin_id = self._settings.admin_telegram_id
        if admin_id is None:
            return UNHANDLED

        try:
            await bot_send_with_retry(bot, chat_id=admin_id, text=self.build_report(event), parse_mode=None)
        except Exception:
            logger.exception("error_monitor_notification_failed", update_id=update_id)
        return UNHANDLED

    def build_report(self, event: ErrorEvent) -> str:
        update = event.update
        exception = event.exception
        kind, trigger, user = self._describe_update(update)
        lines = [
            "CODE SEARCH BOT ERROR",
            f"Environment: {self._settings.environment}",
            f"Exception: {exception.__class__.__name__}: {exception}",
            f"Update ID: {getattr(update, 'update_id', 'unknown')}",
            f"Update Type: {kind}",
            f"User: {self._format_user(user)}",
        ]
        if trigger:
            lines.extend(["", "Trigger:", self._truncate(trigger, TRIGGER_CHAR_LIMIT)])
        trace = self._format_traceback(exception)
        if trace:
            lines.extend(["", "Traceback:", trace])
        return self._truncate("\n".join(lines), REPORT_CHAR_LIMIT)

    @staticmethod
    def _describe_update(update: Update | None) -> tuple[str, str, User | None]:
        if update is None:
            return "unknown", "", None
        if update.message is not None:
            return "message", update.message.text or "", update.message.from_user
        if update.callback_query is not None:
            return "callback_query", update.callback_query.data or "", update.callback_query.from_user
        return "other", "", None

    @staticmethod
    def _format_user(user: User | None) -> str:
        if user is None:
            return "unknown"
        segments = [str(user.id), user.full_name]
        if user.username:
            segments.append(f"@{user.username}")
        return " | ".join(segment for segment in segments if segment)

    def _format_traceback(self, exception: BaseException) -> str:
        trace = "".join(traceback.format_exception(exception.__class__, exception, exception.__traceback__))
        return self._truncate(trace, TRACEBACK_CHAR_LIMIT)

    @staticmethod
    def _truncate(value: str, limit: int) -> str:
        value = value.strip()
        if len(value) <= limit:
            return value
        return f"{value[: limit - 15].rstrip()}\n...[truncated]"


__all__ = ["ErrorMonitor"]
