"""Telegram Bot API transport built on python-telegram-bot."""

import os
from typing import TYPE_CHECKING

from telegram import ReactionTypeEmoji, ReplyParameters, Update
from telegram.constants import ChatAction, ParseMode
from telegram.error import TelegramError
from telegram.ext import Application as TelegramApplication
from telegram.ext import ApplicationBuilder, ContextTypes, MessageHandler, filters

from ..errors import DeliveryError
from ..logging_config import get_logger
from ..models import User
from .telegram_mapper import to_chat_message, to_user

if TYPE_CHECKING:
    from ..dialogue.engine import IEngine

logger = get_logger(__name__)


class TelegramTransport:
    """Long-polling Telegram transport; one task per update."""

    def __init__(self, token: str | None = None):
        token = token or os.getenv("TELEGRAM_TOKEN")
        if not token:
            raise ValueError("TELEGRAM_TOKEN environment variable not set")

        self._app: TelegramApplication = (
            ApplicationBuilder().token(token).concurrent_updates(True).build()
        )
        self._engine: "IEngine | None" = None

    async def get_me(self) -> User:
        # initialize() is a no-op once the application is initialized
        await self._app.initialize()
        me = await self._app.bot.get_me()
        return to_user(me)

    async def send_text(
        self,
        chat_id: str,
        text: str,
        reply_to: int | None = None,
        markdown: bool = False,
    ) -> None:
        reply_parameters = (
            ReplyParameters(message_id=reply_to, allow_sending_without_reply=True)
            if reply_to is not None
            else None
        )
        try:
            await self._app.bot.send_message(
                chat_id=chat_id,
                text=text,
                parse_mode=ParseMode.MARKDOWN if markdown else None,
                reply_parameters=reply_parameters,
            )
        except TelegramError as e:
            raise DeliveryError(str(e)) from e

    async def send_reaction(self, chat_id: str, message_id: int, emoji: str) -> None:
        try:
            await self._app.bot.set_message_reaction(
                chat_id=chat_id,
                message_id=message_id,
                reaction=[ReactionTypeEmoji(emoji)],
            )
        except TelegramError as e:
            raise DeliveryError(str(e)) from e

    async def send_typing(self, chat_id: str) -> None:
        try:
            await self._app.bot.send_chat_action(chat_id=chat_id, action=ChatAction.TYPING)
        except TelegramError as e:
            raise DeliveryError(str(e)) from e

    async def fetch_media_bytes(self, file_id: str) -> bytes:
        try:
            file = await self._app.bot.get_file(file_id)
            data = await file.download_as_bytearray()
        except TelegramError as e:
            raise DeliveryError(f"Failed to download {file_id}: {e}") from e
        return bytes(data)

    async def start(self, engine: "IEngine") -> None:
        """Register handlers and start polling."""
        self._engine = engine
        self._app.add_handler(
            MessageHandler(filters.StatusUpdate.NEW_CHAT_MEMBERS, self._on_members_joined)
        )
        self._app.add_handler(
            MessageHandler(filters.StatusUpdate.LEFT_CHAT_MEMBER, self._on_member_left)
        )
        self._app.add_handler(MessageHandler(filters.TEXT, self._on_message))
        self._app.add_error_handler(self._on_error)

        await self._app.initialize()
        await self._app.start()
        await self._app.updater.start_polling(allowed_updates=Update.ALL_TYPES)
        logger.info("Telegram polling started")

    async def stop(self) -> None:
        if self._app.updater and self._app.updater.running:
            await self._app.updater.stop()
        if self._app.running:
            await self._app.stop()
        await self._app.shutdown()
        logger.info("Telegram transport stopped")

    async def _on_message(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        if self._engine is None or update.effective_message is None:
            return
        message = to_chat_message(update.effective_message)
        if message is None:
            return
        await self._engine.handle_message(message)

    async def _on_members_joined(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        tg_message = update.effective_message
        if self._engine is None or tg_message is None:
            return
        members = [to_user(m) for m in tg_message.new_chat_members]
        await self._engine.handle_members_joined(
            str(tg_message.chat.id), tg_message.chat.title, members
        )

    async def _on_member_left(self, update: Update, context: ContextTypes.DEFAULT_TYPE) -> None:
        tg_message = update.effective_message
        if self._engine is None or tg_message is None or tg_message.left_chat_member is None:
            return
        await self._engine.handle_member_left(
            str(tg_message.chat.id), tg_message.chat.title, to_user(tg_message.left_chat_member)
        )

    async def _on_error(self, update: object, context: ContextTypes.DEFAULT_TYPE) -> None:
        logger.error("Error while handling update: %s", context.error, exc_info=context.error)
