"""Telegram-to-core message mapping adapter.

This keeps python-telegram-bot details out of the routing engine.
"""

from datetime import timezone

from telegram import Message as TgMessage
from telegram import User as TgUser

from ..models import ChatKind, ChatMessage, MediaInfo, MediaKind, User


def to_user(user: TgUser) -> User:
    return User(
        id=user.id,
        first_name=user.first_name or "Неизвестно",
        last_name=user.last_name,
        username=user.username,
        is_bot=user.is_bot,
    )


def to_chat_kind(chat_type: str) -> ChatKind | None:
    try:
        return ChatKind(chat_type)
    except ValueError:
        # channels are not routed
        return None


def media_from_message(message: TgMessage) -> MediaInfo | None:
    """Transcribable media of a Telegram message, if any."""
    if message.voice:
        return MediaInfo(MediaKind.VOICE, message.voice.file_id, "audio/ogg")
    if message.video:
        return MediaInfo(MediaKind.VIDEO, message.video.file_id, "video/mp4")
    if message.video_note:
        return MediaInfo(MediaKind.VIDEO_NOTE, message.video_note.file_id, "video/mp4")
    if message.audio:
        return MediaInfo(
            MediaKind.DOCUMENT,
            message.audio.file_id,
            message.audio.mime_type or "audio/mpeg",
        )
    if message.document:
        mime_type = message.document.mime_type or "application/octet-stream"
        if mime_type.startswith(("audio/", "video/")):
            return MediaInfo(MediaKind.DOCUMENT, message.document.file_id, mime_type)
    return None


def to_chat_message(message: TgMessage, include_reply: bool = True) -> ChatMessage | None:
    """Build a core ChatMessage; None for chats the engine does not serve."""
    chat_kind = to_chat_kind(message.chat.type)
    if chat_kind is None:
        return None

    reply_to = None
    if include_reply and message.reply_to_message is not None:
        # Telegram nests only one level of replies
        reply_to = to_chat_message(message.reply_to_message, include_reply=False)

    timestamp = message.date
    if timestamp is not None and timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)

    extra = {"timestamp": timestamp} if timestamp is not None else {}
    return ChatMessage(
        id=message.message_id,
        chat_id=str(message.chat.id),
        chat_kind=chat_kind,
        sender=to_user(message.from_user) if message.from_user else None,
        text=message.text,
        reply_to=reply_to,
        media=media_from_message(message),
        chat_title=message.chat.title,
        **extra,
    )
