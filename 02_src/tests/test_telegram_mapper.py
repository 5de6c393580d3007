"""Tests for the Telegram-to-core mapping adapter."""

from datetime import datetime, timezone
from types import SimpleNamespace

from chatgate.models import ChatKind, MediaKind
from chatgate.transport.telegram_mapper import media_from_message, to_chat_kind, to_chat_message, to_user


def tg_user(id=1, first_name="Alice", last_name=None, username="alice", is_bot=False):
    return SimpleNamespace(
        id=id, first_name=first_name, last_name=last_name, username=username, is_bot=is_bot
    )


def tg_message(message_id=10, text="hello", chat_type="supergroup", reply_to=None, **media):
    fields = {"voice": None, "video": None, "video_note": None, "audio": None, "document": None}
    fields.update(media)
    return SimpleNamespace(
        message_id=message_id,
        chat=SimpleNamespace(id=-100123, type=chat_type, title="Team"),
        from_user=tg_user(),
        text=text,
        reply_to_message=reply_to,
        date=datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc),
        **fields,
    )


class TestToUser:
    def test_maps_fields(self):
        user = to_user(tg_user(id=5, first_name="Bob", last_name="Lee", username=None, is_bot=True))

        assert user.id == 5
        assert user.first_name == "Bob"
        assert user.last_name == "Lee"
        assert user.username is None
        assert user.is_bot is True


class TestToChatKind:
    def test_known_kinds(self):
        assert to_chat_kind("private") is ChatKind.PRIVATE
        assert to_chat_kind("group") is ChatKind.GROUP
        assert to_chat_kind("supergroup") is ChatKind.SUPERGROUP

    def test_channel_not_routed(self):
        assert to_chat_kind("channel") is None


class TestMedia:
    def test_voice(self):
        media = media_from_message(tg_message(text=None, voice=SimpleNamespace(file_id="v1")))

        assert media.kind is MediaKind.VOICE
        assert media.file_id == "v1"
        assert media.mime_type == "audio/ogg"

    def test_video_note(self):
        media = media_from_message(tg_message(text=None, video_note=SimpleNamespace(file_id="n1")))

        assert media.kind is MediaKind.VIDEO_NOTE

    def test_video_document(self):
        doc = SimpleNamespace(file_id="d1", mime_type="video/quicktime")
        media = media_from_message(tg_message(text=None, document=doc))

        assert media.kind is MediaKind.DOCUMENT
        assert media.mime_type == "video/quicktime"

    def test_non_media_document(self):
        doc = SimpleNamespace(file_id="d2", mime_type="application/pdf")
        assert media_from_message(tg_message(text=None, document=doc)) is None


class TestToChatMessage:
    def test_plain_message(self):
        message = to_chat_message(tg_message())

        assert message.id == 10
        assert message.chat_id == "-100123"
        assert message.chat_kind is ChatKind.SUPERGROUP
        assert message.chat_title == "Team"
        assert message.sender.username == "alice"
        assert message.text == "hello"
        assert message.reply_to is None

    def test_reply_to_voice(self):
        voice = tg_message(message_id=5, text=None, voice=SimpleNamespace(file_id="v1"))
        message = to_chat_message(tg_message(text="что там?", reply_to=voice))

        assert message.reply_to.id == 5
        assert message.reply_to.media.kind is MediaKind.VOICE
        assert message.reply_to.reply_to is None

    def test_channel_post_dropped(self):
        assert to_chat_message(tg_message(chat_type="channel")) is None
