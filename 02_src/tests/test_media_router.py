"""Tests for MediaReplyRouter."""

from unittest.mock import AsyncMock

import pytest

from chatgate.constants import TRANSCRIPTION_FAILED_REPLY
from chatgate.dialogue import MediaReplyRouter
from chatgate.dialogue.media_router import transcribable_media
from chatgate.errors import TranscriptionError
from chatgate.models import MediaInfo, MediaKind, TranscriptionIntent
from conftest import make_message, voice_message


def _router(oracle, transport):
    return MediaReplyRouter(oracle, transport)


class TestTranscribableMedia:
    """Tests for media eligibility."""

    def test_voice_is_transcribable(self):
        assert transcribable_media(voice_message()) is not None

    def test_audio_document_is_transcribable(self):
        media = MediaInfo(MediaKind.DOCUMENT, "f", "audio/mpeg")
        assert transcribable_media(make_message(text=None, media=media)) == media

    def test_pdf_document_is_not(self):
        media = MediaInfo(MediaKind.DOCUMENT, "f", "application/pdf")
        assert transcribable_media(make_message(text=None, media=media)) is None

    def test_plain_text_is_not(self):
        assert transcribable_media(make_message()) is None


class TestRoute:
    """Tests for the transcription short-circuit."""

    @pytest.mark.asyncio
    async def test_transcribes_on_request(self, mock_oracle, transport):
        """A transcription request answers with the transcript as a reply."""
        mock_oracle.classify = AsyncMock(return_value="TRANSCRIBE")
        mock_oracle.transcribe = AsyncMock(return_value="  hello from voice  ")
        message = make_message(id=101, text="расшифруй", reply_to=voice_message())

        outcome = await _router(mock_oracle, transport).route(message)

        assert outcome.handled is True
        assert outcome.intent is TranscriptionIntent.TRANSCRIBE
        assert outcome.transcript == "hello from voice"
        transport.fetch_media_bytes.assert_awaited_once_with("file-voice")
        mock_oracle.transcribe.assert_awaited_once_with(b"media-bytes", "audio/ogg", "ru")
        transport.send_text.assert_awaited_once()
        call = transport.send_text.call_args
        assert call.args[1] == "hello from voice"
        assert call.kwargs["reply_to"] == 101

    @pytest.mark.asyncio
    async def test_failed_transcription_sends_fixed_reply(self, mock_oracle, transport):
        mock_oracle.classify = AsyncMock(return_value="TRANSCRIBE")
        mock_oracle.transcribe = AsyncMock(side_effect=TranscriptionError("boom"))
        message = make_message(text="transcribe please", reply_to=voice_message())

        outcome = await _router(mock_oracle, transport).route(message)

        assert outcome.handled is True
        assert outcome.transcript is None
        assert transport.sent_texts == [TRANSCRIPTION_FAILED_REPLY]

    @pytest.mark.asyncio
    async def test_download_failure_sends_fixed_reply(self, mock_oracle, transport):
        mock_oracle.classify = AsyncMock(return_value="TRANSCRIBE")
        transport.fetch_media_bytes = AsyncMock(side_effect=RuntimeError("404"))
        message = make_message(text="transcribe", reply_to=voice_message())

        outcome = await _router(mock_oracle, transport).route(message)

        assert outcome.handled is True
        assert transport.sent_texts == [TRANSCRIPTION_FAILED_REPLY]
        mock_oracle.transcribe.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_skip_falls_through(self, mock_oracle, transport):
        """Comments about media go on to normal generation."""
        mock_oracle.classify = AsyncMock(return_value="SKIP")
        message = make_message(text="nice voice", reply_to=voice_message())

        outcome = await _router(mock_oracle, transport).route(message)

        assert outcome.handled is False
        assert outcome.intent is TranscriptionIntent.SKIP
        transport.send_text.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_intent_error_falls_through(self, mock_oracle, transport):
        mock_oracle.classify = AsyncMock(side_effect=RuntimeError("down"))
        message = make_message(text="transcribe", reply_to=voice_message())

        outcome = await _router(mock_oracle, transport).route(message)

        assert outcome.handled is False
        mock_oracle.transcribe.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_reply_to_text_is_not_applicable(self, mock_oracle, transport):
        message = make_message(text="transcribe", reply_to=make_message(id=1, text="plain"))

        outcome = await _router(mock_oracle, transport).route(message)

        assert outcome.handled is False
        assert outcome.intent is None
        mock_oracle.classify.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_video_note_prompt_uses_media_label(self, mock_oracle, transport):
        mock_oracle.classify = AsyncMock(return_value="SKIP")
        target = make_message(
            id=7,
            text=None,
            media=MediaInfo(MediaKind.VIDEO_NOTE, "vn", "video/mp4"),
        )

        await _router(mock_oracle, transport).route(make_message(text="что там?", reply_to=target))

        assert "кружочек" in mock_oracle.classify.call_args.args[0]
