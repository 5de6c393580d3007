"""Handles replies that ask to transcribe a voice or video message."""

from dataclasses import dataclass

from ..constants import TRANSCRIPTION_FAILED_REPLY, TRANSCRIPTION_LANGUAGE
from ..formatting import preview
from ..llm import IOracle
from ..logging_config import get_logger
from ..models import ChatMessage, MediaInfo, MediaKind, TranscriptionIntent
from ..transport import ITransport, deliver_text, send_typing
from .prompts import create_transcription_prompt, media_type_label

logger = get_logger(__name__)


@dataclass(frozen=True)
class RouteOutcome:
    """Result of the media router; `handled` ends the pipeline."""

    handled: bool
    intent: TranscriptionIntent | None = None
    transcript: str | None = None
    delivered: bool = False


NOT_APPLICABLE = RouteOutcome(handled=False)


def transcribable_media(message: ChatMessage) -> MediaInfo | None:
    """Media of a message that can be transcribed, if any."""
    media = message.media
    if media is None:
        return None
    if media.kind is MediaKind.DOCUMENT and not media.mime_type.startswith(("audio/", "video/")):
        return None
    return media


class MediaReplyRouter:
    """Detects transcription intent on a reply and serves the transcript."""

    def __init__(
        self,
        oracle: IOracle,
        transport: ITransport,
        language: str = TRANSCRIPTION_LANGUAGE,
    ):
        self._oracle = oracle
        self._transport = transport
        self._language = language

    async def detect_intent(self, text: str, media: MediaInfo) -> TranscriptionIntent:
        prompt = create_transcription_prompt(media_type_label(media))
        try:
            token = await self._oracle.classify(prompt, text)
        except Exception as e:
            logger.warning("Transcription intent check failed: %s", e)
            return TranscriptionIntent.SKIP
        return TranscriptionIntent.parse(token)

    async def route(self, message: ChatMessage) -> RouteOutcome:
        """Transcribe the replied-to media when the message asks for it."""
        target = message.reply_to
        if target is None or not message.text:
            return NOT_APPLICABLE

        media = transcribable_media(target)
        if media is None:
            return NOT_APPLICABLE

        label = media_type_label(media)
        logger.info("Reply to %s message, checking for transcription request", label)

        intent = await self.detect_intent(message.text, media)
        if intent is not TranscriptionIntent.TRANSCRIBE:
            logger.info("No transcription requested: %r", preview(message.text))
            return RouteOutcome(handled=False, intent=intent)

        await send_typing(self._transport, message.chat_id)
        transcript = await self._transcribe(media)
        if transcript:
            reply = transcript
        else:
            logger.warning("Could not transcribe %s message %s", label, target.id)
            reply = TRANSCRIPTION_FAILED_REPLY

        delivered = await deliver_text(
            self._transport, message.chat_id, reply, reply_to=message.id
        )
        return RouteOutcome(
            handled=True,
            intent=intent,
            transcript=transcript,
            delivered=delivered,
        )

    async def _transcribe(self, media: MediaInfo) -> str | None:
        try:
            data = await self._transport.fetch_media_bytes(media.file_id)
            if not data:
                return None
            text = await self._oracle.transcribe(data, media.mime_type, self._language)
        except Exception as e:
            logger.error("Transcription of %s failed: %s", media.file_id, e)
            return None
        return text.strip() or None
