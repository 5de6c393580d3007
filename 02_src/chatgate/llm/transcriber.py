"""Speech-to-text via the OpenAI transcription API."""

import os
from typing import Protocol

import openai

from ..errors import TranscriptionError

DEFAULT_TRANSCRIPTION_MODEL = "whisper-1"


class ITranscriber(Protocol):
    """Turns recorded speech into text."""

    async def transcribe(self, data: bytes, mime_type: str, language: str) -> str:
        ...


class Transcriber:
    """OpenAI Whisper transcriber."""

    def __init__(self, api_key: str | None = None, model: str = DEFAULT_TRANSCRIPTION_MODEL):
        self._api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self._api_key:
            raise ValueError("OPENAI_API_KEY environment variable not set")

        self._model = model
        self._client = openai.AsyncOpenAI(api_key=self._api_key)

    async def transcribe(self, data: bytes, mime_type: str, language: str) -> str:
        """Transcribe audio or video bytes, returning the recognized text."""
        file_name = "video.mp4" if mime_type.startswith("video/") else "audio.ogg"
        try:
            result = await self._client.audio.transcriptions.create(
                file=(file_name, data, mime_type),
                model=self._model,
                language=language,
            )
        except Exception as e:
            raise TranscriptionError(f"Transcription API error: {e}") from e

        return (result.text or "").strip()
