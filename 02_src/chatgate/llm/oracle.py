"""Language-model oracle used by the routing engine."""

from typing import Protocol

from ..config import DEFAULT_WEB_SEARCH_MAX_USES
from ..errors import TranscriptionError
from ..models import ConversationTurn
from .llm_provider import ILLMProvider
from .transcriber import ITranscriber

CLASSIFY_MAX_TOKENS = 16
GENERATE_MAX_TOKENS = 2048

WEB_SEARCH_TOOL_TYPE = "web_search_20250305"


def web_search_tool(max_uses: int) -> dict:
    """Anthropic server-side web search tool definition."""
    return {"type": WEB_SEARCH_TOOL_TYPE, "name": "web_search", "max_uses": max_uses}


class IOracle(Protocol):
    """Text in/text out access to the hosted model."""

    async def classify(self, system_prompt: str, text: str) -> str:
        """Return the raw token the model answered with."""
        ...

    async def generate(self, system_prompt: str, turns: list[ConversationTurn]) -> str:
        """Generate a free-form answer for the given turns."""
        ...

    async def transcribe(self, data: bytes, mime_type: str, language: str) -> str:
        """Transcribe media bytes."""
        ...


class Oracle:
    """Oracle backed by an LLM provider and an optional transcriber."""

    def __init__(
        self,
        llm_provider: ILLMProvider,
        transcriber: ITranscriber | None = None,
        web_search_max_uses: int = DEFAULT_WEB_SEARCH_MAX_USES,
    ):
        self._llm = llm_provider
        self._transcriber = transcriber
        # Only free-form answers may look things up
        self._generate_tools = [web_search_tool(web_search_max_uses)] if web_search_max_uses > 0 else None

    async def classify(self, system_prompt: str, text: str) -> str:
        answer = await self._llm.complete(
            messages=[{"role": "user", "content": text}],
            system=system_prompt,
            max_tokens=CLASSIFY_MAX_TOKENS,
        )
        return answer.strip()

    async def generate(self, system_prompt: str, turns: list[ConversationTurn]) -> str:
        # The messages API takes system text separately from the dialogue
        system_parts = [system_prompt] + [t.content for t in turns if t.role == "system"]
        messages = [t.to_dict() for t in turns if t.role != "system"]
        answer = await self._llm.complete(
            messages=messages,
            system="\n\n".join(system_parts),
            max_tokens=GENERATE_MAX_TOKENS,
            tools=self._generate_tools,
        )
        return answer.strip()

    async def transcribe(self, data: bytes, mime_type: str, language: str) -> str:
        if self._transcriber is None:
            raise TranscriptionError("No transcriber configured")
        return await self._transcriber.transcribe(data, mime_type, language)
