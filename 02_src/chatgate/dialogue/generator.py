"""Response generation with a single refusal-retry."""

from dataclasses import dataclass
from enum import Enum

from ..constants import GENERATION_ERROR_REPLY
from ..formatting import preview
from ..llm import IOracle
from ..logging_config import get_logger
from ..models import ConversationTurn, DraftVerdict
from .prompts import (
    DECLINE_TOKEN,
    create_reformulation_prompt,
    create_refusal_check_prompt,
    fallback_reply,
)

logger = get_logger(__name__)

MAX_ATTEMPTS = 2


class GenerationOutcome(str, Enum):
    """How a generation request was resolved."""

    ANSWERED = "answered"  # first draft accepted
    RETRIED = "retried"  # reformulated draft accepted
    FALLBACK = "fallback"  # templated reply after a second refusal
    DECLINED = "declined"  # model chose not to answer
    FAILED = "failed"  # first draft errored


@dataclass(frozen=True)
class GenerationResult:
    outcome: GenerationOutcome
    text: str | None = None
    attempts: int = 0

    @property
    def should_reply(self) -> bool:
        return self.text is not None


@dataclass
class RefusalState:
    """Per-request retry bookkeeping."""

    attempts: int = 0

    @property
    def can_retry(self) -> bool:
        return self.attempts < MAX_ATTEMPTS


def is_decline(text: str | None) -> bool:
    """Empty output or the decline token means a deliberate non-response."""
    if not text or not text.strip():
        return True
    return text.strip().upper() == DECLINE_TOKEN


class ResponseGenerator:
    """Drafts an answer and retries once with a joking reformulation on refusal."""

    def __init__(self, oracle: IOracle):
        self._oracle = oracle

    async def generate(
        self,
        system_prompt: str,
        turns: list[ConversationTurn],
        request_text: str,
    ) -> GenerationResult:
        state = RefusalState()

        try:
            draft = await self._draft(state, system_prompt, turns, request_text)
        except Exception as e:
            logger.error("Generation failed: %s", e, exc_info=True)
            return GenerationResult(GenerationOutcome.FAILED, GENERATION_ERROR_REPLY, state.attempts)

        if is_decline(draft):
            logger.info("Model declined to answer %r", preview(request_text))
            return GenerationResult(GenerationOutcome.DECLINED, None, state.attempts)

        if await self.check_refusal(draft) is DraftVerdict.ANSWER:
            return GenerationResult(GenerationOutcome.ANSWERED, draft, state.attempts)

        logger.info("Draft for %r was a refusal, retrying reformulated", preview(request_text))
        retry = None
        if state.can_retry:
            try:
                retry = await self._draft(
                    state, system_prompt, turns, create_reformulation_prompt(request_text)
                )
            except Exception as e:
                logger.warning("Reformulated generation failed: %s", e)

        if not is_decline(retry) and await self.check_refusal(retry) is DraftVerdict.ANSWER:
            return GenerationResult(GenerationOutcome.RETRIED, retry, state.attempts)

        logger.info("Using fallback reply for %r", preview(request_text))
        return GenerationResult(GenerationOutcome.FALLBACK, fallback_reply(request_text), state.attempts)

    async def check_refusal(self, draft: str) -> DraftVerdict:
        """Label a non-empty draft; classifier failures count as an answer."""
        try:
            token = await self._oracle.classify(create_refusal_check_prompt(), draft)
        except Exception as e:
            logger.warning("Refusal check failed, accepting draft: %s", e)
            return DraftVerdict.ANSWER
        return DraftVerdict.parse(token)

    async def _draft(
        self,
        state: RefusalState,
        system_prompt: str,
        turns: list[ConversationTurn],
        text: str,
    ) -> str:
        state.attempts += 1
        request = list(turns) + [ConversationTurn("user", text)]
        return await self._oracle.generate(system_prompt, request)
