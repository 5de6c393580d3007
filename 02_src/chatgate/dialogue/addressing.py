"""Decides whether a group message is directed at the assistant."""

from ..formatting import preview
from ..llm import IOracle
from ..logging_config import get_logger
from ..models import AddressingDecision
from .prompts import create_address_check_prompt

logger = get_logger(__name__)


class AddressingClassifier:
    """Single oracle call with a fail-closed result."""

    def __init__(self, oracle: IOracle, bot_name: str):
        self._oracle = oracle
        self._bot_name = bot_name

    async def classify(self, text: str, is_reply_to_assistant: bool = False) -> AddressingDecision:
        prompt = create_address_check_prompt(self._bot_name, is_reply_to_assistant)
        try:
            token = await self._oracle.classify(prompt, text)
        except Exception as e:
            logger.warning("Addressing check failed, staying silent: %s", e)
            return AddressingDecision.NOT_ADDRESSED

        decision = AddressingDecision.parse(token)
        logger.info(
            "Addressing check: %r (reply to assistant: %s) -> %s",
            preview(text),
            is_reply_to_assistant,
            decision.name,
        )
        return decision
