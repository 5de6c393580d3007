"""Probability-gated reactions and unsolicited comments."""

import random

from ..constants import AVAILABLE_REACTIONS, REACTION_PROBABILITY, TROLL_COMMENT_PROBABILITY
from ..formatting import format_user_detailed
from ..llm import IOracle
from ..logging_config import get_logger
from ..models import ChatMessage, ConversationTurn, User
from ..transport import ITransport, deliver_text, send_typing
from .generator import is_decline
from .prompts import create_troll_comment_prompt

logger = get_logger(__name__)


class EngagementLayer:
    """Two independent, memoryless gates drawn from a uniform [0, 1) source."""

    def __init__(
        self,
        oracle: IOracle,
        transport: ITransport,
        bot_name: str,
        rng: random.Random | None = None,
        reaction_probability: float = REACTION_PROBABILITY,
        troll_probability: float = TROLL_COMMENT_PROBABILITY,
        reactions: tuple[str, ...] = AVAILABLE_REACTIONS,
    ):
        self._oracle = oracle
        self._transport = transport
        self._bot_name = bot_name
        self._rng = rng or random.Random()
        self._reaction_probability = reaction_probability
        self._troll_probability = troll_probability
        self._reactions = reactions

    def reaction_gate(self) -> bool:
        return self._rng.random() < self._reaction_probability

    def troll_gate(self) -> bool:
        return self._rng.random() < self._troll_probability

    def pick_reaction(self) -> str:
        return self._rng.choice(self._reactions)

    async def maybe_react(self, message: ChatMessage, assistant: User | None) -> str | None:
        """Attach a random reaction; returns the emoji when one was set."""
        # no reactions until the assistant identity is known
        if message.sender is None or assistant is None:
            return None
        if message.sender.id == assistant.id:
            return None
        if not self.reaction_gate():
            return None

        emoji = self.pick_reaction()
        try:
            await self._transport.send_reaction(message.chat_id, message.id, emoji)
        except Exception as e:
            logger.debug("Reaction %s rejected on message %s: %s", emoji, message.id, e)
            return None

        logger.info("Reacted %s to message %s", emoji, message.id)
        return emoji

    async def maybe_troll(self, message: ChatMessage, system_prompt: str) -> str | None:
        """Send an unsolicited comment to the sender; returns the sent text."""
        if message.sender is None or not message.text:
            return None
        if not self.troll_gate():
            return None

        logger.info("Generating troll comment for message %s", message.id)
        await send_typing(self._transport, message.chat_id)

        prompt = create_troll_comment_prompt(
            self._bot_name, format_user_detailed(message.sender), message.text
        )
        try:
            comment = await self._oracle.generate(system_prompt, [ConversationTurn("user", prompt)])
        except Exception as e:
            logger.warning("Troll comment generation failed: %s", e)
            return None

        if is_decline(comment):
            return None

        comment = comment.strip()
        if not await deliver_text(self._transport, message.chat_id, comment, reply_to=message.id):
            return None
        return comment
