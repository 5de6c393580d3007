"""Builds the conversation context passed to the response generator."""

from dataclasses import dataclass

from ..constants import CONTEXT_MESSAGE_LIMIT, MAX_CONTEXT_MESSAGE_LENGTH
from ..formatting import format_user, format_user_detailed, truncate
from ..logging_config import get_logger
from ..models import ChatMessage, ConversationTurn, User
from .prompts import (
    HISTORY_AUTHOR_FALLBACK,
    UNKNOWN_AUTHOR,
    history_turn,
    primary_target_turn,
)

logger = get_logger(__name__)


@dataclass(frozen=True)
class AssembledContext:
    """Ordered context turns: primary target first, then history oldest to newest."""

    turns: tuple[ConversationTurn, ...]
    roster: str = ""
    primary_target: str | None = None
    history_count: int = 0


class ContextAssembler:
    def __init__(
        self,
        limit: int = CONTEXT_MESSAGE_LIMIT,
        max_length: int = MAX_CONTEXT_MESSAGE_LENGTH,
        include_roster: bool = True,
    ):
        self._limit = limit
        self._max_length = max_length
        self._include_roster = include_roster

    def select_history(self, message: ChatMessage, history: list[ChatMessage]) -> list[ChatMessage]:
        """Most recent text messages preceding `message`, oldest first.

        The current message and the replied-to message never appear here.
        """
        excluded = {message.id}
        if message.reply_to is not None and message.reply_to.text:
            excluded.add(message.reply_to.id)

        candidates = [m for m in history if m.text and m.id not in excluded]
        if self._limit <= 0:
            return []
        return candidates[-self._limit:]

    def assemble(self, message: ChatMessage, history: list[ChatMessage]) -> AssembledContext:
        turns: list[ConversationTurn] = []
        primary_target = None

        target = message.reply_to
        if target is not None and target.text:
            primary_target = target.text
            author = format_user(target.sender) if target.sender else UNKNOWN_AUTHOR
            turns.append(ConversationTurn("user", primary_target_turn(author, target.text)))

        selected = self.select_history(message, history)
        for m in selected:
            author = format_user(m.sender) if m.sender else HISTORY_AUTHOR_FALLBACK
            turns.append(ConversationTurn("user", history_turn(author, truncate(m.text, self._max_length))))

        if selected:
            logger.debug("Added %d previous messages to context", len(selected))

        roster = self.build_roster(message, selected) if self._include_roster else ""
        return AssembledContext(
            turns=tuple(turns),
            roster=roster,
            primary_target=primary_target,
            history_count=len(selected),
        )

    def build_roster(self, message: ChatMessage, selected: list[ChatMessage]) -> str:
        """Numbered list of distinct participants, in first-seen order."""
        participants: dict[int, User] = {}
        candidates = []
        if message.reply_to is not None:
            candidates.append(message.reply_to.sender)
        candidates.append(message.sender)
        candidates.extend(m.sender for m in selected)

        for user in candidates:
            if user is not None and user.id not in participants:
                participants[user.id] = user

        return "\n".join(
            f"{index}. {format_user_detailed(user)}"
            for index, user in enumerate(participants.values(), start=1)
        )
