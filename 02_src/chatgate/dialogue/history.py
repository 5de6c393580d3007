"""Per-chat bounded message history."""

import asyncio
from collections import deque

from ..constants import MAX_CHAT_HISTORY
from ..models import ChatMessage


class ChatHistory:
    """Most recent messages of one chat, oldest first."""

    def __init__(self, max_size: int = MAX_CHAT_HISTORY):
        self._messages: deque[ChatMessage] = deque(maxlen=max_size)

    def add(self, message: ChatMessage) -> None:
        """Append a message, evicting the oldest one on overflow."""
        self._messages.append(message)

    def get_all(self) -> list[ChatMessage]:
        """Get all messages in arrival order."""
        return list(self._messages)

    @property
    def max_size(self) -> int:
        return self._messages.maxlen

    def __len__(self) -> int:
        return len(self._messages)


class ChatStateStore:
    """Chat histories keyed by chat id with serialized access per chat."""

    def __init__(self, max_history: int = MAX_CHAT_HISTORY):
        self._max_history = max_history
        self._histories: dict[str, ChatHistory] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def lock(self, chat_id: str) -> asyncio.Lock:
        """Lock guarding mutation of one chat's state."""
        if chat_id not in self._locks:
            self._locks[chat_id] = asyncio.Lock()
        return self._locks[chat_id]

    def history(self, chat_id: str) -> ChatHistory:
        if chat_id not in self._histories:
            self._histories[chat_id] = ChatHistory(self._max_history)
        return self._histories[chat_id]

    async def append(self, message: ChatMessage) -> None:
        """Append a message to its chat's history under the chat lock."""
        async with self.lock(message.chat_id):
            self.history(message.chat_id).add(message)

    def snapshot(self, chat_id: str) -> list[ChatMessage]:
        """Copy of a chat's history; empty for unknown chats."""
        history = self._histories.get(chat_id)
        return history.get_all() if history else []
