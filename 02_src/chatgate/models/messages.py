"""Message-related data models."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Literal


class ChatKind(str, Enum):
    """Kinds of chats the gateway can receive messages from."""

    PRIVATE = "private"
    GROUP = "group"
    SUPERGROUP = "supergroup"

    @property
    def is_group(self) -> bool:
        return self is not ChatKind.PRIVATE


class MediaKind(str, Enum):
    """Media payloads that can be transcribed."""

    VOICE = "voice"
    VIDEO = "video"
    VIDEO_NOTE = "video_note"
    DOCUMENT = "document"


@dataclass(frozen=True)
class User:
    """A chat participant as seen on a message."""

    id: int
    first_name: str
    last_name: str | None = None
    username: str | None = None
    is_bot: bool | None = None


@dataclass(frozen=True)
class MediaInfo:
    """Downloadable media attached to a message."""

    kind: MediaKind
    file_id: str
    mime_type: str


@dataclass(frozen=True)
class ChatMessage:
    """A single inbound chat message."""

    id: int
    chat_id: str
    chat_kind: ChatKind
    sender: User | None = None
    text: str | None = None
    reply_to: "ChatMessage | None" = None
    media: MediaInfo | None = None
    chat_title: str | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class ConversationTurn:
    """A role-tagged unit of text sent to the generator."""

    role: Literal["user", "assistant", "system"]
    content: str

    def to_dict(self) -> dict:
        return {"role": self.role, "content": self.content}
