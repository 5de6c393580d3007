"""Core data models for the chat gateway."""

from .decisions import AddressingDecision, DraftVerdict, TranscriptionIntent
from .messages import (
    ChatKind,
    ChatMessage,
    ConversationTurn,
    MediaInfo,
    MediaKind,
    User,
)
from .registry import UserProfile
from .tracing import TraceEvent

__all__ = [
    # Messages
    "ChatKind",
    "ChatMessage",
    "ConversationTurn",
    "MediaInfo",
    "MediaKind",
    "User",
    # Decisions
    "AddressingDecision",
    "DraftVerdict",
    "TranscriptionIntent",
    # Registries
    "UserProfile",
    # Tracing
    "TraceEvent",
]
