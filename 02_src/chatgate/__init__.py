"""Chat gateway: routing and context engine between Telegram and an LLM."""

from .app import Application, IApplication
from .config import GatewayConfig
from .dialogue import (
    AddressingClassifier,
    ChatHistory,
    ChatStateStore,
    ContextAssembler,
    EngagementLayer,
    Engine,
    IEngine,
    MediaReplyRouter,
    ResponseGenerator,
)
from .llm import ILLMProvider, IOracle, LLMProvider, Oracle, Transcriber
from .models import (
    AddressingDecision,
    ChatKind,
    ChatMessage,
    ConversationTurn,
    DraftVerdict,
    MediaInfo,
    MediaKind,
    TraceEvent,
    TranscriptionIntent,
    User,
    UserProfile,
)
from .storage import ChatRegistry, ITraceStore, TraceStore, UserRegistry
from .tracker import ITracker, Tracker
from .transport import ITransport

__all__ = [
    # Application
    "Application",
    "IApplication",
    "GatewayConfig",
    # Models
    "AddressingDecision",
    "ChatKind",
    "ChatMessage",
    "ConversationTurn",
    "DraftVerdict",
    "MediaInfo",
    "MediaKind",
    "TraceEvent",
    "TranscriptionIntent",
    "User",
    "UserProfile",
    # Components
    "AddressingClassifier",
    "ChatHistory",
    "ChatStateStore",
    "ContextAssembler",
    "EngagementLayer",
    "Engine",
    "IEngine",
    "MediaReplyRouter",
    "ResponseGenerator",
    "ILLMProvider",
    "IOracle",
    "LLMProvider",
    "Oracle",
    "Transcriber",
    "ChatRegistry",
    "ITraceStore",
    "TraceStore",
    "UserRegistry",
    "ITracker",
    "Tracker",
    "ITransport",
]
