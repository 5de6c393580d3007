"""Dialogue module: the per-message routing pipeline."""

from .addressing import AddressingClassifier
from .context import AssembledContext, ContextAssembler
from .engagement import EngagementLayer
from .engine import Engine, IEngine, MessageOutcome, Stage
from .generator import GenerationOutcome, GenerationResult, RefusalState, ResponseGenerator
from .history import ChatHistory, ChatStateStore
from .media_router import MediaReplyRouter, RouteOutcome

__all__ = [
    "AddressingClassifier",
    "AssembledContext",
    "ContextAssembler",
    "EngagementLayer",
    "Engine",
    "IEngine",
    "MessageOutcome",
    "Stage",
    "GenerationOutcome",
    "GenerationResult",
    "RefusalState",
    "ResponseGenerator",
    "ChatHistory",
    "ChatStateStore",
    "MediaReplyRouter",
    "RouteOutcome",
]
