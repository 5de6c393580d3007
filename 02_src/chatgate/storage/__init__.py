"""Storage module."""

from .registries import ChatRegistry, IChatRegistry, IUserRegistry, UserRegistry
from .trace_store import ITraceStore, TraceStore

__all__ = [
    "ChatRegistry",
    "IChatRegistry",
    "IUserRegistry",
    "UserRegistry",
    "ITraceStore",
    "TraceStore",
]
