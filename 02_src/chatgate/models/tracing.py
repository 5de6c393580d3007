"""Tracing and observability data models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class TraceEvent:
    """A single observability event recorded by the engine."""

    id: str
    event_type: str  # e.g. "message_received", "refusal_retry"
    actor: str  # component that created this event
    data: dict  # self-contained payload for display
    timestamp: datetime
