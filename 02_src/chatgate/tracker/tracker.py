"""Tracker implementation for creating TraceEvents."""

import uuid
from datetime import datetime, timezone
from typing import Protocol

from ..logging_config import get_logger
from ..models import TraceEvent
from ..storage import ITraceStore

logger = get_logger(__name__)


class ITracker(Protocol):
    """Creating TraceEvents from direct calls."""

    async def track(self, event_type: str, actor: str, data: dict) -> None:
        """Create TraceEvent and save to storage."""
        ...


class Tracker:
    """Creates TraceEvents via direct track() calls."""

    def __init__(self, trace_store: ITraceStore):
        self._trace_store = trace_store

    async def track(self, event_type: str, actor: str, data: dict) -> None:
        """Create TraceEvent and save to storage.

        Storage errors are logged; tracing never interrupts message handling.
        """
        trace_event = TraceEvent(
            id=str(uuid.uuid4()),
            event_type=event_type,
            actor=actor,
            data=data,
            timestamp=datetime.now(timezone.utc),
        )
        try:
            await self._trace_store.save_trace_event(trace_event)
        except Exception as e:
            logger.error("Failed to record trace event %s: %s", event_type, e)
