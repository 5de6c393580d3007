"""Observability API routes."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException, Query

from ...app import Application


class TraceEventResponse(BaseModel):
    """Response model for trace event."""

    id: str
    event_type: str
    actor: str
    data: dict[str, Any]
    timestamp: datetime


class UserProfileResponse(BaseModel):
    """Response model for a registered user."""

    id: int
    first_name: str
    last_name: str | None = None
    username: str | None = None
    is_bot: bool | None = None
    last_seen: datetime


class HealthResponse(BaseModel):
    status: str
    assistant: str | None = None


def create_observability_router(app: Application) -> APIRouter:
    """Create observability router."""
    router = APIRouter(prefix="/api", tags=["observability"])

    @router.get("/health", response_model=HealthResponse)
    async def health() -> dict:
        """Liveness plus the resolved assistant account."""
        try:
            assistant = app.engine.assistant
        except RuntimeError:
            return {"status": "starting", "assistant": None}
        return {
            "status": "ok",
            "assistant": assistant.username if assistant else None,
        }

    @router.get("/trace-events", response_model=list[TraceEventResponse])
    async def get_trace_events(
        after: str | None = Query(None, description="ISO timestamp filter"),
        limit: int = Query(100, ge=1, le=1000),
        event_type: str | None = Query(None, description="Filter by event type"),
        actor: str | None = Query(None, description="Filter by actor"),
    ) -> list[dict]:
        """Get trace events with optional filters."""
        after_dt = None
        if after:
            try:
                after_dt = datetime.fromisoformat(after)
            except ValueError:
                raise HTTPException(status_code=400, detail="Invalid after timestamp format")

        try:
            events = await app.trace_store.get_trace_events(
                after=after_dt,
                event_types=[event_type] if event_type else None,
                actor=actor,
                limit=limit,
            )
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        return [
            {
                "id": e.id,
                "event_type": e.event_type,
                "actor": e.actor,
                "data": e.data,
                "timestamp": e.timestamp.isoformat(),
            }
            for e in events
        ]

    @router.get("/chats", response_model=list[str])
    async def get_chats() -> list[str]:
        """Chats the assistant has joined."""
        try:
            return sorted(await app.chat_registry.load_all())
        except RuntimeError as e:
            raise HTTPException(status_code=503, detail=str(e))

    @router.get("/users", response_model=list[UserProfileResponse])
    async def get_users() -> list[dict]:
        """Last-known profiles of seen users."""
        try:
            profiles = await app.user_registry.load_all()
        except RuntimeError as e:
            raise HTTPException(status_code=503, detail=str(e))
        return [p.to_dict() for p in profiles]

    return router
