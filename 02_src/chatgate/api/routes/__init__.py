"""API routes."""

from . import observability

__all__ = ["observability"]
