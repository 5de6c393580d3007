"""Chat transport module."""

from .base import ITransport
from .delivery import deliver_text, send_typing

__all__ = ["ITransport", "deliver_text", "send_typing"]
