"""Chat transport abstraction."""

from typing import TYPE_CHECKING, Protocol

from ..models import User

if TYPE_CHECKING:
    from ..dialogue.engine import IEngine


class ITransport(Protocol):
    """Outbound actions and inbound event delivery of a chat platform."""

    async def get_me(self) -> User:
        """Identity of the assistant account."""
        ...

    async def send_text(
        self,
        chat_id: str,
        text: str,
        reply_to: int | None = None,
        markdown: bool = False,
    ) -> None:
        """Send a text message, optionally as a reply."""
        ...

    async def send_reaction(self, chat_id: str, message_id: int, emoji: str) -> None:
        """Attach an emoji reaction to a message."""
        ...

    async def send_typing(self, chat_id: str) -> None:
        """Show the typing indicator in a chat."""
        ...

    async def fetch_media_bytes(self, file_id: str) -> bytes:
        """Download a file by its platform file id."""
        ...

    async def start(self, engine: "IEngine") -> None:
        """Start delivering inbound events to the engine."""
        ...

    async def stop(self) -> None:
        """Stop receiving events."""
        ...
