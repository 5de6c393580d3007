"""Best-effort outbound helpers shared by the pipeline stages."""

from ..constants import MAX_MESSAGE_LENGTH
from ..logging_config import get_logger
from .base import ITransport

logger = get_logger(__name__)


def split_text(text: str, limit: int = MAX_MESSAGE_LENGTH) -> list[str]:
    """Split text into chunks of at most `limit` characters.

    Cuts prefer a line break, then a space; a word longer than the
    limit is cut hard.
    """
    chunks = []
    rest = text
    while len(rest) > limit:
        cut = rest.rfind("\n", 0, limit + 1)
        if cut <= 0:
            cut = rest.rfind(" ", 0, limit + 1)
        if cut <= 0:
            cut = limit
        chunk = rest[:cut].rstrip()
        if chunk:
            chunks.append(chunk)
        rest = rest[cut:].lstrip()
    if rest.strip() or not chunks:
        chunks.append(rest)
    return chunks


async def _send_chunk(
    transport: ITransport,
    chat_id: str,
    text: str,
    reply_to: int | None,
    markdown: bool,
) -> bool:
    try:
        await transport.send_text(chat_id, text, reply_to=reply_to, markdown=markdown)
        return True
    except Exception as e:
        if not markdown:
            logger.error("Failed to send message to chat %s: %s", chat_id, e)
            return False
        logger.warning(
            "Formatted message rejected in chat %s, resending as plain text: %s",
            chat_id,
            e,
        )

    try:
        await transport.send_text(chat_id, text, reply_to=reply_to, markdown=False)
        return True
    except Exception as e:
        logger.error("Failed to send plain message to chat %s: %s", chat_id, e)
        return False


async def deliver_text(
    transport: ITransport,
    chat_id: str,
    text: str,
    reply_to: int | None = None,
    markdown: bool = False,
) -> bool:
    """Send text; a rejected formatted message is resent once as plain text.

    Text over the message length limit goes out in several messages and
    only the first one replies to `reply_to`. Returns True when every
    part reached the transport.
    """
    chunks = split_text(text)
    if len(chunks) > 1:
        logger.info("Splitting %d-character message for chat %s into %d parts", len(text), chat_id, len(chunks))

    for index, chunk in enumerate(chunks):
        if not await _send_chunk(transport, chat_id, chunk, reply_to if index == 0 else None, markdown):
            return False
    return True


async def send_typing(transport: ITransport, chat_id: str) -> None:
    """Show the typing indicator, ignoring transport errors."""
    try:
        await transport.send_typing(chat_id)
    except Exception as e:
        logger.debug("Typing indicator failed in chat %s: %s", chat_id, e)
