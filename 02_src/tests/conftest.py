"""Pytest configuration and fixtures."""

import sys
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from chatgate.models import ChatKind, ChatMessage, MediaInfo, MediaKind, User  # noqa: E402

TARGET_CHAT = "-100123"
ASSISTANT = User(id=999, first_name="Helper", username="helper_bot", is_bot=True)
ALICE = User(id=1, first_name="Alice", last_name="Smith", username="alice", is_bot=False)
BOB = User(id=2, first_name="Bob", is_bot=False)


class FixedRandom:
    """Random source returning a constant draw; choice picks the first item."""

    def __init__(self, value: float):
        self.value = value

    def random(self) -> float:
        return self.value

    def choice(self, items):
        return items[0]


class FakeTransport:
    """In-memory transport recording every outbound action."""

    def __init__(self, assistant: User = ASSISTANT):
        self.get_me = AsyncMock(return_value=assistant)
        self.send_text = AsyncMock()
        self.send_reaction = AsyncMock()
        self.send_typing = AsyncMock()
        self.fetch_media_bytes = AsyncMock(return_value=b"media-bytes")
        self.start = AsyncMock()
        self.stop = AsyncMock()

    @property
    def sent_texts(self) -> list[str]:
        return [c.args[1] for c in self.send_text.call_args_list]


def make_message(
    id: int = 100,
    text: str | None = "hello",
    sender: User | None = ALICE,
    chat_id: str = TARGET_CHAT,
    chat_kind: ChatKind = ChatKind.SUPERGROUP,
    reply_to: ChatMessage | None = None,
    media: MediaInfo | None = None,
) -> ChatMessage:
    return ChatMessage(
        id=id,
        chat_id=chat_id,
        chat_kind=chat_kind,
        sender=sender,
        text=text,
        reply_to=reply_to,
        media=media,
        chat_title="Team",
    )


def voice_message(id: int = 50, sender: User | None = BOB) -> ChatMessage:
    return make_message(
        id=id,
        text=None,
        sender=sender,
        media=MediaInfo(MediaKind.VOICE, "file-voice", "audio/ogg"),
    )


@pytest_asyncio.fixture
async def trace_store():
    """Create in-memory trace storage for testing."""
    from chatgate.storage import TraceStore

    st = TraceStore(":memory:")
    await st.init()
    yield st
    await st.close()


@pytest.fixture
def tracker(trace_store):
    """Create Tracker with storage."""
    from chatgate.tracker import Tracker

    return Tracker(trace_store)


@pytest.fixture
def mock_oracle():
    """Oracle that treats everything as addressed and answers plainly."""
    oracle = Mock()
    oracle.classify = AsyncMock(return_value="ANSWER")
    oracle.generate = AsyncMock(return_value="Test response")
    oracle.transcribe = AsyncMock(return_value="transcribed text")
    return oracle


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def quiet_rng():
    """Random source that never opens a probability gate."""
    return FixedRandom(0.99)


@pytest.fixture
def gateway_config(tmp_path):
    from chatgate.config import GatewayConfig

    return GatewayConfig(
        bot_name="Helper",
        target_chat_id=TARGET_CHAT,
        data_dir=tmp_path,
    )


@pytest.fixture
def chat_registry(gateway_config):
    from chatgate.storage import ChatRegistry

    return ChatRegistry(gateway_config.chats_path)


@pytest.fixture
def user_registry(gateway_config):
    from chatgate.storage import UserRegistry

    return UserRegistry(gateway_config.users_path)


@pytest_asyncio.fixture
async def engine(gateway_config, mock_oracle, transport, chat_registry, user_registry, tracker, quiet_rng):
    """Started Engine wired to fakes."""
    from chatgate.dialogue import Engine

    en = Engine(
        config=gateway_config,
        oracle=mock_oracle,
        transport=transport,
        chat_registry=chat_registry,
        user_registry=user_registry,
        tracker=tracker,
        rng=quiet_rng,
    )
    await en.start()
    yield en
    await en.stop()
