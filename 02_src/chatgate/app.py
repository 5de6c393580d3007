"""Application bootstrap and lifecycle management."""

import os
import random
from typing import Protocol

from .config import GatewayConfig, resolve_db_path
from .dialogue import Engine
from .llm import IOracle, LLMProvider, Oracle, Transcriber
from .logging_config import get_logger
from .storage import ChatRegistry, ITraceStore, TraceStore, UserRegistry
from .tracker import ITracker, Tracker
from .transport import ITransport, deliver_text

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...


class Application:
    """Main application bootstrap."""

    def __init__(
        self,
        config: GatewayConfig | None = None,
        db_path: str | None = None,
        oracle: IOracle | None = None,
        transport: ITransport | None = None,
        rng: random.Random | None = None,
    ):
        self._config = config or GatewayConfig.from_env()
        env_db_path = os.getenv("TRACE_DB_PATH") if db_path is None else db_path
        self._db_path = resolve_db_path(env_db_path)
        self._rng = rng

        # Components (will be initialized in start())
        self._trace_store: ITraceStore | None = None
        self._tracker: ITracker | None = None
        self._chat_registry: ChatRegistry | None = None
        self._user_registry: UserRegistry | None = None
        self._oracle: IOracle | None = oracle
        self._transport: ITransport | None = transport
        self._engine: Engine | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. Trace storage (no dependencies)
        self._trace_store = TraceStore(self._db_path)
        await self._trace_store.init()
        logger.info("Trace store initialized")

        # 2. Tracker (depends on trace storage)
        self._tracker = Tracker(self._trace_store)

        # 3. Registries
        self._chat_registry = ChatRegistry(self._config.chats_path)
        self._user_registry = UserRegistry(self._config.users_path)
        known_chats = await self._chat_registry.load_all()
        logger.info("Registries loaded: %d known chats", len(known_chats))

        # 4. Oracle (LLM provider + transcriber)
        if self._oracle is None:
            self._oracle = Oracle(
                LLMProvider(),
                self._create_transcriber(),
                web_search_max_uses=self._config.web_search_max_uses,
            )
        logger.info("Oracle initialized")

        # 5. Transport
        if self._transport is None:
            from .transport.telegram import TelegramTransport

            self._transport = TelegramTransport(self._config.telegram_token)

        # 6. Engine (depends on everything above)
        self._engine = Engine(
            config=self._config,
            oracle=self._oracle,
            transport=self._transport,
            chat_registry=self._chat_registry,
            user_registry=self._user_registry,
            tracker=self._tracker,
            rng=self._rng,
        )
        await self._engine.start()
        logger.info("Engine started")

        await self.broadcast_startup()

        # 7. Start receiving events
        await self._transport.start(self._engine)
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._transport:
            try:
                await self._transport.stop()
            except Exception as e:
                logger.error("Transport shutdown failed: %s", e)
        if self._engine:
            await self._engine.stop()
        if self._trace_store:
            await self._trace_store.close()
            logger.info("Trace store closed")

    async def broadcast_startup(self) -> None:
        """Send the startup message to known chats (only the target chat if set)."""
        if not self._config.startup_message:
            return
        chats = await self.chat_registry.load_all()
        target = self._config.target_chat_id
        recipients = sorted(c for c in chats if not target or c == target)
        if recipients:
            logger.info("Sending startup message to %d chat(s)", len(recipients))
        for chat_id in recipients:
            await deliver_text(self._transport, chat_id, self._config.startup_message)

    @staticmethod
    def _create_transcriber() -> Transcriber | None:
        try:
            return Transcriber()
        except ValueError as e:
            logger.warning("Transcription disabled: %s", e)
            return None

    @property
    def config(self) -> GatewayConfig:
        return self._config

    @property
    def trace_store(self) -> ITraceStore:
        """Get trace store instance."""
        if not self._trace_store:
            raise RuntimeError("Application not started")
        return self._trace_store

    @property
    def chat_registry(self) -> ChatRegistry:
        if not self._chat_registry:
            raise RuntimeError("Application not started")
        return self._chat_registry

    @property
    def user_registry(self) -> UserRegistry:
        if not self._user_registry:
            raise RuntimeError("Application not started")
        return self._user_registry

    @property
    def engine(self) -> Engine:
        """Get engine instance."""
        if not self._engine:
            raise RuntimeError("Application not started")
        return self._engine
