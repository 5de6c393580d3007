"""Per-message routing engine."""

import random
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from ..config import GatewayConfig
from ..errors import PersistenceError
from ..formatting import preview
from ..llm import IOracle
from ..logging_config import get_logger
from ..models import AddressingDecision, ChatMessage, User
from ..storage import IChatRegistry, IUserRegistry
from ..tracker import ITracker
from ..transport import ITransport, deliver_text, send_typing
from .addressing import AddressingClassifier
from .context import ContextAssembler
from .engagement import EngagementLayer
from .generator import GenerationOutcome, GenerationResult, ResponseGenerator
from .history import ChatStateStore
from .media_router import MediaReplyRouter, RouteOutcome
from .prompts import create_system_prompt

logger = get_logger(__name__)

ACTOR = "engine"


class Stage(str, Enum):
    """Where processing of a message stopped."""

    IGNORED = "ignored"
    NOT_ADDRESSED = "not_addressed"
    TRANSCRIBED = "transcribed"
    DECLINED = "declined"
    REPLIED = "replied"
    UNDELIVERED = "undelivered"


@dataclass
class MessageOutcome:
    """What the pipeline did with one message."""

    stage: Stage = Stage.IGNORED
    handled: bool = False
    decision: AddressingDecision | None = None
    reaction: str | None = None
    troll_comment: str | None = None
    route: RouteOutcome | None = None
    generation: GenerationResult | None = None
    reply: str | None = None

    def finish(self, stage: Stage) -> "MessageOutcome":
        self.stage = stage
        self.handled = True
        return self


class IEngine(Protocol):
    """Entry points for inbound chat events."""

    async def handle_message(self, message: ChatMessage) -> MessageOutcome:
        ...

    async def handle_members_joined(self, chat_id: str, chat_title: str | None, members: list[User]) -> None:
        ...

    async def handle_member_left(self, chat_id: str, chat_title: str | None, member: User) -> None:
        ...


class Engine:
    """Decides per message whether and how the assistant responds."""

    def __init__(
        self,
        config: GatewayConfig,
        oracle: IOracle,
        transport: ITransport,
        chat_registry: IChatRegistry,
        user_registry: IUserRegistry,
        tracker: ITracker,
        state_store: ChatStateStore | None = None,
        rng: random.Random | None = None,
    ):
        self._config = config
        self._oracle = oracle
        self._transport = transport
        self._chat_registry = chat_registry
        self._user_registry = user_registry
        self._tracker = tracker
        self._state = state_store or ChatStateStore()

        self._addressing = AddressingClassifier(oracle, config.bot_name)
        self._router = MediaReplyRouter(oracle, transport)
        self._assembler = ContextAssembler()
        self._generator = ResponseGenerator(oracle)
        self._engagement = EngagementLayer(oracle, transport, config.bot_name, rng=rng)

        self._assistant: User | None = None
        self._running = False

    @property
    def assistant(self) -> User | None:
        return self._assistant

    @property
    def state(self) -> ChatStateStore:
        return self._state

    async def start(self) -> None:
        """Resolve the assistant identity and start accepting events."""
        logger.info("Starting engine")
        try:
            self._assistant = await self._transport.get_me()
        except Exception as e:
            logger.error("Could not resolve assistant identity: %s", e)
        self._running = True

    async def stop(self) -> None:
        logger.info("Stopping engine")
        self._running = False

    async def handle_message(self, message: ChatMessage) -> MessageOutcome:
        if not self._running:
            raise RuntimeError("Engine not started")

        outcome = MessageOutcome()
        if message.sender is None or not message.text:
            return outcome

        if not message.chat_kind.is_group:
            return await self._handle_private(message, outcome)

        if self._is_other_chat(message.chat_id):
            return outcome

        return await self._handle_group(message, outcome)

    async def _handle_group(self, message: ChatMessage, outcome: MessageOutcome) -> MessageOutcome:
        chat_id = message.chat_id
        await self._record(message)

        logger.info(
            "[%s] (%s, ID: %s): %r",
            message.chat_title or "Без названия",
            message.chat_kind.value,
            chat_id,
            preview(message.text),
            extra={"context": {"chat_id": chat_id, "message_id": message.id}},
        )
        await self._track(
            "message_received",
            {"chat_id": chat_id, "message_id": message.id, "sender_id": message.sender.id},
        )

        outcome.reaction = await self._engagement.maybe_react(message, self._assistant)
        if outcome.reaction:
            await self._track(
                "reaction_attached",
                {"chat_id": chat_id, "message_id": message.id, "emoji": outcome.reaction},
            )

        outcome.decision = await self._addressing.classify(
            message.text, self._is_reply_to_assistant(message)
        )
        await self._track(
            "addressing_decided",
            {"chat_id": chat_id, "message_id": message.id, "decision": outcome.decision.name},
        )

        if outcome.decision is AddressingDecision.NOT_ADDRESSED:
            outcome.troll_comment = await self._engagement.maybe_troll(
                message, self._base_system_prompt()
            )
            if outcome.troll_comment:
                await self._track("troll_sent", {"chat_id": chat_id, "message_id": message.id})
            return outcome.finish(Stage.NOT_ADDRESSED)

        if message.reply_to is not None:
            outcome.route = await self._router.route(message)
            if outcome.route.handled:
                await self._track(
                    "transcription_sent",
                    {
                        "chat_id": chat_id,
                        "message_id": message.id,
                        "success": outcome.route.transcript is not None,
                        "delivered": outcome.route.delivered,
                    },
                )
                return outcome.finish(Stage.TRANSCRIBED)

        await send_typing(self._transport, chat_id)
        context = self._assembler.assemble(message, self._state.snapshot(chat_id))
        system_prompt = create_system_prompt(
            self._config.bot_name,
            self._assistant.username if self._assistant else None,
            main_message=context.primary_target,
            chat_title=message.chat_title,
            chat_kind=message.chat_kind,
            users_info=context.roster,
        )
        outcome.generation = await self._generator.generate(
            system_prompt, list(context.turns), message.text
        )
        return await self._reply(message, outcome)

    async def _handle_private(self, message: ChatMessage, outcome: MessageOutcome) -> MessageOutcome:
        logger.info("Private message: %r", preview(message.text))
        await self._upsert_user(message.sender)

        await send_typing(self._transport, message.chat_id)
        outcome.generation = await self._generator.generate(
            self._base_system_prompt(), [], message.text
        )
        return await self._reply(message, outcome, as_reply=False)

    async def _reply(
        self,
        message: ChatMessage,
        outcome: MessageOutcome,
        as_reply: bool = True,
    ) -> MessageOutcome:
        generation = outcome.generation
        if generation is None or not generation.should_reply:
            return outcome.finish(Stage.DECLINED)

        if generation.attempts > 1:
            await self._track(
                "refusal_retry",
                {"chat_id": message.chat_id, "message_id": message.id, "outcome": generation.outcome.value},
            )
        if generation.outcome is GenerationOutcome.FALLBACK:
            await self._track("fallback_used", {"chat_id": message.chat_id, "message_id": message.id})

        delivered = await deliver_text(
            self._transport,
            message.chat_id,
            generation.text,
            reply_to=message.id if as_reply else None,
            markdown=True,
        )
        if not delivered:
            await self._track("delivery_failed", {"chat_id": message.chat_id, "message_id": message.id})
            return outcome.finish(Stage.UNDELIVERED)

        outcome.reply = generation.text
        await self._track(
            "response_sent",
            {"chat_id": message.chat_id, "message_id": message.id, "outcome": generation.outcome.value},
        )
        logger.info(
            "Reply sent to chat %s",
            message.chat_id,
            extra={"context": {"outcome": generation.outcome.value}},
        )
        return outcome.finish(Stage.REPLIED)

    async def handle_members_joined(self, chat_id: str, chat_title: str | None, members: list[User]) -> None:
        """Record new members; greet the chat when the assistant itself was added."""
        if self._is_other_chat(chat_id):
            logger.debug("Ignoring members joining chat %s", chat_id)
            return

        assistant_id = self._assistant.id if self._assistant else None
        assistant_added = assistant_id is not None and any(m.id == assistant_id for m in members)

        if assistant_added:
            logger.info("Assistant added to chat %r (ID: %s)", chat_title or "Без названия", chat_id)
            await self._mark_chat_known(chat_id)

        for member in members:
            if member.id != assistant_id:
                await self._upsert_user(member)

        await self._track(
            "member_joined",
            {"chat_id": chat_id, "member_ids": [m.id for m in members], "assistant": assistant_added},
        )

        if assistant_added:
            await deliver_text(self._transport, chat_id, self._config.startup_message)

    async def handle_member_left(self, chat_id: str, chat_title: str | None, member: User) -> None:
        """Log removal of the assistant; registries keep the chat."""
        if self._is_other_chat(chat_id):
            return
        if self._assistant is not None and member.id == self._assistant.id:
            logger.warning("Assistant removed from chat %r (ID: %s)", chat_title or "Без названия", chat_id)
            await self._track("member_left", {"chat_id": chat_id, "member_id": member.id})

    def _is_other_chat(self, chat_id: str) -> bool:
        return bool(self._config.target_chat_id) and chat_id != self._config.target_chat_id

    def _is_reply_to_assistant(self, message: ChatMessage) -> bool:
        target = message.reply_to
        if target is None or target.sender is None or self._assistant is None:
            return False
        return target.sender.id == self._assistant.id

    def _base_system_prompt(self) -> str:
        return create_system_prompt(
            self._config.bot_name,
            self._assistant.username if self._assistant else None,
        )

    async def _record(self, message: ChatMessage) -> None:
        # registries serialize their own writes
        await self._mark_chat_known(message.chat_id)
        await self._state.append(message)
        await self._upsert_user(message.sender)

    async def _mark_chat_known(self, chat_id: str) -> None:
        try:
            await self._chat_registry.mark_known(chat_id)
        except PersistenceError as e:
            logger.error("%s", e)

    async def _upsert_user(self, user: User) -> None:
        try:
            await self._user_registry.upsert(user)
        except PersistenceError as e:
            logger.error("%s", e)

    async def _track(self, event_type: str, data: dict) -> None:
        try:
            await self._tracker.track(event_type=event_type, actor=ACTOR, data=data)
        except Exception as e:
            logger.error("Failed to track %s: %s", event_type, e)
