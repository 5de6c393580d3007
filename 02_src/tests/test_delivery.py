"""Tests for the outbound delivery helpers."""

from unittest.mock import AsyncMock

import pytest

from chatgate.constants import MAX_MESSAGE_LENGTH
from chatgate.errors import DeliveryError
from chatgate.transport import deliver_text, send_typing
from chatgate.transport.delivery import split_text


class TestDeliverText:
    @pytest.mark.asyncio
    async def test_success(self, transport):
        assert await deliver_text(transport, "-1", "hi", reply_to=3) is True
        transport.send_text.assert_awaited_once_with("-1", "hi", reply_to=3, markdown=False)

    @pytest.mark.asyncio
    async def test_markdown_rejected_resends_plain(self, transport):
        transport.send_text = AsyncMock(side_effect=[DeliveryError("bad entity"), None])

        assert await deliver_text(transport, "-1", "*hi", markdown=True) is True

        first, second = transport.send_text.call_args_list
        assert first.kwargs["markdown"] is True
        assert second.kwargs["markdown"] is False

    @pytest.mark.asyncio
    async def test_plain_failure_not_retried(self, transport):
        transport.send_text = AsyncMock(side_effect=DeliveryError("blocked"))

        assert await deliver_text(transport, "-1", "hi") is False
        assert transport.send_text.await_count == 1

    @pytest.mark.asyncio
    async def test_both_attempts_fail(self, transport):
        transport.send_text = AsyncMock(side_effect=DeliveryError("kicked"))

        assert await deliver_text(transport, "-1", "hi", markdown=True) is False
        assert transport.send_text.await_count == 2

    @pytest.mark.asyncio
    async def test_long_text_sent_in_parts(self, transport):
        """Only the first part replies to the message."""
        text = "слово " * 1200

        assert await deliver_text(transport, "-1", text, reply_to=7, markdown=True) is True

        calls = transport.send_text.call_args_list
        assert len(calls) == 2
        assert all(len(c.args[1]) <= MAX_MESSAGE_LENGTH for c in calls)
        assert calls[0].kwargs["reply_to"] == 7
        assert calls[1].kwargs["reply_to"] is None
        assert " ".join(c.args[1] for c in calls).split() == text.split()

    @pytest.mark.asyncio
    async def test_failed_part_stops_delivery(self, transport):
        transport.send_text = AsyncMock(side_effect=[None, DeliveryError("kicked")])

        assert await deliver_text(transport, "-1", "a " * 3000) is False
        assert transport.send_text.await_count == 2


class TestSplitText:
    def test_short_text_unchanged(self):
        assert split_text("hi") == ["hi"]

    def test_prefers_line_breaks(self):
        text = "a" * 6 + "\n" + "b" * 6
        assert split_text(text, limit=10) == ["a" * 6, "b" * 6]

    def test_hard_cut_without_spaces(self):
        chunks = split_text("x" * 25, limit=10)
        assert chunks == ["x" * 10, "x" * 10, "x" * 5]

    def test_exact_limit_is_one_chunk(self):
        assert split_text("y" * MAX_MESSAGE_LENGTH) == ["y" * MAX_MESSAGE_LENGTH]


class TestSendTyping:
    @pytest.mark.asyncio
    async def test_errors_ignored(self, transport):
        transport.send_typing = AsyncMock(side_effect=DeliveryError("nope"))

        await send_typing(transport, "-1")

        transport.send_typing.assert_awaited_once_with("-1")
