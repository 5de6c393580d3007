"""Tests for EngagementLayer gates, reactions and troll comments."""

import random
from unittest.mock import AsyncMock

import pytest

from chatgate.constants import AVAILABLE_REACTIONS
from chatgate.dialogue import EngagementLayer
from conftest import ALICE, ASSISTANT, FixedRandom, make_message


def _layer(oracle, transport, rng):
    return EngagementLayer(oracle, transport, "Helper", rng=rng)


class TestGates:
    """Statistical behavior of the two gates."""

    def test_rates_over_many_trials(self, mock_oracle, transport):
        """Reaction fires ~15%, troll ~8%, jointly ~1.2%."""
        layer = _layer(mock_oracle, transport, random.Random(1234))
        trials = 100_000
        reactions = trolls = both = 0
        for _ in range(trials):
            reacted = layer.reaction_gate()
            trolled = layer.troll_gate()
            reactions += reacted
            trolls += trolled
            both += reacted and trolled

        assert abs(reactions / trials - 0.15) < 0.01
        assert abs(trolls / trials - 0.08) < 0.01
        assert abs(both / trials - 0.012) < 0.003

    def test_gate_boundaries(self, mock_oracle, transport):
        """A draw equal to the probability does not open the gate."""
        assert not _layer(mock_oracle, transport, FixedRandom(0.15)).reaction_gate()
        assert _layer(mock_oracle, transport, FixedRandom(0.1499)).reaction_gate()
        assert not _layer(mock_oracle, transport, FixedRandom(0.08)).troll_gate()

    def test_reaction_from_catalog(self, mock_oracle, transport):
        layer = _layer(mock_oracle, transport, random.Random(7))
        for _ in range(50):
            assert layer.pick_reaction() in AVAILABLE_REACTIONS


class TestMaybeReact:
    @pytest.mark.asyncio
    async def test_reacts_when_gate_opens(self, mock_oracle, transport):
        message = make_message(id=42)

        emoji = await _layer(mock_oracle, transport, FixedRandom(0.0)).maybe_react(message, ASSISTANT)

        assert emoji == AVAILABLE_REACTIONS[0]
        transport.send_reaction.assert_awaited_once_with(message.chat_id, 42, emoji)

    @pytest.mark.asyncio
    async def test_never_reacts_to_own_messages(self, mock_oracle, transport):
        message = make_message(sender=ASSISTANT)

        emoji = await _layer(mock_oracle, transport, FixedRandom(0.0)).maybe_react(message, ASSISTANT)

        assert emoji is None
        transport.send_reaction.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_unknown_assistant_never_reacts(self, mock_oracle, transport):
        """An unresolved identity means no reactions, even with an open gate."""
        emoji = await _layer(mock_oracle, transport, FixedRandom(0.0)).maybe_react(make_message(), None)

        assert emoji is None
        transport.send_reaction.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_rejected_reaction_is_swallowed(self, mock_oracle, transport):
        transport.send_reaction = AsyncMock(side_effect=RuntimeError("REACTION_INVALID"))

        emoji = await _layer(mock_oracle, transport, FixedRandom(0.0)).maybe_react(make_message(), ASSISTANT)

        assert emoji is None

    @pytest.mark.asyncio
    async def test_closed_gate(self, mock_oracle, transport):
        emoji = await _layer(mock_oracle, transport, FixedRandom(0.99)).maybe_react(make_message(), ASSISTANT)

        assert emoji is None
        transport.send_reaction.assert_not_awaited()


class TestMaybeTroll:
    @pytest.mark.asyncio
    async def test_sends_comment_as_reply(self, mock_oracle, transport):
        mock_oracle.generate = AsyncMock(return_value=" Bold choice, Alice. ")
        message = make_message(id=77, text="I love pineapple pizza", sender=ALICE)

        comment = await _layer(mock_oracle, transport, FixedRandom(0.0)).maybe_troll(message, "sys")

        assert comment == "Bold choice, Alice."
        assert transport.sent_texts == ["Bold choice, Alice."]
        assert transport.send_text.call_args.kwargs["reply_to"] == 77
        prompt = mock_oracle.generate.call_args.args[1][0].content
        assert "I love pineapple pizza" in prompt
        assert "Alice" in prompt

    @pytest.mark.asyncio
    async def test_declined_comment_not_sent(self, mock_oracle, transport):
        mock_oracle.generate = AsyncMock(return_value="SKIP")

        comment = await _layer(mock_oracle, transport, FixedRandom(0.0)).maybe_troll(make_message(), "sys")

        assert comment is None
        transport.send_text.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_generation_error_not_sent(self, mock_oracle, transport):
        mock_oracle.generate = AsyncMock(side_effect=RuntimeError("down"))

        comment = await _layer(mock_oracle, transport, FixedRandom(0.0)).maybe_troll(make_message(), "sys")

        assert comment is None
        transport.send_text.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_closed_gate_skips_generation(self, mock_oracle, transport):
        comment = await _layer(mock_oracle, transport, FixedRandom(0.5)).maybe_troll(make_message(), "sys")

        assert comment is None
        mock_oracle.generate.assert_not_awaited()
