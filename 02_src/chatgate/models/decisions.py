"""Typed outcomes of the classification oracles.

Each enum parses the raw oracle token and falls back to its safe member when
the answer is anything other than one of the two expected tokens.
"""

from enum import Enum


class _Verdict(str, Enum):
    @classmethod
    def default(cls) -> "_Verdict":
        raise NotImplementedError

    @classmethod
    def parse(cls, token: str | None) -> "_Verdict":
        """Map an oracle answer to a member, or to the safe default."""
        if not token:
            return cls.default()
        normalized = token.strip().strip(".!\"'`").upper()
        for member in cls:
            if member.token == normalized:
                return member
        return cls.default()

    @property
    def token(self) -> str:
        return self.value


class AddressingDecision(_Verdict):
    """Whether a message targets the assistant."""

    ADDRESSED = "ANSWER"
    NOT_ADDRESSED = "SKIP"

    @classmethod
    def default(cls) -> "AddressingDecision":
        return cls.NOT_ADDRESSED


class TranscriptionIntent(_Verdict):
    """Whether a reply asks for the replied-to media to be transcribed."""

    TRANSCRIBE = "TRANSCRIBE"
    SKIP = "SKIP"

    @classmethod
    def default(cls) -> "TranscriptionIntent":
        return cls.SKIP


class DraftVerdict(_Verdict):
    """Whether a generated draft is a refusal or a real answer."""

    REFUSAL = "REFUSAL"
    ANSWER = "ANSWER"

    @classmethod
    def default(cls) -> "DraftVerdict":
        return cls.ANSWER
