"""LLM module."""

from .llm_provider import ILLMProvider, LLMProvider
from .oracle import IOracle, Oracle
from .transcriber import ITranscriber, Transcriber

__all__ = [
    "ILLMProvider",
    "LLMProvider",
    "IOracle",
    "Oracle",
    "ITranscriber",
    "Transcriber",
]
