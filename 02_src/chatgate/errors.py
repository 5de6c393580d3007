"""Exceptions raised by gateway collaborators."""


class GatewayError(Exception):
    """Base class for gateway errors."""


class OracleError(GatewayError):
    """Language model call failed or returned nothing usable."""


class TranscriptionError(OracleError):
    """Audio/video transcription failed."""


class DeliveryError(GatewayError):
    """The chat transport rejected an outbound action."""


class PersistenceError(GatewayError):
    """A registry could not be written to disk."""
