"""Custom exception hierarchy for the grounding engine.

Every error carries a stable ``code`` that the HTTP layer maps to a status.
"""


class GroundingEngineError(Exception):
    """Base exception for all grounding engine errors."""

    code = "internal"


class ValidationError(GroundingEngineError):
    """Malformed or undersized input."""

    code = "invalid-argument"


class NotFoundError(GroundingEngineError):
    """A referenced book or character does not exist."""

    code = "not-found"


class PermissionDeniedError(GroundingEngineError):
    """The caller does not own the resource."""

    code = "permission-denied"


class TransientError(GroundingEngineError):
    """A call to an external model failed; the caller may skip or retry."""

    code = "unavailable"


class EmbeddingError(TransientError):
    """Error generating an embedding."""


class DimensionMismatchError(GroundingEngineError):
    """Two vectors that must share a dimension do not."""

    code = "invalid-argument"


class ConfigurationError(GroundingEngineError):
    """Error in system or call-time configuration."""

    code = "failed-precondition"


class InternalError(GroundingEngineError):
    """Unexpected failure; carries the original message for diagnostics."""

    code = "internal"


class AlreadyExistsError(GroundingEngineError):
    """A resource with the same id is already registered."""

    code = "already-exists"
