"""Domain errors (typed) for the context pipeline.

Why: Unified error family for the Application layer, without Infra leaks.
"""


class DomainError(Exception):
    """Base class for domain-specific errors."""


class ValidationError(DomainError):
    """Invalid input/domain state (e.g. a rejected configuration)."""


class EmbeddingError(DomainError):
    """Embedding backend failed, is misconfigured, or returned no vector."""


class RetrievalError(DomainError):
    """Retrieval provider failed or returned a shape we cannot iterate."""


class TelemetryError(DomainError):
    """Telemetry backend is misconfigured."""
