# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-03
# Description: HSKErrors
# -----------------------------------------------------------------------------


class HSKRagError(Exception):
    """Base class for RAG pipeline errors."""


class ExtractionSkipped(HSKRagError):
    """Normalized text is empty; the item is excluded from embedding."""

    def __init__(self, source_type: str, source_id: int):
        self.source_type = source_type
        self.source_id = source_id
        super().__init__(f"No embeddable text for {source_type}:{source_id}")


class ProviderUnavailable(HSKRagError):
    """Network, timeout or payload failure talking to an external provider."""

    def __init__(self, provider: str, message: str):
        self.provider = provider
        super().__init__(f"{provider} unavailable: {message}")


class GenerationFailed(ProviderUnavailable):
    """The generation provider failed while answering a query (production mode)."""

    def __init__(self, message: str):
        super().__init__("generation", message)


class DimensionMismatch(HSKRagError):
    """Two vectors of unequal length were compared or stored. Always fatal."""

    def __init__(self, expected: int, actual: int, context: str = ""):
        self.expected = expected
        self.actual = actual
        suffix = f" ({context})" if context else ""
        super().__init__(f"Vector dimension mismatch: expected {expected}, got {actual}{suffix}")


class ValidationError(HSKRagError):
    """Malformed query parameters, rejected before any provider call."""


class ReindexInProgress(HSKRagError):
    """A full reindex is already running; only one may run at a time."""

    def __init__(self, job_id: str | None = None):
        self.job_id = job_id
        super().__init__(f"Reindex already running (job_id={job_id})")
