from __future__ import annotations


class GenerationError(Exception):
    """The text-generation API call failed."""


class GenerationConfigError(GenerationError):
    """No API key is configured; retrying cannot help."""


class GenerationNetworkError(GenerationError):
    """Transport-level failure talking to the generation API."""


class GenerationTimeoutError(GenerationError):
    """The generation API did not answer within the configured timeout."""


class GenerationHTTPError(GenerationError):
    """The generation API answered with a non-success status."""

    def __init__(self, message: str, *, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class GenerationEmptyResponseError(GenerationError):
    """The generation API answered without usable text."""


class EnrichmentQueueClosedError(RuntimeError):
    """The enrichment queue was closed before the request was dispatched."""
