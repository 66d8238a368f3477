"""Typed error taxonomy raised by provider adapters, storage and the orchestrator."""

from __future__ import annotations

from typing import Optional


class ContentGenerationError(Exception):
    """Base class for every error raised by the generation core."""


class ProviderError(ContentGenerationError):
    """A generation provider could not produce a usable result."""

    def __init__(self, message: str, *, provider: Optional[str] = None, detail: Optional[str] = None) -> None:
        super().__init__(message)
        self.provider = provider
        self.detail = detail


class ConfigurationError(ProviderError):
    """Credentials are missing or were rejected by the provider."""


class ProviderRejectionError(ProviderError):
    """The provider refused the request on content-policy grounds."""


class TransportError(ProviderError):
    """Network failure, timeout or an unexpected HTTP status."""


class ProviderTimeoutError(TransportError):
    """A long-running provider job did not finish within its polling budget."""


class PollingCancelledError(TransportError):
    """Polling was cancelled by the caller before the job finished."""


class ProviderJobError(ProviderError):
    """A long-running provider job reached a terminal error state."""


class RateLimitError(ProviderError):
    """The provider is throttling us. Never masked by fallback."""

    user_message = "Rate limit exceeded. Please wait a moment and try again."


class StorageError(ContentGenerationError):
    """Uploading or deleting an artifact in object storage failed."""


class UnsupportedContentTypeError(ContentGenerationError, ValueError):
    """The requested content type does not map to any modality."""


class GenerationFailedError(ContentGenerationError):
    """Both the primary path and the placeholder fallback failed."""


__all__ = [
    "ConfigurationError",
    "ContentGenerationError",
    "GenerationFailedError",
    "PollingCancelledError",
    "ProviderError",
    "ProviderJobError",
    "ProviderRejectionError",
    "ProviderTimeoutError",
    "RateLimitError",
    "StorageError",
    "TransportError",
    "UnsupportedContentTypeError",
]
