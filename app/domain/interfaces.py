"""Protocols implemented by provider adapters and storage backends."""

from __future__ import annotations

import threading
from typing import Optional, Protocol, Union

from app.domain.dto import ChatCompletion, ProviderOutput, VideoRenderJob

Payload = Union[bytes, str]


class ChatModel(Protocol):
    """Chat-completion endpoint."""

    name: str

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        max_tokens: int = 2000,
        temperature: float = 0.7,
        **sampling: float,
    ) -> ChatCompletion:
        """Return the generated message for a system/user prompt pair."""


class ImageModel(Protocol):
    """Image-synthesis endpoint."""

    name: str

    def generate(self, prompt: str, *, size: str = "1024x1024") -> ProviderOutput:
        """Return the generated image bytes and the provider-hosted URL."""


class SpeechModel(Protocol):
    """Text-to-speech endpoint."""

    name: str

    def synthesize(self, text: str, *, voice: str = "nova", speed: float = 1.0) -> ProviderOutput:
        """Return encoded audio bytes for the given text."""


class VideoProvider(Protocol):
    """Long-running video generation endpoint (submit, poll, download)."""

    name: str

    @property
    def is_configured(self) -> bool:
        """True when credentials for this provider are present."""

    def generate(self, job: VideoRenderJob, *, cancel_event: Optional[threading.Event] = None) -> ProviderOutput:
        """Render a clip and return its bytes along with the provider URL."""


class ArtifactStorage(Protocol):
    """Object storage for generated artifacts."""

    @property
    def is_configured(self) -> bool:
        """True when the backing bucket and credentials are available."""

    def put(self, key: str, payload: Payload, content_type: str) -> str:
        """Store ``payload`` under ``key`` and return its URL."""

    def delete(self, key: str) -> None:
        """Remove the object stored under ``key``."""


__all__ = ["ArtifactStorage", "ChatModel", "ImageModel", "Payload", "SpeechModel", "VideoProvider"]
