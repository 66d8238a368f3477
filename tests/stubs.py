"""Stub providers and storage shared by the service and API tests."""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

from app.domain.dto import ChatCompletion, ProviderOutput
from app.domain.errors import StorageError


class StubStorage:
    def __init__(self, configured: bool = True, fail: Optional[Exception] = None) -> None:
        self.configured = configured
        self.fail = fail
        self.objects: Dict[str, Tuple[object, str]] = {}

    @property
    def is_configured(self) -> bool:
        return self.configured

    def put(self, key, payload, content_type):
        if not self.configured:
            raise StorageError("S3 storage is not configured")
        if self.fail is not None:
            raise self.fail
        self.objects[key] = (payload, content_type)
        return f"https://bucket.s3.us-east-1.amazonaws.com/{key}"

    def delete(self, key):
        self.objects.pop(key, None)


class StubChatModel:
    name = "openai"

    def __init__(self, responses: Optional[List[object]] = None) -> None:
        self.responses = list(responses or [])
        self.calls: List[dict] = []

    def complete(self, system_prompt, user_prompt, *, max_tokens=2000, temperature=0.7, **sampling):
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "user_prompt": user_prompt,
                "max_tokens": max_tokens,
                "temperature": temperature,
                **sampling,
            }
        )
        response = self.responses.pop(0) if self.responses else ChatCompletion(content="Generated copy", tokens_used=10)
        if isinstance(response, Exception):
            raise response
        if isinstance(response, str):
            return ChatCompletion(content=response, tokens_used=10)
        return response


class StubImageModel:
    name = "dall-e"

    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.calls: List[Tuple[str, str]] = []

    def generate(self, prompt, *, size="1024x1024"):
        self.calls.append((prompt, size))
        if self.error is not None:
            raise self.error
        return ProviderOutput(binary=b"png-bytes", source_url="https://images.example.com/a.png", content_type="image/png")


class StubSpeechModel:
    name = "openai-tts"

    def __init__(self, error: Optional[Exception] = None) -> None:
        self.error = error
        self.calls: List[dict] = []

    def synthesize(self, text, *, voice="nova", speed=1.0):
        self.calls.append({"text": text, "voice": voice, "speed": speed})
        if self.error is not None:
            raise self.error
        return ProviderOutput(binary=b"mp3-bytes", content_type="audio/mpeg")


class StubVideoProvider:
    def __init__(self, name: str = "d-id", configured: bool = True, error: Optional[Exception] = None) -> None:
        self.name = name
        self.configured = configured
        self.error = error
        self.jobs: list = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    def generate(self, job, *, cancel_event=None):
        self.jobs.append(job)
        if self.error is not None:
            raise self.error
        return ProviderOutput(binary=b"mp4-bytes", source_url=f"https://{self.name}.example/v.mp4", content_type="video/mp4")


class FixedClock:
    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now
