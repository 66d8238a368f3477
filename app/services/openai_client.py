"""OpenAI adapters for chat completion, image synthesis and text-to-speech."""

from __future__ import annotations

import base64
import binascii
import logging
import time
from typing import Any, Callable, Dict, Optional

import httpx

from app.domain.dto import ChatCompletion, ProviderOutput
from app.domain.errors import ConfigurationError, ProviderError, TransportError
from app.services.provider_http import download, parse_json, provider_call, raise_for_provider_status
from app.utils import is_unset_credential

DEFAULT_BASE_URL = "https://api.openai.com/v1"
MAX_IMAGE_PROMPT_LENGTH = 4000
MAX_SPEECH_INPUT_LENGTH = 4096


class _OpenAIEndpoint:
    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60.0,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._logger = logger or logging.getLogger(__name__)

    @property
    def is_configured(self) -> bool:
        return not is_unset_credential(self._api_key)

    def _require_key(self) -> None:
        if not self.is_configured:
            raise ConfigurationError("OpenAI API key is not configured", provider=self.name)

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }


class OpenAIChatModel(_OpenAIEndpoint):
    """OpenAI chat completions (``POST /chat/completions``)."""

    name = "openai"

    def __init__(
        self,
        api_key: str,
        model: str = "gpt-4-turbo-preview",
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 60.0,
        max_retries: int = 1,
        sleep: Callable[[float], None] = time.sleep,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(api_key, model, base_url, timeout, logger)
        self._max_retries = max(1, max_retries)
        self._sleep = sleep

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        *,
        max_tokens: int = 2000,
        temperature: float = 0.7,
        **sampling: float,
    ) -> ChatCompletion:
        """Generate a completion. Only transport errors are retried; rate limits never are."""
        self._require_key()
        url = f"{self._base_url}/chat/completions"
        payload: Dict[str, Any] = {
            "model": self._model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "max_tokens": max_tokens,
            "temperature": temperature,
            **sampling,
        }

        for attempt in range(self._max_retries):
            try:
                with httpx.Client(timeout=self._timeout) as client:
                    with provider_call(self.name):
                        response = client.post(url, headers=self._headers(), json=payload)
                    raise_for_provider_status(response, self.name)
                    data = parse_json(response, self.name)
            except TransportError as e:
                self._logger.error(
                    "OpenAI chat transport error (attempt %d/%d): %s", attempt + 1, self._max_retries, e
                )
                if attempt == self._max_retries - 1:
                    raise
                self._sleep(2 ** attempt)
                continue
            return self._to_completion(data)

        raise TransportError("OpenAI chat completion failed after retries", provider=self.name)

    def _to_completion(self, data: Dict[str, Any]) -> ChatCompletion:
        choices = data.get("choices") or []
        content = ""
        if choices and choices[0].get("message"):
            content = (choices[0]["message"].get("content") or "").strip()
        if not content:
            raise ProviderError("No content generated by OpenAI", provider=self.name)
        usage = data.get("usage") or {}
        return ChatCompletion(content=content, tokens_used=usage.get("total_tokens"), model=data.get("model"))


class OpenAIImageModel(_OpenAIEndpoint):
    """DALL-E image generation (``POST /images/generations``)."""

    name = "dall-e"

    def __init__(
        self,
        api_key: str,
        model: str = "dall-e-3",
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 120.0,
        quality: str = "hd",
        style: str = "vivid",
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(api_key, model, base_url, timeout, logger)
        self._quality = quality
        self._style = style

    def generate(self, prompt: str, *, size: str = "1024x1024") -> ProviderOutput:
        self._require_key()
        if len(prompt) > MAX_IMAGE_PROMPT_LENGTH:
            self._logger.warning("Image prompt too long (%d chars), truncating", len(prompt))
            prompt = prompt[: MAX_IMAGE_PROMPT_LENGTH - 100] + "..."

        body = {
            "model": self._model,
            "prompt": prompt,
            "size": size,
            "quality": self._quality,
            "style": self._style,
            "n": 1,
        }
        with httpx.Client(timeout=self._timeout) as client:
            with provider_call(self.name):
                response = client.post(f"{self._base_url}/images/generations", headers=self._headers(), json=body)
            raise_for_provider_status(response, self.name)
            data = parse_json(response, self.name)

            images = data.get("data") or []
            if not images:
                raise ProviderError("No image generated by DALL-E", provider=self.name)
            image = images[0]

            image_url = image.get("url")
            b64 = image.get("b64_json")
            if b64:
                try:
                    image_bytes = base64.b64decode(b64, validate=True)
                except (binascii.Error, ValueError) as exc:
                    raise ProviderError("Invalid base64 image payload", provider=self.name) from exc
            elif image_url:
                self._logger.info("Downloading generated image from %s", image_url)
                image_bytes = download(client, image_url, self.name)
            else:
                raise ProviderError("Missing base64 image payload or URL", provider=self.name)

        return ProviderOutput(
            content=image.get("revised_prompt"),
            binary=image_bytes,
            source_url=image_url,
            content_type="image/png",
        )


class OpenAISpeechModel(_OpenAIEndpoint):
    """OpenAI text-to-speech (``POST /audio/speech``)."""

    name = "openai-tts"

    def __init__(
        self,
        api_key: str,
        model: str = "tts-1-hd",
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 120.0,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(api_key, model, base_url, timeout, logger)

    def synthesize(self, text: str, *, voice: str = "nova", speed: float = 1.0) -> ProviderOutput:
        self._require_key()
        if len(text) > MAX_SPEECH_INPUT_LENGTH:
            self._logger.warning("Speech input too long (%d chars), truncating", len(text))
            text = text[:MAX_SPEECH_INPUT_LENGTH]

        body = {
            "model": self._model,
            "voice": voice,
            "input": text,
            "speed": speed,
            "response_format": "mp3",
        }
        with httpx.Client(timeout=self._timeout) as client:
            with provider_call(self.name):
                response = client.post(f"{self._base_url}/audio/speech", headers=self._headers(), json=body)
            raise_for_provider_status(response, self.name)
            audio = response.content

        if not audio:
            raise ProviderError("OpenAI returned empty audio", provider=self.name)
        return ProviderOutput(binary=audio, content_type="audio/mpeg")


__all__ = ["OpenAIChatModel", "OpenAIImageModel", "OpenAISpeechModel"]
