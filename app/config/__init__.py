"""Configuration loader for provider credentials and storage settings."""

from __future__ import annotations

import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, MutableMapping, Optional

from pydantic import BaseModel

from app.utils import is_unset_credential


BASE_DIR = Path(__file__).resolve().parents[1]
DEFAULT_CONFIG_PATH = BASE_DIR.parent / "config" / "settings.toml"


class OpenAISettings(BaseModel):
    api_key: str = ""
    base_url: str = "https://api.openai.com/v1"
    chat_model: str = "gpt-4-turbo-preview"
    image_model: str = "dall-e-3"
    tts_model: str = "tts-1-hd"
    timeout: float = 60.0
    max_retries: int = 1


class AWSSettings(BaseModel):
    access_key: str = ""
    secret_key: str = ""
    region: str = "us-east-1"
    bucket: str = ""
    endpoint_url: str = ""  # S3-compatible endpoint (MinIO, R2, ...)
    public_base_url: str = ""  # CDN or gateway in front of the bucket
    mock_url_base: str = "https://mock-storage.invalid/placeholders"


class DIDSettings(BaseModel):
    api_key: str = ""
    base_url: str = "https://api.d-id.com"


class PikaSettings(BaseModel):
    api_key: str = ""
    base_url: str = "https://api.pika.art/v1"


class RunwaySettings(BaseModel):
    api_key: str = ""
    base_url: str = "https://api.runwayml.com/v1"


class PollingSettings(BaseModel):
    interval_seconds: float = 10.0
    backoff_factor: float = 1.0
    max_interval_seconds: float = 60.0
    jitter_seconds: float = 0.0
    deadline_seconds: Optional[float] = None


class ServiceSettings(BaseModel):
    log_level: str = "INFO"


class AppSettings(BaseModel):
    openai: OpenAISettings = OpenAISettings()
    aws: AWSSettings = AWSSettings()
    did: DIDSettings = DIDSettings()
    pika: PikaSettings = PikaSettings()
    runway: RunwaySettings = RunwaySettings()
    polling: PollingSettings = PollingSettings()
    service: ServiceSettings = ServiceSettings()

    @property
    def openai_configured(self) -> bool:
        return not is_unset_credential(self.openai.api_key)

    @property
    def storage_configured(self) -> bool:
        return not any(
            is_unset_credential(value)
            for value in (self.aws.access_key, self.aws.secret_key, self.aws.bucket, self.aws.region)
        )

    @property
    def configured_video_providers(self) -> list[str]:
        providers = []
        if not is_unset_credential(self.did.api_key):
            providers.append("d-id")
        if not is_unset_credential(self.pika.api_key):
            providers.append("pika")
        if not is_unset_credential(self.runway.api_key):
            providers.append("runway")
        return providers


def _load_toml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    with path.open("rb") as fp:
        return tomllib.load(fp)


SECTION_MAPPING: Dict[str, Dict[str, str]] = {
    "openai": {
        "OPENAI_API_KEY": "api_key",
        "OPENAI_BASE_URL": "base_url",
        "OPENAI_CHAT_MODEL": "chat_model",
        "OPENAI_IMAGE_MODEL": "image_model",
        "OPENAI_TTS_MODEL": "tts_model",
        "OPENAI_TIMEOUT": "timeout",
        "OPENAI_MAX_RETRIES": "max_retries",
    },
    "aws": {
        "AWS_ACCESS_KEY_ID": "access_key",
        "AWS_SECRET_ACCESS_KEY": "secret_key",
        "AWS_REGION": "region",
        "AWS_BUCKET_NAME": "bucket",
        "S3_ENDPOINT_URL": "endpoint_url",
        "S3_PUBLIC_BASE_URL": "public_base_url",
        "MOCK_STORAGE_BASE_URL": "mock_url_base",
    },
    "did": {
        "D_ID_API_KEY": "api_key",
        "D_ID_BASE_URL": "base_url",
    },
    "pika": {
        "PIKA_API_KEY": "api_key",
        "PIKA_BASE_URL": "base_url",
    },
    "runway": {
        "RUNWAY_API_KEY": "api_key",
        "RUNWAY_BASE_URL": "base_url",
    },
    "polling": {
        "POLL_INTERVAL_SECONDS": "interval_seconds",
        "POLL_BACKOFF_FACTOR": "backoff_factor",
        "POLL_MAX_INTERVAL_SECONDS": "max_interval_seconds",
        "POLL_JITTER_SECONDS": "jitter_seconds",
        "POLL_DEADLINE_SECONDS": "deadline_seconds",
    },
    "service": {
        "LOG_LEVEL": "log_level",
    },
}


def _get_env_with_fallback(env_name: str) -> str | None:
    """Read an environment variable, also accepting its lowercase-hyphen form.

    Some container platforms only allow lowercase alphanumeric names with
    hyphens, so ``OPENAI_API_KEY`` may arrive as ``openai-api-key``. Empty
    strings are treated as unset so they don't override settings.toml.
    """
    value = os.getenv(env_name)
    if value is not None and value != "":
        return value
    value = os.getenv(env_name.lower().replace("_", "-"))
    if value is not None and value != "":
        return value
    return None


def _env_override() -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for section, mapping in SECTION_MAPPING.items():
        values = {field: _get_env_with_fallback(env_name) for env_name, field in mapping.items()}
        filtered_values = {k: v for k, v in values.items() if v is not None}
        if filtered_values:
            result[section] = filtered_values
    return result


def _deep_merge(base: MutableMapping[str, Any], overrides: Mapping[str, Any]) -> MutableMapping[str, Any]:
    for key, value in overrides.items():
        if isinstance(value, Mapping):
            node = base.setdefault(key, {})
            if isinstance(node, MutableMapping):
                _deep_merge(node, value)
            else:
                base[key] = value
        else:
            base[key] = value
    return base


def _normalize_config(data: Dict[str, Any]) -> Dict[str, Any]:
    """Accept both ``api_key`` and ``OPENAI_API_KEY`` style keys inside TOML sections."""
    normalized: Dict[str, Any] = {}
    for section, values in data.items():
        mapping = SECTION_MAPPING.get(section, {})
        normalized_section: Dict[str, Any] = {}
        if isinstance(values, Mapping):
            for key, value in values.items():
                normalized_key = mapping.get(key, key.lower())
                normalized_section[normalized_key] = value
        normalized[section] = normalized_section
    return normalized


def load_settings(config_path: Optional[Path] = None) -> AppSettings:
    """Load settings from a TOML file, overridden by environment variables."""

    path = config_path or DEFAULT_CONFIG_PATH
    data: Dict[str, Any] = _normalize_config(_load_toml(path))
    merged = _deep_merge(data, _env_override())
    return AppSettings(**merged)


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Cached accessor using the default configuration path."""

    return load_settings()


def config_status(settings: AppSettings) -> Dict[str, Any]:
    """Summarise which providers are usable, for the config-status endpoint."""

    openai_ok = settings.openai_configured
    storage_ok = settings.storage_configured
    if openai_ok and storage_ok:
        message = "All services are configured."
    elif openai_ok:
        message = (
            "OpenAI is configured. Storage is not configured; text and image requests return placeholder "
            "content with mock URLs, and audio and video generation require storage."
        )
    elif storage_ok:
        message = "Storage is configured. OpenAI is not configured; placeholder content will be generated."
    else:
        message = "OpenAI and storage are not configured; placeholder content will be generated."
    return {
        "openai": openai_ok,
        "storage": storage_ok,
        "video_providers": settings.configured_video_providers,
        "message": message,
    }


__all__ = [
    "AWSSettings",
    "AppSettings",
    "DIDSettings",
    "OpenAISettings",
    "PikaSettings",
    "PollingSettings",
    "RunwaySettings",
    "ServiceSettings",
    "config_status",
    "get_settings",
    "load_settings",
]
