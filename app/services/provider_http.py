"""Translate httpx failures and provider HTTP statuses into the typed error taxonomy."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator, Optional, Tuple

import httpx

from app.domain.errors import (
    ConfigurationError,
    ProviderRejectionError,
    RateLimitError,
    TransportError,
)

CONTENT_POLICY_CODES = frozenset({"content_policy_violation", "content_filter", "moderation_blocked"})
QUOTA_CODES = frozenset({"insufficient_quota", "billing_hard_limit_reached"})


def _error_payload(response: httpx.Response) -> Tuple[Optional[str], str]:
    try:
        data = response.json()
    except ValueError:
        return None, response.text[:200]
    error = data.get("error") if isinstance(data, dict) else None
    if isinstance(error, dict):
        return error.get("code") or error.get("type"), str(error.get("message") or error)
    if isinstance(data, dict):
        return data.get("code"), str(data.get("message") or data.get("description") or data)[:200]
    return None, str(data)[:200]


def raise_for_provider_status(response: httpx.Response, provider: str) -> None:
    """Raise the matching typed error when ``response`` is not a 2xx."""
    if response.is_success:
        return

    status = response.status_code
    code, detail = _error_payload(response)

    if status in (401, 403):
        raise ConfigurationError(f"{provider} rejected the API credentials", provider=provider, detail=detail)
    if status == 429 and code in QUOTA_CODES:
        raise ConfigurationError(f"{provider} account quota exhausted", provider=provider, detail=detail)
    if status == 429:
        raise RateLimitError(f"{provider} rate limit exceeded", provider=provider, detail=detail)
    if status == 400 and code in CONTENT_POLICY_CODES:
        raise ProviderRejectionError(
            f"{provider} rejected the prompt (content policy)", provider=provider, detail=detail
        )
    raise TransportError(f"{provider} returned HTTP {status}", provider=provider, detail=detail)


def parse_json(response: httpx.Response, provider: str) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise TransportError(f"{provider} returned a non-JSON body", provider=provider) from exc


@contextmanager
def provider_call(provider: str) -> Iterator[None]:
    """Map httpx transport exceptions raised inside the block to ``TransportError``."""
    try:
        yield
    except httpx.TimeoutException as exc:
        raise TransportError(f"{provider} request timed out", provider=provider, detail=str(exc)) from exc
    except httpx.RequestError as exc:
        raise TransportError(f"{provider} network error", provider=provider, detail=str(exc)) from exc


def download(client: httpx.Client, url: str, provider: str) -> bytes:
    """Fetch a provider-hosted result (image, video) and return its bytes."""
    with provider_call(provider):
        response = client.get(url, follow_redirects=True)
    if not response.is_success:
        raise TransportError(
            f"Failed to download {provider} result: HTTP {response.status_code}",
            provider=provider,
            detail=url,
        )
    return response.content


__all__ = ["CONTENT_POLICY_CODES", "QUOTA_CODES", "download", "parse_json", "provider_call", "raise_for_provider_status"]
