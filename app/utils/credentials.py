"""Detect credentials that were left at their sample values."""

from __future__ import annotations

import re

_SAMPLE_MARKERS = ("replace-with", "your-", "your_", "changeme", "dummy", "stub")
_TEMPLATE_PATTERN = re.compile(r"^<[^>]*>$")


def is_unset_credential(value: str | None) -> bool:
    """True when ``value`` is empty, blank, ``<templated>`` or a copied sample like ``replace-with-key``."""
    if value is None:
        return True
    normalized = value.strip().lower()
    if not normalized or _TEMPLATE_PATTERN.match(normalized):
        return True
    return any(marker in normalized for marker in _SAMPLE_MARKERS)
