"""Slug helpers used to build object-storage keys."""

from __future__ import annotations

import re


def slugify(value: str, default: str = "untitled") -> str:
    """
    Slugify a brand name or content type for use in a storage key.

    - Convert to lowercase
    - Replace whitespace runs with hyphens
    - Remove non-alphanumeric characters (except hyphens)
    - Remove leading/trailing hyphens
    """
    slug = (value or "").lower()
    slug = re.sub(r"\s+", "-", slug)
    slug = re.sub(r"[^a-z0-9-]", "", slug)
    slug = re.sub(r"-{2,}", "-", slug)
    slug = re.sub(r"^-+|-+$", "", slug)
    return slug or default
