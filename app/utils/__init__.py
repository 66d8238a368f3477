"""Shared helpers."""

from .credentials import is_unset_credential
from .slugs import slugify

__all__ = ["is_unset_credential", "slugify"]
