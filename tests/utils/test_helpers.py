from __future__ import annotations

import pytest

from app.utils import is_unset_credential, slugify


@pytest.mark.parametrize(
    "value",
    [None, "", "   ", "<openai-api-key>", "replace-with-bucket", "YOUR-KEY", "your_token", "changeme"],
)
def test_unset_credentials(value):
    assert is_unset_credential(value) is True


@pytest.mark.parametrize("value", ["sk-live-123", "AKIAIOSFODNN7", "acme-assets"])
def test_real_credentials(value):
    assert is_unset_credential(value) is False


@pytest.mark.parametrize(
    "value,expected",
    [
        ("Acme Rockets", "acme-rockets"),
        ("  Blog / Article  ", "blog-article"),
        ("Email -- Campaign!", "email-campaign"),
        ("", "untitled"),
    ],
)
def test_slugify(value, expected):
    assert slugify(value) == expected
