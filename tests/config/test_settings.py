from __future__ import annotations

from pathlib import Path

import pytest

from app.config import AppSettings, config_status, load_settings

ENV_NAMES = (
    "OPENAI_API_KEY",
    "openai-api-key",
    "AWS_BUCKET_NAME",
    "AWS_REGION",
    "D_ID_API_KEY",
    "POLL_INTERVAL_SECONDS",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)


def _write(tmp_path: Path, body: str) -> Path:
    path = tmp_path / "settings.toml"
    path.write_text(body, encoding="utf-8")
    return path


def test_missing_file_uses_defaults(tmp_path: Path):
    settings = load_settings(tmp_path / "absent.toml")

    assert settings.openai.chat_model == "gpt-4-turbo-preview"
    assert settings.aws.region == "us-east-1"
    assert settings.polling.interval_seconds == 10.0
    assert settings.openai_configured is False


def test_toml_values_are_loaded(tmp_path: Path):
    path = _write(
        tmp_path,
        """
[openai]
api_key = "sk-test"
timeout = 30

[aws]
AWS_BUCKET_NAME = "acme-assets"

[polling]
backoff_factor = 2.0
""",
    )

    settings = load_settings(path)

    assert settings.openai.api_key == "sk-test"
    assert settings.openai.timeout == 30.0
    assert settings.aws.bucket == "acme-assets"
    assert settings.polling.backoff_factor == 2.0


def test_environment_overrides_toml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    path = _write(tmp_path, '[openai]\napi_key = "from-file"\n\n[service]\nlog_level = "INFO"\n')
    monkeypatch.setenv("OPENAI_API_KEY", "from-env")
    monkeypatch.setenv("POLL_INTERVAL_SECONDS", "2.5")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")

    settings = load_settings(path)

    assert settings.openai.api_key == "from-env"
    assert settings.polling.interval_seconds == 2.5
    assert settings.service.log_level == "DEBUG"


def test_lowercase_hyphen_env_fallback(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("openai-api-key", "sk-hyphen")

    settings = load_settings(tmp_path / "absent.toml")

    assert settings.openai.api_key == "sk-hyphen"


def test_empty_env_does_not_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    path = _write(tmp_path, '[openai]\napi_key = "from-file"\n')
    monkeypatch.setenv("OPENAI_API_KEY", "")

    assert load_settings(path).openai.api_key == "from-file"


@pytest.mark.parametrize("value", ["", "replace-with-openai-key", "your-api-key", "dummy"])
def test_placeholder_keys_are_not_configured(value: str):
    settings = AppSettings.model_validate({"openai": {"api_key": value}})
    assert settings.openai_configured is False


def test_configured_video_providers_keep_order():
    settings = AppSettings.model_validate(
        {"did": {"api_key": "did-key"}, "pika": {"api_key": ""}, "runway": {"api_key": "rw-key"}}
    )
    assert settings.configured_video_providers == ["d-id", "runway"]


def test_config_status_messages():
    storage = {"access_key": "AKIA", "secret_key": "secret", "bucket": "acme", "region": "us-east-1"}

    both = config_status(AppSettings.model_validate({"openai": {"api_key": "sk"}, "aws": storage}))
    storage_only = config_status(AppSettings.model_validate({"aws": storage}))
    openai_only = config_status(AppSettings.model_validate({"openai": {"api_key": "sk"}}))
    neither = config_status(AppSettings())

    assert both["message"] == "All services are configured."
    assert both["openai"] is True and both["storage"] is True
    assert storage_only["message"].startswith("Storage is configured.")
    assert "audio and video generation require storage" in openai_only["message"]
    assert neither["openai"] is False and neither["storage"] is False
    assert "placeholder content" in neither["message"]
