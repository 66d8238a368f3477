"""Tests for the D-ID, Pika and Runway video adapters."""

from __future__ import annotations

import random
from unittest.mock import Mock, patch

import httpx
import pytest

from app.domain.dto import VideoRenderJob
from app.domain.errors import ConfigurationError, ProviderJobError, ProviderTimeoutError, RateLimitError
from app.services.polling import PollingPolicy
from app.services.video_providers import (
    DIDVideoProvider,
    PikaVideoProvider,
    PollingVideoProvider,
    RunwayVideoProvider,
    parse_duration_seconds,
)


def _job(**overrides) -> VideoRenderJob:
    values = dict(
        script="Meet Acme. " * 200,
        prompt="Professional marketing video for Acme.",
        duration_seconds=30,
        brand_name="Acme",
        video_type="Product Demo",
    )
    values.update(overrides)
    return VideoRenderJob(**values)


def _mock_client(mock_client_class, *, post, gets):
    mock_client = Mock()
    mock_client.__enter__ = Mock(return_value=mock_client)
    mock_client.__exit__ = Mock(return_value=False)
    mock_client.post.return_value = post
    mock_client.get.side_effect = gets
    mock_client_class.return_value = mock_client
    return mock_client


def _policy(max_attempts: int = 5) -> PollingPolicy:
    return PollingPolicy(interval_seconds=10, max_attempts=max_attempts)


class TestParseDuration:
    def test_first_integer_wins(self):
        assert parse_duration_seconds("60 seconds") == 60
        assert parse_duration_seconds("2 to 3 minutes") == 2

    def test_default_when_no_number(self):
        assert parse_duration_seconds("about a minute") == 30
        assert parse_duration_seconds("") == 30
        assert parse_duration_seconds(None) == 30


class TestDIDVideoProvider:
    def test_default_attempt_budget(self):
        provider = DIDVideoProvider("key", "https://api.d-id.com")
        assert provider._poller.policy.max_attempts == 30

    def test_presenter_image_falls_back_to_professional(self):
        assert DIDVideoProvider.presenter_image_url("casual").endswith("default_presenter_f")
        assert DIDVideoProvider.presenter_image_url("unknown") == DIDVideoProvider.PRESENTER_IMAGES["professional"]
        assert DIDVideoProvider.presenter_image_url(None) == DIDVideoProvider.PRESENTER_IMAGES["professional"]

    @patch("httpx.Client")
    def test_generate_submits_polls_and_downloads(self, mock_client_class):
        sleep = Mock()
        mock_client = _mock_client(
            mock_client_class,
            post=httpx.Response(201, json={"id": "tlk_123", "status": "created"}),
            gets=[
                httpx.Response(200, json={"status": "started"}),
                httpx.Response(200, json={"status": "done", "result_url": "https://d-id.example/v.mp4"}),
                httpx.Response(200, content=b"mp4-bytes"),
            ],
        )

        provider = DIDVideoProvider("key", "https://api.d-id.com/", _policy(), sleep=sleep)
        output = provider.generate(_job(style="creative"))

        assert output.binary == b"mp4-bytes"
        assert output.source_url == "https://d-id.example/v.mp4"
        assert output.content_type == "video/mp4"
        assert sleep.call_count == 2

        url, kwargs = mock_client.post.call_args[0][0], mock_client.post.call_args[1]
        assert url == "https://api.d-id.com/talks"
        assert kwargs["headers"]["Authorization"] == "Basic key"
        body = kwargs["json"]
        assert len(body["script"]["input"]) == 1000
        assert body["script"]["provider"] == {"type": "microsoft", "voice_id": "en-US-JennyNeural"}
        assert body["source_url"] == DIDVideoProvider.PRESENTER_IMAGES["creative"]
        assert mock_client.get.call_args_list[0][0][0] == "https://api.d-id.com/talks/tlk_123"

    @patch("httpx.Client")
    def test_error_status_raises_job_error(self, mock_client_class):
        _mock_client(
            mock_client_class,
            post=httpx.Response(201, json={"id": "tlk_123"}),
            gets=[httpx.Response(200, json={"status": "error", "error": "face not detected"})],
        )

        provider = DIDVideoProvider("key", "https://api.d-id.com", _policy(), sleep=Mock())
        with pytest.raises(ProviderJobError) as exc_info:
            provider.generate(_job())
        assert exc_info.value.detail == "face not detected"

    def test_missing_key_raises_configuration_error(self):
        provider = DIDVideoProvider("", "https://api.d-id.com")
        assert provider.is_configured is False
        with pytest.raises(ConfigurationError):
            provider.generate(_job())


class TestPikaVideoProvider:
    @patch("httpx.Client")
    def test_completed_job_uses_result_video_url(self, mock_client_class):
        mock_client = _mock_client(
            mock_client_class,
            post=httpx.Response(200, json={"id": "pk_1"}),
            gets=[
                httpx.Response(200, json={"status": "processing"}),
                httpx.Response(200, json={"status": "completed", "result": {"video_url": "https://pika/v.mp4"}}),
                httpx.Response(200, content=b"pika-video"),
            ],
        )

        provider = PikaVideoProvider(
            "key", "https://api.pika.art/v1", _policy(), sleep=Mock(), rng=random.Random(1)
        )
        output = provider.generate(_job(style=None))

        assert output.binary == b"pika-video"
        assert output.source_url == "https://pika/v.mp4"
        body = mock_client.post.call_args[1]["json"]
        assert mock_client.post.call_args[0][0] == "https://api.pika.art/v1/generate"
        assert body["aspect_ratio"] == "16:9"
        assert body["duration"] == 30
        assert body["style"] == "realistic"
        assert 0 <= body["seed"] <= 999_999
        assert mock_client.get.call_args_list[0][0][0] == "https://api.pika.art/v1/generate/pk_1"

    @patch("httpx.Client")
    def test_times_out_after_attempt_budget(self, mock_client_class):
        _mock_client(
            mock_client_class,
            post=httpx.Response(200, json={"id": "pk_1"}),
            gets=[httpx.Response(200, json={"status": "processing"})] * 3,
        )

        provider = PikaVideoProvider("key", "https://api.pika.art/v1", _policy(max_attempts=3), sleep=Mock())
        with pytest.raises(ProviderTimeoutError):
            provider.generate(_job())

    def test_default_attempt_budget(self):
        assert PikaVideoProvider("key", "https://api.pika.art/v1")._poller.policy.max_attempts == 60


class TestRunwayVideoProvider:
    @patch("httpx.Client")
    def test_succeeded_task_uses_first_output(self, mock_client_class):
        mock_client = _mock_client(
            mock_client_class,
            post=httpx.Response(200, json={"id": "task_9"}),
            gets=[
                httpx.Response(200, json={"status": "SUCCEEDED", "output": ["https://runway/v.mp4", "https://runway/alt.mp4"]}),
                httpx.Response(200, content=b"runway-video"),
            ],
        )

        provider = RunwayVideoProvider("key", "https://api.runwayml.com/v1", _policy(), sleep=Mock())
        output = provider.generate(_job())

        assert output.source_url == "https://runway/v.mp4"
        assert output.binary == b"runway-video"
        assert mock_client.post.call_args[1]["headers"]["Authorization"] == "Bearer key"
        assert mock_client.get.call_args_list[0][0][0] == "https://api.runwayml.com/v1/tasks/task_9"

    @patch("httpx.Client")
    def test_failed_task_raises_job_error(self, mock_client_class):
        _mock_client(
            mock_client_class,
            post=httpx.Response(200, json={"id": "task_9"}),
            gets=[httpx.Response(200, json={"status": "FAILED", "failure": "moderation"})],
        )

        provider = RunwayVideoProvider("key", "https://api.runwayml.com/v1", _policy(), sleep=Mock())
        with pytest.raises(ProviderJobError):
            provider.generate(_job())

    @patch("httpx.Client")
    def test_rate_limited_submit_raises(self, mock_client_class):
        mock_client = _mock_client(
            mock_client_class,
            post=httpx.Response(429, json={"error": "too many requests"}),
            gets=[],
        )

        provider = RunwayVideoProvider("key", "https://api.runwayml.com/v1", _policy(), sleep=Mock())
        with pytest.raises(RateLimitError):
            provider.generate(_job())
        mock_client.get.assert_not_called()


def test_base_provider_requires_submit_and_check():
    with pytest.raises(TypeError):
        PollingVideoProvider("key", "https://video.example")

    class SubmitOnly(PollingVideoProvider):
        def _submit(self, client, job):
            return None

    with pytest.raises(TypeError):
        SubmitOnly("key", "https://video.example")
