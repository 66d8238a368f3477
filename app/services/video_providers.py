"""Video generation adapters (D-ID, Pika, Runway) built on submit / poll / download."""

from __future__ import annotations

import logging
import random
import re
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional

import httpx

from app.domain.dto import JobStatus, ProviderJob, ProviderOutput, VideoRenderJob
from app.domain.errors import ConfigurationError, ProviderError, ProviderJobError
from app.services.polling import JobPoller, PollingPolicy
from app.services.provider_http import download, parse_json, provider_call, raise_for_provider_status
from app.utils import is_unset_credential

DEFAULT_DURATION_SECONDS = 30


def parse_duration_seconds(duration: Optional[str], default: int = DEFAULT_DURATION_SECONDS) -> int:
    """Pull the first integer out of strings like ``"60 seconds"``."""
    match = re.search(r"(\d+)", duration or "")
    return int(match.group(1)) if match else default


class PollingVideoProvider(ABC):
    """Shared submit → poll → download flow. Subclasses implement ``_submit`` and ``_check``."""

    name = "video"
    max_attempts = 60

    def __init__(
        self,
        api_key: str,
        base_url: str,
        policy: Optional[PollingPolicy] = None,
        *,
        timeout: float = 60.0,
        sleep: Callable[[float], None] = time.sleep,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._api_key = api_key
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._logger = logger or logging.getLogger(__name__)
        self._poller = JobPoller(
            policy or PollingPolicy(max_attempts=self.max_attempts), sleep=sleep, logger=self._logger
        )

    @property
    def is_configured(self) -> bool:
        return not is_unset_credential(self._api_key)

    def generate(self, job: VideoRenderJob, *, cancel_event: Optional[threading.Event] = None) -> ProviderOutput:
        if not self.is_configured:
            raise ConfigurationError(f"{self.name} API key is not configured", provider=self.name)

        self._logger.info("Generating video with %s for %s", self.name, job.brand_name)
        with httpx.Client(timeout=self._timeout) as client:
            submitted = self._submit(client, job)
            self._logger.info("%s job created with ID: %s", self.name, submitted.job_id)

            finished = self._poller.wait(
                lambda: self._check(client, submitted.job_id),
                provider=self.name,
                cancel_event=cancel_event,
            )
            if not finished.result_url:
                raise ProviderJobError(f"{self.name} job finished without a result URL", provider=self.name)

            video = download(client, finished.result_url, self.name)

        return ProviderOutput(binary=video, source_url=finished.result_url, content_type="video/mp4")

    @abstractmethod
    def _submit(self, client: httpx.Client, job: VideoRenderJob) -> ProviderJob:
        """Create the remote job."""

    @abstractmethod
    def _check(self, client: httpx.Client, job_id: str) -> ProviderJob:
        """Fetch the current state of a remote job."""

    def _auth_header(self) -> str:
        return f"Bearer {self._api_key}"

    def _post(self, client: httpx.Client, path: str, body: Dict[str, Any]) -> Dict[str, Any]:
        headers = {"Authorization": self._auth_header(), "Content-Type": "application/json"}
        with provider_call(self.name):
            response = client.post(f"{self._base_url}{path}", headers=headers, json=body)
        raise_for_provider_status(response, self.name)
        return parse_json(response, self.name)

    def _get(self, client: httpx.Client, path: str) -> Dict[str, Any]:
        with provider_call(self.name):
            response = client.get(f"{self._base_url}{path}", headers={"Authorization": self._auth_header()})
        raise_for_provider_status(response, self.name)
        return parse_json(response, self.name)

    def _job_id(self, data: Dict[str, Any]) -> str:
        job_id = data.get("id")
        if not job_id:
            raise ProviderError(f"{self.name} did not return a job id", provider=self.name)
        return str(job_id)


class DIDVideoProvider(PollingVideoProvider):
    """D-ID talking-head videos."""

    name = "d-id"
    max_attempts = 30
    max_script_length = 1000

    PRESENTER_IMAGES = {
        "professional": "https://create-images.d-id.com/api/v1/images/default_presenter_m",
        "casual": "https://create-images.d-id.com/api/v1/images/default_presenter_f",
        "corporate": "https://create-images.d-id.com/api/v1/images/default_presenter_m_corporate",
        "creative": "https://create-images.d-id.com/api/v1/images/default_presenter_f_creative",
    }
    DEFAULT_VOICE = "en-US-JennyNeural"

    def _auth_header(self) -> str:
        return f"Basic {self._api_key}"

    @classmethod
    def presenter_image_url(cls, style: Optional[str]) -> str:
        return cls.PRESENTER_IMAGES.get(style or "professional", cls.PRESENTER_IMAGES["professional"])

    def _submit(self, client: httpx.Client, job: VideoRenderJob) -> ProviderJob:
        body = {
            "script": {
                "type": "text",
                "subtitles": False,
                "provider": {"type": "microsoft", "voice_id": job.voice_id or self.DEFAULT_VOICE},
                "input": job.script[: self.max_script_length],
            },
            "source_url": self.presenter_image_url(job.style),
            "config": {
                "fluent": True,
                "pad_audio": 0.0,
                "driver_expressions": {
                    "expressions": [
                        {"start_frame": 0, "expression": "neutral", "intensity": 1.0},
                        {"start_frame": 10, "expression": "happy", "intensity": 0.8},
                    ]
                },
            },
        }
        return ProviderJob(job_id=self._job_id(self._post(client, "/talks", body)))

    def _check(self, client: httpx.Client, job_id: str) -> ProviderJob:
        data = self._get(client, f"/talks/{job_id}")
        status = data.get("status")
        if status == "done":
            return ProviderJob(job_id=job_id, status=JobStatus.DONE, result_url=data.get("result_url"))
        if status in ("error", "rejected"):
            return ProviderJob(job_id=job_id, status=JobStatus.ERROR, detail=str(data.get("error") or status))
        return ProviderJob(job_id=job_id)


class PikaVideoProvider(PollingVideoProvider):
    """Pika text-to-video."""

    name = "pika"
    max_attempts = 60

    def __init__(self, *args: Any, rng: Optional[random.Random] = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._rng = rng or random.Random()

    def _submit(self, client: httpx.Client, job: VideoRenderJob) -> ProviderJob:
        body = {
            "prompt": job.prompt,
            "aspect_ratio": "16:9",
            "duration": job.duration_seconds,
            "style": job.style or "realistic",
            "seed": self._rng.randint(0, 999_999),
        }
        return ProviderJob(job_id=self._job_id(self._post(client, "/generate", body)))

    def _check(self, client: httpx.Client, job_id: str) -> ProviderJob:
        data = self._get(client, f"/generate/{job_id}")
        status = data.get("status")
        if status == "completed":
            result = data.get("result") or {}
            return ProviderJob(job_id=job_id, status=JobStatus.DONE, result_url=result.get("video_url"))
        if status == "failed":
            return ProviderJob(job_id=job_id, status=JobStatus.ERROR, detail=str(data.get("error") or status))
        return ProviderJob(job_id=job_id)


class RunwayVideoProvider(PollingVideoProvider):
    """Runway text-to-video."""

    name = "runway"
    max_attempts = 60

    def _submit(self, client: httpx.Client, job: VideoRenderJob) -> ProviderJob:
        body = {
            "prompt": job.prompt,
            "duration": job.duration_seconds,
            "resolution": "1280x720",
            "model": "gen-2",
        }
        return ProviderJob(job_id=self._job_id(self._post(client, "/generate", body)))

    def _check(self, client: httpx.Client, job_id: str) -> ProviderJob:
        data = self._get(client, f"/tasks/{job_id}")
        status = data.get("status")
        if status == "SUCCEEDED":
            output = data.get("output") or []
            return ProviderJob(job_id=job_id, status=JobStatus.DONE, result_url=output[0] if output else None)
        if status == "FAILED":
            return ProviderJob(job_id=job_id, status=JobStatus.ERROR, detail=str(data.get("failure") or status))
        return ProviderJob(job_id=job_id)


__all__ = [
    "DIDVideoProvider",
    "PikaVideoProvider",
    "PollingVideoProvider",
    "RunwayVideoProvider",
    "parse_duration_seconds",
]
