"""Polling loop for long-running provider jobs."""

from __future__ import annotations

import logging
import random
import threading
import time
from dataclasses import dataclass
from typing import Callable, Optional

from app.domain.dto import JobStatus, ProviderJob
from app.domain.errors import PollingCancelledError, ProviderJobError, ProviderTimeoutError


@dataclass(frozen=True)
class PollingPolicy:
    """How often and for how long to poll a provider job.

    The defaults reproduce a fixed interval; ``backoff_factor`` > 1 and
    ``jitter_seconds`` > 0 turn it into exponential backoff with jitter.
    """

    interval_seconds: float = 10.0
    max_attempts: int = 30
    backoff_factor: float = 1.0
    max_interval_seconds: float = 60.0
    jitter_seconds: float = 0.0
    deadline_seconds: Optional[float] = None

    def delay_for(self, attempt: int, rng: random.Random) -> float:
        delay = self.interval_seconds * (self.backoff_factor ** attempt)
        delay = min(delay, max(self.max_interval_seconds, self.interval_seconds))
        if self.jitter_seconds > 0:
            delay += rng.uniform(0, self.jitter_seconds)
        return delay


class JobPoller:
    """Sleep, check, repeat until the job is done, failed, out of attempts or past its deadline."""

    def __init__(
        self,
        policy: PollingPolicy,
        *,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._policy = policy
        self._sleep = sleep
        self._clock = clock
        self._rng = rng or random.Random()
        self._logger = logger or logging.getLogger(__name__)

    @property
    def policy(self) -> PollingPolicy:
        return self._policy

    def wait(
        self,
        check: Callable[[], ProviderJob],
        *,
        provider: str,
        cancel_event: Optional[threading.Event] = None,
    ) -> ProviderJob:
        """Run ``check`` until it reports a terminal status and return the finished job."""
        policy = self._policy
        started = self._clock()

        for attempt in range(policy.max_attempts):
            delay = policy.delay_for(attempt, self._rng)
            if policy.deadline_seconds is not None:
                remaining = policy.deadline_seconds - (self._clock() - started)
                if remaining <= 0:
                    break
                delay = min(delay, remaining)

            if cancel_event is not None:
                if cancel_event.wait(delay):
                    raise PollingCancelledError(f"{provider} polling cancelled", provider=provider)
            else:
                self._sleep(delay)

            job = check()
            self._logger.info(
                "%s job %s status: %s (attempt %d/%d)",
                provider, job.job_id, job.status.value, attempt + 1, policy.max_attempts,
            )
            if job.status == JobStatus.DONE:
                return job
            if job.status == JobStatus.ERROR:
                raise ProviderJobError(
                    f"{provider} video generation failed", provider=provider, detail=job.detail
                )

        raise ProviderTimeoutError(f"{provider} video generation timed out", provider=provider)


__all__ = ["JobPoller", "PollingPolicy"]
