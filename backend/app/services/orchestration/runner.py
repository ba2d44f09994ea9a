from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

import httpx

from ...config import Settings
from ..replicate import ReplicateClient
from .job_types import JobHandle, JobState, JobStatus
from .poller import JobPoller, Sleep, raise_for_terminal_failure
from .postprocess import passthrough
from .submitter import JobSubmitter, RequestBuilder

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class JobSpec:
    """Everything that differs between job-submitting endpoints."""

    name: str
    build_request: RequestBuilder
    build_fallback: Optional[RequestBuilder] = None
    post_process: Callable[[Any], Any] = passthrough
    max_attempts: Optional[int] = None
    prefer_wait: bool = False


@dataclass(frozen=True)
class OrchestrationResult:
    prediction_id: str
    output: Any
    used_fallback: bool
    polls: int


class JobOrchestrator:
    """Submit -> poll -> post-process, shared by every job endpoint.

    Holds the process-wide provider client and a semaphore capping concurrent
    in-flight jobs for the credential. No per-job state outlives `run`.
    """

    def __init__(
        self,
        provider: ReplicateClient,
        *,
        interval_sec: float = 2.0,
        max_attempts: int = 120,
        max_concurrency: int = 8,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.provider = provider
        self.interval_sec = interval_sec
        self.max_attempts = max_attempts
        self._slots = asyncio.Semaphore(max_concurrency)
        self._sleep = sleep
        self._submitter = JobSubmitter(provider)

    @classmethod
    def from_settings(cls, settings: Settings, *, client: Optional[httpx.AsyncClient] = None) -> "JobOrchestrator":
        provider = ReplicateClient(
            settings.REPLICATE_API_TOKEN,
            base_url=settings.REPLICATE_API_BASE,
            timeout=settings.PROVIDER_HTTP_TIMEOUT_SEC,
            wait_sec=settings.PROVIDER_WAIT_SEC,
            get_attempts=settings.PROVIDER_GET_ATTEMPTS,
            client=client,
        )
        return cls(
            provider,
            interval_sec=settings.POLL_INTERVAL_SEC,
            max_attempts=settings.POLL_MAX_ATTEMPTS,
            max_concurrency=settings.PROVIDER_MAX_CONCURRENCY,
        )

    async def aclose(self) -> None:
        await self.provider.aclose()

    async def run(self, spec: JobSpec) -> OrchestrationResult:
        async with self._slots:
            created, used_fallback = await self._submitter.submit(
                spec.build_request, spec.build_fallback, prefer_wait=spec.prefer_wait
            )
            logger.info(
                "[%s] %s submitted (status=%s, fallback=%s)",
                created.id,
                spec.name,
                created.status.value,
                used_fallback,
            )

            polls = 0
            if created.status is JobState.SUCCEEDED:
                logger.info("[%s] %s completed synchronously", created.id, spec.name)
                final = created
            elif created.is_terminal:
                raise_for_terminal_failure(created)
            else:
                poller = JobPoller(
                    self.provider,
                    interval_sec=self.interval_sec,
                    max_attempts=spec.max_attempts or self.max_attempts,
                    sleep=self._sleep,
                )
                final = await poller.wait(JobHandle.from_status(created, used_fallback=used_fallback))
                polls = poller.polls

        output = spec.post_process(final.output)
        logger.info("[%s] %s succeeded after %d polls", final.id, spec.name, polls)
        return OrchestrationResult(
            prediction_id=final.id, output=output, used_fallback=used_fallback, polls=polls
        )

    async def start(self, spec: JobSpec) -> JobStatus:
        """Submit only; the caller polls through `status`."""
        async with self._slots:
            created, used_fallback = await self._submitter.submit(
                spec.build_request, spec.build_fallback, prefer_wait=spec.prefer_wait
            )
        logger.info("[%s] %s started (status=%s, fallback=%s)", created.id, spec.name, created.status.value, used_fallback)
        return created

    async def status(self, prediction_id: str) -> JobStatus:
        return await self.provider.get(prediction_id)
