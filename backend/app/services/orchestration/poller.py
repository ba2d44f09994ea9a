from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Protocol

import httpx

from ...exceptions import JobCancelledError, JobFailedError, JobTimeoutError, PollTransportError
from .job_types import JobHandle, JobState, JobStatus

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class PredictionReader(Protocol):
    async def get(self, prediction_id: str) -> JobStatus: ...

    async def cancel(self, prediction_id: str) -> None: ...


def raise_for_terminal_failure(status: JobStatus) -> None:
    """Translate a failed/cancelled terminal status into its domain error."""
    if status.status is JobState.FAILED:
        raise JobFailedError(status.error)
    if status.status is JobState.CANCELLED:
        raise JobCancelledError(details=status.error)


class JobPoller:
    """Polls a job at a fixed interval until it is terminal or the budget runs out.

    Each attempt waits `interval_sec` and then issues one status read; no read
    is made after the first terminal observation. On exhausting the budget the
    remote job is cancelled (best-effort) and JobTimeoutError is raised.
    """

    def __init__(
        self,
        provider: PredictionReader,
        *,
        interval_sec: float = 2.0,
        max_attempts: int = 120,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self._provider = provider
        self.interval_sec = interval_sec
        self.max_attempts = max_attempts
        self._sleep = sleep
        self.polls = 0

    async def wait(self, handle: JobHandle) -> JobStatus:
        """Return the succeeded status, or raise the matching domain error."""
        status = handle.created_status
        for attempt in range(1, self.max_attempts + 1):
            await self._sleep(self.interval_sec)
            result = await self._provider.get(handle.id)
            self.polls = attempt
            if result.id != handle.id:
                raise PollTransportError(
                    "Status response for a different job", details=f"expected {handle.id}, got {result.id}"
                )
            if result.status is not status:
                logger.info("[%s] %s -> %s", handle.id, status.value, result.status.value)
            status = result.status
            logger.debug("[%s] attempt %d/%d, status: %s", handle.id, attempt, self.max_attempts, status.value)

            if result.status is JobState.SUCCEEDED:
                return result
            if result.is_terminal:
                logger.error("[%s] job ended %s: %s", handle.id, status.value, result.error)
                raise_for_terminal_failure(result)

        logger.warning("[%s] no terminal state after %d polls; cancelling", handle.id, self.max_attempts)
        await self._cancel_quietly(handle.id)
        raise JobTimeoutError(self.max_attempts, self.interval_sec)

    async def _cancel_quietly(self, prediction_id: str) -> None:
        # Cancel failure must not mask the timeout
        try:
            await self._provider.cancel(prediction_id)
        except (httpx.HTTPError, PollTransportError) as exc:
            logger.warning("[%s] cancel after timeout failed: %s", prediction_id, exc)
        else:
            logger.info("[%s] cancel requested after timeout", prediction_id)
