from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, Protocol

from ...exceptions import InvalidInputError, ProviderRejectedError, SubmissionFailedError
from .job_types import JobRequest, JobStatus

logger = logging.getLogger(__name__)

RequestBuilder = Callable[[], JobRequest]


class PredictionCreator(Protocol):
    async def create(self, request: JobRequest, *, prefer_wait: bool = False) -> JobStatus: ...


def require_fields(params: Mapping[str, Any], *names: str) -> None:
    """Raise InvalidInputError if any of `names` is absent, None or blank."""
    missing = []
    for name in names:
        value = params.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            missing.append(name)
    if missing:
        raise InvalidInputError(f"Missing {' or '.join(missing)}", details=", ".join(missing))


class JobSubmitter:
    """Creates a job, falling back to a reduced request exactly once."""

    def __init__(self, provider: PredictionCreator) -> None:
        self._provider = provider

    async def submit(
        self,
        build_primary: RequestBuilder,
        build_fallback: Optional[RequestBuilder] = None,
        *,
        prefer_wait: bool = False,
    ) -> tuple[JobStatus, bool]:
        """Return the creation status and whether the fallback request was used."""
        primary = build_primary()
        try:
            return await self._provider.create(primary, prefer_wait=prefer_wait), False
        except ProviderRejectedError as exc:
            primary_error = str(exc)

        if build_fallback is None:
            logger.error("Submission of %s rejected: %s", primary.model, primary_error)
            raise SubmissionFailedError(primary_error)

        fallback = build_fallback()
        logger.warning(
            "Primary submission of %s rejected (%s); trying fallback %s",
            primary.model,
            primary_error,
            fallback.model,
        )
        try:
            created = await self._provider.create(fallback, prefer_wait=prefer_wait)
        except ProviderRejectedError as exc:
            logger.error("Fallback submission of %s also rejected: %s", fallback.model, exc)
            raise SubmissionFailedError(primary_error, str(exc))
        logger.info("[%s] fallback submission accepted", created.id)
        return created, True
