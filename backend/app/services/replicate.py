"""Replicate predictions client: create, get and cancel over httpx.

Async so the event loop keeps serving other requests while a job is in
flight. Status reads and cancels are idempotent and get lightweight retries
via tenacity for transient network and 429/5xx responses. Creation is never
retried here; the submitter owns the single fallback attempt.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx
from pydantic import ValidationError
from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    stop_after_attempt,
    wait_random_exponential,
)

from ..exceptions import PollTransportError, ProviderRejectedError
from .orchestration.job_types import JobRequest, JobStatus

logger = logging.getLogger(__name__)


# Retry predicate: network errors, timeouts, and 429/5xx HTTP errors
def _is_retryable(exc: BaseException) -> bool:  # pragma: no cover - simple predicate
    if isinstance(exc, (httpx.RequestError, httpx.TimeoutException)):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        return status == 429 or 500 <= status < 600
    return False


def split_model_identifier(model: str) -> tuple[Optional[str], Optional[str]]:
    """Split `owner/name[:version]` into (model path, version).

    A bare version hash yields (None, hash); `owner/name` yields
    (`owner/name`, None) and is served by the model's own predictions route.
    """
    model = model.strip()
    if ":" in model:
        path, version = model.split(":", 1)
        return path or None, version
    if "/" in model:
        return model, None
    return None, model


class ReplicateClient:
    def __init__(
        self,
        api_token: str,
        *,
        base_url: str = "https://api.replicate.com/v1",
        timeout: float = 90.0,
        wait_sec: int = 60,
        get_attempts: int = 3,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not api_token:
            raise ValueError("api_token is required")
        self._token = api_token
        self.base_url = base_url.rstrip("/")
        self.wait_sec = wait_sec
        self.get_attempts = max(1, get_attempts)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout, connect=5.0))

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    def _headers(self, *, prefer_wait: bool = False) -> Dict[str, str]:
        headers = {
            "Authorization": f"Bearer {self._token}",
            "Content-Type": "application/json",
        }
        if prefer_wait:
            headers["Prefer"] = f"wait={self.wait_sec}"
        return headers

    def _create_target(self, request: JobRequest) -> tuple[str, Dict[str, Any]]:
        path, version = split_model_identifier(request.model)
        if version is None:
            return f"{self.base_url}/models/{path}/predictions", {"input": request.payload()}
        return f"{self.base_url}/predictions", {"version": version, "input": request.payload()}

    async def create(self, request: JobRequest, *, prefer_wait: bool = False) -> JobStatus:
        """POST a new prediction. Raises ProviderRejectedError on any failure."""
        url, body = self._create_target(request)
        try:
            resp = await self._client.post(url, headers=self._headers(prefer_wait=prefer_wait), json=body)
        except httpx.RequestError as exc:
            raise ProviderRejectedError(None, f"network error: {exc}") from exc
        if resp.is_error:
            raise ProviderRejectedError(resp.status_code, resp.text)
        try:
            return JobStatus.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            raise ProviderRejectedError(resp.status_code, f"unexpected response: {exc}") from exc

    async def _request_with_retries(self, method: str, url: str) -> httpx.Response:
        async for attempt in AsyncRetrying(
            reraise=True,
            stop=stop_after_attempt(self.get_attempts),
            wait=wait_random_exponential(multiplier=0.2, max=5),
            retry=retry_if_exception(_is_retryable),
        ):
            with attempt:
                resp = await self._client.request(method, url, headers=self._headers())
                resp.raise_for_status()
        return resp

    async def get(self, prediction_id: str) -> JobStatus:
        """Read the current status of a prediction. Raises PollTransportError."""
        url = f"{self.base_url}/predictions/{prediction_id}"
        try:
            resp = await self._request_with_retries("GET", url)
        except httpx.HTTPStatusError as exc:
            raise PollTransportError(
                "Status check rejected",
                details=f"{exc.response.status_code}: {exc.response.text}",
            ) from exc
        except httpx.RequestError as exc:
            raise PollTransportError("Status check failed", details=str(exc)) from exc
        try:
            return JobStatus.model_validate(resp.json())
        except (ValueError, ValidationError) as exc:
            logger.error("[%s] undecodable status body: %s", prediction_id, resp.text[:500])
            raise PollTransportError("Malformed status response", details=str(exc)) from exc

    async def cancel(self, prediction_id: str) -> None:
        url = f"{self.base_url}/predictions/{prediction_id}/cancel"
        await self._request_with_retries("POST", url)
