"""Shared pytest fixtures for Property Studio tests."""

from __future__ import annotations

from typing import Any, Iterable, List, Optional

import pytest

from app.config import Settings, get_settings
from app.services.orchestration.job_types import JobRequest, JobStatus
from app.services.orchestration.runner import JobOrchestrator


def status(job_id: str, state: str, output: Any = None, error: Optional[str] = None) -> JobStatus:
    """Build a provider status record."""
    return JobStatus(id=job_id, status=state, output=output, error=error)


class ScriptedProvider:
    """In-memory provider that replays scripted create/get results.

    Each scripted item is either a JobStatus to return or an exception to raise.
    Every call is recorded so tests can assert on exact call counts.
    """

    def __init__(self, creates: Iterable[Any] = (), polls: Iterable[Any] = ()) -> None:
        self._creates = list(creates)
        self._polls = list(polls)
        self.create_calls: List[tuple[JobRequest, bool]] = []
        self.get_calls: List[str] = []
        self.cancel_calls: List[str] = []
        self.cancel_error: Optional[Exception] = None

    async def create(self, request: JobRequest, *, prefer_wait: bool = False) -> JobStatus:
        self.create_calls.append((request, prefer_wait))
        item = self._creates.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    async def get(self, prediction_id: str) -> JobStatus:
        self.get_calls.append(prediction_id)
        if not self._polls:
            raise AssertionError("poll made after the script ran out")
        item = self._polls.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    async def cancel(self, prediction_id: str) -> None:
        self.cancel_calls.append(prediction_id)
        if self.cancel_error is not None:
            raise self.cancel_error

    async def aclose(self) -> None:
        return None


class RecordingSleep:
    """Stand-in for asyncio.sleep that records delays instead of waiting."""

    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def settings(monkeypatch) -> Settings:
    """Settings built from a clean, explicit environment."""
    monkeypatch.setenv("REPLICATE_API_TOKEN", "r8_test_token")
    monkeypatch.setenv("POLL_INTERVAL_SEC", "2")
    monkeypatch.setenv("POLL_MAX_ATTEMPTS", "120")
    monkeypatch.setenv("AVATAR_POLL_MAX_ATTEMPTS", "120")
    monkeypatch.setenv("VOICE_CLONE_POLL_MAX_ATTEMPTS", "60")
    monkeypatch.setenv("RESULTS_PERSIST_ENABLE", "false")
    get_settings.cache_clear()
    yield get_settings()
    get_settings.cache_clear()


@pytest.fixture
def make_orchestrator(sleep: RecordingSleep):
    """Factory for an orchestrator wired to a ScriptedProvider."""

    def _make(provider: ScriptedProvider, *, max_attempts: int = 120, max_concurrency: int = 8) -> JobOrchestrator:
        return JobOrchestrator(
            provider,  # type: ignore[arg-type]
            interval_sec=2,
            max_attempts=max_attempts,
            max_concurrency=max_concurrency,
            sleep=sleep,
        )

    return _make
