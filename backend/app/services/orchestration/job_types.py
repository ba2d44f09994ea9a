"""Job records exchanged between the submitter, the poller and the provider client."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional

from pydantic import BaseModel, field_validator


class JobState(str, Enum):
    STARTING = "starting"
    PROCESSING = "processing"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        return self in _TERMINAL


_TERMINAL = {JobState.SUCCEEDED, JobState.FAILED, JobState.CANCELLED}


@dataclass(frozen=True)
class JobRequest:
    """One job-creation call: model identifier plus its input payload."""

    model: str
    input: Mapping[str, Any] = field(default_factory=dict)
    is_fallback: bool = False

    def __post_init__(self) -> None:
        # Read-only view so the payload cannot change after construction
        object.__setattr__(self, "input", MappingProxyType(dict(self.input)))

    def payload(self) -> dict:
        return dict(self.input)


class JobStatus(BaseModel):
    """Provider's view of a job, as returned by create and each poll."""

    id: str
    status: JobState
    output: Any = None
    error: Optional[str] = None

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> Any:
        # The provider spells it "canceled"
        if isinstance(value, str):
            value = value.strip().lower()
            if value == "canceled":
                return JobState.CANCELLED.value
        return value

    @field_validator("error", mode="before")
    @classmethod
    def _stringify_error(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal


@dataclass(frozen=True)
class JobHandle:
    """A submitted, still-running job. Lives for one request only."""

    id: str
    created_status: JobState
    used_fallback: bool = False

    @classmethod
    def from_status(cls, status: JobStatus, *, used_fallback: bool = False) -> "JobHandle":
        if status.is_terminal:
            raise ValueError(f"job {status.id} is already {status.status.value}")
        return cls(id=status.id, created_status=status.status, used_fallback=used_fallback)
