from __future__ import annotations

"""Domain-specific exceptions for service and orchestration layers.

Every job-level failure derives from `JobOrchestrationError` and is scoped to
a single request. `main.py` translates them to JSON error bodies.
"""

from typing import Optional


class ConfigurationError(Exception):
    """Missing or invalid process configuration (raised at startup)."""


class ProviderRejectedError(Exception):
    """Provider refused a job-creation call (non-2xx or network failure).

    Internal to the submitter; callers only ever see `SubmissionFailedError`.
    """

    def __init__(self, status_code: Optional[int], body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"{status_code}: {body}" if status_code else body)


class JobOrchestrationError(Exception):
    """Base class for failures of one orchestrated job (maps to HTTP 500)."""

    status_code: int = 500
    public_message: str = "Job processing failed"

    def __init__(self, message: str = "", *, details: Optional[str] = None) -> None:
        self.details = details
        super().__init__(message or self.public_message)


class InvalidInputError(JobOrchestrationError):
    """Missing or empty mandatory field; no network call was made (HTTP 400)."""

    status_code = 400
    public_message = "Invalid input"


class SubmissionFailedError(JobOrchestrationError):
    """Both the primary and the fallback job-creation calls were rejected."""

    public_message = "Failed to start job"

    def __init__(self, primary_error: str, fallback_error: Optional[str] = None) -> None:
        self.primary_error = primary_error
        self.fallback_error = fallback_error
        details = f"primary: {primary_error}"
        if fallback_error is not None:
            details += f"; fallback: {fallback_error}"
        super().__init__(self.public_message, details=details)


class PollTransportError(JobOrchestrationError):
    """Network error, non-2xx, or undecodable body during a status check."""

    public_message = "Failed to check job status"


class JobFailedError(JobOrchestrationError):
    """Provider reported the job as failed."""

    public_message = "Job failed"

    def __init__(self, provider_error: Optional[str] = None) -> None:
        self.provider_error = provider_error
        super().__init__(self.public_message, details=provider_error or "Unknown error")


class JobCancelledError(JobOrchestrationError):
    """Provider reported the job as cancelled."""

    public_message = "Job was cancelled"


class JobTimeoutError(JobOrchestrationError):
    """Attempt budget exhausted before the job reached a terminal state."""

    public_message = "Job timed out"

    def __init__(self, attempts: int, interval_sec: float) -> None:
        self.attempts = attempts
        super().__init__(
            self.public_message,
            details=f"no terminal state after {attempts} polls ({attempts * interval_sec:g}s)",
        )


class PersistenceError(JobOrchestrationError):
    """Final result could not be written back to the results store."""

    public_message = "Failed to store job result"
