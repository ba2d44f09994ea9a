"""FastAPI dependencies (session header parsing, shared services)."""
from __future__ import annotations

import re
from typing import Optional

from fastapi import Header, HTTPException, Request

from .services.firestore import ResultStore
from .services.orchestration.runner import JobOrchestrator

_SESSION_RE = re.compile(r"^[0-9a-fA-F-]{36}$")


def get_session_id(x_session_id: Optional[str] = Header(default=None, alias="X-Session-Id")) -> Optional[str]:
    """Return the optional session ID from the `X-Session-Id` header.

    The frontend generates a UUID v4 per page load; it is only used to
    attribute stored results. Absent is fine, malformed is a 400.
    """
    if x_session_id is None:
        return None
    if not _SESSION_RE.match(x_session_id):
        raise HTTPException(status_code=400, detail="Invalid X-Session-Id header")
    return x_session_id


def get_orchestrator(request: Request) -> JobOrchestrator:
    """Process-wide orchestrator created in the app lifespan."""
    orchestrator = getattr(request.app.state, "orchestrator", None)
    if orchestrator is None:
        raise HTTPException(status_code=503, detail="Inference provider not configured")
    return orchestrator


def get_result_store(request: Request) -> ResultStore:
    store = getattr(request.app.state, "result_store", None)
    if store is None:
        raise HTTPException(status_code=503, detail="Result store not configured")
    return store
