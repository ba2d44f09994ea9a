"""Health and readiness endpoints."""
from __future__ import annotations

from datetime import datetime, timezone
from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])


@router.get("/healthz")
async def healthz(request: Request) -> dict:
    """Liveness check; also reports whether the provider client was set up."""
    return {
        "status": "ok",
        "providerConfigured": getattr(request.app.state, "orchestrator", None) is not None,
        "time": datetime.now(timezone.utc).isoformat(),
    }
