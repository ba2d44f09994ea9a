"""Runtime config endpoint for frontend consumption."""
from __future__ import annotations

from fastapi import APIRouter

from ..config import get_settings
from ..models import PollingPolicy

router = APIRouter(tags=["config"])


@router.get("/config", response_model=PollingPolicy)
async def get_config() -> PollingPolicy:
    """Expose non-sensitive polling policy and model identifiers."""
    settings = get_settings()
    return PollingPolicy(
        intervalSec=settings.POLL_INTERVAL_SEC,
        maxAttempts=settings.POLL_MAX_ATTEMPTS,
        avatarMaxAttempts=settings.AVATAR_POLL_MAX_ATTEMPTS,
        voiceCloneMaxAttempts=settings.VOICE_CLONE_POLL_MAX_ATTEMPTS,
        models=[
            settings.AVATAR_MODEL,
            settings.EDIT_ENHANCE_MODEL,
            settings.EDIT_REMOVE_MODEL,
            settings.OCR_MODEL,
            settings.IMG2PROMPT_MODEL,
            settings.CAMERA_ANALYSIS_MODEL,
            settings.VOICE_CLONE_MODEL,
            settings.VIDEO_MODEL,
        ],
    )
