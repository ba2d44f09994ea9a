"""Generation endpoints: talking-avatar video, image editing, voice cloning
and image-to-video.

Thin HTTP layer; the submit/poll/fallback logic lives in the orchestrator.
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from ..config import get_settings
from ..deps import get_orchestrator, get_result_store, get_session_id
from ..models import (
    AvatarRequest,
    AvatarResponse,
    EditRequest,
    EditResponse,
    PredictionStarted,
    VideoGenerationRequest,
    VoiceCloneRequest,
    VoiceCloneResponse,
)
from ..services.firestore import ResultStore
from ..services.orchestration.catalog import avatar_job, edit_job, video_generation_job, voice_clone_job
from ..services.orchestration.runner import JobOrchestrator

router = APIRouter(tags=["generation"])
logger = logging.getLogger(__name__)


@router.post("/avatar", response_model=AvatarResponse)
async def generate_avatar(
    payload: AvatarRequest,
    orchestrator: JobOrchestrator = Depends(get_orchestrator),
    store: ResultStore = Depends(get_result_store),
    session_id: Optional[str] = Depends(get_session_id),
) -> AvatarResponse:
    """Animate a portrait with a voice track; blocks until the video is ready."""
    spec = avatar_job(get_settings(), payload.imageUrl, payload.audioUrl)
    result = await orchestrator.run(spec)
    store.save_result("avatar", result, session_id=session_id)
    return AvatarResponse(avatarVideoUrl=result.output, predictionId=result.prediction_id)


@router.post("/edit", response_model=EditResponse)
async def edit_image(
    payload: EditRequest,
    orchestrator: JobOrchestrator = Depends(get_orchestrator),
    store: ResultStore = Depends(get_result_store),
    session_id: Optional[str] = Depends(get_session_id),
) -> EditResponse:
    """Enhance an image, or remove an object when editType is 'object-remover'."""
    spec = edit_job(get_settings(), payload.imageUrl, payload.prompt, payload.editType)
    result = await orchestrator.run(spec)
    store.save_result("edit", result, session_id=session_id)
    return EditResponse(editedImageUrl=result.output, predictionId=result.prediction_id)


@router.post("/voice-clone", response_model=VoiceCloneResponse)
async def clone_voice(
    payload: VoiceCloneRequest,
    orchestrator: JobOrchestrator = Depends(get_orchestrator),
    store: ResultStore = Depends(get_result_store),
    session_id: Optional[str] = Depends(get_session_id),
) -> VoiceCloneResponse:
    spec = voice_clone_job(get_settings(), payload.scriptText, payload.speakerUrl)
    result = await orchestrator.run(spec)
    store.save_result("voice-clone", result, session_id=session_id)
    return VoiceCloneResponse(voiceCloneUrl=result.output, predictionId=result.prediction_id)


@router.post("/video-generation", response_model=PredictionStarted)
async def start_video_generation(
    payload: VideoGenerationRequest,
    orchestrator: JobOrchestrator = Depends(get_orchestrator),
) -> PredictionStarted:
    """Start the clip and return at once; progress is read from /predictions/{id}."""
    created = await orchestrator.start(video_generation_job(get_settings(), payload.imageUrl, payload.prompt))
    return PredictionStarted(id=created.id, status=created.status.value)
