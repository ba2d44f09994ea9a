"""Image analysis endpoints.

`/analyze-image` blocks until the camera-movement suggestion is ready.
`/prompt-analysis` is two-phase: it returns the prediction id right away and
the frontend reads progress from `/predictions/{id}`.
"""
from __future__ import annotations

from fastapi import APIRouter, Depends

from ..config import get_settings
from ..deps import get_orchestrator
from ..models import ImageAnalysisResponse, ImageRequest, PredictionStarted, PredictionView
from ..services.orchestration.catalog import image_analysis_job, prompt_analysis_job
from ..services.orchestration.runner import JobOrchestrator

router = APIRouter(tags=["analysis"])


@router.post("/analyze-image", response_model=ImageAnalysisResponse)
async def analyze_image(
    payload: ImageRequest,
    orchestrator: JobOrchestrator = Depends(get_orchestrator),
) -> ImageAnalysisResponse:
    settings = get_settings()
    result = await orchestrator.run(image_analysis_job(settings, payload.imageUrl))
    return ImageAnalysisResponse(
        analysis=result.output,
        model=settings.CAMERA_ANALYSIS_MODEL,
        predictionId=result.prediction_id,
    )


@router.post("/prompt-analysis", response_model=PredictionStarted)
async def start_prompt_analysis(
    payload: ImageRequest,
    orchestrator: JobOrchestrator = Depends(get_orchestrator),
) -> PredictionStarted:
    created = await orchestrator.start(prompt_analysis_job(get_settings(), payload.imageUrl))
    return PredictionStarted(id=created.id, status=created.status.value)


@router.get("/predictions/{prediction_id}", response_model=PredictionView)
async def get_prediction(
    prediction_id: str,
    orchestrator: JobOrchestrator = Depends(get_orchestrator),
) -> PredictionView:
    """Single status read, no polling."""
    status = await orchestrator.status(prediction_id)
    return PredictionView(id=status.id, status=status.status.value, output=status.output, error=status.error)
