"""Text recognition endpoints: whole image and caller-selected region."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends

from ..config import get_settings
from ..deps import get_orchestrator, get_result_store, get_session_id
from ..models import ImageRequest, OcrRegionRequest, OcrRegionResponse, OcrResponse
from ..services.firestore import ResultStore
from ..services.orchestration.catalog import ocr_job, ocr_region_job
from ..services.orchestration.runner import JobOrchestrator

router = APIRouter(prefix="/ocr", tags=["ocr"])


@router.post("", response_model=OcrResponse)
async def recognize_text(
    payload: ImageRequest,
    orchestrator: JobOrchestrator = Depends(get_orchestrator),
) -> OcrResponse:
    """Return the raw recognized spans (`[{box, text}, ...]`)."""
    result = await orchestrator.run(ocr_job(get_settings(), payload.imageUrl))
    return OcrResponse(textData=result.output)


@router.post("/region", response_model=OcrRegionResponse)
async def recognize_text_in_region(
    payload: OcrRegionRequest,
    orchestrator: JobOrchestrator = Depends(get_orchestrator),
    store: ResultStore = Depends(get_result_store),
    session_id: Optional[str] = Depends(get_session_id),
) -> OcrRegionResponse:
    """Recognize the whole image, then keep only spans overlapping `region`."""
    result = await orchestrator.run(ocr_region_job(get_settings(), payload.imageUrl, payload.region))
    store.save_result("ocr-region", result, session_id=session_id)
    return OcrRegionResponse(text=result.output)
