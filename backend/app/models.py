"""Pydantic models for API requests and responses."""
from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, Field


class Region(BaseModel):
    """Axis-aligned rectangle in normalized [0, 1] image coordinates.

    Values outside the unit square are accepted and simply match fewer spans.
    """

    x: float
    y: float
    width: float
    height: float


class AvatarRequest(BaseModel):
    imageUrl: Optional[str] = None
    audioUrl: Optional[str] = None


class AvatarResponse(BaseModel):
    avatarVideoUrl: Any
    predictionId: str


class EditRequest(BaseModel):
    imageUrl: Optional[str] = None
    prompt: Optional[str] = None
    editType: Optional[str] = Field(default=None, description="'object-remover' or any enhancement type")


class EditResponse(BaseModel):
    editedImageUrl: Any
    predictionId: str


class VoiceCloneRequest(BaseModel):
    scriptText: Optional[str] = None
    speakerUrl: Optional[str] = None


class VoiceCloneResponse(BaseModel):
    voiceCloneUrl: Any
    predictionId: str


class VideoGenerationRequest(BaseModel):
    imageUrl: Optional[str] = None
    prompt: Optional[str] = None


class ImageRequest(BaseModel):
    """Endpoints that only need an image reference."""

    imageUrl: Optional[str] = None


class OcrResponse(BaseModel):
    textData: Any


class OcrRegionRequest(BaseModel):
    imageUrl: Optional[str] = None
    region: Optional[Region] = None


class OcrRegionResponse(BaseModel):
    text: str


class ImageAnalysisResponse(BaseModel):
    analysis: str
    model: str
    predictionId: str


class PredictionStarted(BaseModel):
    id: str
    status: str


class PredictionView(BaseModel):
    id: str
    status: str
    output: Any = None
    error: Optional[str] = None


class ErrorBody(BaseModel):
    error: str
    details: Optional[str] = None


class PollingPolicy(BaseModel):
    """Non-sensitive runtime policy exposed to the frontend."""

    intervalSec: float
    maxAttempts: int
    avatarMaxAttempts: int
    voiceCloneMaxAttempts: int
    models: List[str]
