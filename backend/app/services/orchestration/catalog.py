"""Job definitions for each generation endpoint.

Each factory validates its inputs before anything touches the network and
returns a `JobSpec` with the primary request, the reduced fallback (if the
endpoint has one) and the post-processor for the output.
"""
from __future__ import annotations

from functools import partial
from typing import Optional

from ...config import Settings
from ...exceptions import InvalidInputError
from ...models import Region
from .job_types import JobRequest
from .postprocess import filter_text_in_region, join_text_output
from .runner import JobSpec
from .submitter import require_fields

OBJECT_REMOVER = "object-remover"

CAMERA_ANALYSIS_PROMPT = (
    "Analyze this picture and describe what camera movement would be the best to turn this "
    "image into a video, while still staying in the bounds of the original video, not adding "
    "or removing anything but still making it captivating"
)
CAMERA_ANALYSIS_SYSTEM_PROMPT = "you are a expert ai image to video prompt generator"


def avatar_job(settings: Settings, image_url: Optional[str], audio_url: Optional[str]) -> JobSpec:
    """Talking-avatar video from a portrait and a voice track.

    The fallback drops the optional captions/duration/resolution parameters,
    which some model versions reject.
    """
    require_fields({"imageUrl": image_url, "audioUrl": audio_url}, "imageUrl", "audioUrl")
    primary = JobRequest(
        model=settings.AVATAR_MODEL,
        input={
            "image": image_url,
            "audio": audio_url,
            "captions": True,
            "duration": 10,
            "resolution": "720p",
        },
    )
    fallback = JobRequest(
        model=settings.AVATAR_MODEL,
        input={"image": image_url, "audio": audio_url},
        is_fallback=True,
    )
    return JobSpec(
        name="avatar",
        build_request=lambda: primary,
        build_fallback=lambda: fallback,
        max_attempts=settings.AVATAR_POLL_MAX_ATTEMPTS,
    )


def edit_job(settings: Settings, image_url: Optional[str], prompt: Optional[str], edit_type: Optional[str] = None) -> JobSpec:
    """Enhance an image, or remove an object with the removal engine.

    The fallback stays on the same engine and keeps only the image and prompt.
    """
    require_fields({"imageUrl": image_url, "prompt": prompt}, "imageUrl", "prompt")
    if edit_type == OBJECT_REMOVER:
        primary = JobRequest(
            model=settings.EDIT_REMOVE_MODEL,
            input={
                "prompt": prompt,
                "input_image": image_url,
                "aspect_ratio": "match_input_image",
                "output_format": "jpg",
                "safety_tolerance": 2,
                "prompt_upsampling": True,
            },
        )
        fallback = JobRequest(
            model=settings.EDIT_REMOVE_MODEL,
            input={"prompt": prompt, "input_image": image_url},
            is_fallback=True,
        )
    else:
        primary = JobRequest(
            model=settings.EDIT_ENHANCE_MODEL,
            input={
                "image": image_url,
                "prompt": prompt,
                "negative_prompt": "blurry, low quality, distorted",
                "guidance_scale": 7.5,
                "num_inference_steps": 20,
            },
        )
        fallback = JobRequest(
            model=settings.EDIT_ENHANCE_MODEL,
            input={"image": image_url, "prompt": prompt},
            is_fallback=True,
        )
    return JobSpec(name="edit", build_request=lambda: primary, build_fallback=lambda: fallback)


def _ocr_request(settings: Settings, image_url: str) -> JobRequest:
    return JobRequest(model=settings.OCR_MODEL, input={"image": image_url, "format": "json"})


def ocr_job(settings: Settings, image_url: Optional[str]) -> JobSpec:
    require_fields({"imageUrl": image_url}, "imageUrl")
    return JobSpec(name="ocr", build_request=partial(_ocr_request, settings, image_url), prefer_wait=True)


def ocr_region_job(settings: Settings, image_url: Optional[str], region: Optional[Region]) -> JobSpec:
    require_fields({"imageUrl": image_url}, "imageUrl")
    if region is None:
        raise InvalidInputError("imageUrl and region are required", details="region")
    return JobSpec(
        name="ocr-region",
        build_request=partial(_ocr_request, settings, image_url),
        post_process=partial(filter_text_in_region, region=region),
        prefer_wait=True,
    )


def image_analysis_job(settings: Settings, image_url: Optional[str]) -> JobSpec:
    """Camera-movement suggestion for turning a still into a video."""
    require_fields({"imageUrl": image_url}, "imageUrl")
    request = JobRequest(
        model=settings.CAMERA_ANALYSIS_MODEL,
        input={
            "top_p": 1,
            "prompt": CAMERA_ANALYSIS_PROMPT,
            "messages": [],
            "image_input": [image_url],
            "temperature": 1,
            "system_prompt": CAMERA_ANALYSIS_SYSTEM_PROMPT,
            "presence_penalty": 0,
            "frequency_penalty": 0,
            "max_completion_tokens": 4096,
        },
    )
    return JobSpec(
        name="analyze-image",
        build_request=lambda: request,
        post_process=join_text_output,
        prefer_wait=True,
    )


def prompt_analysis_job(settings: Settings, image_url: Optional[str]) -> JobSpec:
    require_fields({"imageUrl": image_url}, "imageUrl")
    request = JobRequest(model=settings.IMG2PROMPT_MODEL, input={"image": image_url})
    return JobSpec(name="prompt-analysis", build_request=lambda: request)


def voice_clone_job(settings: Settings, script_text: Optional[str], speaker_url: Optional[str]) -> JobSpec:
    """Read `script_text` aloud in the voice of the speaker sample."""
    require_fields({"scriptText": script_text, "speakerUrl": speaker_url}, "scriptText", "speakerUrl")
    request = JobRequest(
        model=settings.VOICE_CLONE_MODEL,
        input={
            "text": script_text,
            "speaker": speaker_url,
            "language": "en",
            "cleanup_voice": False,
        },
    )
    return JobSpec(
        name="voice-clone",
        build_request=lambda: request,
        max_attempts=settings.VOICE_CLONE_POLL_MAX_ATTEMPTS,
    )


def video_generation_job(settings: Settings, image_url: Optional[str], prompt: Optional[str]) -> JobSpec:
    """Five-second clip animated from a still; started, then polled by the caller."""
    require_fields({"imageUrl": image_url, "prompt": prompt}, "imageUrl", "prompt")
    request = JobRequest(model=settings.VIDEO_MODEL, input={"image": image_url, "prompt": prompt, "duration": 5})
    return JobSpec(name="video-generation", build_request=lambda: request)
