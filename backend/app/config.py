"""Application settings and configuration helpers."""
from __future__ import annotations

import os
from functools import lru_cache
from typing import List
from dotenv import load_dotenv, find_dotenv

from .exceptions import ConfigurationError


class Settings:
    """Runtime configuration loaded from environment variables.

    Defaults are suitable for local development. Production must provide
    REPLICATE_API_TOKEN; `validate()` is called once at startup and fails
    fast when it is missing.
    """

    APP_NAME: str = "Property Studio API"
    API_PREFIX: str = "/api"

    # CORS
    CORS_ORIGINS: List[str]
    LOG_LEVEL: str

    # Inference provider
    REPLICATE_API_TOKEN: str
    REPLICATE_API_BASE: str
    PROVIDER_HTTP_TIMEOUT_SEC: float
    PROVIDER_WAIT_SEC: int
    PROVIDER_GET_ATTEMPTS: int
    PROVIDER_MAX_CONCURRENCY: int

    # Polling policy
    POLL_INTERVAL_SEC: float
    POLL_MAX_ATTEMPTS: int
    AVATAR_POLL_MAX_ATTEMPTS: int
    VOICE_CLONE_POLL_MAX_ATTEMPTS: int

    # Models
    AVATAR_MODEL: str
    EDIT_ENHANCE_MODEL: str
    EDIT_REMOVE_MODEL: str
    OCR_MODEL: str
    IMG2PROMPT_MODEL: str
    CAMERA_ANALYSIS_MODEL: str
    VOICE_CLONE_MODEL: str
    VIDEO_MODEL: str

    # Results persistence
    RESULTS_PERSIST_ENABLE: bool
    RESULTS_COLLECTION: str
    GCP_PROJECT: str
    FIRESTORE_DATABASE_ID: str

    def __init__(self) -> None:
        # Load .env once (supports parent directories)
        load_dotenv(find_dotenv(), override=False)
        self.CORS_ORIGINS = self._get_list("CORS_ORIGINS", default="*")
        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

        self.REPLICATE_API_TOKEN = os.getenv("REPLICATE_API_TOKEN", "")
        self.REPLICATE_API_BASE = os.getenv("REPLICATE_API_BASE", "https://api.replicate.com/v1").rstrip("/")
        self.PROVIDER_HTTP_TIMEOUT_SEC = float(os.getenv("PROVIDER_HTTP_TIMEOUT_SEC", "90"))
        # Upper bound the provider honours for `Prefer: wait` is 60 seconds
        self.PROVIDER_WAIT_SEC = int(os.getenv("PROVIDER_WAIT_SEC", "60"))
        self.PROVIDER_GET_ATTEMPTS = int(os.getenv("PROVIDER_GET_ATTEMPTS", "3"))
        self.PROVIDER_MAX_CONCURRENCY = int(os.getenv("PROVIDER_MAX_CONCURRENCY", "8"))

        self.POLL_INTERVAL_SEC = float(os.getenv("POLL_INTERVAL_SEC", "2"))
        self.POLL_MAX_ATTEMPTS = int(os.getenv("POLL_MAX_ATTEMPTS", "120"))
        # 120 attempts x 2s = ~4 minutes
        self.AVATAR_POLL_MAX_ATTEMPTS = int(os.getenv("AVATAR_POLL_MAX_ATTEMPTS", "120"))
        # 60 attempts x 2s = ~2 minutes
        self.VOICE_CLONE_POLL_MAX_ATTEMPTS = int(os.getenv("VOICE_CLONE_POLL_MAX_ATTEMPTS", "60"))

        self.AVATAR_MODEL = os.getenv("AVATAR_MODEL", "lucataco/talking-avatar")
        self.EDIT_ENHANCE_MODEL = os.getenv("EDIT_ENHANCE_MODEL", "qwen/qwen-image-edit-plus")
        self.EDIT_REMOVE_MODEL = os.getenv("EDIT_REMOVE_MODEL", "black-forest-labs/flux-kontext-pro")
        self.OCR_MODEL = os.getenv("OCR_MODEL", "datalab-to/ocr")
        self.IMG2PROMPT_MODEL = os.getenv(
            "IMG2PROMPT_MODEL",
            "methexis-inc/img2prompt:50adaf2d3ad20a6f911a8a9e3ccf777b263b8599fbd2c8fc26e8888f8a0edbb5f",
        )
        self.CAMERA_ANALYSIS_MODEL = os.getenv("CAMERA_ANALYSIS_MODEL", "openai/gpt-4o")
        self.VOICE_CLONE_MODEL = os.getenv(
            "VOICE_CLONE_MODEL",
            "lucataco/xtts-v2:684bc3855b37866c0c65add2ff39c78f3dea3f4ff103a436465326e0f438d55e",
        )
        self.VIDEO_MODEL = os.getenv("VIDEO_MODEL", "kwaivgi/kling-v2.5-turbo-pro")

        self.RESULTS_PERSIST_ENABLE = os.getenv("RESULTS_PERSIST_ENABLE", "false").lower() == "true"
        self.RESULTS_COLLECTION = os.getenv("RESULTS_COLLECTION", "generation_results")
        self.GCP_PROJECT = os.getenv("GCP_PROJECT", os.getenv("GOOGLE_CLOUD_PROJECT", ""))
        self.FIRESTORE_DATABASE_ID = os.getenv("FIRESTORE_DATABASE_ID", "(default)")

    def validate(self) -> None:
        """Fail fast on a missing credential or a nonsensical polling policy."""
        if not self.REPLICATE_API_TOKEN.strip():
            raise ConfigurationError("Missing REPLICATE_API_TOKEN")
        if self.POLL_INTERVAL_SEC < 0:
            raise ConfigurationError("POLL_INTERVAL_SEC must be >= 0")
        for name in (
            "POLL_MAX_ATTEMPTS",
            "AVATAR_POLL_MAX_ATTEMPTS",
            "VOICE_CLONE_POLL_MAX_ATTEMPTS",
            "PROVIDER_GET_ATTEMPTS",
            "PROVIDER_MAX_CONCURRENCY",
        ):
            if getattr(self, name) < 1:
                raise ConfigurationError(f"{name} must be >= 1")

    @staticmethod
    def _get_list(name: str, default: str = "") -> List[str]:
        raw = os.getenv(name, default)
        return [item.strip() for item in raw.split(",") if item.strip()] or ["*"]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()
