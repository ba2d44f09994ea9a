"""Firestore helper service for finished generation results."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Protocol

from google.api_core.exceptions import GoogleAPIError
from google.cloud import firestore

from ..config import Settings, get_settings
from ..exceptions import PersistenceError
from .orchestration.runner import OrchestrationResult

logger = logging.getLogger(__name__)


class ResultStore(Protocol):
    def save_result(self, kind: str, result: OrchestrationResult, *, session_id: Optional[str] = None) -> None: ...


class NullResultStore:
    """Used when persistence is disabled."""

    def save_result(self, kind: str, result: OrchestrationResult, *, session_id: Optional[str] = None) -> None:
        logger.debug("[%s] persistence disabled; %s result not stored", result.prediction_id, kind)


class FirestoreResultStore:
    """Thin wrapper around the Firestore client for terminal job results."""

    def __init__(self, settings: Optional[Settings] = None, client: Optional[firestore.Client] = None) -> None:
        settings = settings or get_settings()
        if client is not None:
            self.client = client
        # Use explicit database if provided in env, else default
        elif settings.FIRESTORE_DATABASE_ID:
            self.client = firestore.Client(
                project=settings.GCP_PROJECT or None,
                database=settings.FIRESTORE_DATABASE_ID,
            )
        else:
            self.client = firestore.Client()
        self._results = self.client.collection(settings.RESULTS_COLLECTION)

    @staticmethod
    def to_document(kind: str, result: OrchestrationResult, session_id: Optional[str]) -> Dict[str, Any]:
        return {
            "predictionId": result.prediction_id,
            "kind": kind,
            "output": result.output,
            "sessionId": session_id,
            "usedFallback": result.used_fallback,
            "polls": result.polls,
            "createdAt": firestore.SERVER_TIMESTAMP,
        }

    def save_result(self, kind: str, result: OrchestrationResult, *, session_id: Optional[str] = None) -> None:
        ref = self._results.document(result.prediction_id)
        try:
            ref.set(self.to_document(kind, result, session_id))
        except GoogleAPIError as exc:
            logger.error("[%s] Firestore write failed: %s", result.prediction_id, exc)
            raise PersistenceError(details=str(exc)) from exc


def build_result_store(settings: Settings) -> ResultStore:
    if settings.RESULTS_PERSIST_ENABLE:
        return FirestoreResultStore(settings)
    return NullResultStore()
