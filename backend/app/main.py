"""
Main FastAPI application for the Property Studio backend.
"""
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging
from contextlib import asynccontextmanager

from .config import get_settings
from .exceptions import JobOrchestrationError
from .models import ErrorBody
from .routers.analysis import router as analysis_router
from .routers.config import router as config_router
from .routers.generation import router as generation_router
from .routers.health import router as health_router
from .routers.ocr import router as ocr_router
from .services.firestore import build_result_store
from .services.orchestration.runner import JobOrchestrator


settings = get_settings()
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: fail fast if the provider credential is missing
    settings.validate()
    app.state.orchestrator = JobOrchestrator.from_settings(settings)
    app.state.result_store = build_result_store(settings)
    logger.info(
        "Orchestrator ready: poll every %ss, max %d attempts, concurrency %d",
        settings.POLL_INTERVAL_SEC,
        settings.POLL_MAX_ATTEMPTS,
        settings.PROVIDER_MAX_CONCURRENCY,
    )
    try:
        yield
    finally:
        # Shutdown
        await app.state.orchestrator.aclose()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# CORS configuration
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in settings.CORS_ORIGINS],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error_response(status_code: int, error: str, details: str | None = None) -> JSONResponse:
    body = ErrorBody(error=error, details=details)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


@app.exception_handler(JobOrchestrationError)
async def job_error_handler(request: Request, exc: JobOrchestrationError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s failed: %s (%s)", request.url.path, exc, exc.details)
    else:
        logger.warning("%s rejected: %s (%s)", request.url.path, exc, exc.details)
    return _error_response(exc.status_code, str(exc), exc.details)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = "; ".join(
        f"{'.'.join(str(p) for p in err.get('loc', ()))}: {err.get('msg')}" for err in exc.errors()
    )
    logger.warning("%s request validation failed: %s", request.url.path, details)
    return _error_response(400, "Invalid input", details)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return _error_response(exc.status_code, str(exc.detail))


# Routers
app.include_router(health_router, prefix=settings.API_PREFIX)
app.include_router(config_router, prefix=settings.API_PREFIX)
app.include_router(generation_router, prefix=settings.API_PREFIX)
app.include_router(ocr_router, prefix=settings.API_PREFIX)
app.include_router(analysis_router, prefix=settings.API_PREFIX)


@app.get("/", tags=["root"])
async def root() -> dict:
    """Simple root endpoint."""
    return {"name": app.title, "version": app.version}
