"""
Roastcast Backend API
FastAPI application turning posts into short satirical roast videos

This is the main entry point that wires together all routes and services.
The cache, the xAI transport and the use cases are built once in the
lifespan and shared through ``app.state``.
"""

import os
import random
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from .config import (
    API_TITLE,
    API_DESCRIPTION,
    API_VERSION,
    CORS_ORIGINS,
    XAI_API_KEY,
    PipelineSettings,
)
from .core import (
    setup_logging,
    get_logger,
    set_request_id,
    clear_context,
    generate_request_id,
)
from .routes import generation_router, cache_router
from .services.infrastructure.cache import TTLCache
from .services.infrastructure.llm import XAIClient
from .services.infrastructure.polling import BackoffPoller
from .services.media import MediaGenerationClient
from .services.use_cases import BatchGenerationUseCase, GenerationUseCase

# Initialize logging
log_level = os.getenv("LOG_LEVEL", "INFO")
log_file = os.getenv("LOG_FILE")
use_json_logs = os.getenv("JSON_LOGS", "false").lower() == "true"

setup_logging(
    level=log_level,
    log_file=Path(log_file) if log_file else None,
    use_json=use_json_logs,
)

logger = get_logger(__name__, service="api")
logger.info("Starting Roastcast Backend API", extra={
    "log_level": log_level,
    "json_logs": use_json_logs
})


def build_services(app: FastAPI, settings: PipelineSettings) -> None:
    """Construct the pipeline's collaborators and attach them to ``app.state``"""
    cache = TTLCache(default_ttl=settings.default_ttl)
    transport = XAIClient()
    poller = BackoffPoller.from_settings(settings.polling)
    media_client = MediaGenerationClient(
        transport,
        poller,
        rng=random.Random(),
        clip_duration=settings.clip_duration,
    )
    generation = GenerationUseCase(media_client, cache, settings)

    app.state.settings = settings
    app.state.cache = cache
    app.state.media_client = media_client
    app.state.generation_use_case = generation
    app.state.batch_use_case = BatchGenerationUseCase(generation, settings.max_batch_size)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = PipelineSettings()
    build_services(app, settings)
    if not XAI_API_KEY:
        logger.warning("XAI_API_KEY is not configured; generation requests will fail")
    logger.info("Services ready", extra={
        "target_duration": settings.target_duration,
        "max_batch_size": settings.max_batch_size,
    })
    try:
        yield
    finally:
        await app.state.media_client.aclose()


# Create FastAPI app
app = FastAPI(
    title=API_TITLE,
    description=API_DESCRIPTION,
    version=API_VERSION,
    lifespan=lifespan,
)


@app.middleware("http")
async def add_request_correlation(request: Request, call_next):
    """Add correlation ID to every request, its logs and its response."""
    request_id = request.headers.get("X-Request-ID") or generate_request_id()
    request.state.request_id = request_id
    set_request_id(request_id)
    path = request.url.path

    logger.info(f"{request.method} {path}", extra={
        "method": request.method,
        "path": path,
        "client": request.client.host if request.client else "unknown",
    })

    try:
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        response.headers.setdefault("X-Content-Type-Options", "nosniff")

        logger.info(f"Response: {response.status_code}", extra={
            "status_code": response.status_code,
            "method": request.method,
            "path": path,
        })
        return response
    finally:
        clear_context()

# CORS middleware for the browser extension
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(generation_router)
app.include_router(cache_router)


@app.get("/")
async def root():
    """Root endpoint - API info"""
    return {
        "message": "Roastcast API - Generate satirical roast videos from posts",
        "version": API_VERSION
    }


@app.get("/health")
async def health_check():
    """
    Health check endpoint for container orchestration.

    Reports whether the xAI key is configured and how full the cache is.
    A missing key is reported but does not make the service unhealthy;
    the cache administration endpoints keep working without it.
    """
    cache = getattr(app.state, "cache", None)
    return {
        "status": "healthy",
        "checks": {
            "xai_api_key": {"configured": bool(XAI_API_KEY)},
            "cache": cache.get_stats() if cache is not None else None,
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
    )
