"""
Roast generation routes

Thin HTTP layer over the generation use cases: convert the body, run the
use case, serialize the outcome. Validation failures answer 400 and pipeline
failures answer 500, both as ``{"error": ..., "_meta": {...}}``.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from ..core import RequestValidationError, Timer, generate_request_id, get_logger
from ..models import BatchGenerateRequest, GenerateRequest, StorylineRequest
from ..services.use_cases import BatchGenerationUseCase, GenerationUseCase

router = APIRouter(prefix="/api", tags=["generation"])
logger = get_logger(__name__, component="routes")


def get_generation_use_case(request: Request) -> GenerationUseCase:
    return request.app.state.generation_use_case


def get_batch_use_case(request: Request) -> BatchGenerationUseCase:
    return request.app.state.batch_use_case


def _request_timer(request: Request) -> Timer:
    """Timer keyed by the correlation id the middleware assigned"""
    return Timer(getattr(request.state, "request_id", None) or generate_request_id())


def _error_response(status_code: int, error: Exception, timer: Timer) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": str(error),
            "_meta": {
                "requestId": timer.request_id,
                "timings": timer.timings(),
            },
        },
    )


@router.post("/generate")
async def generate(
    body: GenerateRequest,
    request: Request,
    use_case: GenerationUseCase = Depends(get_generation_use_case),
):
    """Classify a post, write its storyline and generate the roast video"""
    timer = _request_timer(request)
    try:
        outcome = await use_case.execute(body.to_domain(), cohesive=body.cohesive, timer=timer)
    except RequestValidationError as e:
        return _error_response(400, e, timer)
    except Exception as e:
        logger.error(
            f"[{timer.request_id}] Roast generation error: {e}",
            extra={"request_id": timer.request_id},
            exc_info=True,
        )
        return _error_response(500, e, timer)
    return outcome.to_response()


@router.post("/generate/batch")
async def generate_batch(
    body: BatchGenerateRequest,
    request: Request,
    use_case: BatchGenerationUseCase = Depends(get_batch_use_case),
):
    """Process up to five posts concurrently"""
    timer = _request_timer(request)
    try:
        outcome = await use_case.execute([item.to_domain() for item in body.items], timer=timer)
    except RequestValidationError as e:
        return _error_response(400, e, timer)
    except Exception as e:
        logger.error(
            f"[{timer.request_id}] Batch generation error: {e}",
            extra={"request_id": timer.request_id},
            exc_info=True,
        )
        return _error_response(500, e, timer)
    return outcome.to_response()


@router.post("/generate/storyline-only")
async def generate_storyline_only(
    body: StorylineRequest,
    request: Request,
    use_case: GenerationUseCase = Depends(get_generation_use_case),
):
    """Generate only the storyline (no media); useful for prompt testing"""
    timer = _request_timer(request)
    try:
        outcome = await use_case.storyline_only(body.to_domain(), timer=timer)
    except RequestValidationError as e:
        return _error_response(400, e, timer)
    except Exception as e:
        logger.error(
            f"[{timer.request_id}] Storyline error: {e}",
            extra={"request_id": timer.request_id},
            exc_info=True,
        )
        return _error_response(500, e, timer)
    return outcome.to_response()
