"""
BatchGenerationUseCase - runs several roast requests concurrently.

The batch size is capped (default 5) and checked before any work starts.
Items run through ``GenerationUseCase`` concurrently and are settled
independently: a failing item becomes ``{"error", "index"}`` in its slot
and never affects the others.
"""

import asyncio
from typing import Any, Dict, List, Optional, Sequence

from roastcast.config import MAX_BATCH_SIZE
from roastcast.core.exceptions import RequestValidationError
from roastcast.core.logging import generate_request_id, get_logger
from roastcast.core.timing import Timer

from .base import UseCase
from .generation_use_case import GenerationUseCase
from .schemas import BatchOutcome, GenerationRequest

logger = get_logger(__name__, component="batch")


class BatchGenerationUseCase(UseCase[Sequence[GenerationRequest], BatchOutcome]):
    """Fan a list of requests out over the generation pipeline"""

    def __init__(self, generation_use_case: GenerationUseCase, max_batch_size: int = MAX_BATCH_SIZE):
        self.generation = generation_use_case
        self.max_batch_size = max_batch_size

    def _validate(self, requests: Sequence[GenerationRequest]) -> None:
        if not requests:
            raise RequestValidationError("items array is required")
        if len(requests) > self.max_batch_size:
            raise RequestValidationError(f"Batch size exceeds maximum of {self.max_batch_size}")

    async def execute(
        self,
        requests: Sequence[GenerationRequest],
        request_id: Optional[str] = None,
        timer: Optional[Timer] = None,
    ) -> BatchOutcome:
        """
        Process every request and collect per-item outcomes in input order.

        Raises:
            RequestValidationError: Empty batch or more than ``max_batch_size`` items
        """
        self._validate(requests)
        request_id = request_id or (timer.request_id if timer else generate_request_id())
        timer = timer or Timer(request_id)

        logger.info(
            f"[{request_id}] Processing batch of {len(requests)} posts",
            extra={"request_id": request_id, "batch_size": len(requests)},
        )

        with timer.span("items"):
            outcomes = await asyncio.gather(
                *(
                    self.generation.execute(request, request_id=f"{request_id}-{index}")
                    for index, request in enumerate(requests)
                ),
                return_exceptions=True,
            )

        results: List[Dict[str, Any]] = []
        for index, (request, outcome) in enumerate(zip(requests, outcomes)):
            if isinstance(outcome, BaseException):
                logger.warning(
                    f"[{request_id}] Batch item {index} failed: {outcome}",
                    extra={"request_id": request_id, "index": index, "error": str(outcome)},
                )
                results.append({"tweet_id": request.tweet_id, "error": str(outcome), "index": index})
            else:
                item = outcome.result.to_dict()
                item["index"] = index
                results.append(item)

        timings = timer.log_summary(f"[{request_id}] Batch timing summary")
        return BatchOutcome(request_id=request_id, results=results, timings=timings)
