"""
Base use case class.

A use case is one pipeline operation with a plain request object in and an
outcome object out. It knows nothing about HTTP: routes convert bodies into
requests and outcomes into responses, and map the raised exceptions to
status codes.

Example:
    >>> class GenerationUseCase(UseCase[GenerationRequest, GenerationOutcome]):
    ...     async def execute(self, request: GenerationRequest) -> GenerationOutcome:
    ...         ...

    >>> # From a route
    >>> outcome = await GenerationUseCase(media_client, cache).execute(request)

    >>> # Fanned out by another use case
    >>> outcome = await BatchGenerationUseCase(generation).execute([request_a, request_b])
"""

from abc import ABC, abstractmethod
from typing import TypeVar, Generic

RequestT = TypeVar("RequestT")
ResponseT = TypeVar("ResponseT")


class UseCase(ABC, Generic[RequestT, ResponseT]):
    """
    Abstract pipeline operation.

    Type Parameters:
        RequestT: Input object (e.g. ``GenerationRequest``)
        ResponseT: Outcome object carrying results plus timings
    """

    @abstractmethod
    async def execute(self, request: RequestT) -> ResponseT:
        """
        Run the operation.

        Raises:
            RequestValidationError: The request is unusable; nothing remote was called
            PipelineError: A mandatory step failed
        """
        pass
