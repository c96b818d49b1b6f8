"""
Service contracts and the error hierarchy.

Every pipeline stage (market data, analysis, signal construction) exposes
the same async surface so the API and the watchlist driver can treat them
uniformly. Errors carry the originating service name and a details dict
that the API layer turns into an HTTP status.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

RequestT = TypeVar("RequestT")
ResultT = TypeVar("ResultT")


class BaseService(ABC, Generic[RequestT, ResultT]):
    """
    One pipeline stage.

    `execute` takes the stage's request object (CandleRequest,
    AnalysisRequest, SignalRequest) and returns its result. Pure stages
    still expose `execute` as a coroutine so callers never branch on it.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Name used in logs and in ServiceError.service_name."""
        pass

    @abstractmethod
    async def execute(self, input_data: RequestT) -> ResultT:
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        pass


class ServiceError(Exception):
    """Root of every error a service raises on purpose."""

    def __init__(self, service_name: str, message: str, details: dict = None):
        self.service_name = service_name
        self.message = message
        self.details = details or {}
        super().__init__(f"[{service_name}] {message}")


class ValidationError(ServiceError):
    """Caller supplied something unusable. Maps to HTTP 400."""
    pass


class InsufficientDataError(ValidationError):
    """Candle window shorter than the analysis minimum."""

    def __init__(self, service_name: str, required: int, received: int):
        super().__init__(
            service_name,
            f"Insufficient candle data: need at least {required} candles, got {received}",
            {"required": required, "received": received},
        )
        self.required = required
        self.received = received


class InvalidStatusTransitionError(ValidationError):
    """Signal status change that would not move the lifecycle forward."""
    pass


class ExternalAPIError(ServiceError):
    """Exchange or LLM call failed. Maps to HTTP 502."""
    pass
