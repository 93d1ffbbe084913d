"""
Service contracts and error taxonomy.

Async services (signal evaluation, market data access) implement
BaseService. Every ServiceError names the service that raised it and
carries a details dict; status_code is what the HTTP layer answers with.
"""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class BaseService(ABC, Generic[InputT, OutputT]):
    """
    Async service with a typed request and result.

    Implementations supply:
    - name: used as the service_name of raised errors and in logs
    - execute: the main coroutine
    - health_check: whether upstream dependencies answer
    """

    @property
    @abstractmethod
    def name(self) -> str:
        pass

    @abstractmethod
    async def execute(self, input_data: InputT) -> OutputT:
        """
        Process one request.

        Raises:
            ServiceError: on rejected input or a failing dependency
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        pass

    async def validate_input(self, input_data: InputT) -> InputT:
        """Normalise a request before execute(). Pydantic has already checked its shape."""
        return input_data


class ServiceError(Exception):
    """Failure inside a service."""

    status_code = 500

    def __init__(self, service_name: str, message: str, details: dict = None):
        self.service_name = service_name
        self.message = message
        self.details = details or {}
        super().__init__(f"[{service_name}] {message}")

    def to_detail(self) -> dict:
        return {"service": self.service_name, "message": self.message, **self.details}


class ValidationError(ServiceError):
    """Request or candle data rejected before evaluation."""

    status_code = 422


class ExternalAPIError(ServiceError):
    """Market data provider call failed."""

    status_code = 502
