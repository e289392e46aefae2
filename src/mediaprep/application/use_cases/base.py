from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional, TypeVar

ResponseT = TypeVar("ResponseT", bound="UseCaseResponse")


@dataclass(frozen=True)
class UseCaseRequest:
    """Input of a use case; subclasses add the fields they need."""


@dataclass(frozen=True)
class UseCaseResponse:
    """Output of a use case. Failures carry a message fit for the user."""
    success: bool = True
    error: Optional[str] = None

    @classmethod
    def failure(cls: type[ResponseT], error: str) -> ResponseT:
        return cls(success=False, error=error)


class UseCase(ABC):
    """Coroutine use case. Blocking image work is pushed to an executor by its collaborators."""

    @abstractmethod
    async def execute(self, request: UseCaseRequest) -> UseCaseResponse:
        ...
