from abc import ABC, abstractmethod
from typing import Optional

from ..domain.models import BinaryFile, UploadResult


class IUploadBackend(ABC):
    """Interface for storage that accepts processed images."""

    @abstractmethod
    async def upload(self, binary: BinaryFile, destination_key: str) -> UploadResult:
        """
        Store *binary* under *destination_key*.
        Failures are reported through ``UploadResult.success`` rather than raised.
        """
        pass


class IKeyValueStore(ABC):
    """Interface for a string key/value store (browser-style local storage)."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass
