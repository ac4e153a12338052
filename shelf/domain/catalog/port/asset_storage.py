from abc import abstractmethod
from typing import Protocol

from shelf.domain.shared.port import Port


class AssetStoragePort(Port, Protocol):
    @abstractmethod
    async def save(self, name: str, content: bytes, content_type: str) -> str:
        """Persist bytes under ``name`` and return a client-usable reference."""
        ...

    @abstractmethod
    async def delete(self, ref: str) -> None:
        """Delete the bytes behind ``ref``. A missing target is not an error."""
        ...
