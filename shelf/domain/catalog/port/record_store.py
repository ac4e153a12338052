from abc import abstractmethod
from collections.abc import Callable
from typing import Protocol

from shelf.domain.catalog.model.aggregate import CatalogRecord
from shelf.domain.catalog.model.value import RecordId
from shelf.domain.shared.port import Port

RecordUpdater = Callable[[CatalogRecord], CatalogRecord]


class RecordStore(Port, Protocol):
    """Durable id -> CatalogRecord mapping backed by one serialized collection."""

    @abstractmethod
    async def load_all(self) -> list[CatalogRecord]:
        """Every record in insertion order; empty when nothing was persisted yet.

        Raises StoreCorruptError when the backing content is not a record list.
        """
        ...

    @abstractmethod
    async def find_by_id(self, id: RecordId) -> CatalogRecord | None: ...

    @abstractmethod
    async def append(self, record: CatalogRecord) -> None:
        """Persist the collection with ``record`` appended, all-or-nothing."""
        ...

    @abstractmethod
    async def replace(self, id: RecordId, updater: RecordUpdater) -> CatalogRecord:
        """Apply ``updater`` to the record and persist. Raises NotFoundError."""
        ...

    @abstractmethod
    async def remove(self, id: RecordId) -> CatalogRecord:
        """Delete the record and persist; returns it. Raises NotFoundError."""
        ...
