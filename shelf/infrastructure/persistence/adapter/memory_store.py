import asyncio
from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager

from shelf.domain.catalog.model.aggregate import CatalogRecord
from shelf.domain.catalog.model.value import RecordId
from shelf.domain.catalog.port.record_store import RecordStore, RecordUpdater
from shelf.domain.shared.error import NotFoundError


class InMemoryRecordStore(RecordStore):
    """Process-lifetime collection; one instance is built at startup and injected."""

    def __init__(
        self,
        records: Iterable[CatalogRecord] = (),
        serialize_writes: bool = False,
    ) -> None:
        self._records: list[CatalogRecord] = list(records)
        self._lock = asyncio.Lock() if serialize_writes else None

    async def load_all(self) -> list[CatalogRecord]:
        return list(self._records)

    async def find_by_id(self, id: RecordId) -> CatalogRecord | None:
        return next((r for r in self._records if r.id == id), None)

    async def append(self, record: CatalogRecord) -> None:
        async with self._mutation():
            self._records = [*self._records, record]

    async def replace(self, id: RecordId, updater: RecordUpdater) -> CatalogRecord:
        async with self._mutation():
            records = list(self._records)
            index = self._index_of(records, id)
            updated = updater(records[index])
            records[index] = updated
            self._records = records
            return updated

    async def remove(self, id: RecordId) -> CatalogRecord:
        async with self._mutation():
            records = list(self._records)
            removed = records.pop(self._index_of(records, id))
            self._records = records
            return removed

    @asynccontextmanager
    async def _mutation(self) -> AsyncIterator[None]:
        if self._lock is None:
            yield
            return
        async with self._lock:
            yield

    @staticmethod
    def _index_of(records: list[CatalogRecord], id: RecordId) -> int:
        for i, record in enumerate(records):
            if record.id == id:
                return i
        raise NotFoundError(f"Record not found: {id}")
