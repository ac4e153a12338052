import asyncio
import json
import logging
import tempfile
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

from shelf.domain.catalog.model.aggregate import CatalogRecord
from shelf.domain.catalog.model.value import RecordId
from shelf.domain.catalog.port.record_store import RecordStore, RecordUpdater
from shelf.domain.shared.error import NotFoundError, StoreCorruptError
from shelf.infrastructure.persistence.mappers.record import doc_to_record, record_to_doc

logger = logging.getLogger(__name__)


class JsonFileRecordStore(RecordStore):
    """Whole collection in one JSON array, rewritten on every mutation.

    File I/O runs in a worker thread, so concurrent requests interleave at
    read and write boundaries. Without ``serialize_writes`` two overlapping
    mutations race and the later full write wins; with it, every
    read-modify-write cycle runs under one lock.
    """

    def __init__(self, path: str | Path, serialize_writes: bool = False) -> None:
        self.path = Path(path)
        self._lock = asyncio.Lock() if serialize_writes else None

    async def load_all(self) -> list[CatalogRecord]:
        return await asyncio.to_thread(self._read)

    async def find_by_id(self, id: RecordId) -> CatalogRecord | None:
        records = await self.load_all()
        return next((r for r in records if r.id == id), None)

    async def append(self, record: CatalogRecord) -> None:
        async with self._mutation():
            records = await asyncio.to_thread(self._read)
            records.append(record)
            await asyncio.to_thread(self._write, records)

    async def replace(self, id: RecordId, updater: RecordUpdater) -> CatalogRecord:
        async with self._mutation():
            records = await asyncio.to_thread(self._read)
            index = _index_of(records, id)
            updated = updater(records[index])
            records[index] = updated
            await asyncio.to_thread(self._write, records)
            return updated

    async def remove(self, id: RecordId) -> CatalogRecord:
        async with self._mutation():
            records = await asyncio.to_thread(self._read)
            removed = records.pop(_index_of(records, id))
            await asyncio.to_thread(self._write, records)
            return removed

    @asynccontextmanager
    async def _mutation(self) -> AsyncIterator[None]:
        if self._lock is None:
            yield
            return
        async with self._lock:
            yield

    def _read(self) -> list[CatalogRecord]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8") or "[]")
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError
            logger.error("Record file %s is not valid UTF-8 JSON: %s", self.path, e)
            raise StoreCorruptError(f"Record file is not valid UTF-8 JSON: {self.path}") from e

        if not isinstance(data, list):
            raise StoreCorruptError(f"Record file must hold a JSON array: {self.path}")
        try:
            return [doc_to_record(doc) for doc in data]
        except (KeyError, TypeError, ValueError) as e:
            logger.error("Record file %s holds a malformed record: %s", self.path, e)
            raise StoreCorruptError(f"Record file holds a malformed record: {self.path}") from e

    def _write(self, records: list[CatalogRecord]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps([record_to_doc(r) for r in records], indent=2, ensure_ascii=False)

        # Atomic write: write to temp file then rename over the old collection
        fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        try:
            with open(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            Path(tmp_path).replace(self.path)
        except Exception:
            Path(tmp_path).unlink(missing_ok=True)
            raise


def _index_of(records: list[CatalogRecord], id: RecordId) -> int:
    for i, record in enumerate(records):
        if record.id == id:
            return i
    raise NotFoundError(f"Record not found: {id}")
