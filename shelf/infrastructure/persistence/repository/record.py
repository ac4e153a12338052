from __future__ import annotations

from sqlalchemy import delete, insert, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from shelf.domain.catalog.model.aggregate import CatalogRecord
from shelf.domain.catalog.model.value import RecordId
from shelf.domain.catalog.port.record_store import RecordStore, RecordUpdater
from shelf.domain.shared.error import NotFoundError
from shelf.infrastructure.persistence.mappers.record import record_to_row, row_to_record
from shelf.infrastructure.persistence.tables import records_table


class SqlRecordStore(RecordStore):
    """SQL implementation of RecordStore.

    Each mutation commits before returning, so callers only reclaim assets
    once the row change is durable; a failed commit leaves the row unchanged.
    """

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def load_all(self) -> list[CatalogRecord]:
        stmt = select(records_table).order_by(records_table.c.seq)
        result = await self.session.execute(stmt)
        return [row_to_record(dict(r)) for r in result.mappings().all()]

    async def find_by_id(self, id: RecordId) -> CatalogRecord | None:
        stmt = select(records_table).where(records_table.c.id == str(id))
        result = await self.session.execute(stmt)
        row = result.mappings().first()
        return row_to_record(dict(row)) if row else None

    async def append(self, record: CatalogRecord) -> None:
        await self.session.execute(insert(records_table).values(**record_to_row(record)))
        await self.session.commit()

    async def replace(self, id: RecordId, updater: RecordUpdater) -> CatalogRecord:
        existing = await self.find_by_id(id)
        if existing is None:
            raise NotFoundError(f"Record not found: {id}")

        updated = updater(existing)
        row = record_to_row(updated)
        row.pop("id")
        stmt = update(records_table).where(records_table.c.id == str(id)).values(**row)
        await self.session.execute(stmt)
        await self.session.commit()
        return updated

    async def remove(self, id: RecordId) -> CatalogRecord:
        existing = await self.find_by_id(id)
        if existing is None:
            raise NotFoundError(f"Record not found: {id}")

        await self.session.execute(delete(records_table).where(records_table.c.id == str(id)))
        await self.session.commit()
        return existing
