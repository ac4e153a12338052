"""Unit tests for InMemoryRecordStore."""

import asyncio
from datetime import UTC, datetime

import pytest

from shelf.domain.catalog.model.aggregate import CatalogRecord
from shelf.domain.catalog.model.value import RecordId
from shelf.domain.shared.error import NotFoundError
from shelf.infrastructure.persistence.adapter.memory_store import InMemoryRecordStore


def _make_record(id: str) -> CatalogRecord:
    return CatalogRecord(
        id=RecordId(id),
        fields={"title": f"Book {id}"},
        asset_ref=f"/uploads/{id}.png",
        created_at=datetime(2024, 1, 1, tzinfo=UTC),
    )


class TestInMemoryRecordStore:
    @pytest.mark.asyncio
    async def test_starts_with_initial_records(self):
        store = InMemoryRecordStore([_make_record("1"), _make_record("2")])

        assert [str(r.id) for r in await store.load_all()] == ["1", "2"]

    @pytest.mark.asyncio
    async def test_load_all_returns_a_snapshot(self):
        store = InMemoryRecordStore([_make_record("1")])

        snapshot = await store.load_all()
        snapshot.clear()

        assert len(await store.load_all()) == 1

    @pytest.mark.asyncio
    async def test_append_replace_remove(self):
        store = InMemoryRecordStore()
        await store.append(_make_record("1"))

        updated = await store.replace(RecordId("1"), lambda r: r.revise({"title": "New"}))
        assert updated.fields["title"] == "New"

        removed = await store.remove(RecordId("1"))
        assert removed.fields["title"] == "New"
        assert await store.load_all() == []

    @pytest.mark.asyncio
    async def test_missing_ids_raise_not_found(self):
        store = InMemoryRecordStore()

        assert await store.find_by_id(RecordId("x")) is None
        with pytest.raises(NotFoundError):
            await store.replace(RecordId("x"), lambda r: r)
        with pytest.raises(NotFoundError):
            await store.remove(RecordId("x"))

    @pytest.mark.asyncio
    async def test_serialized_concurrent_appends(self):
        store = InMemoryRecordStore(serialize_writes=True)

        await asyncio.gather(*(store.append(_make_record(str(i))) for i in range(20)))

        assert len(await store.load_all()) == 20
