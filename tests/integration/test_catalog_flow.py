"""End-to-end catalog flows against real stores and local asset storage."""

import json
import tempfile
from pathlib import Path
from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError

from shelf.config import DatabaseConfig
from shelf.domain.auth.model.identity import Anonymous, Caller
from shelf.domain.catalog.model.value import UploadedAsset
from shelf.domain.catalog.service.asset import AssetManager
from shelf.domain.catalog.service.catalog import CatalogService
from shelf.domain.catalog.service.ownership import OwnershipPolicy
from shelf.domain.shared.error import ForbiddenError
from shelf.infrastructure.persistence.adapter.json_store import JsonFileRecordStore
from shelf.infrastructure.persistence.adapter.memory_store import InMemoryRecordStore
from shelf.infrastructure.persistence.database import (
    create_db_engine,
    create_session_factory,
    ensure_schema,
)
from shelf.infrastructure.persistence.repository.record import SqlRecordStore
from shelf.infrastructure.storage.local import LocalAssetStorage

ALICE = Caller("alice@example.com")
BOB = Caller("bob@example.com")


def _make_asset(name: str = "cover.jpg") -> UploadedAsset:
    return UploadedAsset(filename=name, content_type="image/jpeg", content=b"\xff\xd8\xff jpeg")


class TestJsonCatalogFlow:
    def setup_method(self):
        self._tmpdir = Path(tempfile.mkdtemp())
        self.data_file = self._tmpdir / "data" / "books.json"
        self.upload_dir = self._tmpdir / "uploads"
        self.service = CatalogService(
            store=JsonFileRecordStore(self.data_file),
            policy=OwnershipPolicy(),
            assets=AssetManager(
                storage=LocalAssetStorage(str(self.upload_dir)),
                accepted_types=["image/jpeg"],
                max_size=1024,
            ),
            field_names=["title", "author"],
        )

    def _uploads(self) -> list[str]:
        return sorted(p.name for p in self.upload_dir.iterdir())

    @pytest.mark.asyncio
    async def test_create_persists_flat_document_and_file(self):
        item = await self.service.create(
            ALICE, {"title": "Dune", "author": "Herbert"}, _make_asset()
        )

        docs = json.loads(self.data_file.read_text())
        assert len(docs) == 1
        assert docs[0]["title"] == "Dune"
        assert docs[0]["owner"] == "alice@example.com"
        assert docs[0]["image"] == item.record.asset_ref
        assert "mine" not in docs[0]
        assert self._uploads() == [item.record.asset_ref.removeprefix("/uploads/")]

    @pytest.mark.asyncio
    async def test_private_records_hidden_from_others(self):
        await self.service.create(ALICE, {"title": "Mine", "author": "A"}, _make_asset())
        await self.service.create(Anonymous(), {"title": "Public", "author": "P"}, _make_asset())

        anon = await self.service.list_records(Anonymous())
        bob = await self.service.list_records(BOB)
        alice = await self.service.list_records(ALICE)

        assert [i.record.fields["title"] for i in anon] == ["Public"]
        assert [i.record.fields["title"] for i in bob] == ["Public"]
        assert [(i.record.fields["title"], i.mine) for i in alice] == [
            ("Mine", True),
            ("Public", False),
        ]

    @pytest.mark.asyncio
    async def test_rejected_update_leaves_file_and_record_untouched(self):
        item = await self.service.create(ALICE, {"title": "Dune", "author": "H"}, _make_asset())
        before = self.data_file.read_text()

        with pytest.raises(ForbiddenError):
            await self.service.update(BOB, item.record.id, {"title": "Stolen"}, _make_asset())

        assert self.data_file.read_text() == before
        assert len(self._uploads()) == 1

    @pytest.mark.asyncio
    async def test_image_replacement_leaves_exactly_one_file(self):
        item = await self.service.create(ALICE, {"title": "Dune", "author": "H"}, _make_asset())

        updated = await self.service.update(ALICE, item.record.id, {}, _make_asset("new.jpg"))

        assert updated.record.asset_ref != item.record.asset_ref
        assert self._uploads() == [updated.record.asset_ref.removeprefix("/uploads/")]

    @pytest.mark.asyncio
    async def test_delete_removes_record_and_file(self):
        item = await self.service.create(ALICE, {"title": "Dune", "author": "H"}, _make_asset())

        await self.service.delete(ALICE, item.record.id)

        assert json.loads(self.data_file.read_text()) == []
        assert self._uploads() == []


class TestMemoryCatalogFlow:
    @pytest.mark.asyncio
    async def test_full_lifecycle(self):
        upload_dir = Path(tempfile.mkdtemp())
        service = CatalogService(
            store=InMemoryRecordStore(serialize_writes=True),
            policy=OwnershipPolicy(),
            assets=AssetManager(
                storage=LocalAssetStorage(str(upload_dir)),
                accepted_types=["image/jpeg"],
                max_size=1024,
            ),
            field_names=["title", "artist"],
        )

        created = await service.create(
            ALICE, {"title": "Sunflowers", "artist": "VG"}, _make_asset()
        )
        fetched = await service.get(BOB, created.record.id)
        updated = await service.update(ALICE, created.record.id, {"artist": "Van Gogh"})
        deleted = await service.delete(ALICE, created.record.id)

        assert fetched.mine is False
        assert updated.record.fields == {"title": "Sunflowers", "artist": "Van Gogh"}
        assert deleted.record.id == created.record.id
        assert await service.list_records(ALICE) == []
        assert list(upload_dir.iterdir()) == []


class TestSqlCatalogFlow:
    @pytest.mark.asyncio
    async def test_failed_commit_keeps_old_image_and_reclaims_new(self):
        tmpdir = Path(tempfile.mkdtemp())
        upload_dir = tmpdir / "uploads"
        engine = create_db_engine(DatabaseConfig(url=f"sqlite+aiosqlite:///{tmpdir / 'shelf.db'}"))
        await ensure_schema(engine)
        session_factory = create_session_factory(engine)

        def make_service(session) -> CatalogService:
            return CatalogService(
                store=SqlRecordStore(session),
                policy=OwnershipPolicy(),
                assets=AssetManager(
                    storage=LocalAssetStorage(str(upload_dir)),
                    accepted_types=["image/jpeg"],
                    max_size=1024,
                ),
                field_names=["title", "author"],
            )

        try:
            async with session_factory() as session:
                created = await make_service(session).create(
                    ALICE, {"title": "Dune", "author": "H"}, _make_asset()
                )
            old_file = upload_dir / created.record.asset_ref.removeprefix("/uploads/")

            async with session_factory() as session:
                error = OperationalError("COMMIT", {}, Exception("disk full"))
                session.commit = AsyncMock(side_effect=error)
                with pytest.raises(OperationalError):
                    await make_service(session).update(
                        ALICE, created.record.id, {}, _make_asset("new.jpg")
                    )

            async with session_factory() as session:
                stored = await make_service(session).get(ALICE, created.record.id)
        finally:
            await engine.dispose()

        assert stored.record.asset_ref == created.record.asset_ref
        assert stored.record == created.record
        assert [p.name for p in upload_dir.iterdir()] == [old_file.name]
