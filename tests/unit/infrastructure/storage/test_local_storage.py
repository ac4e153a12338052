"""Unit tests for LocalAssetStorage - references, traversal and deletion."""

import tempfile
from pathlib import Path

import pytest

from shelf.infrastructure.storage.local import LocalAssetStorage


class TestLocalAssetStorage:
    def setup_method(self):
        self._tmpdir = Path(tempfile.mkdtemp())
        self.upload_dir = self._tmpdir / "uploads"
        self.storage = LocalAssetStorage(str(self.upload_dir))

    @pytest.mark.asyncio
    async def test_save_returns_relative_reference(self):
        ref = await self.storage.save("123-abc.png", b"png", "image/png")

        assert ref == "/uploads/123-abc.png"
        assert (self.upload_dir / "123-abc.png").read_bytes() == b"png"
        assert [p.name for p in self.upload_dir.iterdir()] == ["123-abc.png"]

    @pytest.mark.asyncio
    async def test_public_url_makes_absolute_reference(self):
        storage = LocalAssetStorage(
            str(self.upload_dir), url_prefix="media/", public_url="https://shelf.example/"
        )

        ref = await storage.save("a.jpg", b"jpg", "image/jpeg")

        assert ref == "https://shelf.example/media/a.jpg"
        assert storage.filename_for(ref) == "a.jpg"

    @pytest.mark.asyncio
    async def test_delete_with_public_url_path_removes_file(self):
        storage = LocalAssetStorage(str(self.upload_dir), public_url="https://host.example/shelf")

        ref = await storage.save("a.png", b"png", "image/png")
        await storage.delete(ref)

        assert ref == "https://host.example/shelf/uploads/a.png"
        assert not (self.upload_dir / "a.png").exists()

    def test_public_url_path_still_maps_relative_references(self):
        storage = LocalAssetStorage(str(self.upload_dir), public_url="https://host.example/shelf")

        assert storage.filename_for("/uploads/old.png") == "old.png"
        assert storage.filename_for("https://host.example/other/uploads/x.png") is None

    @pytest.mark.asyncio
    async def test_delete_removes_file(self):
        ref = await self.storage.save("a.png", b"png", "image/png")

        await self.storage.delete(ref)

        assert not (self.upload_dir / "a.png").exists()

    @pytest.mark.asyncio
    async def test_delete_missing_file_is_not_an_error(self):
        await self.storage.delete("/uploads/never-existed.png")

    @pytest.mark.asyncio
    async def test_delete_ignores_foreign_references(self):
        outside = self._tmpdir / "keep.png"
        outside.write_bytes(b"x")

        await self.storage.delete("data:image/png;base64,AAAA")
        await self.storage.delete("https://elsewhere.example/keep.png")

        assert outside.exists()

    @pytest.mark.asyncio
    async def test_delete_rejects_traversal(self):
        with pytest.raises(ValueError, match="Invalid filename"):
            await self.storage.delete("/uploads/../keep.png")

    @pytest.mark.asyncio
    async def test_delete_rejects_encoded_traversal(self):
        with pytest.raises(ValueError, match="Invalid filename"):
            await self.storage.delete("/uploads/..%2Fkeep.png")

    @pytest.mark.asyncio
    async def test_save_rejects_path_separator(self):
        with pytest.raises(ValueError, match="Invalid filename"):
            await self.storage.save("sub/a.png", b"png", "image/png")
