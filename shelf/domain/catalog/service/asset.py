"""AssetManager - lifecycle of the image attached to a catalog record."""

import logging
import mimetypes
import time
from pathlib import PurePath
from uuid import uuid4

from shelf.domain.catalog.model.value import UploadedAsset
from shelf.domain.catalog.port.asset_storage import AssetStoragePort
from shelf.domain.shared.error import PayloadTooLargeError, UnsupportedMediaTypeError
from shelf.domain.shared.service import Service

logger = logging.getLogger(__name__)

ASSET_FIELD = "image"


class AssetManager(Service):
    storage: AssetStoragePort
    accepted_types: list[str]
    max_size: int

    def check(self, asset: UploadedAsset) -> None:
        """Reject assets outside the accepted media types or above the size ceiling."""
        content_type = _base_media_type(asset.content_type)
        if content_type not in self.accepted_types:
            raise UnsupportedMediaTypeError(
                f"Media type '{asset.content_type or 'unknown'}' not accepted. "
                f"Allowed: {self.accepted_types}",
                field=ASSET_FIELD,
            )
        if asset.size > self.max_size:
            raise PayloadTooLargeError(
                f"File size {asset.size} exceeds maximum {self.max_size}",
                field=ASSET_FIELD,
            )

    async def store(self, asset: UploadedAsset) -> str:
        self.check(asset)
        name = generate_asset_name(asset.filename, asset.content_type)
        ref = await self.storage.save(name, asset.content, _base_media_type(asset.content_type))
        logger.debug("Stored asset %s (%d bytes)", name, asset.size)
        return ref

    async def reclaim(self, asset_ref: str | None) -> None:
        """Best-effort delete; failures are logged and never propagated."""
        if not asset_ref:
            return
        try:
            await self.storage.delete(asset_ref)
        except Exception:
            logger.warning("Failed to reclaim asset %s", _short_ref(asset_ref), exc_info=True)


def generate_asset_name(filename: str, content_type: str) -> str:
    """Millisecond timestamp plus a random suffix, keeping the original extension."""
    ext = _extension(filename, content_type)
    return f"{time.time_ns() // 1_000_000}-{uuid4().hex[:12]}{ext}"


def _extension(filename: str, content_type: str) -> str:
    suffix = PurePath(filename).suffix.lower() if filename else ""
    if suffix and suffix[1:].isalnum():
        return suffix
    return mimetypes.guess_extension(_base_media_type(content_type)) or ""


def _base_media_type(content_type: str) -> str:
    # "image/png; charset=binary" -> "image/png"
    return content_type.split(";", 1)[0].strip().lower()


def _short_ref(ref: str) -> str:
    # Inline data URLs can be megabytes long
    return ref if len(ref) <= 80 else f"{ref[:77]}..."
